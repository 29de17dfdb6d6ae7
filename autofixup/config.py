"""Configuration for autofixup runs.

Settings come from (highest precedence first) command-line flags,
the repository's .autofixup/config.yaml and the defaults below.
Use 'git autofixup config' commands to modify the repository settings.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


class InsertPolicy(Enum):
    """How to pick the commit for a pure insertion (nothing replaced)."""

    ABOVE = "above"  # Commit of the line above
    BELOW = "below"  # Commit of the line below
    AROUND = "around"  # Only if the lines above and below share a commit
    RECENT = "recent"  # Most recent commit among the lines above and below


POLICY_DESCRIPTIONS = {
    InsertPolicy.ABOVE: "Use the commit of the line above the insertion",
    InsertPolicy.BELOW: "Use the commit of the line below the insertion",
    InsertPolicy.AROUND: "Use the commit only if the lines above and below agree",
    InsertPolicy.RECENT: "Use the most recent commit of the lines above and below",
}


# ============================================================
# DEFAULT VALUES
# ============================================================

# Never alter this commit or anything before it
DEFAULT_REBASE_LIMIT = "origin/master"
DEFAULT_INSERT_POLICY = InsertPolicy.AROUND


class ConfigurationError(ValueError):
    """Raised when configuration values are invalid."""

    pass


class FixupConfig(BaseModel):
    """Validated settings for one run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    rebase_limit: str = DEFAULT_REBASE_LIMIT
    insert_checks: InsertPolicy = DEFAULT_INSERT_POLICY
    debug: bool = False

    @field_validator("rebase_limit")
    @classmethod
    def limit_not_empty(cls, v: str) -> str:
        """Reject blank references."""
        v = v.strip()
        if not v:
            raise ValueError("rebase_limit must name a commit or branch")
        return v


def build_config(values: Optional[dict[str, Any]] = None, **overrides: Any) -> FixupConfig:
    """Build a FixupConfig from file values and command-line overrides.

    Overrides that are None are ignored so unset flags fall through to the
    file values, then to the defaults.

    Args:
        values: Settings loaded from the repository config file.
        **overrides: Settings given on the command line.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If any value is unknown or invalid.
    """
    merged = dict(values or {})
    merged.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return FixupConfig(**merged)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from e
