"""Data models for autofixup fixup module.

Contains:
- Transformation: One diff hunk, expressed against the pre-edit snapshot
- AttributionDecision: A transformation paired with its resolved commit
- RunState: Everything one run needs to remember about the repository
- split_lines: Split file content into lines, keeping line endings
"""

from dataclasses import dataclass, field
from typing import Optional

from autofixup.config import InsertPolicy
from autofixup.git.backend import WorktreeEntry


# Why a transformation was left staged
REASON_NO_LINE_ABOVE = "no-line-above"
REASON_OUT_OF_RANGE = "out-of-range"
REASON_ROOT_COMMIT = "root-commit"
REASON_AMBIGUOUS = "ambiguous"
REASON_BOUNDARY = "boundary"


def split_lines(content: str) -> list[str]:
    """Split content on newlines only, keeping them.

    str.splitlines also breaks on \\r, form feeds and unicode separators,
    which would corrupt line numbers relative to git's.
    """
    parts = content.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


@dataclass(frozen=True)
class Transformation:
    """One hunk of a staged change.

    from_first_line is 0-indexed into the pre-edit snapshot. A pure
    insertion has from_line_count == 0 and inserts its lines immediately
    above from_first_line.
    """

    path: Optional[str]
    from_first_line: int
    from_line_count: int
    into_lines: Optional[tuple[str, ...]] = None

    @property
    def is_insertion(self) -> bool:
        return self.from_line_count == 0

    def range_to_apply_edit(self) -> range:
        """Lines of the pre-edit snapshot replaced by into_lines.

        Empty for insertions, so splicing there removes nothing.
        """
        return range(self.from_first_line, self.from_first_line + self.from_line_count)

    def lines_for_attribution(self, policy: InsertPolicy) -> Optional[tuple[int, int]]:
        """1-indexed, inclusive (first, last) lines to blame for this hunk.

        Returns None when no line can be blamed (insertion at the very top
        of the file under the 'above' policy).
        """
        if not self.is_insertion:
            return self.from_first_line + 1, self.from_first_line + self.from_line_count

        # Line above the insertion point and line below it, 1-indexed
        above = self.from_first_line
        below = self.from_first_line + 1

        if policy == InsertPolicy.ABOVE:
            if above < 1:
                return None
            return above, above
        if policy == InsertPolicy.BELOW:
            return below, below
        # around / recent: both neighbours
        return max(above, 1), below


@dataclass
class AttributionDecision:
    """A transformation and the commit it should be folded into.

    commit is None when the hunk is left staged; reason says why.
    """

    transformation: Transformation
    commit: Optional[str] = None
    reason: Optional[str] = None

    @property
    def attributable(self) -> bool:
        return self.commit is not None


@dataclass
class RunState:
    """State of a single run, owned by the orchestrator."""

    initial_head: str
    rebase_limit_ref: str
    stash_ref: str
    staged_paths: list[str] = field(default_factory=list)
    staged_contents: dict[str, str] = field(default_factory=dict)
    unstaged_contents: dict[str, Optional[WorktreeEntry]] = field(default_factory=dict)  # None: deleted
    staged_commit: Optional[str] = None
    fixup_commits: list[str] = field(default_factory=list)
    failed_fixups: list[str] = field(default_factory=list)
    final_head: Optional[str] = None
