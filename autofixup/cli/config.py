"""CLI commands for repository configuration management."""

import typer

from autofixup.config import POLICY_DESCRIPTIONS, ConfigurationError, InsertPolicy
from autofixup.git import GitError, get_repo_root
from autofixup.user_config import (
    CONFIG_KEYS,
    describe_config,
    get_config_file,
    get_effective_config,
    set_config_value,
)

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage autofixup settings in .autofixup/config.yaml",
    add_completion=False,
)


@config_app.command("show")
def config_show() -> None:
    """Show the effective settings for this repository."""
    try:
        repo_root = get_repo_root()
        config = get_effective_config(repo_root)

        config_file = get_config_file(repo_root)
        source = str(config_file) if config_file.exists() else "defaults"
        typer.echo(f"Settings (from {source}):")
        typer.echo()
        for key, value in describe_config(config):
            typer.echo(f"  {key}: {value}")

    except (GitError, ConfigurationError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        ...,
        help=f"Setting to change ({', '.join(CONFIG_KEYS)})",
    ),
    value: str = typer.Argument(
        ...,
        help="New value",
    ),
) -> None:
    """Change a setting in .autofixup/config.yaml."""
    try:
        repo_root = get_repo_root()
        set_config_value(repo_root, key, value)
        typer.echo(f"Set {key}: {value}")

    except (GitError, ConfigurationError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@config_app.command("policies")
def config_policies() -> None:
    """List the insertion policies."""
    typer.echo("Insertion policies (insert_checks):")
    typer.echo()
    for policy in InsertPolicy:
        typer.echo(f"  • {policy.value}")
        typer.echo(f"    {POLICY_DESCRIPTIONS[policy]}")
