"""CLI entry point for autofixup.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from autofixup.cli.config import config_app
from autofixup.cli.main import main_command
from autofixup.cli.plan import plan_command

# Main application
app = typer.Typer(
    name="git-autofixup",
    help="git-autofixup: fold staged changes into the commits they fix",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("plan")(plan_command)

# Set the main callback for default behavior (includes --version flag)
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "config_app",
    "main_command",
    "plan_command",
]
