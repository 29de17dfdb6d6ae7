"""Main CLI command for folding staged changes into history."""

from typing import Optional

import typer

from autofixup import __version__
from autofixup.config import ConfigurationError
from autofixup.fixup import RunOrchestrator
from autofixup.git import GitBackend, GitError, NoStagedChangesError, RebaseConflictError
from autofixup.user_config import get_effective_config


def main_command(
    ctx: typer.Context,
    base: Optional[str] = typer.Option(
        None,
        "--base",
        "-b",
        help="Never alter this commit or anything before it (default: origin/master)",
    ),
    insert_checks: Optional[str] = typer.Option(
        None,
        "--insert-checks",
        "-i",
        help="Commit selection for pure insertions (above, below, around, recent)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Show each fixup created, skipped and reapplied",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Fold staged changes into the commits that introduced the lines they touch.

    Hunks that can't be attributed to exactly one commit newer than the base
    stay staged. The command to undo the run is printed before anything is
    changed.
    """
    if version:
        typer.echo(f"git-autofixup {__version__}")
        raise typer.Exit(0)

    # If a subcommand is invoked, don't run the default behavior
    if ctx.invoked_subcommand is not None:
        return

    try:
        backend = GitBackend.discover()
        config = get_effective_config(
            backend.repo_root,
            rebase_limit=base,
            insert_checks=insert_checks,
            debug=debug,
        )
        orchestrator = RunOrchestrator(backend, config)
        state = orchestrator.run()

    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1)
    except NoStagedChangesError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(0)
    except RebaseConflictError as e:
        typer.echo(f"Rebase stopped: {e}", err=True)
        if e.step_ref:
            typer.echo(f"Stopped while applying {e.step_ref[:8]}", err=True)
        typer.echo("Manual intervention required; the undo command above still applies after 'git rebase --abort'.", err=True)
        raise typer.Exit(1)
    except GitError as e:
        typer.echo(f"Git error: {e}", err=True)
        raise typer.Exit(1)

    folded = len(state.fixup_commits) - len(state.failed_fixups)
    typer.echo(f"Folded {folded} change(s) into history.", err=True)
    if state.failed_fixups:
        typer.echo(
            f"{len(state.failed_fixups)} change(s) conflicted and were left staged.",
            err=True,
        )
