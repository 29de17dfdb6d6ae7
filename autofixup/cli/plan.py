"""CLI command for previewing which commit each staged hunk would fix."""

from typing import Optional

import typer

from autofixup.config import ConfigurationError
from autofixup.fixup import AttributionDecision, AttributionResolver, plan_transformations
from autofixup.git import GitBackend, GitError
from autofixup.user_config import get_effective_config


def describe_hunk(decision: AttributionDecision) -> str:
    """Short location of a hunk in the committed file."""
    transformation = decision.transformation
    first = transformation.from_first_line + 1
    if transformation.is_insertion:
        return f"insert before line {first}"
    last = transformation.from_first_line + transformation.from_line_count
    if first == last:
        return f"line {first}"
    return f"lines {first}-{last}"


def plan_command(
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
) -> None:
    """Show which commit each staged hunk would be folded into.

    Nothing in the repository is changed.
    """
    try:
        backend = GitBackend.discover()
        config = get_effective_config(
            backend.repo_root,
            rebase_limit=base,
            insert_checks=insert_checks,
        )

        head = backend.rev_parse("HEAD")
        resolver = AttributionResolver(
            backend,
            backend.merge_base(config.rebase_limit, head),
            policy=config.insert_checks,
            blame_ref=head,
        )

        paths = backend.staged_paths("M")
        if not paths:
            typer.echo("No staged modifications to attribute.", err=True)
            raise typer.Exit(0)

        attributable = 0
        total = 0
        for path in paths:
            decisions = plan_transformations(
                resolver,
                path,
                backend.diff(path, staged=True),
                backend.show_index(path),
                backend.show(head, path),
            )
            typer.echo(path)
            for decision in decisions:
                total += 1
                location = describe_hunk(decision)
                if decision.attributable:
                    attributable += 1
                    subject = backend.commit_subject(decision.commit)
                    typer.echo(f"  {location}: {decision.commit[:8]} {subject}")
                else:
                    typer.echo(f"  {location}: left staged ({decision.reason})")
            typer.echo()

        typer.echo(f"{attributable} of {total} hunk(s) can be folded into history.")

    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1)
    except GitError as e:
        typer.echo(f"Git error: {e}", err=True)
        raise typer.Exit(1)
