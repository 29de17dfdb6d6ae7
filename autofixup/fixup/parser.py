"""Hunk parser for autofixup fixup module.

Contains functions for turning zero-context unified diff output into
transformations:
- parse_transformations: Parse every hunk header of a single-file diff
- _parse_hunk_header: Parse one @@ header into pre- and post-edit ranges
"""

import re
from typing import Optional

from autofixup.fixup.models import Transformation, split_lines


# Format: @@ -old_start[,old_len] +new_start[,new_len] @@ optional context
_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def _parse_hunk_header(header: str) -> Optional[tuple[range, range]]:
    """Parse one @@ header into pre- and post-edit ranges.

    Both ranges are 0-indexed. An insertion (old_len == 0) is reported by
    git as happening after old_start; it is moved to sit before
    old_start + 1 so that insertions and modifications share one meaning
    of from_first_line.

    Args:
        header: The @@ header line

    Returns:
        Tuple of (pre-edit range, post-edit range) or None if not a header
    """
    match = _HUNK_HEADER_RE.match(header)
    if not match:
        return None

    old_first = int(match.group(1)) - 1
    old_len = int(match.group(2)) if match.group(2) else 1
    new_first = int(match.group(3)) - 1
    new_len = int(match.group(4)) if match.group(4) else 1

    if old_len == 0:
        old_first += 1

    return range(old_first, old_first + old_len), range(new_first, new_first + new_len)


def parse_transformations(
    diff_output: str,
    path: Optional[str] = None,
    staged_content: Optional[str] = None,
) -> list[Transformation]:
    """Parse 'git diff -U0' output for one file into transformations.

    Hunks are returned in source order; none is dropped.

    Args:
        diff_output: Raw output of a zero-context diff of a single file
        path: Path of the file the diff belongs to
        staged_content: Staged content of the file, used for the replacement
            lines. When omitted, into_lines is left unset.

    Returns:
        List of Transformation objects
    """
    staged_lines = split_lines(staged_content) if staged_content is not None else None
    transformations: list[Transformation] = []

    for line in diff_output.split("\n"):
        if not line.startswith("@@"):
            continue

        ranges = _parse_hunk_header(line)
        if ranges is None:
            continue
        from_range, into_range = ranges

        into_lines = None
        if staged_lines is not None:
            # A pure deletion at the top has new_start == 0; its range is empty anyway
            start = max(into_range.start, 0)
            into_lines = tuple(staged_lines[start:start + len(into_range)])

        transformations.append(
            Transformation(
                path=path,
                from_first_line=from_range.start,
                from_line_count=len(from_range),
                into_lines=into_lines,
            )
        )

    return transformations
