"""Git blame parsing.

Contains:
- BlameLine: Attribution of a single line to the commit that introduced it
- parse_porcelain_blame: Parse the output of 'git blame --porcelain'
"""

import re
from dataclasses import dataclass


# <sha> <orig_line> <final_line> [<num_lines>]
_HEADER_RE = re.compile(r"^(?P<sha>[0-9a-f]{40}|[0-9a-f]{64}) \d+ (?P<final>\d+)(?: \d+)?$")


@dataclass(frozen=True)
class BlameLine:
    """Attribution of a single line to the commit that introduced it."""

    line: int  # 1-indexed line number in the blamed revision
    sha: str
    boundary: bool = False  # Root commit or outside the blamed history


def parse_porcelain_blame(output: str) -> list[BlameLine]:
    """Parse the output of 'git blame --porcelain'.

    Commit metadata is only printed the first time a commit appears, so the
    boundary flag is remembered per commit and applied to all of its lines.

    Args:
        output: Raw output of git blame --porcelain

    Returns:
        List of BlameLine objects in file order
    """
    entries: list[tuple[int, str]] = []
    boundaries: set[str] = set()
    current_sha = None

    for line in output.split("\n"):
        if line.startswith("\t"):
            # Line content
            continue

        match = _HEADER_RE.match(line)
        if match:
            current_sha = match.group("sha")
            entries.append((int(match.group("final")), current_sha))
        elif line == "boundary" and current_sha is not None:
            boundaries.add(current_sha)

    return [
        BlameLine(line=line_no, sha=sha, boundary=sha in boundaries)
        for line_no, sha in entries
    ]
