"""Commit attribution for autofixup fixup module.

Contains:
- AttributionResolver: Find the single commit a transformation belongs to
"""

from typing import Optional

from autofixup.config import InsertPolicy
from autofixup.fixup.models import (
    REASON_AMBIGUOUS,
    REASON_BOUNDARY,
    REASON_NO_LINE_ABOVE,
    REASON_OUT_OF_RANGE,
    REASON_ROOT_COMMIT,
    AttributionDecision,
    Transformation,
    split_lines,
)
from autofixup.git.backend import GitBackend


class AttributionResolver:
    """Find the commit a transformation should be folded into.

    Lines are blamed at blame_ref (the HEAD the run started from). A commit
    is only ever returned if it is strictly newer than rebase_limit_ref.
    """

    def __init__(
        self,
        backend: GitBackend,
        rebase_limit_ref: str,
        policy: InsertPolicy = InsertPolicy.AROUND,
        blame_ref: str = "HEAD",
    ):
        self.backend = backend
        self.rebase_limit_ref = rebase_limit_ref
        self.policy = policy
        self.blame_ref = blame_ref
        self._ancestor_counts: dict[str, int] = {}
        self._line_counts: dict[str, int] = {}

    def resolve(
        self, transformation: Transformation, line_count: Optional[int] = None
    ) -> AttributionDecision:
        """Resolve the commit for one transformation.

        Args:
            transformation: The hunk to attribute
            line_count: Number of lines of the file at blame_ref, if known

        Returns:
            AttributionDecision; its commit is None when the hunk stays staged
        """
        bounds = transformation.lines_for_attribution(self.policy)
        if bounds is None:
            return AttributionDecision(transformation, reason=REASON_NO_LINE_ABOVE)

        if line_count is None:
            line_count = self._line_count(transformation.path)
        first, last = bounds
        last = min(last, line_count)
        if first > last:
            return AttributionDecision(transformation, reason=REASON_OUT_OF_RANGE)

        blamed = self.backend.blame(transformation.path, first, last, self.blame_ref)
        if not blamed:
            return AttributionDecision(transformation, reason=REASON_OUT_OF_RANGE)
        if any(line.boundary for line in blamed):
            return AttributionDecision(transformation, reason=REASON_ROOT_COMMIT)

        shas = list(dict.fromkeys(line.sha for line in blamed))
        if self.policy == InsertPolicy.RECENT:
            candidate = self.most_recent(shas)
        elif len(shas) == 1:
            candidate = shas[0]
        else:
            return AttributionDecision(transformation, reason=REASON_AMBIGUOUS)

        if not self.is_past_limit(candidate):
            return AttributionDecision(transformation, reason=REASON_BOUNDARY)

        return AttributionDecision(transformation, commit=candidate)

    def most_recent(self, shas: list[str]) -> str:
        """Commit with the most ancestors; newest committer date breaks ties.

        Remaining ties go to the commit blamed first.
        """
        ranked = [
            (self.ancestor_count(sha), self.backend.commit_timestamp(sha), -index, sha)
            for index, sha in enumerate(shas)
        ]
        return max(ranked)[-1]

    def is_past_limit(self, sha: str) -> bool:
        """True if sha is newer than the rebase limit (and so may be rewritten)."""
        return self.ancestor_count(sha) > self.ancestor_count(self.rebase_limit_ref)

    def ancestor_count(self, ref: str) -> int:
        if ref not in self._ancestor_counts:
            self._ancestor_counts[ref] = self.backend.rev_list_count(ref)
        return self._ancestor_counts[ref]

    def _line_count(self, path: str) -> int:
        if path not in self._line_counts:
            content = self.backend.show(self.blame_ref, path)
            self._line_counts[path] = len(split_lines(content))
        return self._line_counts[path]
