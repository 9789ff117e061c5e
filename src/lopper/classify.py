"""Decide which local branches are safe to delete."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from fnmatch import fnmatchcase

logger = logging.getLogger(__name__)

MERGED_REASON = "already merged into current branch."


@dataclass(frozen=True)
class Classification:
    """Deletable branches of one run and the reason they qualify."""

    branches: list[str] = field(default_factory=list)
    reason: str = ""

    @property
    def reasons(self) -> dict[str, str]:
        """Map each deletable branch to its deletion reason."""
        return {branch: self.reason for branch in self.branches}

    def __bool__(self) -> bool:
        return bool(self.branches)


def is_protected(branch: str, protected: Iterable[str]) -> bool:
    """Check a branch against protected names or glob patterns, ignoring case."""
    name = branch.lower()
    return any(fnmatchcase(name, pattern.lower()) for pattern in protected)


def classify(
    local_branches: Sequence[str],
    merged_branches: Iterable[str],
    current_branch: str,
    protected: Iterable[str],
) -> Classification:
    """Compute the local branches that can be deleted.

    A branch qualifies when it is neither protected nor the current branch and
    git reports it as merged into the current branch. Listing order is kept.

    Args:
        local_branches: Local branches in the order git lists them
        merged_branches: Branches merged into the current branch
        current_branch: The checked out branch
        protected: Protected branch names or patterns

    Returns:
        The deletable branches and the reason shared by all of them
    """
    protected = tuple(protected)
    merged = {branch.lower() for branch in merged_branches}
    current = current_branch.lower()

    deletable = []
    reason = ""
    for branch in local_branches:
        if is_protected(branch, protected) or branch.lower() == current:
            logger.debug("Skipping protected or current branch %s", branch)
            continue
        if branch.lower() not in merged:
            continue
        deletable.append(branch)
        reason = MERGED_REASON

    return Classification(branches=deletable, reason=reason)
