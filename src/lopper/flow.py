"""Dry-run, clean and pick flows with the two-step confirmation gate."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from lopper.classify import Classification, classify
from lopper.git import DeleteError

logger = logging.getLogger(__name__)


class Mode(Enum):
    """How a run treats the deletable branches."""

    DRY_RUN = "dry-run"
    CLEAN = "clean"
    PICK = "pick"


class Outcome(Enum):
    """How a run ended."""

    NOTHING_TO_CLEAN = "nothing-to-clean"
    NOTHING_SELECTED = "nothing-selected"
    REPORTED = "reported"
    DECLINED = "declined"
    DELETED = "deleted"
    FAILED = "failed"


@dataclass(frozen=True)
class CleanupResult:
    """Result of a run."""

    outcome: Outcome
    deleted: list[str] = field(default_factory=list)
    failures: list[DeleteError] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        """Process exit code: 1 when any delete failed."""
        return 1 if self.outcome is Outcome.FAILED else 0


class BranchGateway(Protocol):
    """Repository operations the flow depends on."""

    def list_local_branches(self) -> list[str]: ...

    def list_merged_branches(self) -> set[str]: ...

    def get_current_branch(self) -> str: ...

    def delete_branch(self, branch_name: str) -> None: ...


class BranchUI(Protocol):
    """Terminal capability: render branches, ask questions, pick a subset."""

    def show_candidates(self, classification: Classification, current_branch: str) -> None: ...

    def show_selection(self, branches: Sequence[str]) -> None: ...

    def select(self, classification: Classification) -> list[str]: ...

    def confirm(self, message: str) -> bool: ...

    def nothing_to_clean(self) -> None: ...

    def nothing_selected(self) -> None: ...

    def declined(self) -> None: ...

    def deleted(self, branch: str) -> None: ...

    def delete_failed(self, error: DeleteError) -> None: ...

    def show_summary(self, result: CleanupResult) -> None: ...


def confirm_deletion(ui: BranchUI, branches: Sequence[str]) -> bool:
    """Ask twice before deleting; both answers must be yes."""
    if not ui.confirm("Do you want to proceed and delete these branches?"):
        return False
    return ui.confirm(f"Just to be sure, you are about to delete {len(branches)} branch(es). Confirm?")


def delete_branches(
    repo: BranchGateway,
    branches: Sequence[str],
    ui: BranchUI,
    keep_going: bool = False,
) -> CleanupResult:
    """Delete branches one after another.

    Stops at the first failure and reports the remaining branches as skipped,
    unless ``keep_going`` is set, in which case every branch is attempted.
    """
    deleted: list[str] = []
    failures: list[DeleteError] = []
    skipped: list[str] = []

    for index, branch in enumerate(branches):
        try:
            repo.delete_branch(branch)
        except DeleteError as err:
            logger.debug("Delete failed for %s: %s", branch, err.message)
            failures.append(err)
            ui.delete_failed(err)
            if not keep_going:
                skipped = list(branches[index + 1 :])
                break
            continue
        deleted.append(branch)
        ui.deleted(branch)

    result = CleanupResult(
        outcome=Outcome.FAILED if failures else Outcome.DELETED,
        deleted=deleted,
        failures=failures,
        skipped=skipped,
    )
    ui.show_summary(result)
    return result


def run_cleanup(
    repo: BranchGateway,
    mode: Mode,
    protected: Iterable[str],
    ui: BranchUI,
    keep_going: bool = False,
) -> CleanupResult:
    """Classify the repository's branches and act on them according to ``mode``."""
    local = repo.list_local_branches()
    merged = repo.list_merged_branches()
    current = repo.get_current_branch()
    logger.debug("Current branch %s, %d local, %d merged", current, len(local), len(merged))

    classification = classify(local, merged, current, protected)
    if not classification:
        ui.nothing_to_clean()
        return CleanupResult(Outcome.NOTHING_TO_CLEAN)

    if mode is Mode.DRY_RUN:
        ui.show_candidates(classification, current)
        return CleanupResult(Outcome.REPORTED)

    if mode is Mode.CLEAN:
        ui.show_candidates(classification, current)
        chosen = list(classification.branches)
    else:
        picked = set(ui.select(classification))
        # Only real candidates, in listing order
        chosen = [branch for branch in classification.branches if branch in picked]
        if not chosen:
            ui.nothing_selected()
            return CleanupResult(Outcome.NOTHING_SELECTED)
        ui.show_selection(chosen)

    if not confirm_deletion(ui, chosen):
        ui.declined()
        return CleanupResult(Outcome.DECLINED)

    return delete_branches(repo, chosen, ui, keep_going=keep_going)
