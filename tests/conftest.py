"""Test configuration and fixtures."""

from pathlib import Path
from typing import Generator

import pytest
from git import Actor, Repo

AUTHOR = Actor("Test User", "test@example.com")


def init_repo(path: Path) -> Repo:
    """Create a repository with one commit on main, checked out."""
    path.mkdir()
    repo = Repo.init(path)
    repo.config_writer().set_value("user", "name", AUTHOR.name).release()
    repo.config_writer().set_value("user", "email", AUTHOR.email).release()

    readme = path / "README.md"
    readme.write_text("# Test Repository")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit", author=AUTHOR)

    # Ensure we're on main whatever the default branch name is
    if "main" not in repo.heads:
        repo.create_head("main")
    repo.heads.main.checkout()
    return repo


def create_branch(repo: Repo, name: str, merge: bool = False) -> None:
    """Create a branch off main with one commit, optionally merging it back."""
    main_branch = repo.heads.main
    main_branch.checkout()

    branch = repo.create_head(name)
    branch.checkout()

    file_name = f"{name.replace('/', '_')}.txt"
    (Path(repo.working_tree_dir) / file_name).write_text(f"{name} content")
    repo.index.add([file_name])
    repo.index.commit(f"Add {name}", author=AUTHOR)

    main_branch.checkout()
    if merge:
        repo.git.merge("--no-ff", "-m", f"Merge {name}", name)


@pytest.fixture
def empty_repo(tmp_path: Path) -> Path:
    """Create a repository that has nothing to clean."""
    init_repo(tmp_path / "empty")
    return tmp_path / "empty"


@pytest.fixture
def test_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a repository with merged, unmerged and protected branches.

    Branches (main checked out):
        dev: merged, protected by default
        feature/merged: merged
        feature/unmerged: has a commit main does not have
        release/1.0: merged
    """
    local_path = tmp_path / "local"
    repo = init_repo(local_path)

    create_branch(repo, "feature/merged", merge=True)
    create_branch(repo, "feature/unmerged")
    create_branch(repo, "dev", merge=True)
    create_branch(repo, "release/1.0", merge=True)
    repo.heads.main.checkout()

    yield local_path

    # Cleanup is handled by pytest's tmp_path fixture
