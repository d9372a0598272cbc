"""
Shared test fixtures and configuration.
"""

import logging
import shutil
import subprocess
from pathlib import Path

import pytest

from depend.core.config.catalog import load_catalog
from depend.core.models.refs import RemoteRef

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _sha(n: int) -> str:
    return f"{n:040x}"


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo setup_logging() calls made by the CLI under test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def sha():
    """``sha(n)`` → a deterministic 40-hex object id."""
    return _sha


@pytest.fixture
def make_ref():
    """``make_ref(name, n)`` → RemoteRef pointing at ``sha(n)``."""

    def _make(name: str, n: int) -> RemoteRef:
        return RemoteRef(name=name, content_id=_sha(n))

    return _make


@pytest.fixture
def catalog():
    """The built-in package catalog."""
    return load_catalog()


@pytest.fixture
def doxygen_spec(catalog):
    return catalog.get("doxygen")


@pytest.fixture
def nasm_spec(catalog):
    return catalog.get("nasm")


@pytest.fixture
def doxygen_refs(make_ref):
    """An ls-remote listing shaped like doxygen's: branches, unpeeled and peeled tags."""
    return [
        make_ref("HEAD", 1),
        make_ref("refs/heads/master", 1),
        make_ref("refs/tags/Release_1_9_6", 10),
        make_ref("refs/tags/Release_1_9_6^{}", 11),
        make_ref("refs/tags/Release_1_9_7", 20),
        make_ref("refs/tags/Release_1_9_7^{}", 21),
        make_ref("refs/tags/Release_1_9_8", 30),
        make_ref("refs/tags/Release_1_9_8^{}", 31),
    ]


@pytest.fixture
def nasm_refs(make_ref):
    return [
        make_ref("refs/heads/master", 1),
        make_ref("refs/tags/nasm-2.15.05^{}", 40),
        make_ref("refs/tags/nasm-2.16rc1^{}", 41),
        make_ref("refs/tags/nasm-2.16rc2^{}", 42),
        make_ref("refs/tags/nasm-2.16^{}", 43),
    ]


# ── Real git repositories ────────────────────────────────────────────


def git(cwd: Path, *args: str) -> str:
    """Run git with a fixed identity, return stdout."""
    result = subprocess.run(
        [
            "git",
            "-c", "user.name=Test",
            "-c", "user.email=test@example.com",
            "-c", "init.defaultBranch=master",
            "-c", "commit.gpgsign=false",
            "-c", "tag.gpgsign=false",
            *args,
        ],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def upstream_repo(tmp_path: Path) -> Path:
    """A local repository with annotated release tags 1_0_0 and 1_1_0.

    1_0_0 contains ``old.txt``; 1_1_0 removes it and adds ``new.txt``.
    """
    repo = tmp_path / "upstream"
    repo.mkdir()
    git(repo, "init", "--quiet")

    (repo / "README").write_text("hello\n")
    (repo / "old.txt").write_text("old\n")
    git(repo, "add", "-A")
    git(repo, "commit", "--quiet", "-m", "first")
    git(repo, "tag", "-a", "Release_1_0_0", "-m", "1.0.0")

    (repo / "old.txt").unlink()
    (repo / "new.txt").write_text("new\n")
    git(repo, "add", "-A")
    git(repo, "commit", "--quiet", "-m", "second")
    git(repo, "tag", "-a", "Release_1_1_0", "-m", "1.1.0")

    (repo / "unreleased.txt").write_text("wip\n")
    git(repo, "add", "-A")
    git(repo, "commit", "--quiet", "-m", "wip")
    return repo
