"""
Git adapter — remote listing and working-tree materialization.

Uses the git CLI — never a library binding. Remote listing goes
through ``git ls-remote``, which needs no local repository and
downloads no objects; that is what keeps dry runs write-free.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from depend.adapters.base import VcsAdapter
from depend.core.errors import VcsCommandError
from depend.core.models.refs import RemoteRef

logger = logging.getLogger(__name__)

PEELED_SUFFIX = "^{}"


class GitCliAdapter(VcsAdapter):
    """Git operations through the ``git`` executable.

    Args:
        shallow: Fetch only the tagged commit (``--depth 1``) instead of
            its full history.
    """

    def __init__(self, git: str = "git", shallow: bool = True):
        self._git_bin = git
        self._shallow = shallow

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which(self._git_bin) is not None

    # ── Remote ──────────────────────────────────────────────────

    def list_remote_refs(self, remote_url: str) -> list[RemoteRef]:
        output = self._git(["ls-remote", remote_url])
        refs: list[RemoteRef] = []
        for line in output.splitlines():
            if not line.strip():
                continue
            content_id, sep, name = line.partition("\t")
            if not sep:
                logger.debug("Ignoring malformed ls-remote line: %r", line)
                continue
            try:
                refs.append(RemoteRef(name=name.strip(), content_id=content_id.strip()))
            except ValueError:
                logger.debug("Ignoring ref with unexpected object id: %r", line)
        logger.debug("Remote %s advertises %d refs", remote_url, len(refs))
        return refs

    # ── Working tree ────────────────────────────────────────────

    def init_repository(self, path: Path, remote_url: str) -> None:
        self._git(["init", "--quiet", str(path)])
        remotes = self._git(["remote"], cwd=path).split()
        if "origin" in remotes:
            self._git(["remote", "set-url", "origin", remote_url], cwd=path)
        else:
            self._git(["remote", "add", "origin", remote_url], cwd=path)

    def fetch(self, path: Path, ref: RemoteRef) -> None:
        tag = ref.name.removesuffix(PEELED_SUFFIX)
        args = ["fetch", "--quiet", "--no-tags", "--force"]
        if self._shallow:
            args += ["--depth", "1"]
        args += ["origin", f"+{tag}:{tag}"]
        self._git(args, cwd=path)
        # The peeled commit must now be present locally.
        self._git(["cat-file", "-e", f"{ref.content_id}^{{commit}}"], cwd=path)

    def checkout_detached(self, path: Path, content_id: str) -> None:
        self._git(
            ["-c", "advice.detachedHead=false", "checkout", "--quiet", "--force", "--detach", content_id],
            cwd=path,
        )
        self._git(["reset", "--quiet", "--hard", content_id], cwd=path)
        # -ff also removes nested repositories left by an earlier version.
        self._git(["clean", "-ffdxq"], cwd=path)

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, args: list[str], cwd: Path | None = None) -> str:
        """Run a git command and return stdout."""
        command = [self._git_bin, *args]
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"  # fail instead of prompting for credentials
        logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                errors="replace",
                env=env,
            )
        except OSError as e:
            raise VcsCommandError(f"Cannot run git: {e}", argv=command) from e
        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise VcsCommandError(
                stderr.splitlines()[-1] if stderr else f"git {args[0]} failed",
                argv=command,
                stderr=stderr,
                return_code=result.returncode,
            )
        return result.stdout
