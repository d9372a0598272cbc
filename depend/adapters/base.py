"""
Adapter base — the contracts between the engine and external tools.

The engine never shells out itself. It talks to two collaborators:

    VcsAdapter       list remote refs, init, fetch, detached checkout
    ProcessExecutor  spawn a program, wait for it, report how it ended

Real implementations live in ``adapters/vcs`` and ``adapters/shell``;
``adapters/mock`` holds test doubles for both.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path

from depend.core.models.receipt import ProcessReceipt
from depend.core.models.refs import RemoteRef


class VcsAdapter(ABC):
    """Version-control operations needed to resolve and materialize.

    Methods raise ``VcsCommandError`` on failure; the engine maps that
    onto the transport / materialize error it means in context.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'git', 'mock-vcs')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tool is installed. Never raises."""

    @abstractmethod
    def list_remote_refs(self, remote_url: str) -> list[RemoteRef]:
        """List every ref the remote advertises, in listing order.

        Must not download objects or need a local repository.
        """

    @abstractmethod
    def init_repository(self, path: Path, remote_url: str) -> None:
        """Create (or reuse) a repository at ``path`` with ``origin`` → ``remote_url``."""

    @abstractmethod
    def fetch(self, path: Path, ref: RemoteRef) -> None:
        """Fetch the objects reachable from ``ref`` into the repository at ``path``."""

    @abstractmethod
    def checkout_detached(self, path: Path, content_id: str) -> None:
        """Detach HEAD at ``content_id`` and force the tree to match it exactly.

        Local modifications and untracked files are discarded.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class ProcessExecutor(ABC):
    """Spawn-and-wait capability used by the build pipeline.

    ``run`` MUST never raise: spawn failures and non-zero exits are
    both captured in the returned ProcessReceipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The executor identifier (e.g., 'subprocess', 'mock')."""

    @abstractmethod
    def is_available(self, program: str) -> bool:
        """Whether ``program`` can be found for execution. Never raises."""

    @abstractmethod
    def run(
        self,
        program: str,
        args: Sequence[str],
        *,
        cwd: str,
        env: Mapping[str, str] | None = None,
    ) -> ProcessReceipt:
        """Run ``program args...`` in ``cwd`` and block until it exits.

        Args:
            program: Executable name or path.
            args: Arguments, already fully substituted.
            cwd: Working directory of the child.
            env: Extra environment variables layered over ours.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
