"""
Mock adapters — test doubles for the VCS and process collaborators.

Used to exercise resolution, materialization and the build pipeline
without network access or real compilers. Both record every call so
tests can assert on order and arguments.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from depend.adapters.base import ProcessExecutor, VcsAdapter
from depend.core.errors import VcsCommandError
from depend.core.models.receipt import ProcessReceipt
from depend.core.models.refs import RemoteRef


class MockVcsAdapter(VcsAdapter):
    """In-memory remote.

    ``trees`` maps a content id to the files its checkout contains
    (relative path → text). Checking out writes exactly that file set
    and removes everything else, like a hard reset plus clean.
    """

    def __init__(
        self,
        refs: Sequence[RemoteRef] = (),
        trees: Mapping[str, Mapping[str, str]] | None = None,
        adapter_name: str = "mock-vcs",
        available: bool = True,
    ):
        self._name = adapter_name
        self._available = available
        self.refs = list(refs)
        self.trees = {k: dict(v) for k, v in (trees or {}).items()}
        self._failures: dict[str, str] = {}
        self._call_log: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[tuple[str, str]]:
        """``(operation, argument)`` pairs in call order."""
        return self._call_log

    @property
    def operations(self) -> list[str]:
        return [op for op, _ in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, operation: str, error: str = "Mock failure") -> None:
        """Make one operation ('list', 'init', 'fetch', 'checkout') fail."""
        self._failures[operation] = error

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._call_log.clear()
        self._failures.clear()

    def _record(self, operation: str, argument: str) -> None:
        self._call_log.append((operation, argument))
        if operation in self._failures:
            raise VcsCommandError(self._failures[operation], argv=[operation, argument])

    def list_remote_refs(self, remote_url: str) -> list[RemoteRef]:
        self._record("list", remote_url)
        return list(self.refs)

    def init_repository(self, path: Path, remote_url: str) -> None:
        self._record("init", str(path))
        path.mkdir(parents=True, exist_ok=True)
        (path / ".mockvcs").write_text(remote_url, encoding="utf-8")

    def fetch(self, path: Path, ref: RemoteRef) -> None:
        self._record("fetch", ref.name)
        if ref.content_id not in self.trees:
            self.trees[ref.content_id] = {}

    def checkout_detached(self, path: Path, content_id: str) -> None:
        self._record("checkout", content_id)
        tree = self.trees.get(content_id, {})
        for existing in sorted(path.rglob("*"), reverse=True):
            rel = existing.relative_to(path).as_posix()
            if rel == ".mockvcs":
                continue
            if existing.is_dir():
                if not any(existing.iterdir()):
                    existing.rmdir()
            elif rel not in tree:
                existing.unlink()
        for rel, content in tree.items():
            target = path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")


@dataclass
class RecordedCall:
    """One ``ProcessExecutor.run`` invocation seen by the mock."""

    program: str
    args: list[str]
    cwd: str
    env: dict[str, str] = field(default_factory=dict)


class MockProcessExecutor(ProcessExecutor):
    """Process executor that never spawns anything.

    By default every call succeeds. Outcomes can be set per call number
    (1-based, in call order) or per program name.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        missing_programs: Sequence[str] = (),
    ):
        self._name = adapter_name
        self._missing = set(missing_programs)
        self._exit_codes: dict[int, int] = {}
        self._spawn_failures: dict[str, str] = {}
        self._side_effects: dict[int, Callable[[RecordedCall], None]] = {}
        self._call_log: list[RecordedCall] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[RecordedCall]:
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self, program: str) -> bool:
        return program not in self._missing

    def set_exit_code(self, call_number: int, return_code: int) -> None:
        """Make the N-th call (1-based) exit with ``return_code``."""
        self._exit_codes[call_number] = return_code

    def set_spawn_failure(self, program: str, error: str = "No such file or directory") -> None:
        """Make every call of ``program`` fail to start."""
        self._spawn_failures[program] = error

    def set_side_effect(self, call_number: int, effect: Callable[[RecordedCall], None]) -> None:
        """Run ``effect`` when the N-th call happens (e.g. create build output)."""
        self._side_effects[call_number] = effect

    def reset(self) -> None:
        self._call_log.clear()
        self._exit_codes.clear()
        self._spawn_failures.clear()
        self._side_effects.clear()

    def run(
        self,
        program: str,
        args: Sequence[str],
        *,
        cwd: str,
        env: Mapping[str, str] | None = None,
    ) -> ProcessReceipt:
        call = RecordedCall(program=program, args=list(args), cwd=cwd, env=dict(env or {}))
        self._call_log.append(call)
        number = len(self._call_log)

        if program in self._spawn_failures:
            return ProcessReceipt.spawn_failure(
                program, call.args, error=self._spawn_failures[program], cwd=cwd,
            )

        if number in self._side_effects:
            self._side_effects[number](call)

        return_code = self._exit_codes.get(number, 0)
        if return_code == 0:
            return ProcessReceipt.success(program, call.args, cwd=cwd)
        return ProcessReceipt.failure(program, call.args, return_code, cwd=cwd)
