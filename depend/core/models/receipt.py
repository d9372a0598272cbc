"""
ProcessReceipt — the result of one child process.

Process executors return receipts; they NEVER raise. A receipt tells
apart the three outcomes the pipeline cares about:

    ok            exited with status 0
    failed        ran, then exited non-zero or was killed by a signal
    spawn_failed  never started (program missing, not executable, bad cwd)
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from depend.core.errors import describe_exit


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ProcessReceipt(BaseModel):
    """Outcome of a single program invocation."""

    program: str
    args: list[str] = Field(default_factory=list)
    cwd: str = ""
    status: Literal["ok", "failed", "spawn_failed"] = "ok"
    return_code: int | None = None

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    stdout: str = ""         # only filled when output is captured
    stderr: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def spawn_failed(self) -> bool:
        return self.status == "spawn_failed"

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    @classmethod
    def success(cls, program: str, args: list[str], **kwargs: Any) -> ProcessReceipt:
        """Create a success receipt."""
        return cls(program=program, args=list(args), status="ok", return_code=0, **kwargs)

    @classmethod
    def failure(
        cls,
        program: str,
        args: list[str],
        return_code: int,
        **kwargs: Any,
    ) -> ProcessReceipt:
        """Create a receipt for a process that ran and failed."""
        kwargs.setdefault("error", f"{program} failed with {describe_exit(return_code)}")
        return cls(
            program=program,
            args=list(args),
            status="failed",
            return_code=return_code,
            **kwargs,
        )

    @classmethod
    def spawn_failure(
        cls,
        program: str,
        args: list[str],
        error: str,
        **kwargs: Any,
    ) -> ProcessReceipt:
        """Create a receipt for a process that could not be started."""
        return cls(program=program, args=list(args), status="spawn_failed", error=error, **kwargs)
