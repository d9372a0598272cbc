"""
Error model — one exception class per failure kind.

Every failure that can end an install run is a ``DependError`` carrying
a stable machine-readable ``code`` plus enough ``context`` (step index,
path, exit status, ...) to diagnose it without re-running.

Only ``VersionParseError`` is recovered locally: the resolver drops the
offending tag and keeps going. Everything else aborts the run.
"""

from __future__ import annotations

import signal
from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers surfaced in JSON output."""

    CONFIG = "E_CONFIG"
    UNKNOWN_PACKAGE = "E_UNKNOWN_PACKAGE"
    VCS = "E_VCS"
    TRANSPORT = "E_TRANSPORT"
    NO_MATCHING_TAGS = "E_NO_MATCHING_TAGS"
    PARSE = "E_PARSE"
    MATERIALIZE = "E_MATERIALIZE"
    STEP_FAILED = "E_STEP_FAILED"
    SPAWN = "E_SPAWN"
    COPY_FAILED = "E_COPY_FAILED"


class DependError(Exception):
    """Base error carrying code, optional hint and context."""

    code: str
    hint: str | None
    context: dict[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code.value
        self.hint = hint
        self.context = {k: str(v) for k, v in (context or {}).items() if v is not None}

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ConfigError(DependError):
    """Package catalog missing, unreadable or invalid."""

    def __init__(self, message: str, *, path: object = None, hint: str | None = None) -> None:
        super().__init__(message, code=ErrorCode.CONFIG, hint=hint, context={"path": path})


class UnknownPackageError(DependError):
    def __init__(self, name: str, known: list[str]) -> None:
        super().__init__(
            f"Unknown package '{name}'",
            code=ErrorCode.UNKNOWN_PACKAGE,
            hint=f"Known packages: {', '.join(known) or '(none)'}",
            context={"package": name},
        )
        self.name = name


class VcsCommandError(DependError):
    """A version-control command failed (raised by VCS adapters)."""

    def __init__(
        self,
        message: str,
        *,
        argv: list[str] | None = None,
        stderr: str = "",
        return_code: int | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.VCS,
            context={
                "argv": " ".join(argv) if argv else None,
                "stderr": stderr or None,
                "return_code": return_code,
            },
        )
        self.stderr = stderr
        self.return_code = return_code


class TransportError(DependError):
    """The remote could not be reached or its refs could not be listed."""

    def __init__(self, remote_url: str, reason: str) -> None:
        super().__init__(
            f"Cannot list refs of {remote_url}: {reason}",
            code=ErrorCode.TRANSPORT,
            hint="Check the network connection and the remote URL.",
            context={"remote_url": remote_url},
        )
        self.remote_url = remote_url


class NoMatchingTags(DependError):
    """Resolution found zero usable release tags."""

    def __init__(self, remote_url: str, pattern: str, *, listed: int = 0, dropped: int = 0) -> None:
        super().__init__(
            f"No release tags of {remote_url} match {pattern}",
            code=ErrorCode.NO_MATCHING_TAGS,
            context={
                "remote_url": remote_url,
                "pattern": pattern,
                "refs_listed": listed,
                "unparseable": dropped,
            },
        )
        self.remote_url = remote_url
        self.pattern = pattern


class VersionParseError(DependError):
    """A tag did not fit the package's version grammar."""

    def __init__(self, tag: str, reason: str) -> None:
        super().__init__(
            f"Cannot parse version '{tag}': {reason}",
            code=ErrorCode.PARSE,
            context={"tag": tag},
        )
        self.tag = tag
        self.reason = reason


class MaterializeError(DependError):
    """init / fetch / checkout of the working tree failed."""

    def __init__(self, phase: str, path: object, reason: str) -> None:
        super().__init__(
            f"Working tree {phase} failed at {path}: {reason}",
            code=ErrorCode.MATERIALIZE,
            context={"phase": phase, "path": path},
        )
        self.phase = phase
        self.path = path


class StepFailed(DependError):
    """A build step ran and exited unsuccessfully."""

    def __init__(self, step_index: int, exit_status: int | None, *, label: str = "", program: str = "") -> None:
        super().__init__(
            f"Build step {step_index} ({label or program}) failed with {describe_exit(exit_status)}",
            code=ErrorCode.STEP_FAILED,
            hint="Partial build output is left in place for inspection.",
            context={
                "step_index": step_index,
                "exit_status": exit_status,
                "program": program or None,
            },
        )
        self.step_index = step_index
        self.exit_status = exit_status


class SpawnError(DependError):
    """A build step's process could not be started at all.

    ``step_index`` is ``None`` when the failure is found by the toolchain
    check that runs before the first step.
    """

    def __init__(self, step_index: int | None, program: str, reason: str) -> None:
        where = f"Build step {step_index}" if step_index is not None else "Toolchain check"
        super().__init__(
            f"{where}: cannot start '{program}': {reason}",
            code=ErrorCode.SPAWN,
            context={"step_index": step_index, "program": program},
        )
        self.step_index = step_index
        self.program = program


class CopyFailed(DependError):
    """Placing a built artifact into ``<prefix>/bin`` failed."""

    def __init__(self, source: object, destination: object, reason: str) -> None:
        super().__init__(
            f"Cannot install {source} to {destination}: {reason}",
            code=ErrorCode.COPY_FAILED,
            context={"source": source, "destination": destination},
        )
        self.source = source
        self.destination = destination


def describe_exit(exit_status: int | None) -> str:
    """Human form of a ``subprocess`` return code (negative = signal)."""
    if exit_status is None:
        return "unknown status"
    if exit_status < 0:
        try:
            name = signal.Signals(-exit_status).name
        except ValueError:
            name = f"signal {-exit_status}"
        return f"abnormal termination ({name})"
    return f"exit status {exit_status}"


__all__ = [
    "ConfigError",
    "CopyFailed",
    "DependError",
    "ErrorCode",
    "MaterializeError",
    "NoMatchingTags",
    "SpawnError",
    "StepFailed",
    "TransportError",
    "UnknownPackageError",
    "VcsCommandError",
    "VersionParseError",
    "describe_exit",
]
