"""
Subprocess executor — the single place build steps are spawned.

Build output goes straight to the terminal by default so long compiles
stay visible; tests pass ``capture_output=True`` to inspect it.
No timeout is applied: a hung build hangs the run.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from collections.abc import Mapping, Sequence

from depend.adapters.base import ProcessExecutor
from depend.core.models.receipt import ProcessReceipt

logger = logging.getLogger(__name__)

# Captured output is trimmed to the tail, where build errors usually are.
_OUTPUT_TAIL = 4000


class SubprocessExecutor(ProcessExecutor):
    """Run programs with ``subprocess.run`` and wait for them."""

    def __init__(self, capture_output: bool = False):
        self._capture = capture_output

    @property
    def name(self) -> str:
        return "subprocess"

    def is_available(self, program: str) -> bool:
        if os.sep in program:
            return os.path.isfile(program) and os.access(program, os.X_OK)
        return shutil.which(program) is not None

    def run(
        self,
        program: str,
        args: Sequence[str],
        *,
        cwd: str,
        env: Mapping[str, str] | None = None,
    ) -> ProcessReceipt:
        full_env = os.environ.copy()
        if env:
            for key, value in env.items():
                full_env[key] = os.path.expandvars(value)

        logger.debug("Spawning: %s %s (cwd=%s)", program, " ".join(args), cwd)
        start = time.monotonic()
        try:
            result = subprocess.run(
                [program, *args],
                cwd=cwd,
                env=full_env,
                capture_output=self._capture,
                text=True,
                errors="replace",
                check=False,
            )
        except OSError as e:
            # Executable missing / not executable / cwd missing: never started.
            return ProcessReceipt.spawn_failure(
                program,
                list(args),
                error=f"{type(e).__name__}: {e.strerror or e}",
                cwd=cwd,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = (result.stdout or "")[-_OUTPUT_TAIL:]
        stderr = (result.stderr or "")[-_OUTPUT_TAIL:]

        if result.returncode == 0:
            return ProcessReceipt.success(
                program,
                list(args),
                cwd=cwd,
                duration_ms=elapsed_ms,
                stdout=stdout,
                stderr=stderr,
            )
        return ProcessReceipt.failure(
            program,
            list(args),
            result.returncode,
            cwd=cwd,
            duration_ms=elapsed_ms,
            stdout=stdout,
            stderr=stderr,
        )
