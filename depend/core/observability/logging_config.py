"""
Logging for depend runs.

``setup_logging`` is called once by the CLI group and decides the level
from the global flags and the environment:

    --debug  >  --verbose  >  --quiet  >  DEPEND_LOG_LEVEL  >  WARNING

Console output goes to stderr so that stdout stays clean for the
resolved version and ``--json`` payloads. At the default level a line
reads like ``depend: Skipping tag refs/tags/nasm-2.999^{}: ...``; with
``--verbose`` each line is timestamped so long builds show where time
went. ``DEPEND_LOG_FILE`` adds a file that always gets the detailed
form, at ``DEPEND_LOG_FILE_LEVEL`` (default: the console level).
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

LEVEL_ENV = "DEPEND_LOG_LEVEL"
FILE_ENV = "DEPEND_LOG_FILE"
FILE_LEVEL_ENV = "DEPEND_LOG_FILE_LEVEL"

_DETAILED = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"


def parse_level(name: str | None, default: int = logging.WARNING) -> int:
    """Level number for a name like ``"info"``; ``default`` if unknown."""
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Console level from CLI flags, falling back to ``DEPEND_LOG_LEVEL``."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    if quiet:
        return logging.ERROR
    env = os.environ if environ is None else environ
    return parse_level(env.get(LEVEL_ENV))


def _console_formatter(level: int) -> logging.Formatter:
    if level <= logging.DEBUG:
        return logging.Formatter(_DETAILED, datefmt="%H:%M:%S")
    if level <= logging.INFO:
        return logging.Formatter("%(asctime)s %(message)s", datefmt="%H:%M:%S")
    return logging.Formatter("depend: %(message)s")


def setup_logging(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Install depend's handlers on the root logger.

    Replaces any handlers installed by an earlier call, so the CLI can
    be invoked repeatedly in one process.

    Returns:
        The console level in effect.
    """
    env = os.environ if environ is None else environ
    level = resolve_level(debug=debug, verbose=verbose, quiet=quiet, environ=env)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(_console_formatter(level))
    handlers: list[logging.Handler] = [console]

    log_file = env.get(FILE_ENV)
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(parse_level(env.get(FILE_LEVEL_ENV), default=level))
        file_handler.setFormatter(logging.Formatter(_DETAILED, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(min(h.level for h in handlers))
    return level
