"""
Repository materializer — put the resolved revision on disk.

The working tree is a disposable staging area, not a user clone:
every run forces it to match the resolved commit exactly, so running
twice (or after an older version) never leaves stale files behind.
"""

from __future__ import annotations

import logging
from pathlib import Path

from depend.adapters.base import VcsAdapter
from depend.core.errors import MaterializeError, VcsCommandError
from depend.core.models.refs import ResolvedVersion, WorkingTree

logger = logging.getLogger(__name__)


class RepositoryMaterializer:
    """Init → fetch → detached checkout, each phase failing distinctly."""

    def __init__(self, vcs: VcsAdapter):
        self._vcs = vcs

    def materialize(
        self,
        remote_url: str,
        target_dir: Path,
        resolved: ResolvedVersion,
    ) -> WorkingTree:
        """Check ``resolved`` out into ``target_dir``.

        Raises:
            MaterializeError: With ``phase`` set to ``init``, ``fetch``
                or ``checkout``.
        """
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MaterializeError("init", target_dir, str(e)) from e

        logger.info("Materializing %s at %s", resolved.display_name, target_dir)

        try:
            self._vcs.init_repository(target_dir, remote_url)
        except VcsCommandError as e:
            raise MaterializeError("init", target_dir, e.message) from e

        try:
            self._vcs.fetch(target_dir, resolved.ref)
        except VcsCommandError as e:
            raise MaterializeError("fetch", target_dir, e.message) from e

        try:
            self._vcs.checkout_detached(target_dir, resolved.content_id)
        except VcsCommandError as e:
            raise MaterializeError("checkout", target_dir, e.message) from e

        logger.debug("Working tree at %s is %s", target_dir, resolved.content_id)
        return WorkingTree(path=str(target_dir), content_id=resolved.content_id)
