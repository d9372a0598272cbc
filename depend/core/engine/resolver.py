"""
Ref resolver — pick the newest release straight from the remote.

Flow:
    list remote refs → keep tag refs matching the package pattern
    → strip prefix/suffix → parse version → take the maximum

The same ``resolve`` call serves both dry runs and real installs.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from depend.adapters.base import VcsAdapter
from depend.core.errors import NoMatchingTags, TransportError, VcsCommandError, VersionParseError
from depend.core.models.package import PackageSpec
from depend.core.models.refs import RemoteRef, ResolvedVersion
from depend.core.versioning import VersionGrammar, parse_version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagMatcher:
    """Which refs are releases, and how to get the bare version out.

    ``restore(strip(name)) == name`` for every name that ``matches``.
    """

    pattern: str
    prefix: str
    suffix: str

    @classmethod
    def from_spec(cls, spec: PackageSpec) -> TagMatcher:
        return cls(
            pattern=spec.tag_pattern,
            prefix=spec.prefix_strip,
            suffix=spec.suffix_strip,
        )

    def matches(self, ref_name: str) -> bool:
        if not re.fullmatch(self.pattern, ref_name):
            return False
        return ref_name.startswith(self.prefix) and ref_name.endswith(self.suffix)

    def strip(self, ref_name: str) -> str:
        body = ref_name.removeprefix(self.prefix)
        if self.suffix:
            body = body.removesuffix(self.suffix)
        return body

    def restore(self, display_name: str) -> str:
        return f"{self.prefix}{display_name}{self.suffix}"


class RefResolver:
    """Resolve the highest-versioned release ref of a remote."""

    def __init__(self, vcs: VcsAdapter):
        self._vcs = vcs

    def candidates(
        self,
        remote_url: str,
        matcher: TagMatcher,
        grammar: VersionGrammar,
    ) -> list[ResolvedVersion]:
        """All parseable release refs, sorted ascending by version.

        The sort is stable, so among equal keys the later-listed ref
        stays last.

        Raises:
            TransportError: If the remote cannot be listed.
            NoMatchingTags: If no ref survives filtering and parsing.
        """
        try:
            refs = self._vcs.list_remote_refs(remote_url)
        except VcsCommandError as e:
            raise TransportError(remote_url, e.message) from e

        parsed: list[ResolvedVersion] = []
        dropped = 0
        for ref in refs:
            if not matcher.matches(ref.name):
                continue
            candidate = self._parse_candidate(ref, matcher, grammar)
            if candidate is None:
                dropped += 1
                continue
            parsed.append(candidate)

        if not parsed:
            raise NoMatchingTags(remote_url, matcher.pattern, listed=len(refs), dropped=dropped)

        logger.debug(
            "%s: %d refs listed, %d release candidates, %d unparseable",
            remote_url, len(refs), len(parsed), dropped,
        )
        return sorted(parsed, key=lambda c: c.key)

    def resolve(
        self,
        remote_url: str,
        matcher: TagMatcher,
        grammar: VersionGrammar,
    ) -> ResolvedVersion:
        """Return the release ref with the maximum version key.

        If two distinct tags parse to equal keys, the one listed later
        by the remote wins.
        """
        best = self.candidates(remote_url, matcher, grammar)[-1]
        logger.info("Resolved %s → %s (%s)", remote_url, best.display_name, best.content_id[:12])
        return best

    @staticmethod
    def _parse_candidate(
        ref: RemoteRef,
        matcher: TagMatcher,
        grammar: VersionGrammar,
    ) -> ResolvedVersion | None:
        display = matcher.strip(ref.name)
        try:
            key = parse_version(display, grammar)
        except VersionParseError as e:
            logger.warning("Skipping tag %s: %s", ref.name, e.reason)
            return None
        return ResolvedVersion(ref=ref, key=key, display_name=display)
