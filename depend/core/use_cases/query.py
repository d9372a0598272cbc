"""
Query use cases — read-only views: known packages and their versions.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from depend.adapters.base import VcsAdapter
from depend.core.config.catalog import Catalog, load_catalog
from depend.core.engine.resolver import RefResolver, TagMatcher
from depend.core.errors import DependError
from depend.core.models.package import PackageSpec
from depend.core.models.refs import ResolvedVersion


@dataclass
class VersionsResult:
    """Every release of a package the remote advertises."""

    package: str = ""
    versions: list[ResolvedVersion] = field(default_factory=list)
    error: str | None = None
    error_code: str | None = None

    @property
    def latest(self) -> ResolvedVersion | None:
        return self.versions[-1] if self.versions else None

    def to_dict(self) -> dict:
        result: dict = {"package": self.package}
        if self.error:
            result["error"] = {"code": self.error_code, "message": self.error}
            return result
        result["versions"] = [v.to_dict() for v in self.versions]
        result["latest"] = self.latest.display_name if self.latest else None
        return result


def list_versions(
    package_name: str,
    catalog: Catalog | None = None,
    vcs: VcsAdapter | None = None,
) -> VersionsResult:
    """List release versions of a package, oldest first."""
    result = VersionsResult(package=package_name)
    try:
        if catalog is None:
            catalog = load_catalog()
        spec = catalog.get(package_name)
        if vcs is None:
            from depend.adapters.vcs.git import GitCliAdapter

            vcs = GitCliAdapter()
        result.versions = RefResolver(vcs).candidates(
            spec.remote_url, TagMatcher.from_spec(spec), spec.version_grammar,
        )
    except DependError as e:
        result.error = e.message
        result.error_code = e.code
    return result


def describe_package(spec: PackageSpec) -> dict:
    """Summary of a catalog entry for listings."""
    return {
        "name": spec.name,
        "description": spec.description,
        "remote_url": spec.remote_url,
        "grammar": spec.version_grammar.kind,
        "steps": len(spec.build_steps),
        "artifacts": [a.destination for a in spec.installed_artifacts],
        "requires": list(spec.requires_toolchain),
    }
