"""
Install use case — the whole run from request to installed binaries.

    catalog lookup → resolve newest release → [dry run: stop]
    → materialize <prefix>/src → build plan → execute → <prefix>/bin

Every failure ends the run and comes back as ``InstallResult.error``
(plus its stable code and context); nothing here prints or exits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from depend.adapters.base import ProcessExecutor, VcsAdapter
from depend.core.config.catalog import Catalog, load_catalog
from depend.core.engine.materializer import RepositoryMaterializer
from depend.core.engine.pipeline import BuildPipeline, BuildReport
from depend.core.engine.resolver import RefResolver, TagMatcher
from depend.core.errors import DependError
from depend.core.models.package import PackageSpec
from depend.core.models.refs import ResolvedVersion, WorkingTree
from depend.core.models.request import InstallLayout, InstallRequest

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Outcome of one install (or dry-run) request."""

    package: str = ""
    dry_run: bool = False
    prefix: str | None = None
    resolved: ResolvedVersion | None = None
    working_tree: WorkingTree | None = None
    report: BuildReport | None = None
    error: str | None = None
    error_code: str | None = None
    error_context: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def version(self) -> str | None:
        return self.resolved.display_name if self.resolved else None

    def fail(self, exc: DependError) -> InstallResult:
        self.error = exc.message
        self.error_code = exc.code
        self.error_context = dict(exc.context)
        return self

    def to_dict(self) -> dict:
        result: dict = {
            "package": self.package,
            "dry_run": self.dry_run,
            "status": "ok" if self.ok else "failed",
        }
        if self.prefix:
            result["prefix"] = self.prefix
        if self.resolved:
            result["resolved"] = self.resolved.to_dict()
        if self.working_tree:
            result["working_tree"] = self.working_tree.to_dict()
        if self.report:
            result["build"] = self.report.to_dict()
        if self.error:
            result["error"] = {
                "code": self.error_code,
                "message": self.error,
                "context": self.error_context,
            }
        return result


def _default_vcs() -> VcsAdapter:
    from depend.adapters.vcs.git import GitCliAdapter

    return GitCliAdapter()


def _default_executor() -> ProcessExecutor:
    from depend.adapters.shell.process import SubprocessExecutor

    return SubprocessExecutor()


def resolve_package(spec: PackageSpec, vcs: VcsAdapter) -> ResolvedVersion:
    """Resolve the newest release of ``spec``. Shared by dry and full runs."""
    resolver = RefResolver(vcs)
    return resolver.resolve(spec.remote_url, TagMatcher.from_spec(spec), spec.version_grammar)


def install_package(
    request: InstallRequest,
    catalog: Catalog | None = None,
    vcs: VcsAdapter | None = None,
    executor: ProcessExecutor | None = None,
) -> InstallResult:
    """Resolve, fetch and build one package.

    Args:
        request: What to install and where.
        catalog: Known packages (default: built-in catalog).
        vcs: Version-control adapter (default: git CLI).
        executor: Process executor (default: real subprocesses).

    Returns:
        InstallResult; ``error`` is set if any phase failed.
    """
    result = InstallResult(
        package=request.package_name,
        dry_run=request.dry_run,
        prefix=str(request.prefix) if request.prefix else None,
    )

    try:
        if catalog is None:
            catalog = load_catalog()
        spec = catalog.get(request.package_name)

        vcs = vcs or _default_vcs()
        result.resolved = resolve_package(spec, vcs)

        if request.dry_run:
            return result

        assert request.prefix is not None  # guaranteed by InstallRequest validation
        layout = InstallLayout.for_prefix(request.prefix)

        materializer = RepositoryMaterializer(vcs)
        result.working_tree = materializer.materialize(spec.remote_url, layout.src, result.resolved)

        pipeline = BuildPipeline(executor or _default_executor())
        plan = pipeline.plan(spec, layout, jobs=request.jobs)
        result.report = BuildReport(package=spec.name)
        pipeline.execute(plan, report=result.report)

    except DependError as e:
        logger.debug("Install of %s failed: %s", request.package_name, e.to_dict())
        return result.fail(e)

    logger.info("Installed %s %s into %s", spec.name, result.version, request.prefix)
    return result
