"""
Build pipeline — run a package's native build, fail-fast.

Flow:
    plan (substitute placeholders) → toolchain check → steps in order
    → copy artifacts into <prefix>/bin

Steps run one at a time, each blocking until its process exits. The
first step that fails stops the pipeline: no later step runs and
nothing already done is rolled back. Internal build parallelism is
only the ``{jobs}`` value handed to one step's arguments.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from depend.adapters.base import ProcessExecutor
from depend.core.errors import CopyFailed, SpawnError, StepFailed
from depend.core.models.package import PackageSpec
from depend.core.models.receipt import ProcessReceipt
from depend.core.models.request import InstallLayout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedStep:
    """A BuildStep with every placeholder filled in."""

    index: int               # 1-based
    label: str
    program: str
    args: list[str]
    cwd: Path
    env: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PlannedCopy:
    source: Path
    destination: Path


@dataclass
class BuildPlan:
    """Concrete steps for one install run."""

    package: str
    layout: InstallLayout
    jobs: int
    steps: list[PlannedStep] = field(default_factory=list)
    artifacts: list[PlannedCopy] = field(default_factory=list)
    requires_toolchain: list[str] = field(default_factory=list)

    @property
    def total_steps(self) -> int:
        return len(self.steps)


@dataclass
class BuildReport:
    """What the pipeline did. Partially filled if it stopped early."""

    package: str = ""
    receipts: list[ProcessReceipt] = field(default_factory=list)
    installed: list[Path] = field(default_factory=list)

    @property
    def steps_run(self) -> int:
        return len(self.receipts)

    @property
    def all_ok(self) -> bool:
        return all(r.ok for r in self.receipts)

    def to_dict(self) -> dict:
        return {
            "package": self.package,
            "steps_run": self.steps_run,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
            "installed": [str(p) for p in self.installed],
        }


def default_jobs() -> int:
    """Parallel job count for compile steps: the host's CPU count."""
    return os.cpu_count() or 1


def substitute_placeholders(tokens: list[str], variables: dict[str, str]) -> list[str]:
    """Replace ``{var}`` placeholders in each token.

    Unknown placeholders are left untouched, so literal braces in
    arguments survive.
    """
    result: list[str] = []
    for token in tokens:
        for key, value in variables.items():
            token = token.replace(f"{{{key}}}", str(value))
        result.append(token)
    return result


class BuildPipeline:
    """Plans and executes a package's build steps."""

    def __init__(self, executor: ProcessExecutor):
        self._executor = executor

    def plan(
        self,
        spec: PackageSpec,
        layout: InstallLayout,
        jobs: int | None = None,
    ) -> BuildPlan:
        """Turn the package's step templates into concrete invocations."""
        jobs = jobs or default_jobs()
        variables = {**layout.variables(), "jobs": str(jobs)}

        def sub(value: str) -> str:
            return substitute_placeholders([value], variables)[0]

        plan = BuildPlan(
            package=spec.name,
            layout=layout,
            jobs=jobs,
            requires_toolchain=list(spec.requires_toolchain),
        )
        for index, step in enumerate(spec.build_steps, start=1):
            plan.steps.append(
                PlannedStep(
                    index=index,
                    label=step.display_label,
                    program=sub(step.program),
                    args=substitute_placeholders(step.args, variables),
                    cwd=Path(sub(step.cwd)),
                    env={k: sub(v) for k, v in step.env.items()},
                )
            )
        for artifact in spec.installed_artifacts:
            plan.artifacts.append(
                PlannedCopy(
                    source=layout.src / sub(artifact.source),
                    destination=layout.bin / sub(artifact.destination),
                )
            )
        return plan

    def execute(self, plan: BuildPlan, report: BuildReport | None = None) -> BuildReport:
        """Run every step, then install artifacts.

        Args:
            plan: Output of ``plan()``.
            report: Optional report to fill in place, so callers keep
                the receipts of completed steps when a step fails.

        Raises:
            SpawnError: A required tool is missing, or a step's program
                could not be started.
            StepFailed: A step exited non-zero or was killed.
            CopyFailed: An artifact could not be placed.
        """
        if report is None:
            report = BuildReport(package=plan.package)
        report.package = plan.package

        self._check_toolchain(plan)

        for step in plan.steps:
            logger.info(
                "[%d/%d] %s: %s %s (cwd=%s)",
                step.index, plan.total_steps, step.label,
                step.program, " ".join(step.args), step.cwd,
            )
            receipt = self._executor.run(step.program, step.args, cwd=str(step.cwd), env=step.env)
            report.receipts.append(receipt)

            if receipt.spawn_failed:
                raise SpawnError(step.index, step.program, receipt.error or "could not start")
            if not receipt.ok:
                raise StepFailed(
                    step.index, receipt.return_code, label=step.label, program=step.program,
                )
            logger.debug("Step %d finished in %dms", step.index, receipt.duration_ms)

        self._install_artifacts(plan, report)
        return report

    def _check_toolchain(self, plan: BuildPlan) -> None:
        for tool in plan.requires_toolchain:
            if not self._executor.is_available(tool):
                raise SpawnError(None, tool, "required tool not found on PATH")

    def _install_artifacts(self, plan: BuildPlan, report: BuildReport) -> None:
        if not plan.artifacts:
            return
        try:
            plan.layout.bin.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CopyFailed(plan.layout.src, plan.layout.bin, str(e)) from e

        for artifact in plan.artifacts:
            if not artifact.source.is_file():
                raise CopyFailed(artifact.source, artifact.destination, "build did not produce this file")
            try:
                artifact.destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(artifact.source, artifact.destination)
            except OSError as e:
                raise CopyFailed(artifact.source, artifact.destination, str(e)) from e
            logger.info("Installed %s", artifact.destination)
            report.installed.append(artifact.destination)
