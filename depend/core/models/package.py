"""
Package model — per-package build knowledge.

A PackageSpec is pure data: where the sources live, which tags are
releases, how to read a version out of a tag, and which programs to run
to build and install it. Control flow lives in the engine, never here.

Template strings in steps and artifacts may use these placeholders,
substituted when the build plan is made:

    {prefix}   installation prefix
    {src}      working tree (<prefix>/src)
    {build}    out-of-tree build directory (<prefix>/src/build)
    {bin}      artifact directory (<prefix>/bin)
    {jobs}     parallel job count for the compile step
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from depend.core.versioning.grammar import DelimitedGrammar, VersionGrammar


class BuildStep(BaseModel):
    """One external program invocation of the native build."""

    model_config = ConfigDict(frozen=True)

    label: str = ""
    program: str
    args: list[str] = Field(default_factory=list)
    cwd: str = "{src}"
    env: dict[str, str] = Field(default_factory=dict)
    must_succeed: bool = True

    @field_validator("must_succeed")
    @classmethod
    def _always_fail_fast(cls, v: bool) -> bool:
        if not v:
            raise ValueError("optional build steps are not supported; every step must succeed")
        return v

    @property
    def display_label(self) -> str:
        return self.label or self.program


class ArtifactCopy(BaseModel):
    """A built file to place under ``<prefix>/bin``."""

    model_config = ConfigDict(frozen=True)

    source: str              # relative to the working tree
    destination: str         # relative to <prefix>/bin


class PackageSpec(BaseModel):
    """Everything needed to resolve, fetch and build one package."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str = ""
    remote_url: str = Field(min_length=1)

    # Tag selection
    tag_pattern: str                         # full-match regex on the ref name
    prefix_strip: str = "refs/tags/"
    suffix_strip: str = "^{}"
    version_grammar: VersionGrammar = Field(default_factory=DelimitedGrammar)

    # Build
    requires_toolchain: list[str] = Field(default_factory=list)
    build_steps: list[BuildStep] = Field(default_factory=list)
    installed_artifacts: list[ArtifactCopy] = Field(default_factory=list)

    @field_validator("tag_pattern")
    @classmethod
    def _check_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid tag_pattern: {e}") from e
        return v

    @model_validator(mode="after")
    def _check_strip_rules(self) -> PackageSpec:
        if not self.prefix_strip.startswith("refs/"):
            raise ValueError("prefix_strip must be a full ref prefix (refs/...)")
        return self
