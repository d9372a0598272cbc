"""
Install request and the on-disk layout it produces.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


class InstallRequest(BaseModel):
    """What the caller asked for. Built once by the CLI."""

    model_config = ConfigDict(frozen=True)

    package_name: str = Field(min_length=1)
    prefix: Path | None = None
    dry_run: bool = False
    jobs: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _check_prefix(self) -> InstallRequest:
        if self.prefix is None:
            if not self.dry_run:
                raise ValueError("an installation prefix is required unless dry_run is set")
        elif not self.prefix.is_absolute():
            raise ValueError(f"prefix must be an absolute path: {self.prefix}")
        return self


@dataclass(frozen=True)
class InstallLayout:
    """Paths an install run writes to.

    ``src`` is a disposable staging tree; ``bin`` receives artifacts.
    """

    prefix: Path
    src: Path
    build: Path
    bin: Path

    @classmethod
    def for_prefix(cls, prefix: Path) -> InstallLayout:
        return cls(
            prefix=prefix,
            src=prefix / "src",
            build=prefix / "src" / "build",
            bin=prefix / "bin",
        )

    def variables(self) -> dict[str, str]:
        """Placeholder values for step templates."""
        return {
            "prefix": str(self.prefix),
            "src": str(self.src),
            "build": str(self.build),
            "bin": str(self.bin),
        }
