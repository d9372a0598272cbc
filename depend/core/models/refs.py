"""
Remote ref models — what a remote advertises and what we pick from it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, field_validator

from depend.core.versioning.key import VersionKey

# SHA-1 or SHA-256 object names.
_OBJECT_ID = re.compile(r"^(?:[0-9a-f]{40}|[0-9a-f]{64})$")


class RemoteRef(BaseModel):
    """One advertised ref: full name plus the object it points at."""

    model_config = ConfigDict(frozen=True)

    name: str                # e.g. "refs/tags/Release_1_9_8^{}"
    content_id: str          # commit hash

    @field_validator("content_id")
    @classmethod
    def _check_content_id(cls, v: str) -> str:
        v = v.lower()
        if not _OBJECT_ID.fullmatch(v):
            raise ValueError(f"not an object id: {v!r}")
        return v


@dataclass(frozen=True)
class ResolvedVersion:
    """The winning candidate of a resolution."""

    ref: RemoteRef
    key: VersionKey
    display_name: str        # e.g. "1_9_8"

    @property
    def content_id(self) -> str:
        return self.ref.content_id

    def to_dict(self) -> dict:
        return {
            "version": self.display_name,
            "ref": self.ref.name,
            "content_id": self.ref.content_id,
            "key": list(self.key.fields),
        }


@dataclass(frozen=True)
class WorkingTree:
    """A materialized checkout."""

    path: str
    content_id: str

    def to_dict(self) -> dict:
        return {"path": self.path, "content_id": self.content_id}
