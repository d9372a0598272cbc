"""
Version grammars — declarative descriptions of a package's tag format.

A grammar is data, not code: ``parse_version`` evaluates whichever
grammar a package declares. Two shapes cover the known packages:

    delimited           1_9_8       → (1, 9, 8)
    release_candidate   2.16rc2     → (2, 16, 0, 0, 2)
                        2.16        → (2, 16, 0, 1, 0)

The fourth release-candidate field is a "final" flag, which is what
makes a plain ``2.16`` outrank ``2.16rc1`` and ``2.16rc2``.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class DelimitedGrammar(BaseModel):
    """Any number of integers joined by one delimiter."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["delimited"] = "delimited"
    delimiter: str = Field(default="_", min_length=1)


class ReleaseCandidateGrammar(BaseModel):
    """``major.minor[.patch][rcN]`` with missing fields defaulting to 0."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["release_candidate"] = "release_candidate"
    separator: str = Field(default=".", min_length=1)
    marker: str = Field(default="rc", min_length=1)
    max_fields: int = Field(default=3, ge=1)
    # Each field must fit in 8 bits; None disables the check.
    field_limit: int | None = Field(default=255, ge=0)


VersionGrammar = Annotated[
    DelimitedGrammar | ReleaseCandidateGrammar,
    Field(discriminator="kind"),
]
