"""
VersionKey — the comparable form of a release tag.

A key is a tuple of non-negative integers. Keys of different length
compare as if the shorter one were zero-padded on the right, so
``1_9`` and ``1_9_0`` are equal and ``1_10`` sorts after ``1_9_8``.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering


@total_ordering
@dataclass(frozen=True, eq=False)
class VersionKey:
    """Totally ordered, immutable version key."""

    fields: tuple[int, ...]

    def __post_init__(self) -> None:
        if any(f < 0 for f in self.fields):
            raise ValueError(f"Version fields must be non-negative: {self.fields}")

    @property
    def normalized(self) -> tuple[int, ...]:
        """Fields with trailing zeros stripped (equality/hash form)."""
        fields = list(self.fields)
        while fields and fields[-1] == 0:
            fields.pop()
        return tuple(fields)

    def _padded(self, other: VersionKey) -> tuple[tuple[int, ...], tuple[int, ...]]:
        width = max(len(self.fields), len(other.fields))
        return (
            self.fields + (0,) * (width - len(self.fields)),
            other.fields + (0,) * (width - len(other.fields)),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionKey):
            return NotImplemented
        mine, theirs = self._padded(other)
        return mine == theirs

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionKey):
            return NotImplemented
        mine, theirs = self._padded(other)
        return mine < theirs

    def __hash__(self) -> int:
        return hash(self.normalized)

    def __str__(self) -> str:
        return ".".join(str(f) for f in self.fields)
