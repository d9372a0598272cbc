"""
Version parser — turns a stripped tag name into a VersionKey.

Pure functions, no I/O. Malformed input raises ``VersionParseError``;
callers decide whether that is fatal (the resolver just drops the tag).
"""

from __future__ import annotations

from depend.core.errors import VersionParseError
from depend.core.versioning.grammar import (
    DelimitedGrammar,
    ReleaseCandidateGrammar,
    VersionGrammar,
)
from depend.core.versioning.key import VersionKey


def parse_version(text: str, grammar: VersionGrammar) -> VersionKey:
    """Parse ``text`` under ``grammar``.

    Args:
        text: Version body with the tag prefix/suffix already removed,
            e.g. ``"1_9_8"`` or ``"2.16rc1"``.
        grammar: The package's declared grammar.

    Raises:
        VersionParseError: If ``text`` does not fit the grammar.
    """
    if isinstance(grammar, DelimitedGrammar):
        return _parse_delimited(text, grammar)
    if isinstance(grammar, ReleaseCandidateGrammar):
        return _parse_release_candidate(text, grammar)
    raise TypeError(f"Unsupported version grammar: {type(grammar).__name__}")


def _parse_delimited(text: str, grammar: DelimitedGrammar) -> VersionKey:
    fields = tuple(_to_int(text, part) for part in text.split(grammar.delimiter))
    return VersionKey(fields)


def _parse_release_candidate(text: str, grammar: ReleaseCandidateGrammar) -> VersionKey:
    # The marker is found by position, so "2.16rc1" and "2.16.1rc12" both work.
    head, marker, tail = text.rpartition(grammar.marker)
    if marker:
        body = head
        final, rc = 0, _to_int(text, tail)
    else:
        body = text
        final, rc = 1, 0

    parts = body.split(grammar.separator)
    if len(parts) > grammar.max_fields:
        raise VersionParseError(
            text, f"expected at most {grammar.max_fields} fields, got {len(parts)}",
        )

    numbers = [_to_int(text, part) for part in parts]
    numbers += [0] * (grammar.max_fields - len(numbers))

    if grammar.field_limit is not None:
        for value in (*numbers, rc):
            if value > grammar.field_limit:
                raise VersionParseError(
                    text, f"field {value} exceeds limit {grammar.field_limit}",
                )

    return VersionKey((*numbers, final, rc))


def _to_int(text: str, field: str) -> int:
    if not field:
        raise VersionParseError(text, "empty numeric field")
    if not (field.isascii() and field.isdigit()):
        raise VersionParseError(text, f"non-digit characters in field '{field}'")
    return int(field)
