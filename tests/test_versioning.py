"""
Tests for version keys, grammars and the version parser.
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from depend.core.errors import VersionParseError
from depend.core.versioning import (
    DelimitedGrammar,
    ReleaseCandidateGrammar,
    VersionGrammar,
    VersionKey,
    parse_version,
)

# ── VersionKey ───────────────────────────────────────────────────────


class TestVersionKey:
    def test_ordering_is_lexicographic(self):
        assert VersionKey((1, 9, 7)) < VersionKey((1, 9, 8))
        assert VersionKey((1, 10, 0)) > VersionKey((1, 9, 8))
        assert VersionKey((2,)) > VersionKey((1, 99, 99))

    def test_shorter_key_is_zero_padded(self):
        assert VersionKey((1, 9)) == VersionKey((1, 9, 0))
        assert VersionKey((1, 9)) < VersionKey((1, 9, 1))
        assert not VersionKey((1, 9, 0)) < VersionKey((1, 9))

    def test_equal_keys_hash_alike(self):
        assert hash(VersionKey((1, 9))) == hash(VersionKey((1, 9, 0, 0)))
        assert len({VersionKey((1, 9)), VersionKey((1, 9, 0))}) == 1

    def test_max_and_sorted(self):
        keys = [VersionKey((1, 9, 8)), VersionKey((1, 9, 6)), VersionKey((1, 9, 7))]
        assert max(keys) == VersionKey((1, 9, 8))
        assert [str(k) for k in sorted(keys)] == ["1.9.6", "1.9.7", "1.9.8"]

    def test_negative_field_rejected(self):
        with pytest.raises(ValueError):
            VersionKey((1, -1))

    def test_normalized(self):
        assert VersionKey((2, 16, 0, 0)).normalized == (2, 16)
        assert VersionKey(()).normalized == ()

    def test_not_equal_to_tuple(self):
        assert VersionKey((1, 2)) != (1, 2)


# ── Delimited grammar ────────────────────────────────────────────────


class TestDelimitedGrammar:
    def test_parse(self):
        assert parse_version("1_9_8", DelimitedGrammar()).fields == (1, 9, 8)

    def test_custom_delimiter(self):
        assert parse_version("3.2.1", DelimitedGrammar(delimiter=".")).fields == (3, 2, 1)

    def test_leading_zeros(self):
        assert parse_version("1_09_08", DelimitedGrammar()) == VersionKey((1, 9, 8))

    def test_numeric_not_string_order(self):
        g = DelimitedGrammar()
        assert parse_version("1_10_0", g) > parse_version("1_9_8", g)

    @pytest.mark.parametrize("text", ["", "1__8", "1_9_", "1_9_x", "1_9_8a", "1_-9_8"])
    def test_malformed(self, text):
        with pytest.raises(VersionParseError) as exc:
            parse_version(text, DelimitedGrammar())
        assert exc.value.tag == text
        assert exc.value.code == "E_PARSE"

    def test_non_ascii_digits_rejected(self):
        with pytest.raises(VersionParseError):
            parse_version("1_٩_8", DelimitedGrammar())


# ── Release-candidate grammar ────────────────────────────────────────


class TestReleaseCandidateGrammar:
    def test_final_release(self):
        assert parse_version("2.16", ReleaseCandidateGrammar()).fields == (2, 16, 0, 1, 0)

    def test_candidate(self):
        assert parse_version("2.16rc2", ReleaseCandidateGrammar()).fields == (2, 16, 0, 0, 2)

    def test_three_fields(self):
        assert parse_version("2.15.05", ReleaseCandidateGrammar()).fields == (2, 15, 5, 1, 0)

    def test_candidate_with_patch(self):
        assert parse_version("2.16.1rc12", ReleaseCandidateGrammar()).fields == (2, 16, 1, 0, 12)

    def test_final_outranks_its_candidates(self):
        g = ReleaseCandidateGrammar()
        rc1 = parse_version("2.16rc1", g)
        rc2 = parse_version("2.16rc2", g)
        final = parse_version("2.16", g)
        assert rc1 < rc2 < final
        assert max([rc1, final, rc2]) == final

    def test_next_candidate_outranks_previous_final(self):
        g = ReleaseCandidateGrammar()
        assert parse_version("2.16rc1", g) > parse_version("2.15.05", g)

    def test_too_many_fields(self):
        with pytest.raises(VersionParseError, match="at most 3"):
            parse_version("2.16.1.4", ReleaseCandidateGrammar())

    def test_field_limit(self):
        with pytest.raises(VersionParseError, match="exceeds limit"):
            parse_version("2.256", ReleaseCandidateGrammar())

    def test_rc_number_limit(self):
        with pytest.raises(VersionParseError):
            parse_version("2.16rc300", ReleaseCandidateGrammar())

    def test_field_limit_disabled(self):
        g = ReleaseCandidateGrammar(field_limit=None)
        assert parse_version("2.1000", g).fields == (2, 1000, 0, 1, 0)

    @pytest.mark.parametrize("text", ["", "2.", ".16", "2.16rc", "2.16-rc1", "v2.16"])
    def test_malformed(self, text):
        with pytest.raises(VersionParseError):
            parse_version(text, ReleaseCandidateGrammar())


# ── Grammar as data ──────────────────────────────────────────────────


class TestGrammarModel:
    def test_discriminated_union(self):
        adapter = TypeAdapter(VersionGrammar)
        g = adapter.validate_python({"kind": "release_candidate", "max_fields": 2})
        assert isinstance(g, ReleaseCandidateGrammar)
        assert g.max_fields == 2
        assert isinstance(adapter.validate_python({"kind": "delimited"}), DelimitedGrammar)

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            TypeAdapter(VersionGrammar).validate_python({"kind": "semver"})

    def test_empty_delimiter_rejected(self):
        with pytest.raises(ValidationError):
            DelimitedGrammar(delimiter="")

    def test_unsupported_grammar_type(self):
        with pytest.raises(TypeError):
            parse_version("1", object())
