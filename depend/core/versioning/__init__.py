"""
Version keys and grammars.

    from depend.core.versioning import parse_version, DelimitedGrammar

    parse_version("1_9_8", DelimitedGrammar())   # VersionKey((1, 9, 8))
"""

from depend.core.versioning.grammar import (
    DelimitedGrammar,
    ReleaseCandidateGrammar,
    VersionGrammar,
)
from depend.core.versioning.key import VersionKey
from depend.core.versioning.parser import parse_version

__all__ = [
    "DelimitedGrammar",
    "ReleaseCandidateGrammar",
    "VersionGrammar",
    "VersionKey",
    "parse_version",
]
