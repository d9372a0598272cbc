"""
Static data shipped with the package.

    from depend.core.data import BUILTIN_CATALOG
"""

from __future__ import annotations

from pathlib import Path

_DATA_DIR = Path(__file__).parent

BUILTIN_CATALOG = _DATA_DIR / "packages.yml"
