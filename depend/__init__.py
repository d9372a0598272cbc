"""
depend — install tools from their upstream release tags.

Resolves the newest release tag of a known package straight from the
remote repository, checks that revision out under ``<prefix>/src`` and
drives the package's native build into ``<prefix>/bin``.
"""

__version__ = "0.1.0"
