"""
Catalog loader — reads package definitions from YAML.

The built-in catalog ships inside the package. A user catalog with the
same schema can be layered on top; its entries replace built-ins of
the same name.

Schema::

    packages:
      - name: doxygen
        remote_url: https://...
        tag_pattern: 'refs/tags/Release_...'
        ...
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from depend.core.data import BUILTIN_CATALOG
from depend.core.errors import ConfigError, UnknownPackageError
from depend.core.models.package import PackageSpec

logger = logging.getLogger(__name__)


class Catalog:
    """Known packages, keyed by name, in definition order."""

    def __init__(self, packages: dict[str, PackageSpec] | None = None):
        self._packages: dict[str, PackageSpec] = dict(packages or {})

    @property
    def names(self) -> list[str]:
        return list(self._packages)

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def __len__(self) -> int:
        return len(self._packages)

    def get(self, name: str) -> PackageSpec:
        """Look up a package.

        Raises:
            UnknownPackageError: If ``name`` is not in the catalog.
        """
        spec = self._packages.get(name)
        if spec is None:
            raise UnknownPackageError(name, self.names)
        return spec

    def all(self) -> list[PackageSpec]:
        return list(self._packages.values())

    def merged(self, other: Catalog) -> Catalog:
        """A new catalog with ``other``'s entries overriding ours."""
        combined = dict(self._packages)
        combined.update(other._packages)
        return Catalog(combined)


def load_catalog_file(path: Path) -> Catalog:
    """Load and validate one catalog file.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Catalog file not found: {path}", path=path)

    logger.debug("Loading package catalog from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path=path) from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path=path) from e

    if data is None:
        return Catalog()
    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected a YAML mapping in {path}, got {type(data).__name__}", path=path,
        )

    entries = data.get("packages") or []
    if not isinstance(entries, list):
        raise ConfigError(f"'packages' in {path} must be a list", path=path)

    packages: dict[str, PackageSpec] = {}
    for position, entry in enumerate(entries, start=1):
        try:
            spec = PackageSpec.model_validate(entry)
        except ValidationError as e:
            raise ConfigError(
                f"Invalid package #{position} in {path}: {e.error_count()} error(s)",
                path=path,
                hint=str(e),
            ) from e
        if spec.name in packages:
            raise ConfigError(f"Duplicate package '{spec.name}' in {path}", path=path)
        packages[spec.name] = spec

    logger.info("Loaded %d package(s) from %s", len(packages), path)
    return Catalog(packages)


def load_catalog(extra: Path | None = None) -> Catalog:
    """Built-in catalog, optionally overlaid with a user catalog file."""
    catalog = load_catalog_file(BUILTIN_CATALOG)
    if extra is not None:
        catalog = catalog.merged(load_catalog_file(extra))
    return catalog
