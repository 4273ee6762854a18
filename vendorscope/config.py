"""Core data types and configuration for package resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_MANIFEST_NAME = "composer.json"
DEFAULT_VENDOR_DIR = "vendor"

PSR4 = "psr-4"
FILES = "files"

METAPACKAGE = "metapackage"


@dataclass(frozen=True)
class Package:
    """An installed package as recorded by the dependency manager.

    Identity is the package name; two records with the same name describe
    the same installed package.
    """
    name: str
    version: str = ""
    type: str = "library"
    autoload: dict[str, Any] = field(default_factory=dict, compare=False)
    install_path: str | None = field(default=None, compare=False)

    def psr4_rules(self) -> dict:
        """Return the PSR-4 prefix map, or an empty dict when it is malformed."""
        rules = self.autoload.get(PSR4) if isinstance(self.autoload, dict) else None
        if isinstance(rules, dict):
            return rules
        return {}

    def files_rules(self) -> list[str]:
        """Return the "files" autoload entries that are strings."""
        rules = self.autoload.get(FILES) if isinstance(self.autoload, dict) else None
        if not isinstance(rules, (list, tuple)):
            return []
        return [f for f in rules if isinstance(f, str)]


@dataclass
class ManifestInfo:
    """Parsed information from a root manifest file."""
    path: str
    name: str = ""
    vendor_dir: str = DEFAULT_VENDOR_DIR
    autoload: dict[str, Any] = field(default_factory=dict)


@dataclass
class IndexConfig:
    manifest_name: str = DEFAULT_MANIFEST_NAME
    home_env_var: str = "HOME"
    manifest_env_var: str = "VENDORSCOPE_MANIFEST"
