"""Local package repository and installation manager for a Composer project.

The objects here mirror the narrow slice of Composer the index consumes:
a local repository enumerating installed packages and an installation
manager mapping a package to its directory on disk.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from vendorscope.composer.installed import INSTALLED_FILE, parse_installed
from vendorscope.composer.manifest import parse_manifest
from vendorscope.config import METAPACKAGE, ManifestInfo, Package
from vendorscope.errors import RepositoryError

logger = logging.getLogger(__name__)


class LocalRepository:
    """Installed packages, read from installed.json on first access."""

    def __init__(self, installed_path: str) -> None:
        self.installed_path = installed_path
        self._packages: list[Package] | None = None

    def get_packages(self) -> list[Package]:
        if self._packages is None:
            self._packages = parse_installed(self.installed_path)
            logger.debug(
                f"Loaded {len(self._packages)} installed packages from {self.installed_path}"
            )
        return list(self._packages)


class InstallationManager:
    """Maps installed packages to their install directories."""

    def __init__(self, vendor_dir: str) -> None:
        self.vendor_dir = vendor_dir

    def get_install_path(self, package: Package) -> str | None:
        """Return the directory a package was installed into.

        Metapackages have no files and therefore no install path. A path
        recorded by Composer 2 is relative to ``<vendor>/composer``; without
        one the package lives at ``<vendor>/<name>``.
        """
        if package.type == METAPACKAGE:
            return None
        if package.install_path:
            base = os.path.join(self.vendor_dir, "composer")
            return os.path.normpath(os.path.join(base, package.install_path))
        return os.path.join(self.vendor_dir, *package.name.split("/"))


@dataclass
class ComposerProject:
    """A Composer project opened from its root manifest."""
    manifest: ManifestInfo
    vendor_dir: str
    cache_dir: str
    local_repository: LocalRepository
    installation_manager: InstallationManager

    @classmethod
    def create(cls, manifest_path: str) -> ComposerProject:
        """Open the project described by ``manifest_path``.

        Like Composer itself, a relative vendor directory is resolved
        against the current working directory, not the manifest's directory.
        """
        manifest = parse_manifest(manifest_path)

        vendor_dir = os.environ.get("COMPOSER_VENDOR_DIR") or manifest.vendor_dir
        vendor_dir = os.path.abspath(vendor_dir)

        cache_dir = _cache_dir()
        logger.debug(f"Opened {manifest_path}: vendor={vendor_dir} cache={cache_dir}")

        return cls(
            manifest=manifest,
            vendor_dir=vendor_dir,
            cache_dir=cache_dir,
            local_repository=LocalRepository(os.path.join(vendor_dir, INSTALLED_FILE)),
            installation_manager=InstallationManager(vendor_dir),
        )


def _cache_dir() -> str:
    """Work out the cache directory from the environment."""
    cache_dir = os.environ.get("COMPOSER_CACHE_DIR")
    if cache_dir:
        return cache_dir

    composer_home = os.environ.get("COMPOSER_HOME")
    if composer_home:
        return os.path.join(composer_home, "cache")

    home = os.environ.get("HOME")
    if not home:
        raise RepositoryError(
            "Cannot determine a cache directory: none of COMPOSER_CACHE_DIR, "
            "COMPOSER_HOME or HOME is set"
        )
    return os.path.join(home, ".cache", "composer")
