"""Package index: the bridge between the resolver and the Composer project."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from vendorscope.composer.repository import (
    ComposerProject,
    InstallationManager,
    LocalRepository,
)
from vendorscope.config import DEFAULT_MANIFEST_NAME, IndexConfig, Package
from vendorscope.errors import ConfigurationError

logger = logging.getLogger(__name__)

# The working directory is process-wide state; every change goes through this lock.
_CWD_LOCK = threading.RLock()


@contextmanager
def working_directory(path: str) -> Iterator[str]:
    """Run the enclosed block with ``path`` as the current working directory.

    The previous directory is restored on every exit path, including errors.
    """
    with _CWD_LOCK:
        previous = os.getcwd()
        os.chdir(path)
        try:
            yield path
        finally:
            os.chdir(previous)


def _is_readable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.R_OK)


def locate_manifest(
    start_dir: str | None = None,
    manifest_name: str = DEFAULT_MANIFEST_NAME,
) -> str | None:
    """Return the topmost readable manifest at or above ``start_dir``.

    The walk does not stop at the first manifest: one found part way up
    usually belongs to a package installed inside the application, so the
    furthest ancestor wins. Returns None if no manifest is found.
    """
    current = Path(start_dir) if start_dir else Path.cwd()
    current = current.resolve()

    found = None
    for directory in (current, *current.parents):
        candidate = directory / manifest_name
        if _is_readable_file(candidate):
            logger.debug(f"Manifest candidate: {candidate}")
            found = candidate

    return str(found) if found else None


def _validate_manifest_path(manifest_path: str | None) -> None:
    if not manifest_path:
        raise ConfigurationError("No path to the manifest file was provided.")
    if not os.path.exists(manifest_path):
        raise ConfigurationError(f"The provided path {manifest_path} does not exist.")
    if not os.path.isfile(manifest_path) or not os.access(manifest_path, os.R_OK):
        raise ConfigurationError(f"The provided path {manifest_path} is not readable.")


class PackageIndex:
    """Installed packages of the project governed by one manifest file.

    The Composer project is opened lazily on first use and kept for the
    lifetime of the index.
    """

    def __init__(
        self,
        manifest_path: str,
        config: IndexConfig | None = None,
        project_factory: Callable[[str], ComposerProject] | None = None,
    ) -> None:
        _validate_manifest_path(manifest_path)
        self.config = config or IndexConfig()
        self.manifest_path = os.path.abspath(manifest_path)
        self._project_factory = project_factory or ComposerProject.create
        self._project: ComposerProject | None = None
        self._open_lock = threading.Lock()
        self._check_home_dir()

    @classmethod
    def for_application(
        cls,
        start_dir: str | None = None,
        config: IndexConfig | None = None,
    ) -> PackageIndex:
        """Build an index for the application containing ``start_dir``.

        An explicit manifest path in the environment takes precedence over
        the upward search.
        """
        config = config or IndexConfig()
        manifest_path = os.environ.get(config.manifest_env_var)
        if not manifest_path:
            manifest_path = locate_manifest(start_dir, config.manifest_name)
        if not manifest_path:
            where = start_dir or os.getcwd()
            raise ConfigurationError(f"No {config.manifest_name} found at or above {where}.")
        return cls(manifest_path, config=config)

    def _check_home_dir(self) -> None:
        # Accounts such as www-data may have no home; keep the cache in the project.
        var = self.config.home_env_var
        if not os.environ.get(var):
            home_dir = os.path.dirname(self.manifest_path)
            logger.info(f"{var} is not set, using {home_dir}")
            os.environ[var] = home_dir

    def get_manifest_path(self) -> str:
        """Return the manifest path used by this index."""
        return self.manifest_path

    def open(self) -> ComposerProject:
        """Open the Composer project, constructing it on first call.

        The manifest is checked again first, as it may have been removed since
        the index was built. Composer resolves relative paths against the
        working directory, so construction runs from the manifest's directory.
        """
        with self._open_lock:
            if self._project is None:
                _validate_manifest_path(self.manifest_path)
                with working_directory(os.path.dirname(self.manifest_path)):
                    self._project = self._project_factory(self.manifest_path)
        return self._project

    def get_local_repository(self) -> LocalRepository:
        return self.open().local_repository

    def installation_manager(self) -> InstallationManager:
        return self.open().installation_manager

    def list_packages(self) -> list[Package]:
        """Return every installed package, in repository order.

        The order is whatever installed.json records and may differ between
        Composer versions.
        """
        return self.get_local_repository().get_packages()
