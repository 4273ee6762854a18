"""Symbol-to-package resolution by longest PSR-4 namespace prefix."""

from __future__ import annotations

import logging
import os
import re
import threading
from typing import Protocol

from vendorscope.config import PSR4, Package

logger = logging.getLogger(__name__)

_SEGMENT_RE = re.compile(r"[\\.]")


class InstallPathSource(Protocol):
    def get_install_path(self, package: Package) -> str | None: ...


class PackageSource(Protocol):
    def list_packages(self) -> list[Package]: ...

    def installation_manager(self) -> InstallPathSource: ...


class ResolutionCache:
    """Append-only lookup caches.

    by_symbol: symbol name -> Package or None
    install_paths: package name -> install path or None

    The installed package set does not change while the process runs, so
    entries are never invalidated and a key is never written twice.
    """

    def __init__(self) -> None:
        self.by_symbol: dict[str, Package | None] = {}
        self.install_paths: dict[str, str | None] = {}
        self._symbol_lock = threading.Lock()
        self._path_lock = threading.Lock()

    def lookup_symbol(self, symbol: str) -> tuple[bool, Package | None]:
        with self._symbol_lock:
            if symbol in self.by_symbol:
                return True, self.by_symbol[symbol]
        return False, None

    def store_symbol(self, symbol: str, package: Package | None) -> Package | None:
        """Store a result unless one exists; return the stored value."""
        with self._symbol_lock:
            return self.by_symbol.setdefault(symbol, package)

    def lookup_install_path(self, name: str) -> tuple[bool, str | None]:
        with self._path_lock:
            if name in self.install_paths:
                return True, self.install_paths[name]
        return False, None

    def store_install_path(self, name: str, path: str | None) -> str | None:
        with self._path_lock:
            return self.install_paths.setdefault(name, path)


def get_namespace(package: Package) -> str:
    """Return the first PSR-4 prefix the package declares, or ""."""
    for prefix in package.psr4_rules():
        return prefix
    return ""


def get_source_root(package: Package) -> str | None:
    """Return the directory mapped to the first PSR-4 prefix, or None.

    Only one namespace/path pair per package is supported; later prefixes
    are ignored. If the first prefix maps to a list, its first entry is used.
    """
    for paths in package.psr4_rules().values():
        if isinstance(paths, str):
            return paths
        if isinstance(paths, (list, tuple)) and paths and isinstance(paths[0], str):
            return paths[0]
        return None
    return None


def first_segment(symbol: str) -> str:
    """Return the leading namespace segment of a ``\\`` or ``.`` separated name."""
    return _SEGMENT_RE.split(symbol, maxsplit=1)[0]


class NamespaceResolver:
    """Resolves symbols and packages against the installed package set."""

    def __init__(self, index: PackageSource, cache: ResolutionCache | None = None) -> None:
        self.index = index
        self.cache = cache if cache is not None else ResolutionCache()

    def resolve_package_by_symbol(self, symbol: str) -> Package | None:
        """Return the package that defines ``symbol``, or None.

        The package with the longest matching PSR-4 prefix wins. Of two
        equally long matches the first one in repository order is kept.
        When no prefix matches, the first package with a "files" autoload
        entry containing the symbol's leading segment is returned.
        """
        hit, cached = self.cache.lookup_symbol(symbol)
        if hit:
            return cached

        packages = self.index.list_packages()
        best = self._match_psr4(symbol, packages)
        if best is None:
            best = self._match_files(symbol, packages)

        if best is None:
            logger.debug(f"No package found for {symbol}")
        else:
            logger.debug(f"{symbol} -> {best.name}")
        return self.cache.store_symbol(symbol, best)

    def _match_psr4(self, symbol: str, packages: list[Package]) -> Package | None:
        best = None
        best_len = 0
        for package in packages:
            rules = package.autoload.get(PSR4) if isinstance(package.autoload, dict) else None
            if rules is not None and not isinstance(rules, dict):
                logger.warning(f"Ignoring malformed {PSR4} autoload in {package.name}")
                continue
            for prefix in package.psr4_rules():
                if not isinstance(prefix, str):
                    continue
                # Keep scanning: a later package may declare a deeper prefix.
                if symbol.startswith(prefix) and len(prefix) > best_len:
                    best = package
                    best_len = len(prefix)
        return best

    def _match_files(self, symbol: str, packages: list[Package]) -> Package | None:
        segment = first_segment(symbol).lower()
        if not segment:
            return None
        for package in packages:
            for file_path in package.files_rules():
                if segment in file_path.lower():
                    return package
        return None

    def resolve_install_path(self, package: Package) -> str | None:
        """Return the install path of ``package`` if it is installed, else None."""
        hit, cached = self.cache.lookup_install_path(package.name)
        if hit:
            return cached

        path = None
        for installed in self.index.list_packages():
            if installed.name == package.name:
                path = self.index.installation_manager().get_install_path(installed)
                break

        return self.cache.store_install_path(package.name, path)

    def get_source_root(self, package: Package) -> str | None:
        return get_source_root(package)

    def get_namespace(self, package: Package) -> str:
        return get_namespace(package)

    def resolve_source_directory(self, symbol: str) -> str | None:
        """Return the source directory of the package defining ``symbol``.

        This is the package's install path joined with its first PSR-4
        directory; None if either is unknown.
        """
        package = self.resolve_package_by_symbol(symbol)
        if package is None:
            return None
        install_path = self.resolve_install_path(package)
        source_root = get_source_root(package)
        if install_path is None or source_root is None:
            return None
        return os.path.normpath(os.path.join(install_path, source_root))
