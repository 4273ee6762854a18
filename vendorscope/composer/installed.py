"""Parse vendor/composer/installed.json (Composer 1 and 2 layouts)."""

from __future__ import annotations

import json
import logging
import os

from vendorscope.config import Package
from vendorscope.errors import RepositoryError

logger = logging.getLogger(__name__)

INSTALLED_FILE = os.path.join("composer", "installed.json")


def parse_installed(installed_path: str) -> list[Package]:
    """Parse an installed.json file and return its packages in file order.

    Composer 1 writes a bare list of packages, Composer 2 wraps the list in
    ``{"packages": [...]}``. A missing file means nothing is installed.
    """
    if not os.path.exists(installed_path):
        logger.debug(f"No installed packages file at {installed_path}")
        return []

    try:
        with open(installed_path, "r", encoding="utf-8-sig") as f:
            data = json.load(f)
    except OSError as e:
        raise RepositoryError(f"Cannot read {installed_path}: {e}") from e
    except ValueError as e:
        raise RepositoryError(f"{installed_path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        entries = data.get("packages", [])
    else:
        entries = data

    if not isinstance(entries, list):
        raise RepositoryError(f"{installed_path} does not list any packages")

    packages = []
    for entry in entries:
        package = _to_package(entry)
        if package is None:
            logger.warning(f"Skipping unnamed package record in {installed_path}")
            continue
        packages.append(package)

    return packages


def _to_package(entry: object) -> Package | None:
    if not isinstance(entry, dict):
        return None
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        return None

    autoload = entry.get("autoload")
    if not isinstance(autoload, dict):
        autoload = {}

    install_path = entry.get("install-path")
    if not isinstance(install_path, str):
        install_path = None

    return Package(
        name=name,
        version=str(entry.get("version", "")),
        type=str(entry.get("type", "library")),
        autoload=autoload,
        install_path=install_path,
    )
