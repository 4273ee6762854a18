"""Parse composer.json root manifests."""

from __future__ import annotations

import json

from vendorscope.config import DEFAULT_VENDOR_DIR, ManifestInfo
from vendorscope.errors import RepositoryError


def parse_manifest(manifest_path: str) -> ManifestInfo:
    """Parse a composer.json file and return the fields the index needs.

    Only ``name``, ``config.vendor-dir`` and ``autoload`` are read; the rest of
    the manifest (requirements, scripts, repositories) is ignored.
    """
    try:
        with open(manifest_path, "r", encoding="utf-8-sig") as f:
            data = json.load(f)
    except OSError as e:
        raise RepositoryError(f"Cannot read manifest {manifest_path}: {e}") from e
    except ValueError as e:
        raise RepositoryError(f"Manifest {manifest_path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RepositoryError(f"Manifest {manifest_path} must contain a JSON object")

    info = ManifestInfo(path=manifest_path)

    name = data.get("name")
    if isinstance(name, str):
        info.name = name

    config = data.get("config")
    if isinstance(config, dict):
        vendor_dir = config.get("vendor-dir")
        if isinstance(vendor_dir, str) and vendor_dir.strip():
            info.vendor_dir = vendor_dir.strip()

    autoload = data.get("autoload")
    if isinstance(autoload, dict):
        info.autoload = autoload

    if not info.vendor_dir:
        info.vendor_dir = DEFAULT_VENDOR_DIR

    return info
