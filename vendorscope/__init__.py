"""Vendorscope - Map symbols back to the installed packages that ship them."""

from vendorscope.config import IndexConfig, Package
from vendorscope.errors import ConfigurationError, RepositoryError, VendorscopeError
from vendorscope.index import PackageIndex, locate_manifest
from vendorscope.resolver import NamespaceResolver, ResolutionCache

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "IndexConfig",
    "NamespaceResolver",
    "Package",
    "PackageIndex",
    "RepositoryError",
    "ResolutionCache",
    "VendorscopeError",
    "locate_manifest",
]
