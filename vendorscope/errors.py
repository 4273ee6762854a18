"""Exception types raised by vendorscope."""


class VendorscopeError(Exception):
    """Base class for all vendorscope errors."""


class ConfigurationError(VendorscopeError):
    """The manifest path is missing, does not exist or is not readable."""


class RepositoryError(VendorscopeError):
    """The installed-package data could not be read."""
