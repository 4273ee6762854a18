"""Read-only adapter over the files Composer leaves on disk."""

from vendorscope.composer.repository import (
    ComposerProject,
    InstallationManager,
    LocalRepository,
)

__all__ = ["ComposerProject", "InstallationManager", "LocalRepository"]
