"""
Filesystem capabilities: where test files live while a build runs them.
"""

from .base import Capability, CapabilityContext, Category


class LocalFileSystemCapability(Capability):
    """Test files live on the host's local disk (default)."""

    category = Category.FILESYSTEM

    def name(self) -> str:
        return "Local-FileSystem"

    def is_implemented(self) -> bool:
        return True


class SmbFileSystemCapability(Capability):
    """Test files live on an SMB share mounted from the host.

    Recognized so that saved compositions referencing it still parse;
    creating shares is not implemented yet.
    """

    category = Category.FILESYSTEM

    def name(self) -> str:
        return "SMB"

    def is_implemented(self) -> bool:
        return False

    def is_supported(self, context: CapabilityContext) -> bool:
        return context.host.is_windows_host()

    def is_uac_required_for_setup(self) -> bool:
        # Creating a share needs an elevated session
        return True
