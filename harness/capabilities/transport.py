"""
Socket transport capabilities.
"""

from .base import Capability, Category, PermutationLayer


class PlainSocketCapability(Capability):
    """Unencrypted sockets, exactly what the build does without help (default)."""

    category = Category.SOCKET_TRANSPORT

    def name(self) -> str:
        return "Plain-Socket"

    def is_implemented(self) -> bool:
        return True

    def is_placeholder(self, layer: PermutationLayer) -> bool:
        return True
