"""
Integration toggles for optional libraries the build can link against.
"""

from lxml import etree

from harness.directives.store import DirectiveStore

from .base import Capability, CapabilityContext, Category, PermutationLayer


class EnchantCapability(Capability):
    """Spell-checking integration; disabled unless explicitly enabled."""

    category = Category.INTEGRATION_TOGGLE

    _ENABLED_ATTRIBUTE = "enabled"

    def __init__(self, enabled: bool = False):
        self.enabled = enabled

    def name(self) -> str:
        return "Enchant" if self.enabled else "No-Enchant"

    def is_implemented(self) -> bool:
        return True

    def is_placeholder(self, layer: PermutationLayer) -> bool:
        return not self.enabled

    def apply_directives(self, store: DirectiveStore, context: CapabilityContext) -> None:
        if self.enabled and not store.has_extension("enchant"):
            store.add_host_extension(context.host, context.build, "enchant")

    def serialize_custom(self, element: etree._Element) -> None:
        element.set(self._ENABLED_ATTRIBUTE, "true" if self.enabled else "false")

    def parse_custom(self, element: etree._Element) -> None:
        self.enabled = element.get(self._ENABLED_ATTRIBUTE, "false").strip().lower() == "true"

    def __repr__(self) -> str:
        return f"EnchantCapability(enabled={self.enabled})"
