"""
Code-cache capabilities.
"""

from typing import Optional

from lxml import etree

from harness.constants import OPCACHE_ENABLE, OPCACHE_ENABLE_CLI, ZEND_EXTENSION
from harness.directives.store import DirectiveStore, extension_file_name

from .base import Capability, CapabilityContext, Category, PermutationLayer, TestContext


class NoCodeCacheCapability(Capability):
    """Run without any opcode cache (default)."""

    category = Category.CODE_CACHE

    OPCACHE_TESTS_MARKER = "ext/opcache/"

    def name(self) -> str:
        return "No-Code-Cache"

    def is_implemented(self) -> bool:
        return True

    def is_placeholder(self, layer: PermutationLayer) -> bool:
        return True

    def will_skip(self, test_context: TestContext) -> bool:
        # The cache's own tests are meaningless with the cache disabled
        return self.OPCACHE_TESTS_MARKER in test_context.normalized_name


class OpcacheCapability(Capability):
    """Load the opcode cache extension and enable it for CLI runs too."""

    category = Category.CODE_CACHE

    DEFAULT_MEMORY_CONSUMPTION = 128
    _OPTION_TAG = "option"
    _MEMORY_OPTION = "opcache.memory_consumption"

    def __init__(self, memory_consumption: int = DEFAULT_MEMORY_CONSUMPTION):
        self.memory_consumption = memory_consumption

    def name(self) -> str:
        return "Opcache"

    def is_implemented(self) -> bool:
        return True

    def _library_path(self, context: CapabilityContext) -> Optional[str]:
        extension_dir = context.build.default_extension_directory() if context.build else None
        if not extension_dir:
            return None
        return f"{extension_dir}/{extension_file_name(context.host, 'opcache')}"

    def is_supported(self, context: CapabilityContext) -> bool:
        library_path = self._library_path(context)
        return library_path is not None and context.host.exists(library_path)

    def apply_directives(self, store: DirectiveStore, context: CapabilityContext) -> None:
        store.set(ZEND_EXTENSION, self._library_path(context) or extension_file_name(context.host, "opcache"))
        store.set(OPCACHE_ENABLE, 1)
        store.set(OPCACHE_ENABLE_CLI, 1)
        store.set(self._MEMORY_OPTION, self.memory_consumption)

    def serialize_custom(self, element: etree._Element) -> None:
        option = etree.SubElement(element, self._OPTION_TAG)
        option.set("name", self._MEMORY_OPTION)
        option.set("value", str(self.memory_consumption))

    def parse_custom(self, element: etree._Element) -> None:
        for option in element.iter(self._OPTION_TAG):
            if option.get("name") == self._MEMORY_OPTION:
                self.memory_consumption = int(option.get("value", self.DEFAULT_MEMORY_CONSUMPTION))

    def __repr__(self) -> str:
        return f"OpcacheCapability(memory_consumption={self.memory_consumption})"
