"""
Directive override capability: extra directives carried by a composition.
"""

from typing import Optional

from lxml import etree

from harness.directives.store import DirectiveStore

from .base import Capability, CapabilityContext, Category


class DirectiveOverrideCapability(Capability):
    """Replace directives of the runnable store with the ones carried here."""

    category = Category.DIRECTIVE_OVERRIDE

    _DIRECTIVE_TAG = "directive"

    def __init__(self, directives: Optional[DirectiveStore] = None):
        self.directives = directives if directives is not None else DirectiveStore()

    def name(self) -> str:
        return "Directives"

    def is_implemented(self) -> bool:
        return True

    def apply_directives(self, store: DirectiveStore, context: CapabilityContext) -> None:
        store.merge_replace(self.directives)

    def serialize_custom(self, element: etree._Element) -> None:
        for directive in self.directives.directives():
            for value in self.directives.get_all(directive) or []:
                child = etree.SubElement(element, self._DIRECTIVE_TAG)
                child.set("name", directive)
                child.set("value", value)

    def parse_custom(self, element: etree._Element) -> None:
        for child in element.iter(self._DIRECTIVE_TAG):
            name = child.get("name")
            if name is not None:
                self.directives.add(name, child.get("value", ""))

    def __repr__(self) -> str:
        return f"DirectiveOverrideCapability({self.directives!r})"
