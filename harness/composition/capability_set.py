"""
Composition set: one capability per category.

Sets are assembled by one owner, completed with defaults, then published
and treated as read-only by everything that runs tests under them.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from lxml import etree

from harness.capabilities.base import (
    REQUIRED_CATEGORIES,
    Capability,
    Category,
    PermutationLayer,
    TestContext,
)
from harness.capabilities.bootstrap import get_capability_registry
from harness.capabilities.registry import CapabilityRegistry

from .codec import Source, append_capabilities, read_capabilities, write_capabilities


class CompositionSet:
    """Capabilities keyed by category, iterated in insertion order."""

    def __init__(self, capabilities: Optional[Iterable[Capability]] = None):
        self._capabilities: Dict[Category, Capability] = {}
        for capability in capabilities or ():
            self.add(capability)

    def add(self, capability: Capability) -> None:
        """Insert a capability, replacing any other of the same category."""
        self._capabilities[capability.category] = capability

    def complete_with_defaults(self, registry: Optional[CapabilityRegistry] = None) -> None:
        """Fill every missing required category with its default capability.

        Existing entries are never replaced, so calling this twice changes
        nothing the second time.
        """
        registry = registry or get_capability_registry()
        for category in REQUIRED_CATEGORIES:
            if category not in self._capabilities:
                self._capabilities[category] = registry.create_default(category)

    def contains(self, category: Category) -> bool:
        return category in self._capabilities

    def get(self, category: Category) -> Optional[Capability]:
        return self._capabilities.get(category)

    def missing_categories(self) -> List[Category]:
        return [category for category in REQUIRED_CATEGORIES if category not in self._capabilities]

    def is_complete(self) -> bool:
        return not self.missing_categories()

    def copy(self) -> "CompositionSet":
        """Shallow copy; capabilities are shared with this set."""
        return CompositionSet(self)

    def short_name(self, layer: PermutationLayer = PermutationLayer.CORE) -> str:
        """Name built from every capability that is not a placeholder for ``layer``."""
        return "_".join(
            capability.name()
            for capability in self
            if not capability.ignore_for_short_name(layer)
        )

    def uac_required_for_setup(self) -> bool:
        return any(capability.is_uac_required_for_setup() for capability in self)

    def uac_required_for_start(self) -> bool:
        return any(capability.is_uac_required_for_start() for capability in self)

    def will_skip(self, test_context: TestContext) -> bool:
        """True if any capability vetoes the test."""
        return any(capability.will_skip(test_context) for capability in self)

    #######################################################################
    ## Serialization
    #######################################################################

    def serialize(self) -> str:
        """Serialize as XML records in set order."""
        return write_capabilities(self)

    def to_element(self, parent: etree._Element) -> etree._Element:
        """Embed the set's records under ``parent`` of a larger document."""
        return append_capabilities(parent, self)

    @classmethod
    def parse(cls, source: Source, registry: Optional[CapabilityRegistry] = None) -> "CompositionSet":
        """Parse records written by ``serialize``.

        Raises:
            CapabilityCodecError: If any record is unknown; no partial set
                is returned
        """
        return cls(read_capabilities(source, registry))

    #######################################################################
    ## Protocol Methods
    #######################################################################

    def __contains__(self, category: object) -> bool:
        return category in self._capabilities

    def __iter__(self) -> Iterator[Capability]:
        return iter(list(self._capabilities.values()))

    def __len__(self) -> int:
        return len(self._capabilities)

    def __str__(self) -> str:
        return self.short_name()

    def __repr__(self) -> str:
        return f"CompositionSet({list(self._capabilities.values())!r})"
