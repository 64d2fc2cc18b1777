"""
Capability registry.

This module maps the bare type names used in serialized compositions to
capability classes and records the default capability of each required
category. The namespace is closed: it only holds what
``harness.capabilities.bootstrap`` registers, and looking up anything else
is an error.
"""

from typing import Dict, List, Type

from harness.exceptions import CapabilityError
from harness.logger import UnifiedLogger

from .base import Capability, Category

# Create module logger
logger = UnifiedLogger(tag="capability-registry")


#######################################################################
## Exception Classes
#######################################################################

class CapabilityRegistryError(CapabilityError):
    """Base exception for capability registry errors."""
    pass


class UnknownCapabilityError(CapabilityRegistryError):
    """Raised when looking up a type name that is not registered."""
    pass


class DuplicateCapabilityError(CapabilityRegistryError):
    """Raised when registering a type name or category default twice."""
    pass


#######################################################################
## Registry Implementation
#######################################################################

class CapabilityRegistry:
    """Registry of capability classes keyed by bare type name."""

    def __init__(self):
        """Initialize an empty capability registry."""
        self._classes: Dict[str, Type[Capability]] = {}
        self._defaults: Dict[Category, Type[Capability]] = {}

    def register_capability(self, capability_cls: Type[Capability], *, default: bool = False) -> None:
        """Register a capability class.

        Args:
            capability_cls: The capability class to register
            default: Whether the class is its category's default

        Raises:
            DuplicateCapabilityError: If the type name, or the category's
                default, is already registered
        """
        type_name = capability_cls.type_name()

        if type_name in self._classes:
            raise DuplicateCapabilityError(
                f"Capability '{type_name}' is already registered"
            )

        if default and capability_cls.category in self._defaults:
            raise DuplicateCapabilityError(
                f"Category '{capability_cls.category.value}' already defaults to "
                f"'{self._defaults[capability_cls.category].type_name()}'"
            )

        self._classes[type_name] = capability_cls
        if default:
            self._defaults[capability_cls.category] = capability_cls

    def is_capability_registered(self, type_name: str) -> bool:
        return type_name in self._classes

    def get_capability_class(self, type_name: str) -> Type[Capability]:
        """Get the class registered under a bare type name.

        Raises:
            UnknownCapabilityError: If the name is not registered
        """
        if type_name not in self._classes:
            raise UnknownCapabilityError(
                f"Unknown capability: '{type_name}'. "
                f"Registered capabilities: {list(self._classes.keys())}"
            )

        return self._classes[type_name]

    def create(self, type_name: str) -> Capability:
        """Instantiate the default-constructed capability for a type name."""
        return self.get_capability_class(type_name)()

    def create_default(self, category: Category) -> Capability:
        """Instantiate the default capability of a category.

        Raises:
            UnknownCapabilityError: If the category has no default
        """
        if category not in self._defaults:
            raise UnknownCapabilityError(f"No default capability for category '{category.value}'")
        return self._defaults[category]()

    def get_registered_capabilities(self) -> List[str]:
        return list(self._classes.keys())

    def is_default(self, type_name: str) -> bool:
        capability_cls = self._classes.get(type_name)
        return capability_cls is not None and self._defaults.get(capability_cls.category) is capability_cls

    def get_capabilities_by_category(self) -> Dict[Category, List[Type[Capability]]]:
        """Group registered classes by category, in registration order."""
        grouped: Dict[Category, List[Type[Capability]]] = {}
        for capability_cls in self._classes.values():
            grouped.setdefault(capability_cls.category, []).append(capability_cls)
        return grouped


#######################################################################
## Global Registry Instance
#######################################################################

_global_registry = CapabilityRegistry()


def get_global_registry() -> CapabilityRegistry:
    """Get the global capability registry instance.

    The built-in capabilities are registered lazily; callers that resolve
    names should go through ``harness.capabilities.bootstrap.get_capability_registry``.
    """
    return _global_registry
