"""
Helpers for registering built-in capabilities.

Provides an explicit entry point for wiring the closed set of capabilities
into the global registry without relying on package import side effects.
"""

from __future__ import annotations

from typing import Type

from harness.logger import UnifiedLogger

from .applications import ElggCapability
from .base import Capability
from .code_cache import NoCodeCacheCapability, OpcacheCapability
from .execution import BuiltinWebServerCapability, CliCapability
from .filesystem import LocalFileSystemCapability, SmbFileSystemCapability
from .integration import EnchantCapability
from .overrides import DirectiveOverrideCapability
from .paths import DeepPathsCapability, NormalPathsCapability
from .registry import CapabilityRegistry, get_global_registry
from .transport import PlainSocketCapability

logger = UnifiedLogger(tag="capability-bootstrap")

# (class, is category default)
_BUILTIN_CAPABILITIES: tuple[tuple[Type[Capability], bool], ...] = (
    (CliCapability, True),
    (BuiltinWebServerCapability, False),
    (LocalFileSystemCapability, True),
    (SmbFileSystemCapability, False),
    (PlainSocketCapability, True),
    (NoCodeCacheCapability, True),
    (OpcacheCapability, False),
    (NormalPathsCapability, True),
    (DeepPathsCapability, False),
    (EnchantCapability, True),
    (ElggCapability, False),
    (DirectiveOverrideCapability, False),
)

_builtins_registered: bool = False


def ensure_builtin_capabilities_registered() -> None:
    """Register the built-in capabilities with the global registry once."""
    global _builtins_registered

    if _builtins_registered:
        return

    registry = get_global_registry()

    for capability_cls, is_default in _BUILTIN_CAPABILITIES:
        type_name = capability_cls.type_name()

        if registry.is_capability_registered(type_name):
            continue

        try:
            registry.register_capability(capability_cls, default=is_default)
        except Exception as exc:
            logger.error(
                "Failed to register capability",
                capability=type_name,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise

    _builtins_registered = True


def get_capability_registry() -> CapabilityRegistry:
    """Return the global registry with the built-in capabilities registered."""
    ensure_builtin_capabilities_registered()
    return get_global_registry()
