"""
Runnable configuration: a completed composition paired with its directives.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from harness.capabilities.base import CapabilityContext
from harness.directives.store import DirectiveStore
from harness.exceptions import CapabilityError
from harness.logger import UnifiedLogger

from .capability_set import CompositionSet

logger = UnifiedLogger(tag="runnable-configuration")


#######################################################################
## Exception Classes
#######################################################################

class CompositionError(CapabilityError):
    """Base exception for compositions that cannot be run."""
    pass


class IncompleteCompositionError(CompositionError):
    """Raised when a required category has no capability."""
    pass


class UnimplementedCapabilityError(CompositionError):
    """Raised when a composition includes a recognized but unimplemented capability."""
    pass


class UnsupportedCapabilityError(CompositionError):
    """Raised when a capability is not supported by the host or build."""
    pass


#######################################################################
## Runnable Configuration
#######################################################################

@dataclass(frozen=True)
class RunnableConfiguration:
    """Everything needed to start the interpreter under a composition."""

    composition: CompositionSet
    directives: DirectiveStore
    cli_args: str
    directive_text: str
    short_name: str

    def write_directive_file(self, path: Path) -> Path:
        """Write the directive text to ``path`` and return it."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.directive_text, encoding="utf-8")
        return path


def validate_composition(composition: CompositionSet, context: CapabilityContext) -> None:
    """Reject compositions that cannot run in ``context``.

    Raises:
        IncompleteCompositionError: If required categories are missing
        UnimplementedCapabilityError: If any capability is not implemented
        UnsupportedCapabilityError: If any capability is unsupported
    """
    missing = composition.missing_categories()
    if missing:
        raise IncompleteCompositionError(
            f"Composition is missing required categories: {[category.value for category in missing]}"
        )

    for capability in composition:
        if not capability.is_implemented():
            raise UnimplementedCapabilityError(f"Capability '{capability.name()}' is not implemented")
        if not capability.is_supported(context):
            raise UnsupportedCapabilityError(
                f"Capability '{capability.name()}' is not supported on {context.host!r}"
            )


def build_runnable_configuration(
    composition: CompositionSet,
    directives: DirectiveStore,
    context: CapabilityContext,
) -> RunnableConfiguration:
    """Validate a published composition and derive its runnable directives.

    ``directives`` is copied; neither it nor the composition is modified.
    """
    validate_composition(composition, context)

    store = directives.copy()
    for capability in composition:
        capability.apply_directives(store, context)

    short_name = composition.short_name(context.layer)
    configuration = RunnableConfiguration(
        composition=composition,
        directives=store,
        cli_args=store.to_cli_args(context.host.is_windows_host()),
        directive_text=store.to_text(),
        short_name=short_name,
    )

    logger.debug(
        "Built runnable configuration",
        composition=short_name,
        directive_count=store.count_directives(),
    )
    return configuration
