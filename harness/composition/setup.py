"""
Setup of every capability in a composition.

Setup is fail-fast: the first capability whose setup fails stops the loop.
Handles acquired before the failure are not released here; they stay on the
returned CompositionSetup and the caller releases them, normally by using
it as a context manager.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from harness.capabilities.base import Capability, CapabilityContext, SetupFailure, SetupHandle
from harness.logger import UnifiedLogger

from .capability_set import CompositionSet

logger = UnifiedLogger(tag="composition-setup")


@dataclass
class CompositionSetup:
    """Outcome of setting up a composition."""

    composition: CompositionSet
    context: CapabilityContext
    handles: List[Tuple[Capability, SetupHandle]] = field(default_factory=list)
    failure: Optional[SetupFailure] = None
    closed: bool = False

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    def close(self) -> None:
        """Release every acquired handle, newest first.

        Each release is attempted even if an earlier one raised; the first
        error is re-raised once all were attempted.
        """
        if self.closed:
            return
        self.closed = True

        first_error: Optional[BaseException] = None
        for capability, handle in reversed(self.handles):
            try:
                handle.close(self.context.sink)
            except Exception as exc:
                logger.error(
                    "Failed to release capability setup",
                    capability=capability.name(),
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                if first_error is None:
                    first_error = exc

        if first_error is not None:
            raise first_error

    def __enter__(self) -> "CompositionSetup":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def setup_composition(composition: CompositionSet, context: CapabilityContext) -> CompositionSetup:
    """Set up each capability that requires it for the context's layer.

    Returns:
        A CompositionSetup holding the acquired handles, with ``failure``
        set if a capability's setup failed. The caller releases the handles
        in both cases.
    """
    outcome = CompositionSetup(composition=composition, context=context)
    scope = composition.short_name(context.layer)

    with logger.span("setup_composition", composition=scope, layer=context.layer.value):
        for capability in composition:
            if not capability.setup_required(context.layer):
                continue

            try:
                result = capability.setup(context)
            except Exception as exc:
                logger.error(
                    "Capability setup raised",
                    capability=capability.name(),
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                result = SetupFailure(capability.name(), f"{type(exc).__name__}: {exc}")

            if isinstance(result, SetupFailure):
                outcome.failure = result
                logger.activity(
                    "Capability setup failed",
                    scope=scope,
                    level="warning",
                    capability=capability.name(),
                    reason=result.reason,
                )
                return outcome

            outcome.handles.append((capability, result))
            context.sink.println("CompositionSetup", f"Set up {result.name_with_version_info()}")

    logger.activity(
        "Composition set up",
        scope=scope,
        capabilities=[capability.name() for capability, _ in outcome.handles],
    )
    return outcome
