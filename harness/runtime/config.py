"""
Runtime configuration for composing test runs.

Bundles the collaborators a run needs and produces the CapabilityContext
handed to capabilities.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from harness.capabilities.base import CapabilityContext, PermutationLayer
from harness.exceptions import HarnessError

from .host import Build, Host, LocalHost, LoggerSink, MessageSink, StaticBuild


@dataclass
class HarnessConfig:
    """
    Configuration for one orchestrated run.

    Attributes:
        host: Host the build runs on
        build: Build under test (None when only directives are composed)
        sink: Receiver for setup diagnostics
        layer: Layer compositions are permuted for
    """

    host: Host
    build: Optional[Build] = None
    sink: MessageSink = field(default_factory=LoggerSink)
    layer: PermutationLayer = PermutationLayer.CORE

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.layer, str) and not isinstance(self.layer, PermutationLayer):
            try:
                self.layer = PermutationLayer(self.layer.lower())
            except ValueError:
                valid_layers = [layer.value for layer in PermutationLayer]
                raise HarnessConfigError(f"Invalid layer '{self.layer}'. Must be one of: {valid_layers}")

        if not isinstance(self.host, Host):
            raise HarnessConfigError(f"host must implement path_separator/exists/is_windows_host, got {self.host!r}")

    @classmethod
    def for_local(
        cls,
        extension_dir: Optional[str] = None,
        layer: Union[str, PermutationLayer] = PermutationLayer.CORE,
    ) -> "HarnessConfig":
        """Create configuration for the machine running the harness."""
        return cls(
            host=LocalHost(),
            build=StaticBuild(extension_dir),
            layer=layer,
        )

    def capability_context(self) -> CapabilityContext:
        return CapabilityContext(host=self.host, build=self.build, sink=self.sink, layer=self.layer)


class HarnessConfigError(HarnessError):
    """Raised when runtime configuration is invalid."""
    pass
