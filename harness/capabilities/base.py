"""
Base classes for the capability system.

A capability is one orthogonal facet of the environment a test run executes
in: how the interpreter is started, which filesystem it sees, which socket
transport and code cache it uses, how deep its paths are, and which optional
integrations are enabled. A CompositionSet holds one capability per
category; see ``harness.composition.capability_set``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Optional, Union

from lxml import etree

from harness.constants import CAPABILITY_NAME_ATTRIBUTE, CAPABILITY_TAG
from harness.runtime.host import Build, Host, LoggerSink, MessageSink

if TYPE_CHECKING:
    from harness.directives.store import DirectiveStore


class Category(str, Enum):
    """Key used to deduplicate and default capabilities within a set."""

    EXECUTION_MODE = "execution-mode"
    FILESYSTEM = "filesystem"
    SOCKET_TRANSPORT = "socket-transport"
    CODE_CACHE = "code-cache"
    PATH_STYLE = "path-style"
    INTEGRATION_TOGGLE = "integration-toggle"
    APPLICATION = "application"
    DIRECTIVE_OVERRIDE = "directive-override"


# Every completed set holds exactly one capability for each of these
REQUIRED_CATEGORIES = (
    Category.EXECUTION_MODE,
    Category.FILESYSTEM,
    Category.SOCKET_TRANSPORT,
    Category.CODE_CACHE,
    Category.PATH_STYLE,
    Category.INTEGRATION_TOGGLE,
)


class PermutationLayer(str, Enum):
    """What a composition is being permuted for."""

    CORE = "core"
    APPLICATION = "application"
    PERFORMANCE = "performance"


@dataclass
class CapabilityContext:
    """Collaborators handed to capabilities when queried or set up."""

    host: Host
    build: Optional[Build] = None
    sink: MessageSink = field(default_factory=LoggerSink)
    layer: PermutationLayer = PermutationLayer.CORE


@dataclass
class TestContext:
    """Test case a capability may veto under the current configuration."""

    __test__ = False  # not a pytest test class

    test_name: str
    context: Optional[CapabilityContext] = None

    @property
    def normalized_name(self) -> str:
        """Test name with forward slashes regardless of host convention."""
        return self.test_name.replace("\\", "/")


#######################################################################
## Setup Results
#######################################################################

class SetupHandle(ABC):
    """Resource acquired by a successful capability setup.

    ``close`` must be called once the owning configuration is done, on
    every exit path.
    """

    succeeded: ClassVar[bool] = True

    @abstractmethod
    def name(self) -> str:
        pass

    def name_with_version_info(self) -> str:
        return self.name()

    @abstractmethod
    def close(self, sink: MessageSink) -> None:
        """Release the resource."""
        pass

    def __str__(self) -> str:
        return self.name_with_version_info()


class _SuccessHandle(SetupHandle):
    """Handle for setups that acquire nothing."""

    def name(self) -> str:
        return "Success"

    def close(self, sink: MessageSink) -> None:
        pass


SETUP_SUCCESS = _SuccessHandle()


@dataclass
class SetupFailure:
    """Non-success outcome of a capability setup."""

    capability_name: str
    reason: str = ""

    succeeded: ClassVar[bool] = False

    def __str__(self) -> str:
        return f"{self.capability_name} setup failed: {self.reason}" if self.reason else f"{self.capability_name} setup failed"


SetupResult = Union[SetupHandle, SetupFailure]


#######################################################################
## Capability
#######################################################################

class Capability(ABC):
    """Base class for capabilities.

    Each built-in capability declares its ``category`` and implements
    ``name`` and ``is_implemented``. Every other hook has a default that
    suits capabilities which need no resources.
    """

    category: ClassVar[Category]

    @abstractmethod
    def name(self) -> str:
        """Display name, also used to build composition short names."""
        pass

    @abstractmethod
    def is_implemented(self) -> bool:
        """False for recognized capabilities that cannot run yet.

        Building a runnable configuration from an unimplemented capability
        fails; it is never silently ignored.
        """
        pass

    @classmethod
    def type_name(cls) -> str:
        """Bare type name used as the serialized record tag."""
        return cls.__name__

    def is_placeholder(self, layer: PermutationLayer) -> bool:
        return False

    def setup_required(self, layer: PermutationLayer) -> bool:
        return not self.is_placeholder(layer)

    def ignore_for_short_name(self, layer: PermutationLayer) -> bool:
        return self.is_placeholder(layer)

    def is_supported(self, context: CapabilityContext) -> bool:
        return True

    def will_skip(self, test_context: TestContext) -> bool:
        """Return True to veto running the test under this capability."""
        return False

    def setup(self, context: CapabilityContext) -> SetupResult:
        """Acquire whatever the capability needs for a run.

        Returns a handle on success or a SetupFailure; failures are values,
        not exceptions, so callers can branch before using the configuration.
        """
        return SETUP_SUCCESS

    def is_uac_required_for_setup(self) -> bool:
        """True if setup needs privilege elevation on Windows."""
        return False

    def is_uac_required_for_start(self) -> bool:
        """True if starting the capability needs privilege elevation on Windows."""
        return False

    def apply_directives(self, store: "DirectiveStore", context: CapabilityContext) -> None:
        """Add the directives this capability needs to a runnable store."""
        pass

    def serialize(self, parent: etree._Element) -> etree._Element:
        """Append this capability's record to ``parent``."""
        element = etree.SubElement(parent, CAPABILITY_TAG)
        element.set(CAPABILITY_NAME_ATTRIBUTE, self.type_name())
        self.serialize_custom(element)
        return element

    def serialize_custom(self, element: etree._Element) -> None:
        pass

    def parse_custom(self, element: etree._Element) -> None:
        """Restore capability-specific fields from a parsed record."""
        pass

    def __str__(self) -> str:
        return self.name()

    def __repr__(self) -> str:
        return f"{self.type_name()}()"
