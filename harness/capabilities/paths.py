"""
Path-style capabilities: how long the paths are that tests run from.
"""

import shutil
import tempfile
from pathlib import Path

from lxml import etree

from harness.runtime.host import MessageSink

from .base import (
    Capability,
    CapabilityContext,
    Category,
    PermutationLayer,
    SetupFailure,
    SetupHandle,
    SetupResult,
)


class NormalPathsCapability(Capability):
    """Run tests from wherever they already are (default)."""

    category = Category.PATH_STYLE

    def name(self) -> str:
        return "Normal-Paths"

    def is_implemented(self) -> bool:
        return True

    def is_placeholder(self, layer: PermutationLayer) -> bool:
        return True


class DeepPathHandle(SetupHandle):
    """Deeply nested scratch directory removed on close."""

    def __init__(self, root: Path, path: Path):
        self.root = root
        self.path = path

    def name(self) -> str:
        return "Deep-Paths"

    def name_with_version_info(self) -> str:
        return f"Deep-Paths ({len(str(self.path))} chars)"

    def close(self, sink: MessageSink) -> None:
        if self.root.exists():
            shutil.rmtree(self.root)
            sink.println("DeepPaths", f"Removed {self.root}")


class DeepPathsCapability(Capability):
    """Run tests from a directory nested deeply enough to stress path limits."""

    category = Category.PATH_STYLE

    DEFAULT_DEPTH = 12
    SEGMENT = "deep_path_segment"
    _DEPTH_ATTRIBUTE = "depth"

    def __init__(self, depth: int = DEFAULT_DEPTH):
        self.depth = depth

    def name(self) -> str:
        return "Deep-Paths"

    def is_implemented(self) -> bool:
        return True

    def setup(self, context: CapabilityContext) -> SetupResult:
        root = Path(tempfile.mkdtemp(prefix="harness-deep-"))
        path = root.joinpath(*(f"{self.SEGMENT}_{index:02d}" for index in range(self.depth)))
        try:
            path.mkdir(parents=True)
        except OSError as exc:
            shutil.rmtree(root, ignore_errors=True)
            context.sink.println("DeepPaths", f"Cannot create {path}: {exc}")
            return SetupFailure(self.name(), str(exc))

        context.sink.println("DeepPaths", f"Created {path}")
        return DeepPathHandle(root, path)

    def serialize_custom(self, element: etree._Element) -> None:
        element.set(self._DEPTH_ATTRIBUTE, str(self.depth))

    def parse_custom(self, element: etree._Element) -> None:
        self.depth = int(element.get(self._DEPTH_ATTRIBUTE, self.DEFAULT_DEPTH))

    def __repr__(self) -> str:
        return f"DeepPathsCapability(depth={self.depth})"
