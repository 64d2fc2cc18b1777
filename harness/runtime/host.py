"""
Collaborator interfaces consumed by the directive store and capabilities.

Hosts, builds and message sinks are implemented by the orchestrator; the
protocols below describe the small surface this package relies on. Local
defaults are provided for standalone use and for the CLI.
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from harness.logger import UnifiedLogger


@runtime_checkable
class Host(Protocol):
    """Machine a build is tested on."""

    def path_separator(self) -> str:
        """Separator between entries of a path list (include_path)."""
        ...

    def exists(self, path: str) -> bool:
        ...

    def is_windows_host(self) -> bool:
        ...


@runtime_checkable
class Build(Protocol):
    """Interpreter build under test."""

    def default_extension_directory(self) -> Optional[str]:
        ...


@runtime_checkable
class MessageSink(Protocol):
    """Fire-and-forget receiver for diagnostics emitted during setup."""

    def println(self, tag: str, message: str) -> None:
        ...


class LocalHost:
    """Host implementation backed by the machine running the harness."""

    def path_separator(self) -> str:
        return os.pathsep

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_windows_host(self) -> bool:
        return platform.system() == "Windows"

    def __repr__(self) -> str:
        return f"LocalHost({platform.system()})"


@dataclass
class StaticBuild:
    """Build described only by where its shared extensions live."""

    extension_directory: Optional[str] = None

    def default_extension_directory(self) -> Optional[str]:
        return self.extension_directory


class LoggerSink:
    """Message sink that forwards setup diagnostics to the unified logger."""

    def __init__(self, logger: Optional[UnifiedLogger] = None):
        self.logger = logger or UnifiedLogger(tag="setup-messages")

    def println(self, tag: str, message: str) -> None:
        self.logger.info(message, source=tag)
