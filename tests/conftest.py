from typing import Iterable, List, Tuple

import pytest

from harness.capabilities.base import CapabilityContext, PermutationLayer
from harness.runtime.host import StaticBuild
from harness.settings import refresh_settings_cache
from harness.settings.profiles import refresh_profiles_cache


class FakeHost:
    """Host whose platform and filesystem are fully scripted."""

    def __init__(self, windows: bool = False, existing: Iterable[str] = ()):
        self.windows = windows
        self.existing = set(existing)

    def path_separator(self) -> str:
        return ";" if self.windows else ":"

    def exists(self, path: str) -> bool:
        return path in self.existing

    def is_windows_host(self) -> bool:
        return self.windows

    def __repr__(self) -> str:
        return f"FakeHost(windows={self.windows})"


class RecordingSink:
    """Message sink keeping every line it receives."""

    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def println(self, tag: str, message: str) -> None:
        self.messages.append((tag, message))


@pytest.fixture(autouse=True)
def isolated_system_root(tmp_path, monkeypatch):
    """Point settings, profiles and the activity log at a per-test directory."""
    system_root = tmp_path / "system"
    monkeypatch.setenv("HARNESS_SYSTEM_ROOT", str(system_root))
    monkeypatch.delenv("HARNESS_PROFILES_PATH", raising=False)
    refresh_settings_cache()
    refresh_profiles_cache()
    yield system_root
    refresh_settings_cache()
    refresh_profiles_cache()


@pytest.fixture
def make_host():
    def factory(windows: bool = False, existing: Iterable[str] = ()) -> FakeHost:
        return FakeHost(windows=windows, existing=existing)
    return factory


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def make_context(sink):
    def factory(
        windows: bool = False,
        existing: Iterable[str] = (),
        extension_dir: str = "/opt/php/ext",
        layer: PermutationLayer = PermutationLayer.CORE,
    ) -> CapabilityContext:
        return CapabilityContext(
            host=FakeHost(windows=windows, existing=existing),
            build=StaticBuild(extension_dir),
            sink=sink,
            layer=layer,
        )
    return factory


@pytest.fixture
def context(make_context):
    return make_context()
