import json

import pytest

from harness.capabilities.base import PermutationLayer
from harness.logger import UnifiedLogger
from harness.runtime.config import HarnessConfig, HarnessConfigError
from harness.runtime.host import Host, LocalHost, LoggerSink, MessageSink, StaticBuild
from harness.settings import get_harness_settings, get_system_root


def test_for_local_builds_context():
    config = HarnessConfig.for_local(extension_dir="/usr/lib/php/ext", layer="performance")

    context = config.capability_context()

    assert isinstance(context.host, LocalHost)
    assert context.build.default_extension_directory() == "/usr/lib/php/ext"
    assert context.layer is PermutationLayer.PERFORMANCE
    assert isinstance(context.sink, LoggerSink)


def test_invalid_layer_is_rejected():
    with pytest.raises(HarnessConfigError, match="Invalid layer"):
        HarnessConfig.for_local(layer="nightly")


def test_host_must_follow_protocol():
    with pytest.raises(HarnessConfigError):
        HarnessConfig(host=object())


def test_collaborators_satisfy_protocols(host, sink):
    assert isinstance(host, Host)
    assert isinstance(LocalHost(), Host)
    assert isinstance(sink, MessageSink)
    assert isinstance(LoggerSink(), MessageSink)
    assert StaticBuild().default_extension_directory() is None


def test_settings_follow_environment(isolated_system_root):
    settings = get_harness_settings()

    assert get_system_root() == isolated_system_root
    assert settings.activity_log_path == isolated_system_root / "activity.log"
    assert not settings.logfire_enabled


def test_activity_entries_are_json_lines(isolated_system_root):
    logger = UnifiedLogger(tag="test-activity")

    logger.activity("Composition set up", scope="CLI_Local-FileSystem", capabilities=["CLI"])

    lines = (isolated_system_root / "activity.log").read_text(encoding="utf-8").splitlines()
    entry = json.loads(lines[-1])
    assert entry["tag"] == "test-activity"
    assert entry["scope"] == "CLI_Local-FileSystem"
    assert entry["context"] == {"capabilities": ["CLI"]}
