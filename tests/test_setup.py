import pytest

from harness.capabilities.base import (
    Capability,
    Category,
    SetupFailure,
    SetupHandle,
)
from harness.capabilities.paths import DeepPathsCapability
from harness.composition.capability_set import CompositionSet
from harness.composition.setup import setup_composition


class RecordingHandle(SetupHandle):
    def __init__(self, label, journal, fail_on_close=False):
        self.label = label
        self.journal = journal
        self.fail_on_close = fail_on_close

    def name(self) -> str:
        return self.label

    def close(self, sink) -> None:
        self.journal.append(f"close {self.label}")
        if self.fail_on_close:
            raise RuntimeError(f"cannot release {self.label}")


def _capability(category, label, journal, outcome="ok", fail_on_close=False):
    """Build a one-off capability whose setup follows a script."""

    class Scripted(Capability):
        def name(self) -> str:
            return label

        def is_implemented(self) -> bool:
            return True

        def setup(self, context):
            journal.append(f"setup {label}")
            if outcome == "fail":
                return SetupFailure(label, "scripted failure")
            if outcome == "raise":
                raise OSError("disk full")
            return RecordingHandle(label, journal, fail_on_close)

    Scripted.category = category
    return Scripted()


def test_defaults_and_deep_paths_setup_in_set_order(context):
    composition = CompositionSet([DeepPathsCapability(depth=2)])
    composition.complete_with_defaults()

    with setup_composition(composition, context) as outcome:
        assert outcome.succeeded
        assert [capability.name() for capability, _ in outcome.handles] == [
            "Deep-Paths",
            "CLI",
            "Local-FileSystem",
        ]
        deep_handle = outcome.handles[0][1]
        assert deep_handle.path.is_dir()

    assert outcome.closed
    assert not deep_handle.root.exists()


def test_setup_stops_at_first_failure(context):
    journal = []
    composition = CompositionSet([
        _capability(Category.EXECUTION_MODE, "A", journal),
        _capability(Category.FILESYSTEM, "B", journal, outcome="fail"),
        _capability(Category.SOCKET_TRANSPORT, "C", journal),
    ])

    outcome = setup_composition(composition, context)

    assert not outcome.succeeded
    assert outcome.failure.capability_name == "B"
    assert journal == ["setup A", "setup B"]
    # A's handle is handed back for the caller to release
    assert [handle.name() for _, handle in outcome.handles] == ["A"]

    outcome.close()
    assert journal[-1] == "close A"


def test_setup_exception_becomes_failure(context):
    journal = []
    composition = CompositionSet([
        _capability(Category.EXECUTION_MODE, "A", journal),
        _capability(Category.FILESYSTEM, "B", journal, outcome="raise"),
    ])

    with setup_composition(composition, context) as outcome:
        assert not outcome.succeeded
        assert "disk full" in outcome.failure.reason

    assert journal == ["setup A", "setup B", "close A"]


def test_placeholders_are_not_set_up(context):
    journal = []
    composition = CompositionSet([_capability(Category.EXECUTION_MODE, "A", journal)])
    composition.complete_with_defaults()

    outcome = setup_composition(composition, context)

    assert [capability.name() for capability, _ in outcome.handles] == ["A", "Local-FileSystem"]


def test_close_releases_in_reverse_and_reraises_first_error(context):
    journal = []
    composition = CompositionSet([
        _capability(Category.EXECUTION_MODE, "A", journal, fail_on_close=True),
        _capability(Category.FILESYSTEM, "B", journal, fail_on_close=True),
        _capability(Category.SOCKET_TRANSPORT, "C", journal),
    ])
    outcome = setup_composition(composition, context)

    with pytest.raises(RuntimeError, match="cannot release B"):
        outcome.close()

    assert journal[3:] == ["close C", "close B", "close A"]

    # Closing again is a no-op
    outcome.close()
    assert journal.count("close A") == 1


def test_setup_reports_to_sink(context, sink):
    journal = []
    composition = CompositionSet([_capability(Category.EXECUTION_MODE, "A", journal)])

    setup_composition(composition, context).close()

    assert ("CompositionSetup", "Set up A") in sink.messages
