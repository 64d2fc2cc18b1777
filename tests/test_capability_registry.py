import pytest

from harness.capabilities.base import Capability, Category
from harness.capabilities.bootstrap import get_capability_registry
from harness.capabilities.code_cache import NoCodeCacheCapability, OpcacheCapability
from harness.capabilities.execution import CliCapability
from harness.capabilities.registry import (
    CapabilityRegistry,
    DuplicateCapabilityError,
    UnknownCapabilityError,
)


class ExampleCapability(Capability):
    category = Category.APPLICATION

    def name(self) -> str:
        return "Example"

    def is_implemented(self) -> bool:
        return True


def test_register_and_create():
    registry = CapabilityRegistry()
    registry.register_capability(ExampleCapability)

    assert registry.is_capability_registered("ExampleCapability")
    assert registry.get_capability_class("ExampleCapability") is ExampleCapability
    assert isinstance(registry.create("ExampleCapability"), ExampleCapability)
    assert registry.get_registered_capabilities() == ["ExampleCapability"]


def test_duplicate_type_name_is_rejected():
    registry = CapabilityRegistry()
    registry.register_capability(ExampleCapability)

    with pytest.raises(DuplicateCapabilityError):
        registry.register_capability(ExampleCapability)


def test_second_default_for_a_category_is_rejected():
    registry = CapabilityRegistry()
    registry.register_capability(NoCodeCacheCapability, default=True)

    with pytest.raises(DuplicateCapabilityError):
        registry.register_capability(OpcacheCapability, default=True)


def test_unknown_names_are_errors():
    registry = CapabilityRegistry()

    with pytest.raises(UnknownCapabilityError):
        registry.create("harness.capabilities.execution.CliCapability")
    with pytest.raises(UnknownCapabilityError):
        registry.create_default(Category.EXECUTION_MODE)


def test_builtin_registry_defaults():
    registry = get_capability_registry()

    expected = {
        Category.EXECUTION_MODE: "CLI",
        Category.FILESYSTEM: "Local-FileSystem",
        Category.SOCKET_TRANSPORT: "Plain-Socket",
        Category.CODE_CACHE: "No-Code-Cache",
        Category.PATH_STYLE: "Normal-Paths",
        Category.INTEGRATION_TOGGLE: "No-Enchant",
    }
    for category, name in expected.items():
        assert registry.create_default(category).name() == name

    assert registry.is_default("CliCapability")
    assert not registry.is_default("OpcacheCapability")
    assert not registry.is_default("NotACapability")


def test_builtin_registry_is_stable():
    first = get_capability_registry()
    second = get_capability_registry()

    assert first is second
    assert first.get_registered_capabilities().count("CliCapability") == 1
    assert len(first.get_registered_capabilities()) == 12


def test_builtins_grouped_by_category():
    grouped = get_capability_registry().get_capabilities_by_category()

    assert grouped[Category.EXECUTION_MODE][0] is CliCapability
    assert len(grouped[Category.CODE_CACHE]) == 2
    assert Category.APPLICATION in grouped
