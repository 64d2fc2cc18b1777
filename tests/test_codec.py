import io

import pytest
from lxml import etree

from harness.capabilities.base import Category
from harness.capabilities.code_cache import OpcacheCapability
from harness.capabilities.execution import BuiltinWebServerCapability
from harness.capabilities.integration import EnchantCapability
from harness.capabilities.overrides import DirectiveOverrideCapability
from harness.capabilities.paths import DeepPathsCapability
from harness.composition.capability_set import CompositionSet
from harness.composition.codec import CapabilityCodecError, read_capabilities, write_capabilities
from harness.directives.store import DirectiveStore


def test_completed_set_survives_serialization():
    composition = CompositionSet([BuiltinWebServerCapability(), OpcacheCapability(memory_consumption=64)])
    composition.complete_with_defaults()

    restored = CompositionSet.parse(composition.serialize())

    assert [type(capability) for capability in restored] == [type(capability) for capability in composition]
    assert restored.short_name() == composition.short_name()
    assert restored.get(Category.CODE_CACHE).memory_consumption == 64


def test_records_are_written_in_set_order():
    text = write_capabilities([EnchantCapability(enabled=True), DeepPathsCapability()])

    assert text.index('name="EnchantCapability"') < text.index('name="DeepPathsCapability"')
    assert text.startswith("<capability_set>")


def test_directive_override_payload_round_trips():
    overrides = DirectiveStore()
    overrides.add("extension", "intl.so")
    overrides.add("error_reporting", "E_ALL")

    [restored] = read_capabilities(write_capabilities([DirectiveOverrideCapability(overrides)]))

    assert restored.directives == overrides


def test_unknown_record_fails_whole_parse():
    document = (
        "<capability_set>"
        '<capability name="CliCapability"/>'
        '<capability name="QuantumCapability"/>'
        "</capability_set>"
    )

    with pytest.raises(CapabilityCodecError):
        CompositionSet.parse(document)


def test_qualified_names_are_not_resolved():
    document = '<capability_set><capability name="harness.capabilities.execution.CliCapability"/></capability_set>'

    with pytest.raises(CapabilityCodecError):
        read_capabilities(document)


def test_foreign_element_is_rejected():
    with pytest.raises(CapabilityCodecError):
        read_capabilities("<capability_set><plugin name='CliCapability'/></capability_set>")


def test_record_without_name_is_rejected():
    with pytest.raises(CapabilityCodecError):
        read_capabilities("<capability_set><capability/></capability_set>")


@pytest.mark.parametrize(
    "document",
    [
        '<capability name="QuantumCapability"/>',
        '<capability name="CliCapability"/>',
        '<scenario_set><capability name="QuantumCapability"/></scenario_set>',
    ],
)
def test_document_without_capability_set_is_rejected(document):
    with pytest.raises(CapabilityCodecError, match="no <capability_set>"):
        CompositionSet.parse(document)


def test_invalid_payload_value_is_a_codec_error():
    document = (
        "<capability_set>"
        '<capability name="OpcacheCapability">'
        '<option name="opcache.memory_consumption" value="lots"/>'
        "</capability>"
        "</capability_set>"
    )

    with pytest.raises(CapabilityCodecError, match="OpcacheCapability"):
        read_capabilities(document)


def test_deep_paths_depth_survives_serialization():
    restored = CompositionSet.parse(CompositionSet([DeepPathsCapability(depth=30)]).serialize())

    assert restored.get(Category.PATH_STYLE).depth == 30


def test_deep_paths_record_without_depth_uses_default():
    [restored] = read_capabilities('<capability_set><capability name="DeepPathsCapability"/></capability_set>')

    assert restored.depth == DeepPathsCapability.DEFAULT_DEPTH


def test_malformed_document():
    with pytest.raises(CapabilityCodecError):
        read_capabilities("<capability_set><capability name='CliCapability'>")


def test_reading_stops_at_end_of_embedded_set():
    document = (
        b"<run>"
        b"<build>php-8.3</build>"
        b"<capability_set>"
        b'<capability name="OpcacheCapability"><option name="opcache.memory_consumption" value="32"/></capability>'
        b'<capability name="DeepPathsCapability"/>'
        b"</capability_set>"
        b"<capability_set><capability name='QuantumCapability'/></capability_set>"
        b"</run>"
    )

    capabilities = read_capabilities(io.BytesIO(document))

    assert [capability.type_name() for capability in capabilities] == ["OpcacheCapability", "DeepPathsCapability"]
    assert capabilities[0].memory_consumption == 32


def test_embedded_set_written_by_to_element_reads_back():
    composition = CompositionSet([EnchantCapability(enabled=True)])
    composition.complete_with_defaults()
    run = etree.Element("run")
    etree.SubElement(run, "build").text = "php-8.3"

    composition.to_element(run)
    restored = CompositionSet.parse(etree.tostring(run))

    assert restored.short_name() == composition.short_name() == "Enchant_CLI_Local-FileSystem"
    assert len(restored) == 6


def test_empty_set():
    assert read_capabilities("<capability_set/>") == []
    assert len(CompositionSet.parse("<capability_set></capability_set>")) == 0
