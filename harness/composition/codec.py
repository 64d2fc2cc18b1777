"""
XML codec for capability records.

A composition serializes as::

    <capability_set>
      <capability name="CliCapability"/>
      <capability name="OpcacheCapability">
        <option name="opcache.memory_consumption" value="128"/>
      </capability>
    </capability_set>

Each record's ``name`` is the capability's bare type name, resolved against
the closed registry when reading. Reading is pull-based so a
``<capability_set>`` can be embedded in a larger document: records are read
from the first such element and reading stops when it closes.
"""

from __future__ import annotations

import io
from typing import IO, Iterable, List, Optional, Union

from lxml import etree

from harness.capabilities.base import Capability
from harness.capabilities.bootstrap import get_capability_registry
from harness.capabilities.registry import CapabilityRegistry, UnknownCapabilityError
from harness.constants import CAPABILITY_NAME_ATTRIBUTE, CAPABILITY_SET_TAG, CAPABILITY_TAG
from harness.exceptions import CapabilityError
from harness.logger import UnifiedLogger

logger = UnifiedLogger(tag="capability-codec")

Source = Union[str, bytes, IO[bytes]]


class CapabilityCodecError(CapabilityError):
    """Raised when capability records cannot be read."""
    pass


def append_capabilities(
    parent: etree._Element,
    capabilities: Iterable[Capability],
    tag: str = CAPABILITY_SET_TAG,
) -> etree._Element:
    """Append a capability set element holding one record per capability."""
    element = etree.SubElement(parent, tag)
    for capability in capabilities:
        capability.serialize(element)
    return element


def write_capabilities(capabilities: Iterable[Capability], root_tag: str = CAPABILITY_SET_TAG) -> str:
    """Serialize capabilities, in iteration order, into an XML document."""
    root = etree.Element(root_tag)
    for capability in capabilities:
        capability.serialize(root)
    return etree.tostring(root, pretty_print=True, encoding="unicode")


def _as_stream(source: Source) -> IO[bytes]:
    if isinstance(source, str):
        return io.BytesIO(source.encode("utf-8"))
    if isinstance(source, bytes):
        return io.BytesIO(source)
    return source


def _create_capability(element: etree._Element, registry: CapabilityRegistry) -> Capability:
    if element.tag != CAPABILITY_TAG:
        raise CapabilityCodecError(
            f"Unexpected element <{element.tag}> where a <{CAPABILITY_TAG}> record was expected"
        )

    type_name = element.get(CAPABILITY_NAME_ATTRIBUTE)
    if not type_name:
        raise CapabilityCodecError(f"<{CAPABILITY_TAG}> record without a '{CAPABILITY_NAME_ATTRIBUTE}' attribute")

    try:
        capability = registry.create(type_name)
    except UnknownCapabilityError as exc:
        raise CapabilityCodecError(str(exc)) from exc

    try:
        capability.parse_custom(element)
    except ValueError as exc:
        raise CapabilityCodecError(f"Invalid payload for '{type_name}': {exc}") from exc
    return capability


def read_capabilities(source: Source, registry: Optional[CapabilityRegistry] = None) -> List[Capability]:
    """Read capability records until the enclosing capability set closes.

    Args:
        source: XML text, bytes, or a binary stream
        registry: Registry resolving record names (built-ins by default)

    Returns:
        Capabilities in document order

    Raises:
        CapabilityCodecError: On a record naming an unknown capability, a
            foreign element among the records, an invalid record payload,
            a document without a capability set, or malformed XML. Nothing
            read before the error is returned.
    """
    registry = registry or get_capability_registry()
    capabilities: List[Capability] = []
    depth = 0
    set_depth: Optional[int] = None

    try:
        for event, element in etree.iterparse(_as_stream(source), events=("start", "end")):
            if event == "start":
                depth += 1
                if set_depth is None and element.tag == CAPABILITY_SET_TAG:
                    set_depth = depth
                continue

            if set_depth is not None:
                if depth == set_depth + 1:
                    capabilities.append(_create_capability(element, registry))
                    element.clear()
                elif depth == set_depth:
                    # Enclosing element closed
                    break
            depth -= 1
    except etree.XMLSyntaxError as exc:
        raise CapabilityCodecError(f"Malformed capability document: {exc}") from exc

    if set_depth is None:
        raise CapabilityCodecError(f"Document has no <{CAPABILITY_SET_TAG}> element")

    logger.debug("Read capability records", count=len(capabilities))
    return capabilities
