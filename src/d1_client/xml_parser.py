"""
DataONE XML Parser

Parses Coordinating Node registry XML (v2 nodeList) into model objects.

Field lookups inside an entity only look at direct children of the entity
element. A <subject> inside <service><restriction> never leaks into the
node's subjects, and <property> elements only belong to the node that
directly contains them.

Tags are matched by local name, so unqualified and namespaced (including
default-namespaced) documents decode the same way.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type, Union

from lxml import etree

from d1_client.coercion import to_bool, to_datetime, to_int
from d1_client.exceptions import D1ParseError, D1ValidationError
from d1_client.models import (
    D1Node,
    NodeReplicationPolicy,
    Service,
    ServiceMethodRestriction,
    Synchronization,
)
from d1_client.schema import (
    NODE_SCHEMA,
    REPLICATION_POLICY_SCHEMA,
    RESTRICTION_SCHEMA,
    SCHEDULE_ATTRIBUTES,
    SERVICE_SCHEMA,
    SYNCHRONIZATION_SCHEMA,
    EntitySchema,
)

logger = logging.getLogger("d1.parser")

# Secure parser
_parser = etree.XMLParser(
    resolve_entities=False,
    no_network=True,
    remove_blank_text=True,
    remove_comments=True,
    remove_pis=True,
)


def parse_xml(xml_data: Union[str, bytes]) -> etree._Element:
    """
    Parse XML with secure parser.

    Args:
        xml_data: Raw XML text or bytes

    Returns:
        Root element of the document

    Raises:
        D1ParseError: If the document is not well-formed
    """
    if not xml_data:
        raise D1ParseError("Error parsing XML: document is empty")
    if isinstance(xml_data, str):
        xml_data = xml_data.encode("utf-8")
    try:
        return etree.fromstring(xml_data, _parser)
    except etree.XMLSyntaxError as e:
        raise D1ParseError(f"Error parsing XML: {e}")


# =============================================================================
# Field Extraction
# =============================================================================

def any_namespace(tag: str) -> str:
    """Match tag in any namespace, or none."""
    return "{*}" + tag


def text_content(elem: etree._Element) -> Optional[str]:
    """Return the stripped text of elem and its descendants, or None if blank."""
    text = "".join(elem.itertext()).strip()
    return text or None


def find_text(elem: etree._Element, tag: str) -> Optional[str]:
    """Find direct child and return its text."""
    found = elem.find(any_namespace(tag))
    if found is None:
        return None
    return text_content(found)


def find_all_text(elem: etree._Element, tag: str) -> List[str]:
    """Return the text of every direct child named tag, in document order."""
    values = []
    for child in elem.findall(any_namespace(tag)):
        text = text_content(child)
        if text is not None:
            values.append(text)
    return values


def get_attribute(elem: etree._Element, name: str) -> Optional[str]:
    """Return an attribute of elem itself, or None if missing or empty."""
    value = elem.get(name)
    return value or None


def iter_properties(elem: etree._Element) -> Iterator[Tuple[str, str]]:
    """Yield (key, value) for each direct <property> child with both set."""
    for prop in elem.findall(any_namespace("property")):
        key = prop.get("key")
        value = text_content(prop)
        if key and value:
            yield key, value


def find_property(elem: etree._Element, key: str) -> Optional[str]:
    """Return the value of the first <property key="..."> child matching key."""
    for prop_key, value in iter_properties(elem):
        if prop_key == key:
            return value
    return None


# =============================================================================
# Generic Decoding
# =============================================================================

def _validate_enum(field: str, value: str, enum_cls: Type) -> Any:
    """Check value against the wire vocabulary of enum_cls."""
    allowed = [member.value for member in enum_cls]
    if value not in allowed:
        raise D1ValidationError(field, value, allowed)
    return enum_cls(value)


def decode_fields(elem: etree._Element, schema: EntitySchema) -> Dict[str, Any]:
    """
    Extract and convert the flat fields described by schema.

    Fields not found in elem are left out of the result entirely.

    Args:
        elem: Entity element
        schema: Field layout of the entity

    Returns:
        Keyword arguments for the entity constructor

    Raises:
        D1ValidationError: If an enumerated field has a value outside its set
        D1CoercionError: If an integer field is not numeric
    """
    params: Dict[str, Any] = {}

    for name, tag in schema.text_fields.items():
        value = find_text(elem, tag)
        if value is not None:
            params[name] = value

    for name, tag in schema.repeated_fields.items():
        values = find_all_text(elem, tag)
        if values:
            params[name] = tuple(values)

    if schema.property_keys:
        # Last one wins if two keys map to the same field
        for key, value in iter_properties(elem):
            name = schema.property_keys.get(key)
            if name is None:
                logger.debug(f"Skipping unknown property key '{key}'")
                continue
            params[name] = value

    for name, attr in schema.attributes.items():
        value = get_attribute(elem, attr)
        if value is not None:
            params[name] = value

    for name in schema.boolean_fields:
        if name in params:
            params[name] = to_bool(params[name])

    for name in schema.date_fields:
        if name in params:
            date = to_datetime(params.pop(name), name)
            if date is not None:
                params[name] = date

    for name in schema.integer_fields:
        if name in params:
            params[name] = to_int(params[name], name)

    for name, enum_cls in schema.enum_fields.items():
        if name in params:
            params[name] = _validate_enum(name, params[name], enum_cls)

    return params


class XMLParser:
    """
    Parses Coordinating Node registry XML.

    Entity methods take an already parsed element and return a model
    object. Passing None returns an empty model.
    """

    @staticmethod
    def parse_node_list(xml_data: Union[str, bytes]) -> List[D1Node]:
        """
        Parse a node list document.

        Every <node> element in the document is decoded, in document order.
        The first invalid node aborts the whole list.

        Args:
            xml_data: Raw XML text or bytes

        Returns:
            List of D1Node objects
        """
        root = parse_xml(xml_data)
        nodes = [XMLParser.parse_node(elem) for elem in root.iter(any_namespace("node"))]
        logger.debug(f"Parsed {len(nodes)} nodes")
        return nodes

    @staticmethod
    def parse_node(elem: Optional[etree._Element]) -> D1Node:
        """Parse a <node> element."""
        if elem is None:
            return D1Node()

        params = decode_fields(elem, NODE_SCHEMA)

        services = tuple(XMLParser.parse_service(s) for s in elem.findall(any_namespace("service")))
        if services:
            params["services"] = services

        policy = elem.find(any_namespace("nodeReplicationPolicy"))
        if policy is not None:
            params["node_replication_policy"] = XMLParser.parse_replication_policy(policy)

        sync = elem.find(any_namespace("synchronization"))
        if sync is not None:
            params["synchronization"] = XMLParser.parse_synchronization(sync)

        return D1Node(**params)

    @staticmethod
    def parse_service(elem: Optional[etree._Element]) -> Service:
        """Parse a <service> element."""
        if elem is None:
            return Service()

        params = decode_fields(elem, SERVICE_SCHEMA)

        restrictions = tuple(
            XMLParser.parse_restriction(r) for r in elem.findall(any_namespace("restriction"))
        )
        if restrictions:
            params["restrictions"] = restrictions

        return Service(**params)

    @staticmethod
    def parse_restriction(elem: Optional[etree._Element]) -> ServiceMethodRestriction:
        """Parse a <restriction> element."""
        if elem is None:
            return ServiceMethodRestriction()
        return ServiceMethodRestriction(**decode_fields(elem, RESTRICTION_SCHEMA))

    @staticmethod
    def parse_synchronization(elem: Optional[etree._Element]) -> Synchronization:
        """Parse a <synchronization> element."""
        if elem is None:
            return Synchronization()

        params = decode_fields(elem, SYNCHRONIZATION_SCHEMA)

        schedule = elem.find(any_namespace("schedule"))
        if schedule is not None:
            params["schedule"] = XMLParser.parse_schedule(schedule)

        return Synchronization(**params)

    @staticmethod
    def parse_schedule(elem: Optional[etree._Element]) -> Optional[str]:
        """
        Parse a <schedule> element into a cron expression.

        The seven attributes are read in the order sec, min, hour, mday,
        mon, wday, year. Missing attributes become "*".

        Args:
            elem: Schedule element

        Returns:
            Space-separated cron expression, or None if elem is None
        """
        if elem is None:
            return None
        parts = []
        for attr in SCHEDULE_ATTRIBUTES:
            parts.append(get_attribute(elem, attr) or "*")
        return " ".join(parts)

    @staticmethod
    def parse_replication_policy(elem: Optional[etree._Element]) -> NodeReplicationPolicy:
        """Parse a <nodeReplicationPolicy> element."""
        if elem is None:
            return NodeReplicationPolicy()
        return NodeReplicationPolicy(**decode_fields(elem, REPLICATION_POLICY_SCHEMA))
