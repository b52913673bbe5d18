"""
Entity Schemas

Declarative field tables for each registry type. A schema says where each
field lives in the XML (child text, repeated child text, attribute or
<property key="...">) and which conversion applies to it. The generic
decoder in xml_parser walks these tables; nested types are decoded there
explicitly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Mapping, Tuple, Type

from d1_client.models import NodeState, NodeType


@dataclass(frozen=True)
class EntitySchema:
    """Field layout of one registry type.

    Mappings are keyed by the Python field name, except property_keys which
    maps the external property key to the field name.
    """
    text_fields: Mapping[str, str] = field(default_factory=dict)
    repeated_fields: Mapping[str, str] = field(default_factory=dict)
    property_keys: Mapping[str, str] = field(default_factory=dict)
    attributes: Mapping[str, str] = field(default_factory=dict)
    boolean_fields: FrozenSet[str] = frozenset()
    date_fields: FrozenSet[str] = frozenset()
    integer_fields: FrozenSet[str] = frozenset()
    enum_fields: Mapping[str, Type[Enum]] = field(default_factory=dict)


NODE_SCHEMA = EntitySchema(
    text_fields={
        "identifier": "identifier",
        "name": "name",
        "description": "description",
        "base_url": "baseURL",
    },
    repeated_fields={
        "subjects": "subject",
        "contact_subjects": "contactSubject",
    },
    property_keys={
        "metacat_version": "metacat_version",
        "upgrade_status": "upgrade_status",
        "CN_info_url": "info_url",
        "CN_date_deprecated": "date_deprecated",
        "CN_date_upcoming": "date_upcoming",
        "read_only_mode": "read_only_mode",
        "CN_logo_url": "logo_url",
        "CN_operational_status": "operational_status",
        "CN_date_operational": "date_operational",
        "CN_location_lonlat": "location",
    },
    attributes={
        "replicate": "replicate",
        "synchronize": "synchronize",
        "type": "type",
        "state": "state",
    },
    boolean_fields=frozenset({"replicate", "synchronize", "read_only_mode"}),
    date_fields=frozenset({"date_deprecated", "date_upcoming", "date_operational"}),
    enum_fields={"type": NodeType, "state": NodeState},
)

SERVICE_SCHEMA = EntitySchema(
    attributes={
        "name": "name",
        "version": "version",
        "available": "available",
    },
    boolean_fields=frozenset({"available"}),
)

RESTRICTION_SCHEMA = EntitySchema(
    repeated_fields={"subjects": "subject"},
    attributes={"method_name": "methodName"},
)

SYNCHRONIZATION_SCHEMA = EntitySchema(
    text_fields={
        "last_harvested": "lastHarvested",
        "last_complete_harvest": "lastCompleteHarvest",
    },
    date_fields=frozenset({"last_harvested", "last_complete_harvest"}),
)

REPLICATION_POLICY_SCHEMA = EntitySchema(
    text_fields={
        "max_object_size": "maxObjectSize",
        "space_allocated": "spaceAllocated",
    },
    integer_fields=frozenset({"max_object_size", "space_allocated"}),
)

# Order is fixed: downstream cron consumers read the fields positionally
SCHEDULE_ATTRIBUTES: Tuple[str, ...] = ("sec", "min", "hour", "mday", "mon", "wday", "year")
