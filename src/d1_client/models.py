"""
DataONE Client Models

Data classes for the node registry types returned by a Coordinating Node.
See https://releases.dataone.org/online/api-documentation-v2.0/apis/Types.html

Every field is optional. A field that was not present in the source XML is
left as None, including sequence fields, so callers can tell "missing" apart from
"empty".
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class NodeType(str, Enum):
    """Role of a node in the network."""
    COORDINATING = "cn"
    MEMBER = "mn"


class NodeState(str, Enum):
    """Reported availability of a node."""
    UP = "up"
    DOWN = "down"
    UNKNOWN = "unknown"


# =============================================================================
# Service Models
# =============================================================================

@dataclass(frozen=True)
class ServiceMethodRestriction:
    """Restricts a service method to the listed subjects.

    If present for a method, only the subjects listed may invoke it.
    """
    method_name: Optional[str] = None
    subjects: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class Service:
    """A versioned DataONE API exposed by a node.

    Member Node service names: MNCore, MNRead, MNAuthorization, MNStorage,
    MNReplication. Coordinating Node service names: CNCore, CNRead,
    CNAuthorization, CNIdentity, CNReplication, CNRegister.
    """
    name: Optional[str] = None
    version: Optional[str] = None  # e.g. "v1"
    available: Optional[bool] = None
    restrictions: Optional[Tuple[ServiceMethodRestriction, ...]] = None


# =============================================================================
# Node Models
# =============================================================================

@dataclass(frozen=True)
class Synchronization:
    """Harvest configuration for a node.

    Member Nodes only set the schedule. Coordinating Nodes also report
    last_harvested and last_complete_harvest.
    """
    schedule: Optional[str] = None  # "sec min hour mday mon wday year"
    last_harvested: Optional[datetime] = None
    last_complete_harvest: Optional[datetime] = None


@dataclass(frozen=True)
class NodeReplicationPolicy:
    """Replica storage limits for a node, in bytes.

    allowedNode and allowedObjectFormat are not supported.
    """
    max_object_size: Optional[int] = None
    space_allocated: Optional[int] = None


@dataclass(frozen=True)
class D1Node:
    """A Member or Coordinating Node registered with the network.

    identifier, name, description, base_url, subjects, contact_subjects,
    replicate, synchronize, type and state are required for a valid node,
    but decoding does not enforce this.
    """
    # identifier MUST NOT change over the lifetime of the node; base_url may
    identifier: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    base_url: Optional[str] = None  # without the API version suffix
    services: Optional[Tuple[Service, ...]] = None
    synchronization: Optional[Synchronization] = None
    node_replication_policy: Optional[NodeReplicationPolicy] = None
    subjects: Optional[Tuple[str, ...]] = None
    contact_subjects: Optional[Tuple[str, ...]] = None
    replicate: Optional[bool] = None
    synchronize: Optional[bool] = None
    type: Optional[NodeType] = None
    state: Optional[NodeState] = None
    # <property key="..."> values
    metacat_version: Optional[str] = None
    upgrade_status: Optional[str] = None
    info_url: Optional[str] = None
    date_deprecated: Optional[datetime] = None
    date_upcoming: Optional[datetime] = None
    read_only_mode: Optional[bool] = None
    logo_url: Optional[str] = None
    operational_status: Optional[str] = None
    date_operational: Optional[datetime] = None
    location: Optional[str] = None  # "lat, lon"

    @property
    def is_coordinating(self) -> bool:
        """Check if this is a Coordinating Node."""
        return self.type == NodeType.COORDINATING

    @property
    def is_member(self) -> bool:
        """Check if this is a Member Node."""
        return self.type == NodeType.MEMBER
