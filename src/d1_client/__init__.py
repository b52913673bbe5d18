"""
DataONE Client

Reads the node registry of a DataONE Coordinating Node and decodes it into
typed Python objects.
"""

__version__ = "1.0.0"

from d1_client.client import AsyncCNClient, list_nodes
from d1_client.environments import CN_ENVIRONMENTS, get_base_url
from d1_client.xml_parser import XMLParser, parse_xml
from d1_client.models import (
    D1Node,
    NodeReplicationPolicy,
    NodeState,
    NodeType,
    Service,
    ServiceMethodRestriction,
    Synchronization,
)
from d1_client.exceptions import (
    D1Error,
    D1CoercionError,
    D1ConfigurationError,
    D1ConnectionError,
    D1ParseError,
    D1ResponseError,
    D1ValidationError,
)

__all__ = [
    # Client
    "AsyncCNClient",
    "list_nodes",
    "CN_ENVIRONMENTS",
    "get_base_url",
    # Parser
    "XMLParser",
    "parse_xml",
    # Models
    "D1Node",
    "NodeReplicationPolicy",
    "NodeState",
    "NodeType",
    "Service",
    "ServiceMethodRestriction",
    "Synchronization",
    # Exceptions
    "D1Error",
    "D1CoercionError",
    "D1ConfigurationError",
    "D1ConnectionError",
    "D1ParseError",
    "D1ResponseError",
    "D1ValidationError",
]
