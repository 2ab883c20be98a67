"""
Interface Schema - typed description of a node's ports and catalog record.

This package provides:
- Format: manifest with targets, sources and presentation data
- Node: catalog row built from a Format plus storage paths
- PRIMITIVE_TYPES / LICENSE_TYPES: closed choice lists used when authoring
"""

from .models import (
    BACKGROUND_COLOR,
    LICENSE_TYPES,
    NODE_WIDTH,
    PRIMITIVE_TYPES,
    Data,
    Format,
    Node,
    NodeType,
    Source,
    Target,
    node_height,
    unique_node_id,
)

__all__ = [
    "BACKGROUND_COLOR",
    "LICENSE_TYPES",
    "NODE_WIDTH",
    "PRIMITIVE_TYPES",
    "Data",
    "Format",
    "Node",
    "NodeType",
    "Source",
    "Target",
    "node_height",
    "unique_node_id",
]
