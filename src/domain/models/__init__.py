from .geo import GeoPoint
from .graph import EdgeKind, TransitEdge, TransitGraph, TransitNode
from .journey import Journey, JourneySegment, SegmentType
from .line import DEFAULT_LINE_COLOR, Line, TransportMode, TransportType
from .network import Correspondence
from .stop import Stop

__all__ = [
    "Correspondence",
    "DEFAULT_LINE_COLOR",
    "EdgeKind",
    "GeoPoint",
    "Journey",
    "JourneySegment",
    "Line",
    "SegmentType",
    "Stop",
    "TransitEdge",
    "TransitGraph",
    "TransitNode",
    "TransportMode",
    "TransportType",
]
