"""Pydantic models shared across the graph services."""

from .graph import (
    BacklinkEntry,
    BacklinksResult,
    Graph,
    GraphEdge,
    GraphNode,
    GraphStats,
    HubEntry,
    OutlinkEntry,
    OutlinksResult,
)

__all__ = [
    "BacklinkEntry",
    "BacklinksResult",
    "Graph",
    "GraphEdge",
    "GraphNode",
    "GraphStats",
    "HubEntry",
    "OutlinkEntry",
    "OutlinksResult",
]
