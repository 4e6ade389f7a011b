"""Graph data models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GraphNode(BaseModel):
    """Represents a single note in the graph."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique identifier (note path)")
    label: str = Field(..., description="Note name without folder or extension")
    links: int = Field(default=0, description="Total connections (outlinks + backlinks)")
    outlinks: int = Field(default=0, description="Links from this note")
    backlinks: int = Field(default=0, description="Links to this note")


class GraphEdge(BaseModel):
    """Represents a directed connection between two notes."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="ID of the linking note")
    target: str = Field(..., description="ID of the linked note")
    alias: Optional[str] = Field(default=None, description="Link text, if one was written")


class Graph(BaseModel):
    """Nodes and edges of one vault snapshot."""

    model_config = ConfigDict(frozen=True)

    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)


class HubEntry(BaseModel):
    path: str
    connections: int


class GraphStats(BaseModel):
    """Aggregate statistics for the whole vault."""

    total_nodes: int
    total_edges: int
    orphans: List[str] = Field(default_factory=list, description="Notes with no connections")
    hubs: List[HubEntry] = Field(default_factory=list, description="Most connected notes")
    unresolved_links: List[str] = Field(
        default_factory=list, description="Link targets that match no note"
    )


class BacklinkEntry(BaseModel):
    source: str = Field(..., description="Note that links to the requested note")
    context: Optional[str] = Field(default=None, description="Alias used by the link")


class BacklinksResult(BaseModel):
    path: str
    backlinks: List[BacklinkEntry] = Field(default_factory=list)


class OutlinkEntry(BaseModel):
    target: str = Field(..., description="Resolved note path, or the raw target if unresolved")
    resolved: bool = Field(..., description="Whether the target exists in the vault")
    alias: Optional[str] = None


class OutlinksResult(BaseModel):
    path: str
    outlinks: List[OutlinkEntry] = Field(default_factory=list)
