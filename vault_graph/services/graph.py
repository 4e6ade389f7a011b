"""Link graph construction and queries over a note vault."""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
import logging
import posixpath
import time
from typing import Dict, List, Optional, Sequence

from ..models.graph import (
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
from .config import AppConfig
from .links import NoteIndex, ensure_extension, extract_links, source_directory, strip_extension
from .vault import VaultService

logger = logging.getLogger(__name__)


@dataclass
class _Counters:
    outlinks: int = 0
    backlinks: int = 0

    @property
    def links(self) -> int:
        return self.outlinks + self.backlinks


@dataclass
class _NoteLinks:
    """Per-note result of the concurrent read/extract/resolve step."""

    note_path: str
    edges: List[GraphEdge] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)
    read_ok: bool = True


class GraphService:
    """
    Build the vault link graph and answer graph queries.

    Nothing is cached: every public coroutine walks the vault again, so each
    result reflects the files on disk at call time.
    """

    def __init__(self, vault_service: VaultService | None = None, config: AppConfig | None = None) -> None:
        self.vault_service = vault_service or VaultService(config=config)
        self.config = config or self.vault_service.config
        self.extension = self.config.note_extension
        self.max_concurrency = self.config.max_concurrency

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def note_label(self, note_path: str) -> str:
        name = posixpath.basename(note_path)
        for ext in self.config.note_extensions:
            if name.endswith(ext):
                return name[: -len(ext)]
        return name

    def normalize_path(self, path: str) -> str:
        return ensure_extension(path.strip(), self.extension)

    async def _read_links(self, note_path: str, index: NoteIndex) -> _NoteLinks:
        """Read one note and resolve its links against ``index``."""
        try:
            content = await asyncio.to_thread(self.vault_service.read_text, note_path)
        except (OSError, ValueError) as exc:
            logger.warning(
                "Failed to read note, skipping its links",
                extra={"note_path": note_path, "error": str(exc)},
            )
            return _NoteLinks(note_path=note_path, read_ok=False)

        result = _NoteLinks(note_path=note_path)
        source_dir = source_directory(note_path)
        for link in extract_links(content, self.extension):
            target = index.resolve(link.target, source_dir)
            if target is None:
                result.unresolved.append(strip_extension(link.target, self.extension))
            elif target != note_path:
                result.edges.append(GraphEdge(source=note_path, target=target, alias=link.alias))
        return result

    async def _gather_links(self, notes: Sequence[str], index: NoteIndex) -> List[_NoteLinks]:
        """Process every note concurrently; results keep the order of ``notes``."""
        results: List[_NoteLinks] = []

        # At most max_concurrency reads in flight per batch
        for i in range(0, len(notes), self.max_concurrency):
            batch = notes[i:i + self.max_concurrency]
            results.extend(await asyncio.gather(*(self._read_links(note, index) for note in batch)))

        return results

    @staticmethod
    def _locate(candidates: Sequence[str], normalized: str) -> Optional[str]:
        """Exact match, else the first candidate ending with or case-insensitively equal to the path."""
        if normalized in candidates:
            return normalized
        lowered = normalized.lower()
        for candidate in candidates:
            if candidate.endswith(normalized) or candidate.lower() == lowered:
                return candidate
        return None

    # ------------------------------------------------------------------
    # graph builder
    # ------------------------------------------------------------------

    async def build_graph(self) -> Graph:
        """Build the complete link graph of the vault."""
        start_time = time.time()

        notes = await asyncio.to_thread(self.vault_service.list_notes)
        index = NoteIndex(notes, self.extension)
        counters: Dict[str, _Counters] = {note: _Counters() for note in notes}

        results = await self._gather_links(notes, index)

        edges: List[GraphEdge] = []
        failed_reads = 0
        for result in results:
            if not result.read_ok:
                failed_reads += 1
            for edge in result.edges:
                edges.append(edge)
                counters[edge.source].outlinks += 1
                counters[edge.target].backlinks += 1

        nodes = [
            GraphNode(
                id=note,
                label=self.note_label(note),
                links=count.links,
                outlinks=count.outlinks,
                backlinks=count.backlinks,
            )
            for note, count in counters.items()
        ]

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Graph built",
            extra={
                "vault_path": str(self.vault_service.vault_root),
                "nodes": len(nodes),
                "edges": len(edges),
                "failed_reads": failed_reads,
                "duration_ms": f"{duration_ms:.2f}",
            },
        )
        return Graph(nodes=nodes, edges=edges)

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    async def get_statistics(self, hub_count: int = 10) -> GraphStats:
        """Orphans, most connected notes and unresolved link targets."""
        graph = await self.build_graph()

        orphans = [node.id for node in graph.nodes if node.links == 0]
        ranked = sorted(graph.nodes, key=lambda node: node.links, reverse=True)
        hubs = [
            HubEntry(path=node.id, connections=node.links)
            for node in ranked[: max(hub_count, 0)]
        ]

        # Unresolved targets are dropped by build_graph, so collect them in a separate pass.
        notes = await asyncio.to_thread(self.vault_service.list_notes)
        index = NoteIndex(notes, self.extension)
        seen: Dict[str, None] = {}
        for result in await self._gather_links(notes, index):
            for target in result.unresolved:
                seen.setdefault(target, None)

        return GraphStats(
            total_nodes=len(graph.nodes),
            total_edges=len(graph.edges),
            orphans=orphans,
            hubs=hubs,
            unresolved_links=list(seen),
        )

    async def get_backlinks(self, path: str) -> BacklinksResult:
        """Notes linking to ``path``; a bare name also matches nested notes."""
        normalized = self.normalize_path(path)
        graph = await self.build_graph()
        suffix = f"/{normalized}"

        backlinks = [
            BacklinkEntry(source=edge.source, context=edge.alias)
            for edge in graph.edges
            if edge.target == normalized or edge.target.endswith(suffix)
        ]
        return BacklinksResult(path=normalized, backlinks=backlinks)

    async def get_outlinks(self, path: str) -> OutlinksResult:
        """Every link written in ``path``, resolved or not."""
        normalized = self.normalize_path(path)
        notes = await asyncio.to_thread(self.vault_service.list_notes)
        index = NoteIndex(notes, self.extension)
        actual_path = self._locate(index.paths, normalized) or normalized

        try:
            content = await asyncio.to_thread(self.vault_service.read_text, actual_path)
        except (OSError, ValueError) as exc:
            logger.warning(
                "Failed to read note for outlinks",
                extra={"note_path": actual_path, "error": str(exc)},
            )
            return OutlinksResult(path=actual_path, outlinks=[])

        source_dir = source_directory(actual_path)
        outlinks = []
        for link in extract_links(content, self.extension):
            resolved = index.resolve(link.target, source_dir)
            outlinks.append(
                OutlinkEntry(
                    target=resolved or link.target,
                    resolved=resolved is not None,
                    alias=link.alias,
                )
            )
        return OutlinksResult(path=actual_path, outlinks=outlinks)

    async def get_local_graph(self, path: str, depth: int = 1) -> Graph:
        """
        Subgraph around one note.

        Walks edges in both directions up to ``depth`` hops from the centre
        and returns the visited notes with every edge between them. An
        unknown centre yields an empty graph.
        """
        normalized = self.normalize_path(path)
        full_graph = await self.build_graph()

        center = self._locate([node.id for node in full_graph.nodes], normalized)
        if center is None:
            logger.debug("Local graph centre not found", extra={"path": normalized})
            return Graph()

        neighbours: Dict[str, List[str]] = {}
        for edge in full_graph.edges:
            neighbours.setdefault(edge.source, []).append(edge.target)
            neighbours.setdefault(edge.target, []).append(edge.source)

        visited = {center}
        queue = deque([(center, 0)])
        while queue:
            current, current_depth = queue.popleft()
            if current_depth >= depth:
                continue
            for neighbour in neighbours.get(current, []):
                if neighbour not in visited:
                    visited.add(neighbour)
                    queue.append((neighbour, current_depth + 1))

        return Graph(
            nodes=[node for node in full_graph.nodes if node.id in visited],
            edges=[
                edge
                for edge in full_graph.edges
                if edge.source in visited and edge.target in visited
            ],
        )


__all__ = ["GraphService"]
