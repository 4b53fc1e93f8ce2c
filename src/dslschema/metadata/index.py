"""Queryable view over type metadata, backed by a NetworkX inheritance graph."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

import networkx as nx

from dslschema.metadata.model import TypeInfo

log = logging.getLogger(__name__)


class MetadataIndex:
    """Name-keyed collection of :class:`TypeInfo` records.

    Types are enumerated in ascending canonical-name order, which gives the
    catalog a stable tie-break for types sharing the same order value.

    The inheritance graph has one edge ``child -> superclass`` per type.
    Superclasses that are not themselves indexed still appear as nodes, so
    :meth:`extends_type` works against base types that live outside the
    scanned sources.
    """

    def __init__(self, types: Iterable[TypeInfo] = ()):
        self._types: dict[str, TypeInfo] = {}
        for info in types:
            if info.name in self._types:
                log.debug("Duplicate metadata for %s ignored (from %s)", info.name, info.source)
                continue
            self._types[info.name] = info
        self._graph = self._build_inheritance_graph()

    def _build_inheritance_graph(self) -> nx.DiGraph:
        G = nx.DiGraph()
        for name in sorted(self._types):
            info = self._types[name]
            G.add_node(name, indexed=True)
            if info.super_name:
                if info.super_name not in G:
                    G.add_node(info.super_name, indexed=info.super_name in self._types)
                G.add_edge(name, info.super_name)
        return G

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[TypeInfo]:
        for name in sorted(self._types):
            yield self._types[name]

    def get(self, name: str | None) -> TypeInfo | None:
        if not name:
            return None
        return self._types.get(name)

    def annotated(self, marker: str) -> list[TypeInfo]:
        """All types carrying annotation *marker*, in canonical-name order."""
        return [info for info in self if info.has_annotation(marker)]

    def superclass(self, info: TypeInfo | None) -> TypeInfo | None:
        """Resolve the superclass of *info*; ``None`` when unknown or unindexed."""
        if info is None or not info.super_name:
            return None
        return self._types.get(info.super_name)

    def extends_type(self, info: TypeInfo | None, base: str) -> bool:
        """True when *base* is a proper ancestor of *info*."""
        if info is None or info.name not in self._graph or base not in self._graph:
            return False
        return nx.has_path(self._graph, info.name, base) and info.name != base

    def merged(self, other: MetadataIndex) -> MetadataIndex:
        """New index with this index's types first, then *other*'s new ones."""
        return MetadataIndex(list(self._types.values()) + list(other._types.values()))
