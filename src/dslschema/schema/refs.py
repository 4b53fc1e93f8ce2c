"""Reference graph of a built schema: dangling ``$ref`` targets and cycles.

The graph is diagnostic only.  Dangling references are reported, never
repaired, and reference cycles are legal in the output format.
"""

from __future__ import annotations

from collections.abc import Iterator

import networkx as nx

from dslschema.schema.typespec import REF_PREFIX

ITEMS_NODE = "#/items"


def _iter_refs(node) -> Iterator[str]:
    """Every ``$ref`` value below *node*, in document order."""
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "$ref" and isinstance(value, str):
                yield value
            else:
                yield from _iter_refs(value)
    elif isinstance(node, list):
        for value in node:
            yield from _iter_refs(value)


def _target(pointer: str) -> str:
    if pointer.startswith(REF_PREFIX):
        return pointer[len(REF_PREFIX):]
    return pointer


def build_reference_graph(root: dict) -> nx.DiGraph:
    """Directed graph ``definition -> referenced definition``.

    Nodes for defined keys carry ``defined=True``.  The root ``items`` node
    is included as :data:`ITEMS_NODE` so top-level wiring is visible.
    """
    items = root.get("items", {})
    definitions = items.get("definitions", {})

    G = nx.DiGraph()
    for key in definitions:
        G.add_node(key, defined=True)
    G.add_node(ITEMS_NODE, defined=True)

    for key, definition in definitions.items():
        for pointer in _iter_refs(definition):
            target = _target(pointer)
            if target not in G:
                G.add_node(target, defined=False)
            G.add_edge(key, target)

    for pointer in _iter_refs(items.get("properties", {})):
        target = _target(pointer)
        if target not in G:
            G.add_node(target, defined=False)
        G.add_edge(ITEMS_NODE, target)
    return G


def find_dangling(G: nx.DiGraph) -> list[dict]:
    """Referenced keys without a definition, with their referrers (sorted)."""
    result = []
    for node, defined in sorted(G.nodes(data="defined"), key=lambda n: n[0]):
        if defined:
            continue
        result.append({"target": node, "referrers": sorted(G.predecessors(node))})
    return result


def find_reference_cycles(G: nx.DiGraph, min_size: int = 1) -> list[list[str]]:
    """Strongly connected groups of definitions that reference each other.

    Single definitions only count when they reference themselves.
    Sorted by size descending; members sorted for deterministic output.
    """
    cycles = []
    for component in nx.strongly_connected_components(G):
        members = sorted(component)
        if len(members) == 1:
            node = members[0]
            if min_size > 1 or not G.has_edge(node, node):
                continue
        elif len(members) < min_size:
            continue
        cycles.append(members)
    cycles.sort(key=lambda c: (-len(c), c))
    return cycles
