from __future__ import annotations

from allfollow.lock.graph import LockGraph
from allfollow.refcount import count_from


def prune_orphans(graph: LockGraph) -> list[str]:
    """Remove every node the current root no longer reaches.

    Returns the removed identifiers in graph order. The root always has a
    count of at least one, so it is never selected.
    """
    dead_nodes = count_from(graph, graph.root_index).orphans()
    for index in dead_nodes:
        graph.remove_node(index)
    return dead_nodes
