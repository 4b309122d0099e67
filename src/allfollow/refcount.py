from __future__ import annotations

from dataclasses import dataclass, field
from typing import ItemsView, Iterator

from allfollow.exceptions import CyclicReference
from allfollow.invariants import require_not_none
from allfollow.lock.graph import LockGraph


@dataclass
class ReferenceTally:
    """Visit count per node identifier, relative to ``root_index``.

    Every identifier of the graph has an entry, zero included, in graph order.
    """

    root_index: str
    counts: dict[str, int] = field(default_factory=dict)

    def __getitem__(self, index: str) -> int:
        return self.counts[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self.counts)

    def __len__(self) -> int:
        return len(self.counts)

    def items(self) -> ItemsView[str, int]:
        return self.counts.items()

    def orphans(self) -> list[str]:
        return [index for index, count in self.counts.items() if count == 0]

    def as_json_dict(self) -> dict[str, int]:
        return dict(self.counts)


def count_from(graph: LockGraph, start_index: str) -> ReferenceTally:
    """Count how many times each node is reached walking edges from ``start_index``.

    A node is counted once per path that reaches it. Reaching a node that is
    already on the current path means the graph is cyclic; that raises
    ``CyclicReference`` rather than walking forever.
    """
    tally = ReferenceTally(
        root_index=start_index,
        counts={index: 0 for index in graph.node_indices()},
    )
    stack: list[str] = []

    def _visit(index: str) -> None:
        node = require_not_none(
            graph.get_node(index),
            reason="a node to exist with this index",
            index=index,
        )
        tally.counts[index] += 1
        stack.append(index)
        for _name, edge in node.iter_edges():
            target = graph.resolve_edge(edge)
            if target in stack:
                raise CyclicReference([*stack[stack.index(target):], target])
            _visit(target)
        stack.pop()

    _visit(start_index)
    return tally
