"""Imitate Nix ``inputs.*.inputs.*.follows`` as a post-process on the lock graph."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from allfollow.invariants import require_not_none
from allfollow.lock.graph import Edge, FollowsEdge, LockGraph, Node, edge_index


class DecisionKind(str, Enum):
    FOLLOWS = "follows"
    INDEXED = "indexed"
    UNMATCHED = "unmatched"


@dataclass(frozen=True)
class SubstitutionDecision:
    input_name: str
    input_index: str
    edge_name: str
    kind: DecisionKind
    old: Edge
    new: Edge | None = None
    target: str | None = None

    @property
    def replaced(self) -> bool:
        return self.new is not None


def substitute_node_inputs_with_root_inputs(
    graph: LockGraph,
    node: Node,
    *,
    indexed: bool = False,
    input_name: str = "",
    input_index: str = "",
) -> list[SubstitutionDecision]:
    """Point every edge of ``node`` named like a root input at the root's input.

    With ``indexed`` false the replacement is ``FollowsEdge((name,))``, which
    imitates input following. Otherwise the root's own edge is copied verbatim,
    most likely keeping an ``IndexedEdge``.
    """
    root = graph.root()
    decisions: list[SubstitutionDecision] = []
    for edge_name, slot in node.iter_edges_mut():
        root_edge = root.get_edge(edge_name)
        if root_edge is None:
            decisions.append(
                SubstitutionDecision(
                    input_name=input_name,
                    input_index=input_index,
                    edge_name=edge_name,
                    kind=DecisionKind.UNMATCHED,
                    old=slot.value,
                    target=graph.resolve_edge(slot.value),
                )
            )
            continue
        if indexed:
            replacement: Edge = root_edge
            kind = DecisionKind.INDEXED
        else:
            replacement = FollowsEdge((edge_name,))
            kind = DecisionKind.FOLLOWS
        old = slot.replace(replacement)
        decisions.append(
            SubstitutionDecision(
                input_name=input_name,
                input_index=input_index,
                edge_name=edge_name,
                kind=kind,
                old=old,
                new=replacement,
            )
        )
    return decisions


def rewritten_inputs(graph: LockGraph) -> list[tuple[str, str]]:
    """Name and node index of each root input whose own inputs get rewritten."""
    return [
        (input_name, graph.resolve_edge(root_edge))
        for input_name, root_edge in graph.root().iter_edges()
        if edge_index(root_edge) is not None
    ]


def substitute_with_root_follows(
    graph: LockGraph, *, indexed: bool = False
) -> list[SubstitutionDecision]:
    """Rewrite the inputs of every indexed root input; one level deep only."""
    decisions: list[SubstitutionDecision] = []
    for input_name, input_index in rewritten_inputs(graph):
        node = require_not_none(
            graph.get_node_mut(input_index),
            reason="a node to exist with this index",
            index=input_index,
        )
        decisions.extend(
            substitute_node_inputs_with_root_inputs(
                graph,
                node,
                indexed=indexed,
                input_name=input_name,
                input_index=input_index,
            )
        )
    return decisions
