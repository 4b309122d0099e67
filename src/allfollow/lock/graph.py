"""In-memory lock graph: an arena of nodes keyed by identifier.

Edges never own their targets. An edge is either a direct node identifier
(``IndexedEdge``) or a path of input names walked from the root
(``FollowsEdge``), so removing a node is a keyed delete and the only failure
mode left is a dangling identifier, which ``resolve_edge`` reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, TypeAlias

from allfollow.exceptions import DanglingReference, UnresolvableFollowsPath
from allfollow.invariants import never, require_not_none

MIN_SUPPORTED_LOCK_VERSION = 5
MAX_SUPPORTED_LOCK_VERSION = 7
DEFAULT_ROOT_INDEX = "root"


@dataclass(frozen=True)
class IndexedEdge:
    index: str

    def __str__(self) -> str:
        return self.index


@dataclass(frozen=True)
class FollowsEdge:
    path: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))
        if not self.path:
            raise ValueError("a follows path must name at least one input")

    def __str__(self) -> str:
        return "/".join(self.path)


Edge: TypeAlias = IndexedEdge | FollowsEdge


def edge_index(edge: Edge) -> str | None:
    """Return the node identifier of an indexed edge, ``None`` for follows."""
    if isinstance(edge, IndexedEdge):
        return edge.index
    return None


class EdgeSlot:
    """Writable handle on a single named edge of one node."""

    __slots__ = ("_edges", "name")

    def __init__(self, edges: dict[str, Edge], name: str) -> None:
        self._edges = edges
        self.name = name

    @property
    def value(self) -> Edge:
        return self._edges[self.name]

    def replace(self, edge: Edge) -> Edge:
        old = self._edges[self.name]
        self._edges[self.name] = edge
        return old


class Node:
    """A lock node: ordered named edges plus the on-disk members around them.

    ``fields`` keeps every other member of the node object (``locked``,
    ``original``, ...) in its original order so it can be written back
    untouched.
    """

    def __init__(
        self,
        edges: Mapping[str, Edge] | None = None,
        *,
        fields: Mapping[str, object] | None = None,
    ) -> None:
        self._edges: dict[str, Edge] = dict(edges or {})
        self.fields: dict[str, object] = dict(fields or {})

    def __repr__(self) -> str:
        return f"Node(edges={self._edges!r})"

    @property
    def edges(self) -> Mapping[str, Edge]:
        return MappingProxyType(self._edges)

    def get_edge(self, name: str) -> Edge | None:
        return self._edges.get(name)

    def iter_edges(self) -> Iterator[tuple[str, Edge]]:
        yield from list(self._edges.items())

    def iter_edges_mut(self) -> Iterator[tuple[str, EdgeSlot]]:
        for name in list(self._edges):
            yield name, EdgeSlot(self._edges, name)


class NodeView:
    """Read-only view of a node owned by a ``LockGraph``."""

    __slots__ = ("_node",)

    def __init__(self, node: Node) -> None:
        self._node = node

    def __repr__(self) -> str:
        return f"NodeView({self._node!r})"

    @property
    def edges(self) -> Mapping[str, Edge]:
        return self._node.edges

    def edge_names(self) -> list[str]:
        return list(self._node.edges)

    def get_edge(self, name: str) -> Edge | None:
        return self._node.get_edge(name)

    def iter_edges(self) -> Iterator[tuple[str, Edge]]:
        return self._node.iter_edges()


class LockGraph:
    def __init__(
        self,
        nodes: Mapping[str, Node],
        *,
        root_index: str = DEFAULT_ROOT_INDEX,
        version: int = MAX_SUPPORTED_LOCK_VERSION,
        fields: Mapping[str, object] | None = None,
    ) -> None:
        self._nodes: dict[str, Node] = dict(nodes)
        if root_index not in self._nodes:
            raise DanglingReference(root_index)
        self._root_index = root_index
        self._version = int(version)
        self.fields: dict[str, object] = dict(fields or {})

    def __contains__(self, index: object) -> bool:
        return index in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return (
            f"LockGraph(root_index={self._root_index!r}, version={self._version}, "
            f"nodes={list(self._nodes)!r})"
        )

    @property
    def root_index(self) -> str:
        return self._root_index

    @property
    def version(self) -> int:
        return self._version

    def node_indices(self) -> list[str]:
        return list(self._nodes)

    def iter_nodes(self) -> Iterator[tuple[str, NodeView]]:
        for index, node in list(self._nodes.items()):
            yield index, NodeView(node)

    def get_node(self, index: str) -> NodeView | None:
        node = self._nodes.get(index)
        if node is None:
            return None
        return NodeView(node)

    def get_node_mut(self, index: str) -> Node | None:
        return self._nodes.get(index)

    def root(self) -> NodeView:
        return require_not_none(
            self.get_node(self._root_index),
            reason="the root node to exist",
            root_index=self._root_index,
        )

    def remove_node(self, index: str) -> None:
        if index == self._root_index:
            never("the root node cannot be removed", index=index)
        self._nodes.pop(index, None)

    def resolve_edge(self, edge: Edge) -> str:
        return self._resolve(edge, ())

    def _resolve(self, edge: Edge, resolving: tuple[tuple[str, str], ...]) -> str:
        if isinstance(edge, IndexedEdge):
            if edge.index not in self._nodes:
                raise DanglingReference(edge.index)
            return edge.index
        current = self._root_index
        for hop in edge.path:
            # A hop already being resolved further up would never terminate.
            step = (current, hop)
            if step in resolving:
                raise UnresolvableFollowsPath(edge.path, hop=hop, at_node=current)
            next_edge = self._nodes[current].get_edge(hop)
            if next_edge is None:
                raise UnresolvableFollowsPath(edge.path, hop=hop, at_node=current)
            current = self._resolve(next_edge, resolving + (step,))
        return current
