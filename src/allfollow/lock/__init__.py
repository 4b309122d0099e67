"""Lock graph model and its on-disk codec."""

from allfollow.lock.codec import dump_lock_text, load_lock_path, load_lock_text
from allfollow.lock.graph import (
    MAX_SUPPORTED_LOCK_VERSION,
    MIN_SUPPORTED_LOCK_VERSION,
    Edge,
    EdgeSlot,
    FollowsEdge,
    IndexedEdge,
    LockGraph,
    Node,
    NodeView,
    edge_index,
)

__all__ = [
    "MAX_SUPPORTED_LOCK_VERSION",
    "MIN_SUPPORTED_LOCK_VERSION",
    "Edge",
    "EdgeSlot",
    "FollowsEdge",
    "IndexedEdge",
    "LockGraph",
    "Node",
    "NodeView",
    "dump_lock_text",
    "edge_index",
    "load_lock_path",
    "load_lock_text",
]
