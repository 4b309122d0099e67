"""allfollow package root."""

from allfollow.follows_config import emit_follows_config
from allfollow.lock import FollowsEdge, IndexedEdge, LockGraph, Node
from allfollow.prune import prune_orphans
from allfollow.refcount import ReferenceTally, count_from
from allfollow.substitute import substitute_with_root_follows

__all__ = [
    "__version__",
    "FollowsEdge",
    "IndexedEdge",
    "LockGraph",
    "Node",
    "ReferenceTally",
    "count_from",
    "emit_follows_config",
    "prune_orphans",
    "substitute_with_root_follows",
]

__version__ = "0.1.0"
