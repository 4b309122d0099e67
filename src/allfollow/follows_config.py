"""Generate the ``flake.nix`` inputs block that reproduces root following."""

from __future__ import annotations

from allfollow.invariants import require_not_none
from allfollow.lock.graph import LockGraph, edge_index

START_MARKER = "# START INPUT FOLLOW BLOCK -- DO NOT EDIT MANUALLY"
END_MARKER = "# END INPUT FOLLOW BLOCK -- DO NOT EDIT MANUALLY"
LINE_INDENT = "    "


def follows_line(path: list[str], name: str) -> str:
    # B.inputs.C.inputs.nixpkgs.follows = "nixpkgs";
    return f'{LINE_INDENT}{".inputs.".join([*path, name])}.follows = "{name}";'


def collect_follows_lines(graph: LockGraph) -> list[str]:
    root = graph.root()
    root_inputs = set(root.edge_names())
    lines: list[str] = []

    def _traverse(index: str, path: list[str], visited: list[str]) -> None:
        node = require_not_none(graph.get_node(index), reason="node exists", index=index)
        for edge_name, edge in node.iter_edges():
            if edge_name in root_inputs:
                # Following a root input ends this branch.
                lines.append(follows_line(path, edge_name))
                continue
            child_index = graph.resolve_edge(edge)
            if child_index in visited:
                continue
            visited.append(child_index)
            _traverse(child_index, [*path, edge_name], visited)
            visited.pop()

    for input_name, edge in root.iter_edges():
        index = edge_index(edge)
        if index is None:
            continue
        graph.resolve_edge(edge)
        _traverse(index, [input_name], [index])
    return lines


def emit_follows_config(graph: LockGraph) -> str:
    """Render the marker-wrapped ``inputs = { ... };`` block.

    The text has no trailing newline after the end marker.
    """
    return "\n".join(
        [
            START_MARKER,
            "inputs = {",
            *collect_follows_lines(graph),
            "};",
            END_MARKER,
        ]
    )
