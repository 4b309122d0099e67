"""Reading and writing the on-disk ``flake.lock`` schema.

The payload shape is checked with pydantic, but the graph itself is built from
the raw decoded mapping so that member order and members this tool does not
model (``locked``, ``original``, ...) survive a round trip unchanged.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, cast

from pydantic import ValidationError

from allfollow.exceptions import InputUnreadable, MalformedInput, SchemaVersionUnsupported
from allfollow.lock.graph import (
    MAX_SUPPORTED_LOCK_VERSION,
    MIN_SUPPORTED_LOCK_VERSION,
    Edge,
    FollowsEdge,
    IndexedEdge,
    LockGraph,
    Node,
)
from allfollow.lock.schema import LockFileDTO

_INPUTS_KEY = "inputs"
_GRAPH_KEYS = ("nodes", "root", "version")


def _malformed_from_validation(exc: ValidationError) -> MalformedInput:
    first = exc.errors()[0]
    return MalformedInput(str(first.get("msg", "invalid value")), path=first.get("loc", ()))


def decode_edge(raw: object, *, path: tuple[str | int, ...] = ()) -> Edge:
    if isinstance(raw, str):
        return IndexedEdge(raw)
    if isinstance(raw, list) and raw and all(isinstance(item, str) for item in raw):
        return FollowsEdge(tuple(raw))
    raise MalformedInput(
        "an input must be a node identifier or a non-empty list of input names",
        path=path,
    )


def encode_edge(edge: Edge) -> str | list[str]:
    if isinstance(edge, IndexedEdge):
        return edge.index
    return list(edge.path)


def _decode_node(index: str, raw: Mapping[str, object]) -> Node:
    edges: dict[str, Edge] = {}
    raw_inputs = raw.get(_INPUTS_KEY, {})
    if isinstance(raw_inputs, Mapping):
        for name, raw_edge in raw_inputs.items():
            edges[name] = decode_edge(raw_edge, path=("nodes", index, _INPUTS_KEY, name))
    fields = {key: (None if key == _INPUTS_KEY else value) for key, value in raw.items()}
    return Node(edges, fields=fields)


def check_version(version: int) -> None:
    if version < MIN_SUPPORTED_LOCK_VERSION or version > MAX_SUPPORTED_LOCK_VERSION:
        raise SchemaVersionUnsupported(
            version,
            minimum=MIN_SUPPORTED_LOCK_VERSION,
            maximum=MAX_SUPPORTED_LOCK_VERSION,
        )


def lock_from_payload(payload: object) -> LockGraph:
    try:
        validated = LockFileDTO.model_validate(payload)
    except ValidationError as exc:
        raise _malformed_from_validation(exc) from exc
    check_version(validated.version)
    raw_payload = cast(Mapping[str, object], payload)
    raw_nodes = cast(Mapping[str, Mapping[str, object]], raw_payload["nodes"])
    if validated.root not in raw_nodes:
        raise MalformedInput(
            f"root node '{validated.root}' is not present in nodes", path=("root",)
        )
    nodes = {index: _decode_node(index, raw) for index, raw in raw_nodes.items()}
    fields = {key: (None if key in _GRAPH_KEYS else value) for key, value in raw_payload.items()}
    return LockGraph(
        nodes,
        root_index=validated.root,
        version=validated.version,
        fields=fields,
    )


def load_lock_text(text: str) -> LockGraph:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedInput(f"invalid JSON: {exc}") from exc
    return lock_from_payload(payload)


def load_lock_path(path: Path) -> LockGraph:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeError) as exc:
        raise InputUnreadable(f"Failed to read the input file: {exc}") from exc
    return load_lock_text(text)


def _node_to_payload(node: Node) -> dict[str, object]:
    encoded_inputs = {name: encode_edge(edge) for name, edge in node.iter_edges()}
    payload: dict[str, object] = {}
    if _INPUTS_KEY not in node.fields and encoded_inputs:
        payload[_INPUTS_KEY] = encoded_inputs
    for key, value in node.fields.items():
        payload[key] = encoded_inputs if key == _INPUTS_KEY else value
    return payload


def lock_to_payload(graph: LockGraph) -> dict[str, object]:
    encoded: dict[str, object] = {
        "nodes": {
            index: _node_to_payload(graph.get_node_mut(index))
            for index in graph.node_indices()
        },
        "root": graph.root_index,
        "version": graph.version,
    }
    payload: dict[str, object] = {}
    for key, value in graph.fields.items():
        payload[key] = encoded[key] if key in encoded else value
    for key, value in encoded.items():
        payload.setdefault(key, value)
    return payload


def dump_json_text(value: object, *, pretty: bool = False) -> str:
    if pretty:
        text = json.dumps(value, indent=2, ensure_ascii=False)
    else:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return text + "\n"


def dump_lock_text(graph: LockGraph, *, pretty: bool = False) -> str:
    return dump_json_text(lock_to_payload(graph), pretty=pretty)
