from __future__ import annotations

from allfollow.follows_config import (
    END_MARKER,
    START_MARKER,
    collect_follows_lines,
    emit_follows_config,
)
from allfollow.lock.graph import LockGraph
from tests.lock_helpers import build_lock, scenario_lock


def test_scenario_emits_single_follows_line() -> None:
    assert emit_follows_config(scenario_lock()) == "\n".join(
        [
            START_MARKER,
            "inputs = {",
            '    foo.inputs.nixpkgs.follows = "nixpkgs";',
            "};",
            END_MARKER,
        ]
    )


def test_output_has_no_trailing_newline() -> None:
    assert emit_follows_config(scenario_lock()).endswith(END_MARKER)


def test_traversal_descends_through_unmatched_inputs() -> None:
    lock = build_lock(
        {
            "root": {"nixpkgs": "N1", "foo": "F"},
            "N1": {},
            "F": {"bar": "B"},
            "B": {"baz": "Z", "nixpkgs": "N2"},
            "Z": {"nixpkgs": "N3"},
            "N2": {},
            "N3": {},
        }
    )
    assert collect_follows_lines(lock) == [
        '    foo.inputs.bar.inputs.baz.inputs.nixpkgs.follows = "nixpkgs";',
        '    foo.inputs.bar.inputs.nixpkgs.follows = "nixpkgs";',
    ]


def test_matching_name_stops_descent() -> None:
    lock = build_lock(
        {
            "root": {"nixpkgs": "N1", "foo": "F"},
            "N1": {},
            "F": {"nixpkgs": "N2"},
            "N2": {"nixpkgs": "N3"},
            "N3": {},
        }
    )
    assert collect_follows_lines(lock) == ['    foo.inputs.nixpkgs.follows = "nixpkgs";']


def test_root_follows_inputs_are_not_traversed() -> None:
    lock = build_lock(
        {
            "root": {"nixpkgs": "N1", "pkgs": ["nixpkgs"]},
            "N1": {"lib": "L"},
            "L": {"pkgs": "P"},
            "P": {},
        }
    )
    assert collect_follows_lines(lock) == ['    nixpkgs.inputs.lib.inputs.pkgs.follows = "pkgs";']


def test_cycles_terminate_without_repeating_a_path_node() -> None:
    lock = build_lock(
        {
            "root": {"nixpkgs": "N1", "foo": "A"},
            "N1": {},
            "A": {"b": "B"},
            "B": {"a": "A", "c": "C", "nixpkgs": "N2"},
            "C": {"b": "B"},
            "N2": {},
        }
    )
    assert collect_follows_lines(lock) == ['    foo.inputs.b.inputs.nixpkgs.follows = "nixpkgs";']


def test_hyprland_config_block(hyprland_lock: LockGraph) -> None:
    assert collect_follows_lines(hyprland_lock) == [
        '    aquamarine.inputs.hyprutils.follows = "hyprutils";',
        '    aquamarine.inputs.hyprwayland-scanner.inputs.nixpkgs.follows = "nixpkgs";',
        '    aquamarine.inputs.hyprwayland-scanner.inputs.systems.follows = "systems";',
        '    aquamarine.inputs.nixpkgs.follows = "nixpkgs";',
        '    aquamarine.inputs.systems.follows = "systems";',
        '    hyprutils.inputs.nixpkgs.follows = "nixpkgs";',
        '    hyprutils.inputs.systems.follows = "systems";',
    ]


def test_emitter_does_not_mutate_the_graph(hyprland_lock: LockGraph) -> None:
    before = {index: dict(node.edges) for index, node in hyprland_lock.iter_nodes()}
    emit_follows_config(hyprland_lock)
    after = {index: dict(node.edges) for index, node in hyprland_lock.iter_nodes()}
    assert before == after
