from __future__ import annotations

import re

from allfollow.lock.graph import FollowsEdge, IndexedEdge
from allfollow.refcount import ReferenceTally
from allfollow.render import render_decisions, render_removed, render_tally
from allfollow.substitute import DecisionKind, SubstitutionDecision

_ANSI_ESCAPE = re.compile(r"\x1B\[[0-9;]*m")


def _plain(lines: list[str]) -> list[str]:
    return [_ANSI_ESCAPE.sub("", line) for line in lines]


def test_tally_rows_are_aligned() -> None:
    tally = ReferenceTally(root_index="root", counts={"root": 1, "nixpkgs_2": 0, "a": 3})
    assert _plain(render_tally(tally)) == [
        "root      = 1",
        "nixpkgs_2 = 0",
        "a         = 3",
    ]


def test_decisions_are_grouped_by_input() -> None:
    decisions = [
        SubstitutionDecision("foo", "foo", "nixpkgs", DecisionKind.FOLLOWS,
                             old=IndexedEdge("nixpkgs_2"), new=FollowsEdge(("nixpkgs",))),
        SubstitutionDecision("foo", "foo", "utils", DecisionKind.UNMATCHED,
                             old=IndexedEdge("utils"), target="utils"),
        SubstitutionDecision("bar", "bar_1", "nixpkgs", DecisionKind.INDEXED,
                             old=IndexedEdge("nixpkgs_3"), new=IndexedEdge("nixpkgs")),
    ]
    assert _plain(render_decisions(decisions)) == [
        "Replacing inputs for 'foo' ('foo')",
        "- 'nixpkgs' now follows 'nixpkgs' (was 'nixpkgs_2')",
        "No suitable replacement for 'utils' ('utils')",
        "Replacing inputs for 'bar' ('bar_1')",
        "- 'nixpkgs' now references 'nixpkgs' (was 'nixpkgs_3')",
    ]


def test_removed_nodes() -> None:
    assert _plain(render_removed(["a", "b"])) == ["- removed 'a'", "- removed 'b'"]
    assert render_removed([]) == ["- no orphaned nodes"]


def test_inputs_without_edges_still_get_a_heading() -> None:
    decisions = [
        SubstitutionDecision("foo", "N2", "nixpkgs", DecisionKind.FOLLOWS,
                             old=IndexedEdge("N3"), new=FollowsEdge(("nixpkgs",))),
    ]
    assert _plain(render_decisions(decisions, [("nixpkgs", "N1"), ("foo", "N2")])) == [
        "Replacing inputs for 'nixpkgs' ('N1')",
        "Replacing inputs for 'foo' ('N2')",
        "- 'nixpkgs' now follows 'nixpkgs' (was 'N3')",
    ]
