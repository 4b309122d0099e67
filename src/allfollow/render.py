"""Terminal rendering of tallies and substitution/pruning decisions."""

from __future__ import annotations

from typing import Iterable

import typer

from allfollow.refcount import ReferenceTally
from allfollow.substitute import DecisionKind, SubstitutionDecision


def heading(text: str) -> str:
    return typer.style(text, fg=typer.colors.BRIGHT_MAGENTA, bold=True)


def render_tally(tally: ReferenceTally) -> list[str]:
    width = max((len(index) for index in tally), default=0)
    equals = typer.style("=", fg=typer.colors.RED)
    lines: list[str] = []
    for index, count in tally.items():
        padded = f"{index:<{width}}"
        if index == tally.root_index:
            line = f"{typer.style(padded, dim=True)} {equals} {typer.style(str(count), dim=True)}"
        elif count <= 1:
            styled = typer.style(padded, fg=typer.colors.BRIGHT_YELLOW, bold=True)
            line = f"{styled} {equals} {typer.style(str(count), dim=True)}"
        else:
            styled_count = typer.style(str(count), fg=typer.colors.BRIGHT_GREEN, bold=True)
            line = f"{padded} {equals} {styled_count}"
        lines.append(line)
    return lines


def render_decision(decision: SubstitutionDecision) -> str:
    name = typer.style(f"'{decision.edge_name}'", fg=typer.colors.YELLOW)
    if decision.kind is DecisionKind.UNMATCHED:
        label = typer.style("No suitable replacement for", fg=typer.colors.CYAN, bold=True)
        target = typer.style(f"('{decision.target}')", dim=True)
        return f"{label} {name} {target}"
    was = typer.style(f"(was '{decision.old}')", dim=True)
    if decision.kind is DecisionKind.INDEXED:
        new = typer.style(f"'{decision.new}'", fg=typer.colors.MAGENTA, italic=True)
        return f"- {name} now references {new} {was}"
    new = typer.style(f"'{decision.new}'", fg=typer.colors.GREEN)
    return f"- {name} now follows {new} {was}"


def _input_heading(input_name: str, input_index: str) -> str:
    label = typer.style("Replacing inputs for", fg=typer.colors.BRIGHT_CYAN, bold=True)
    name = typer.style(f"'{input_name}'", fg=typer.colors.GREEN, bold=True)
    index = typer.style(f"('{input_index}')", dim=True)
    return f"{label} {name} {index}"


def render_decisions(
    decisions: Iterable[SubstitutionDecision],
    inputs: Iterable[tuple[str, str]] | None = None,
) -> list[str]:
    """Group decisions under a heading per rewritten input.

    ``inputs`` lists every rewritten ``(name, index)`` pair, so inputs that had
    no edges still get their heading; by default only inputs with decisions do.
    """
    decisions = list(decisions)
    if inputs is None:
        inputs = dict.fromkeys((d.input_name, d.input_index) for d in decisions)
    lines: list[str] = []
    for key in inputs:
        lines.append(_input_heading(*key))
        lines.extend(
            render_decision(decision)
            for decision in decisions
            if (decision.input_name, decision.input_index) == key
        )
    return lines


def render_removed(removed: Iterable[str]) -> list[str]:
    lines = [
        "- removed " + typer.style(f"'{index}'", fg=typer.colors.RED) for index in removed
    ]
    return lines or ["- no orphaned nodes"]


def echo_lines(lines: Iterable[str], *, err: bool = False) -> None:
    for line in lines:
        typer.echo(line, err=err)
