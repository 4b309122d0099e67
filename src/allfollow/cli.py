"""Imitate Nix flake input following as a post-process on ``flake.lock``.

This replaces hand-maintained ``inputs.*.inputs.*.follows = "*";`` lines with
automation: ``prune`` rewrites the lock, ``count`` reports reference counts
and ``config`` generates the equivalent ``flake.nix`` block.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, NoReturn, Optional

import typer

from allfollow.config import AllfollowConfig, resolve_config
from allfollow.exceptions import AllfollowError
from allfollow.follows_config import emit_follows_config
from allfollow.io_targets import DEFAULT_LOCK_PATH, STDIO_ALIAS, InputSource, OutputTarget
from allfollow.lock.codec import dump_json_text, dump_lock_text, load_lock_text
from allfollow.lock.graph import LockGraph
from allfollow.manifest import manifest_path_for, update_manifest
from allfollow.prune import prune_orphans
from allfollow.refcount import count_from
from allfollow.render import (
    echo_lines,
    heading,
    render_decisions,
    render_removed,
    render_tally,
)
from allfollow.substitute import rewritten_inputs, substitute_with_root_follows

app = typer.Typer(add_completion=False, help=__doc__)

_INPUT_HELP = (
    "The path of `flake.lock` to read, or `-` to read from standard input. "
    "If unspecified, defaults to the current directory."
)


def _fail(exc: object) -> NoReturn:
    typer.secho(str(exc), err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


@contextmanager
def _fatal_errors() -> Iterator[None]:
    try:
        yield
    except AllfollowError as exc:
        _fail(exc)
    except OSError as exc:
        _fail(f"I/O failure: {exc}")


def _settings(ctx: typer.Context) -> AllfollowConfig:
    obj = ctx.find_root().obj
    if isinstance(obj, AllfollowConfig):
        return obj
    return resolve_config()


def _read_lock(source: InputSource) -> LockGraph:
    return load_lock_text(source.read_text())


def _output_target(
    source: InputSource,
    *,
    output: str,
    in_place: bool,
    overwrite: bool,
) -> tuple[OutputTarget, bool]:
    if in_place:
        return OutputTarget.from_input(source), True
    return OutputTarget.parse(output), overwrite


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Configuration file (defaults to ./allfollow.toml).",
    ),
) -> None:
    ctx.obj = resolve_config(config_path=config)


@app.command("prune")
def prune(
    ctx: typer.Context,
    lock_file: str = typer.Argument(str(DEFAULT_LOCK_PATH), metavar="INPUT", help=_INPUT_HELP),
    no_follows: bool = typer.Option(
        False,
        "--indexed",
        "--no-follows",
        help="Do not imitate `inputs.*.follows`, reference node indices instead.",
    ),
    pretty: bool = typer.Option(False, "-p", "--pretty", help="Do not minify the output JSON."),
    in_place: bool = typer.Option(
        False, "-I", "--in-place", help="Write new file back to INPUT (if specified)."
    ),
    overwrite: bool = typer.Option(
        False, "-f", "--force", "--overwrite", help="Overwrite the output file if it exists."
    ),
    output: str = typer.Option(
        STDIO_ALIAS,
        "-o",
        "--output",
        metavar="OUTPUT",
        help="Path of the file to write, set to `-` for stdout (default).",
    ),
) -> None:
    """Redirect transitive inputs to the root's inputs and drop orphaned nodes."""
    defaults = _settings(ctx).prune
    indexed = no_follows or defaults.indexed
    source = InputSource.parse(lock_file)
    target, overwrite = _output_target(
        source, output=output, in_place=in_place, overwrite=overwrite
    )
    with _fatal_errors():
        target.check_writable(overwrite=overwrite)
        lock = _read_lock(source)

        typer.echo(err=True)
        typer.echo(heading("Flake input nodes' reference counts:"), err=True)
        echo_lines(render_tally(count_from(lock, lock.root_index)), err=True)

        typer.echo(err=True)
        typer.echo(heading("Redirecting inputs to imitate follows behavior."), err=True)
        inputs = rewritten_inputs(lock)
        decisions = substitute_with_root_follows(lock, indexed=indexed)
        echo_lines(render_decisions(decisions, inputs), err=True)

        typer.echo(err=True)
        typer.echo(heading("Pruning orphaned nodes from modified lock."), err=True)
        echo_lines(render_removed(prune_orphans(lock)), err=True)

        typer.echo(err=True)
        typer.echo(
            heading("Flake input nodes' reference counts ")
            + typer.style("after successful pruning", fg=typer.colors.BRIGHT_GREEN, bold=True)
            + heading(":"),
            err=True,
        )
        echo_lines(render_tally(count_from(lock, lock.root_index)), err=True)
        typer.echo(err=True)

        target.write_text(
            dump_lock_text(lock, pretty=pretty or defaults.pretty),
            overwrite=overwrite,
        )


@app.command("count")
def count(
    ctx: typer.Context,
    lock_file: str = typer.Argument(str(DEFAULT_LOCK_PATH), metavar="INPUT", help=_INPUT_HELP),
    json_output: bool = typer.Option(False, "-j", "--json", help="Show the data as JSON."),
    pretty: bool = typer.Option(False, "-p", "--pretty", help="Do not minify the output JSON."),
    in_place: bool = typer.Option(
        False, "-I", "--in-place", help="Write new file back to INPUT (if specified)."
    ),
    overwrite: bool = typer.Option(
        False, "-f", "--force", "--overwrite", help="Overwrite the output file if it exists."
    ),
    output: str = typer.Option(
        STDIO_ALIAS,
        "-o",
        "--output",
        metavar="OUTPUT",
        help="Path of the file to write, set to `-` for stdout (default).",
    ),
) -> None:
    """Show how many times each lock node is referenced from the root."""
    defaults = _settings(ctx).count
    source = InputSource.parse(lock_file)
    target, overwrite = _output_target(
        source, output=output, in_place=in_place, overwrite=overwrite
    )
    with _fatal_errors():
        lock = _read_lock(source)
        tally = count_from(lock, lock.root_index)
        if json_output or defaults.json:
            target.write_text(
                dump_json_text(tally.as_json_dict(), pretty=pretty or defaults.pretty),
                overwrite=overwrite,
            )
            return
        typer.echo(heading("Flake input nodes' reference counts:"))
        echo_lines(render_tally(tally))


@app.command("config")
def config_block(
    ctx: typer.Context,
    lock_file: str = typer.Argument(str(DEFAULT_LOCK_PATH), metavar="INPUT", help=_INPUT_HELP),
    in_place: bool = typer.Option(
        False,
        "-I",
        "--in-place",
        help="Modify the `flake.nix` file in the same directory as the lock file.",
    ),
) -> None:
    """Generate the `flake.nix` follows block equivalent to pruning."""
    defaults = _settings(ctx).config
    source = InputSource.parse(lock_file)
    with _fatal_errors():
        lock = _read_lock(source)
        block = emit_follows_config(lock)
        if not in_place:
            typer.echo(block)
            return
        manifest_path = manifest_path_for(source.path, defaults.manifest)
        update_manifest(manifest_path, block)
        typer.secho(f"Successfully updated {manifest_path}", err=True, fg=typer.colors.GREEN)
