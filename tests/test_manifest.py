from __future__ import annotations

from pathlib import Path

import pytest

from allfollow.exceptions import ManifestMarkersMissing, ManifestMarkersOutOfOrder
from allfollow.follows_config import END_MARKER, START_MARKER, emit_follows_config
from allfollow.manifest import (
    indent_block,
    manifest_path_for,
    patch_manifest_text,
    plan_manifest_edit,
    update_manifest,
)
from tests.lock_helpers import scenario_lock

BEFORE = '{\n  inputs.nixpkgs.url = "github:NixOS/nixpkgs/nixos-unstable";\n\n'
AFTER = "\n\n  outputs = { self, nixpkgs }: { };\n}\n"
MANIFEST = f"{BEFORE}  {START_MARKER}\n  {END_MARKER}{AFTER}"


def test_block_is_indented_like_the_start_marker() -> None:
    block = emit_follows_config(scenario_lock())
    patched = patch_manifest_text(MANIFEST, block)
    assert patched.startswith(BEFORE)
    assert patched.endswith(AFTER)
    region = patched[len(BEFORE) : len(patched) - len(AFTER)]
    lines = region.split("\n")
    assert lines == [f"  {line}" for line in block.split("\n")]
    assert "\n  inputs = {\n" in patched
    assert '\n      foo.inputs.nixpkgs.follows = "nixpkgs";\n' in patched


def test_patching_twice_gives_the_same_text() -> None:
    block = emit_follows_config(scenario_lock())
    once = patch_manifest_text(MANIFEST, block)
    assert patch_manifest_text(once, block) == once


def test_region_extends_to_the_end_of_the_end_marker_line() -> None:
    text = f"a\n{START_MARKER}\nold\n{END_MARKER} trailing\nb\n"
    edit = plan_manifest_edit(text, "X")
    assert edit.indent == ""
    assert edit.apply(text) == "a\nX\nb\n"


def test_end_marker_at_end_of_file() -> None:
    text = f"\t{START_MARKER}\n\t{END_MARKER}"
    assert patch_manifest_text(text, "x\ny") == "\tx\n\ty"


@pytest.mark.parametrize(
    "text",
    [
        "{ }\n",
        f"{START_MARKER}\n",
        f"{END_MARKER}\n",
    ],
)
def test_missing_markers_are_reported_with_guidance(text: str) -> None:
    with pytest.raises(ManifestMarkersMissing) as excinfo:
        patch_manifest_text(text, "block")
    assert START_MARKER in str(excinfo.value)
    assert END_MARKER in str(excinfo.value)


def test_markers_out_of_order() -> None:
    with pytest.raises(ManifestMarkersOutOfOrder):
        patch_manifest_text(f"{END_MARKER}\n{START_MARKER}\n", "block")


def test_indent_block_leaves_empty_lines_bare() -> None:
    assert indent_block("a\n\nb", "  ") == "  a\n\n  b"


def test_crlf_manifest_keeps_its_line_endings() -> None:
    text = f"a\r\n  {START_MARKER}\r\n  old\r\n  {END_MARKER}\r\nb\r\n"
    patched = patch_manifest_text(text, "x\ny")
    assert patched == "a\r\n  x\r\n  y\r\nb\r\n"


def test_crlf_after_end_marker_survives_mixed_endings() -> None:
    text = f"a\r\n  {START_MARKER}\n  {END_MARKER}\r\nb\n"
    assert patch_manifest_text(text, "x") == "a\r\n  x\r\nb\n"


def test_update_manifest_rewrites_file(tmp_path: Path) -> None:
    manifest = tmp_path / "flake.nix"
    manifest.write_text(MANIFEST, encoding="utf-8")
    update_manifest(manifest, emit_follows_config(scenario_lock()))
    content = manifest.read_text(encoding="utf-8")
    assert 'foo.inputs.nixpkgs.follows = "nixpkgs";' in content
    assert list(tmp_path.iterdir()) == [manifest]


def test_update_manifest_preserves_crlf_bytes(tmp_path: Path) -> None:
    manifest = tmp_path / "flake.nix"
    manifest.write_bytes(f"{{\r\n  {START_MARKER}\r\n  {END_MARKER}\r\n}}\r\n".encode())
    update_manifest(manifest, "inputs = { };")
    assert manifest.read_bytes() == b"{\r\n  inputs = { };\r\n}\r\n"


def test_update_manifest_leaves_file_untouched_on_missing_markers(tmp_path: Path) -> None:
    manifest = tmp_path / "flake.nix"
    manifest.write_text("{ }\n", encoding="utf-8")
    with pytest.raises(ManifestMarkersMissing):
        update_manifest(manifest, "block")
    assert manifest.read_text(encoding="utf-8") == "{ }\n"
    assert list(tmp_path.iterdir()) == [manifest]


def test_manifest_path_for_lock_file_and_stdin() -> None:
    assert manifest_path_for(Path("some/dir/flake.lock")) == Path("some/dir/flake.nix")
    assert manifest_path_for(None) == Path("flake.nix")
    assert manifest_path_for(Path("flake.lock"), "other.nix") == Path("other.nix")
