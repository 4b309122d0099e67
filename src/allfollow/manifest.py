"""In-place patching of the follow block in ``flake.nix``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from allfollow.exceptions import (
    InputUnreadable,
    ManifestMarkersMissing,
    ManifestMarkersOutOfOrder,
)
from allfollow.follows_config import END_MARKER, START_MARKER
from allfollow.io_targets import write_text_atomic

DEFAULT_MANIFEST_NAME = "flake.nix"


@dataclass(frozen=True)
class ManifestEdit:
    """Replacement of ``text[start:end]``; offsets are character positions."""

    start: int
    end: int
    indent: str
    replacement: str

    def apply(self, text: str) -> str:
        return text[: self.start] + self.replacement + text[self.end :]


def indent_block(block: str, indent: str, newline: str = "\n") -> str:
    return newline.join(f"{indent}{line}" if line else line for line in block.splitlines())


def plan_manifest_edit(text: str, block: str) -> ManifestEdit:
    """Locate the marker region and build the indented replacement.

    The region runs from the start of the line holding the start marker to the
    end of the line holding the end marker (its line ending is kept).
    Indentation is whatever precedes the start marker on its line, and block
    lines are joined with CRLF when the manifest uses it.
    """
    start = text.find(START_MARKER)
    end = text.find(END_MARKER)
    if start < 0 or end < 0:
        raise ManifestMarkersMissing(
            "Could not find the start and end markers in the manifest. "
            "Please add them manually:\n"
            f"{START_MARKER}\ninputs = {{ ... }};\n{END_MARKER}"
        )
    if start >= end:
        raise ManifestMarkersOutOfOrder(
            "Found markers in the manifest but START comes after END."
        )
    line_start = text.rfind("\n", 0, start) + 1
    indent = text[line_start:start]
    line_end = text.find("\n", end)
    if line_end < 0:
        line_end = len(text)
    elif text[line_end - 1] == "\r":
        line_end -= 1
    newline = "\r\n" if "\r\n" in text else "\n"
    return ManifestEdit(
        start=line_start,
        end=line_end,
        indent=indent,
        replacement=indent_block(block, indent, newline),
    )


def patch_manifest_text(text: str, block: str) -> str:
    return plan_manifest_edit(text, block).apply(text)


def update_manifest(path: Path, block: str) -> None:
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            content = handle.read()
    except (OSError, UnicodeError) as exc:
        raise InputUnreadable(f"Failed to read {path}: {exc}") from exc
    write_text_atomic(path, patch_manifest_text(content, block))


def manifest_path_for(lock_path: Path | None, manifest_name: str = DEFAULT_MANIFEST_NAME) -> Path:
    """The manifest beside the lock file, or in the working directory for stdin."""
    if lock_path is None:
        return Path(manifest_name)
    return lock_path.parent / manifest_name
