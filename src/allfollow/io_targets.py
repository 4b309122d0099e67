"""Input and output stream selection: a path, or ``-`` for stdin/stdout."""

from __future__ import annotations

import os
import shutil
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path

import typer

from allfollow.exceptions import InputUnreadable, OutputAlreadyExists

STDIO_ALIAS = "-"
DEFAULT_LOCK_PATH = Path("./flake.lock")


def write_text_atomic(path: Path, text: str) -> None:
    """Write through a temporary sibling file so readers never see half a file.

    Symlinks are followed: the file they point at is replaced, the link stays.
    """
    path = Path(os.path.realpath(path))
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


@dataclass(frozen=True)
class InputSource:
    path: Path | None = None

    @classmethod
    def parse(cls, value: str | Path) -> "InputSource":
        if str(value) == STDIO_ALIAS:
            return cls(None)
        return cls(Path(value))

    def read_text(self) -> str:
        try:
            if self.path is None:
                return sys.stdin.read()
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeError) as exc:
            raise InputUnreadable(f"Failed to read the input file: {exc}") from exc


@dataclass(frozen=True)
class OutputTarget:
    path: Path | None = None

    @classmethod
    def parse(cls, value: str | Path | None) -> "OutputTarget":
        if value is None or str(value) == STDIO_ALIAS:
            return cls(None)
        return cls(Path(value))

    @classmethod
    def from_input(cls, source: InputSource) -> "OutputTarget":
        return cls(source.path)

    def check_writable(self, *, overwrite: bool) -> None:
        if self.path is not None and not overwrite and self.path.exists():
            raise OutputAlreadyExists(self.path)

    def write_text(self, text: str, *, overwrite: bool) -> None:
        if self.path is None:
            typer.echo(text, nl=False)
            return
        self.check_writable(overwrite=overwrite)
        write_text_atomic(self.path, text)
