"""Error kinds raised while loading, transforming and writing lock graphs."""

from __future__ import annotations

from typing import Sequence


class AllfollowError(RuntimeError):
    """Base class for every fatal, user-facing failure."""


class SchemaVersionUnsupported(AllfollowError):
    def __init__(self, version: int, *, minimum: int, maximum: int) -> None:
        super().__init__(
            "This program supports lock files between schema versions "
            f"{minimum} and {maximum} while the flake you have asked to modify "
            f"is of version {version}."
        )
        self.version = version
        self.minimum = minimum
        self.maximum = maximum


class MalformedInput(AllfollowError):
    """The lock payload does not have the expected shape.

    ``path`` locates the offending member, e.g. ``("nodes", "foo", "inputs")``.
    """

    def __init__(self, reason: str, *, path: Sequence[str | int] = ()) -> None:
        self.path = tuple(path)
        self.reason = reason
        location = ".".join(str(part) for part in self.path)
        if location:
            super().__init__(f"{location}: {reason}")
        else:
            super().__init__(reason)


class DanglingReference(AllfollowError):
    def __init__(self, index: str) -> None:
        super().__init__(f"edge references node '{index}' which does not exist")
        self.index = index


class UnresolvableFollowsPath(AllfollowError):
    def __init__(self, path: Sequence[str], *, hop: str, at_node: str) -> None:
        rendered = "/".join(path)
        super().__init__(
            f"follows path '{rendered}' cannot be resolved: "
            f"node '{at_node}' has no usable input '{hop}'"
        )
        self.path = tuple(path)
        self.hop = hop
        self.at_node = at_node


class CyclicReference(AllfollowError):
    def __init__(self, cycle: Sequence[str]) -> None:
        super().__init__(
            "lock graph contains a reference cycle: " + " -> ".join(cycle)
        )
        self.cycle = tuple(cycle)


class OutputAlreadyExists(AllfollowError):
    def __init__(self, path: object) -> None:
        super().__init__(
            f"output file '{path}' already exists (pass --force to overwrite)"
        )
        self.path = path


class InputUnreadable(AllfollowError):
    pass


class ManifestMarkersMissing(AllfollowError):
    pass


class ManifestMarkersOutOfOrder(AllfollowError):
    pass


class NeverThrown(RuntimeError):
    """Raised by ``allfollow.invariants.never`` when an unreachable path runs."""

    def __init__(self, message: str, *, env: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.env = dict(env or {})
