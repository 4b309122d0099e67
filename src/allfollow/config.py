from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from allfollow.manifest import DEFAULT_MANIFEST_NAME

DEFAULT_CONFIG_NAME = "allfollow.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def _section(data: TomlTable, name: str) -> TomlTable:
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return False


@dataclass(frozen=True)
class PruneDefaults:
    indexed: bool = False
    pretty: bool = False


@dataclass(frozen=True)
class CountDefaults:
    json: bool = False
    pretty: bool = False


@dataclass(frozen=True)
class ConfigDefaults:
    manifest: str = DEFAULT_MANIFEST_NAME


@dataclass(frozen=True)
class AllfollowConfig:
    prune: PruneDefaults = PruneDefaults()
    count: CountDefaults = CountDefaults()
    config: ConfigDefaults = ConfigDefaults()


def prune_defaults(data: TomlTable) -> PruneDefaults:
    section = _section(data, "prune")
    return PruneDefaults(
        indexed=_as_bool(section.get("indexed")),
        pretty=_as_bool(section.get("pretty")),
    )


def count_defaults(data: TomlTable) -> CountDefaults:
    section = _section(data, "count")
    return CountDefaults(
        json=_as_bool(section.get("json")),
        pretty=_as_bool(section.get("pretty")),
    )


def config_defaults(data: TomlTable) -> ConfigDefaults:
    section = _section(data, "config")
    manifest = section.get("manifest")
    if isinstance(manifest, str) and manifest.strip():
        return ConfigDefaults(manifest=manifest.strip())
    return ConfigDefaults()


def resolve_config(root: Path | None = None, config_path: Path | None = None) -> AllfollowConfig:
    data = load_config(root=root, config_path=config_path)
    return AllfollowConfig(
        prune=prune_defaults(data),
        count=count_defaults(data),
        config=config_defaults(data),
    )
