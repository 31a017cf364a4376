from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from pydantic import ValidationError

from gcassert.exceptions import ConfigError
from gcassert.schema import CompilerSettings

DEFAULT_CONFIG_NAME = "gcassert.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    elif not config_path.is_file():
        raise ConfigError(f"config file {config_path} does not exist")
    return _load_toml(config_path)


def compiler_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("compiler", {})
    return section if isinstance(section, dict) else {}


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def load_compiler_settings(
    root: Path | None = None,
    config_path: Path | None = None,
    *,
    overrides: TomlTable | None = None,
) -> CompilerSettings:
    payload = merge_payload(overrides or {}, compiler_defaults(root=root, config_path=config_path))
    try:
        return CompilerSettings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid [compiler] configuration: {exc}") from exc
