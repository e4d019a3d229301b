import json
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from projectforge.executor.types import Severity

from .types import ConfigError, Settings, UnsupportedConfigFormatError

DEFAULT_CONFIG_NAMES = (
    "projectforge.yml",
    "projectforge.yaml",
    "projectforge.toml",
    "projectforge.json",
)

_STRING_FIELDS = {
    "github_owner",
    "aws_region",
    "aws_profile",
    "terraform_organization",
    "database_host",
    "author",
    "license",
}


def find_settings_file(directory: str | Path = ".") -> Path | None:
    base = Path(directory).expanduser().resolve()
    for name in DEFAULT_CONFIG_NAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from ``path``, or from a default file in the cwd.

    An explicit path must exist. Without one, a missing default file yields
    default settings.
    """
    if path is None:
        found = find_settings_file()
        if found is None:
            return Settings()
        path = found

    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    return _build_settings(raw_file)


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    match fmt:
        case "yaml":
            return _parse_yaml(path)
        case "toml":
            return _parse_toml(path)
        case "json":
            return _parse_json(path)
        case _:
            raise AssertionError("Unreachable")


def _parse_yaml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML") from exc

    # An empty YAML document is a valid, empty configuration.
    if raw_file is None:
        return {}

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: YAML parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _parse_toml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML") from exc

    return raw_file


def _parse_json(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: JSON parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_settings(raw: Mapping[str, Any]) -> Settings:
    keys = _STRING_FIELDS | {"database_port", "poll_delay", "poll_timeout", "severity"}
    settings = Settings()

    for key in raw.keys():
        if key not in keys:
            raise ConfigError(f"Can't process: {key}")

    for key in sorted(_STRING_FIELDS & set(raw)):
        value = raw[key]
        if not isinstance(value, str):
            raise ConfigError(f"'{key}' should be a string")
        if len(value.strip()) < 1:
            raise ConfigError(f"'{key}': Please provide a string or remove this field")
        setattr(settings, key, value.strip())

    if "database_port" in raw:
        port = raw["database_port"]
        if isinstance(port, bool) or not isinstance(port, int):
            raise ConfigError("'database_port' should be an integer")
        if not 0 < port < 65536:
            raise ConfigError(f"'database_port' out of range: {port}")
        settings.database_port = port

    if "poll_delay" in raw:
        settings.poll_delay = _seconds("poll_delay", raw["poll_delay"])
        if settings.poll_delay <= 0:
            raise ConfigError("'poll_delay' must be positive")

    if "poll_timeout" in raw:
        # null disables the bound and polls until a terminal status.
        if raw["poll_timeout"] is None:
            settings.poll_timeout = None
        else:
            settings.poll_timeout = _seconds("poll_timeout", raw["poll_timeout"])

    if "severity" in raw:
        settings.severity = _build_severity(raw["severity"])

    return settings


def _seconds(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{key}' should be a number of seconds")
    if value < 0:
        raise ConfigError(f"'{key}' can't be negative")
    return float(value)


def _build_severity(raw: Any) -> dict[str, Severity]:
    if not isinstance(raw, Mapping):
        raise ConfigError(f"'severity' must be a mapping, got {type(raw)}")

    severity = {}
    for title, level in raw.items():
        if not isinstance(title, str) or len(title.strip()) < 1:
            raise ConfigError("A severity key must be a non-empty task title")
        if not isinstance(level, str):
            raise ConfigError(f"{title}: severity should be a string")
        try:
            severity[title.strip()] = Severity(level.strip().lower())
        except ValueError:
            raise ConfigError(
                f"{title}: unknown severity '{level}', expected 'fatal' or 'advisory'"
            ) from None

    return severity
