"""Load ThoughtsConfig from thoughts.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from thoughts._errors import ConfigError
from thoughts.config import ThoughtsConfig

_KNOWN_KEYS = frozenset({
    "repo", "title", "host", "port", "use_cache", "cache_dir", "api_url",
    "branch", "sync_interval", "request_timeout", "shutdown_grace",
    "templates_dir", "user_agent",
})


def load_config(root: Path, **overrides: object) -> ThoughtsConfig:
    """Load ThoughtsConfig from root, optionally merging thoughts.yaml.

    Looks for thoughts.yaml, thoughts.yml, or thoughts.toml in root. If found,
    loads and merges with overrides. Overrides take precedence; an override
    of ``None`` means "not given" and leaves the file value in place.

    Raises:
        ConfigError: If a config file exists but cannot be parsed, or
            names a key ThoughtsConfig does not know.

    """
    file_config = _read_thoughts_config(root)
    given = {k: v for k, v in overrides.items() if v is not None}
    merged = {**file_config, **given}
    unknown = sorted(set(merged) - _KNOWN_KEYS)
    if unknown:
        msg = f"Unknown config keys: {', '.join(unknown)}"
        raise ConfigError(msg)
    return ThoughtsConfig(root=root, **merged)


def _read_thoughts_config(root: Path) -> dict[str, object]:
    """Read thoughts config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("thoughts.yaml", "thoughts.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "thoughts.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config."""
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping"
        raise ConfigError(msg)
    return _flatten_thoughts_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config."""
    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_thoughts_section(data)


def _flatten_thoughts_section(data: dict[str, object]) -> dict[str, object]:
    """Extract thoughts.* keys into top-level config."""
    result: dict[str, object] = {}
    section = data.get("thoughts")
    if isinstance(section, dict):
        for k, v in section.items():
            result[k] = v
    for k, v in data.items():
        if k != "thoughts" and k in _KNOWN_KEYS:
            result[k] = v
    return result
