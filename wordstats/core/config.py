from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from wordstats.core.errors import ConfigError

DEFAULT_TIMEOUT: float = 30.0
DEFAULT_DICTIONARY_PATH: str = "english.txt"

# Environment variable -> config key
_ENV_KEYS: Dict[str, str] = {
    "WS_TIMEOUT": "timeout",
    "WS_MAX_WORKERS": "max_workers",
    "WS_DICTIONARY": "dictionary_path",
}


def load_config_file(path: Optional[str | Path]) -> Dict[str, Any]:
    """Load a YAML or JSON config file into a dict; a missing file yields ``{}``."""
    if not path:
        return {}
    p = Path(path)
    if not p.exists():
        return {}

    with p.open("r", encoding="utf-8") as f:
        try:
            if p.suffix.lower() in (".yml", ".yaml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f) or {}
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"cannot parse {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{p} must contain a mapping at top level")
    return data


def load_env() -> Dict[str, Any]:
    """Collect ``WS_*`` overrides from the environment."""
    out: Dict[str, Any] = {}
    for env_name, key in _ENV_KEYS.items():
        v = os.getenv(env_name)
        if v is not None and v.strip() != "":
            out[key] = v.strip()
    return out


def merge_config(*layers: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Merge config layers left to right; ``None`` values never override."""
    merged: Dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for k, v in layer.items():
            if v is not None:
                merged[k] = v
    return merged


@dataclass(frozen=True)
class AppConfig:
    timeout: Optional[float] = DEFAULT_TIMEOUT
    max_workers: Optional[int] = None
    dictionary_path: str = DEFAULT_DICTIONARY_PATH

    @classmethod
    def from_mapping(cls, conf: Mapping[str, Any]) -> "AppConfig":
        """Validate a merged config mapping.

        ``timeout: 0`` disables socket timeouts entirely, so a hung
        connection blocks its worker forever. ``max_workers`` unset means
        one thread per input file.
        """
        timeout: Optional[float] = DEFAULT_TIMEOUT
        if conf.get("timeout") is not None:
            try:
                timeout = float(conf["timeout"])
            except (TypeError, ValueError) as e:
                raise ConfigError(f"timeout must be a number, got {conf['timeout']!r}") from e
            if timeout < 0:
                raise ConfigError("timeout must not be negative")
            if timeout == 0:
                timeout = None

        max_workers: Optional[int] = None
        if conf.get("max_workers") is not None:
            try:
                max_workers = int(conf["max_workers"])
            except (TypeError, ValueError) as e:
                raise ConfigError(
                    f"max_workers must be an integer, got {conf['max_workers']!r}"
                ) from e
            if max_workers < 1:
                raise ConfigError("max_workers must be at least 1")

        dictionary_path = str(conf.get("dictionary_path") or DEFAULT_DICTIONARY_PATH)
        return cls(timeout=timeout, max_workers=max_workers, dictionary_path=dictionary_path)


def load_app_config(
    config_path: Optional[str | Path] = None, overrides: Optional[Mapping[str, Any]] = None
) -> AppConfig:
    """File, then ``WS_*`` env, then explicit overrides (usually CLI options)."""
    return AppConfig.from_mapping(
        merge_config(load_config_file(config_path), load_env(), overrides)
    )
