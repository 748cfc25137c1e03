from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

import yaml
from dotenv import load_dotenv

CONFIG_ENV_VAR = "AITOOLS_CONFIG"


def load_env_file(path: str | os.PathLike[str] | None = None) -> bool:
    """Load a `.env` file into the process environment without overriding set values."""
    if path is None:
        return load_dotenv(override=False)
    return load_dotenv(path, override=False)


def _load_yaml_mapping(path: str) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except FileNotFoundError:
        raise
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Config file must contain a YAML mapping: {path}")
    return dict(payload)


def _deep_merge(base: Any, overlay: Any, *, path: str) -> Any:
    if overlay is None:
        return None

    if base is None:
        return overlay

    if isinstance(base, Mapping):
        if not isinstance(overlay, Mapping):
            raise ValueError(
                f"Invalid config overlay merge at {path}: base is mapping but overlay is {type(overlay).__name__}"
            )
        merged: dict[str, Any] = dict(base)
        for key, overlay_value in overlay.items():
            next_path = f"{path}.{key}" if path else str(key)
            if key in base:
                merged[key] = _deep_merge(base[key], overlay_value, path=next_path)
            else:
                merged[key] = overlay_value
        return merged

    if isinstance(base, (list, tuple)):
        if not isinstance(overlay, (list, tuple)):
            raise ValueError(
                f"Invalid config overlay merge at {path}: base is list but overlay is {type(overlay).__name__}"
            )
        return list(overlay)

    if isinstance(overlay, (Mapping, list, tuple)):
        raise ValueError(
            f"Invalid config overlay merge at {path}: base is {type(base).__name__} but overlay is {type(overlay).__name__}"
        )

    return overlay


def load_config(
    *,
    config_path: str | os.PathLike[str] | None = None,
    base_dir: str | os.PathLike[str] | None = None,
    env_var: str = CONFIG_ENV_VAR,
    config_rel_path: str = "config",
    config_name: str = "config",
    config_type: str = ".yaml",
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Load tool settings from YAML.

    Resolution order:
      1) explicit `config_path` (single file, no overlay)
      2) the `AITOOLS_CONFIG` environment variable (single file, no overlay)
      3) `<base_dir>/config/config.yaml` deep-merged with `config.local.yaml`
      4) nothing found: an empty mapping, i.e. built-in defaults

    Returns (cfg, meta) where meta describes which files were used.
    """

    explicit_path = None
    if config_path is not None:
        explicit_path = str(config_path).strip() or None
    elif env_var:
        raw_env = os.environ.get(str(env_var), "")
        explicit_path = raw_env.strip() or None

    if explicit_path:
        expanded = os.path.abspath(os.path.expandvars(os.path.expanduser(explicit_path)))
        cfg = _load_yaml_mapping(expanded)
        meta = {
            "mode": "env" if config_path is None else "explicit",
            "paths": [expanded],
            "env_var": env_var,
        }
        return cfg, meta

    root = os.path.abspath(str(base_dir)) if base_dir is not None else os.getcwd()
    config_directory = os.path.join(root, config_rel_path)
    base_config_path = os.path.join(config_directory, config_name + config_type)
    local_overlay_path = os.path.join(config_directory, f"{config_name}.local{config_type}")

    if not os.path.exists(base_config_path):
        return {}, {"mode": "defaults", "paths": [], "env_var": env_var}

    cfg = _load_yaml_mapping(base_config_path)
    loaded_paths = [os.path.abspath(base_config_path)]
    mode = "base"

    if os.path.exists(local_overlay_path):
        overlay = _load_yaml_mapping(local_overlay_path)
        cfg = _deep_merge(cfg, overlay, path="")
        loaded_paths.append(os.path.abspath(local_overlay_path))
        mode = "base+local"

    return cfg, {"mode": mode, "paths": loaded_paths, "env_var": env_var}
