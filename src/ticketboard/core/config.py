"""3-layer configuration system for Ticket Board.

Loads and merges configuration from:
1. Default settings (built-in)
2. Workspace config (.ticketboard/config.yaml)
3. CLI parameters (override)
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional

import yaml

from .. import __version__

WORKSPACE_DIR = ".ticketboard"

DEFAULT_CONFIG: dict = {
    "backend": {
        "url": "http://localhost:5000",
        "timeout_seconds": 30,
    },
    "source": {
        "kind": "http",
        "fixture_path": "",
    },
    "refresh": {
        "interval_ms": 300000,
        "carousel_ms": 5000,
        "page_rotation_ms": 10000,
        "discard_stale_responses": False,
    },
    "display": {
        "page_size": 15,
        "ticket_number_width": 5,
        "legend_width": 3,
        "stagger_ms": 65,
    },
    "cache": {
        "directory": "",
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = {}
    for key in base:
        result[key] = base[key]
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def load_workspace_config(workspace_path: Path) -> dict:
    """Load workspace configuration from .ticketboard/config.yaml."""
    config_path = workspace_path / WORKSPACE_DIR / "config.yaml"
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        data = yaml.safe_load(content) or {}
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def resolve_cache_dir(config: dict, workspace_path: Path) -> Path:
    """Cache directory from config, relative paths anchored at the workspace."""
    configured = (config.get("cache") or {}).get("directory") or ""
    if not configured:
        return workspace_path / WORKSPACE_DIR / "cache"
    path = Path(configured).expanduser()
    return path if path.is_absolute() else workspace_path / path


def get_effective_config(
    workspace_path: Path,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """Get the fully resolved configuration for a dashboard run."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    workspace_config = load_workspace_config(workspace_path)
    if workspace_config:
        config = deep_merge(config, workspace_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    config["_workspace_path"] = str(workspace_path)
    config["_cache_dir"] = str(resolve_cache_dir(config, workspace_path))

    return config


def initialize_workspace(workspace_path: Path) -> Path:
    """Create the .ticketboard directory with a starter config. Returns the config path."""
    tb_dir = workspace_path / WORKSPACE_DIR
    (tb_dir / "cache").mkdir(parents=True, exist_ok=True)

    config_path = tb_dir / "config.yaml"
    if not config_path.exists():
        config_path.write_text(
            "# Ticket Board workspace configuration\n"
            "\n"
            f"ticketboard_version: \"{__version__}\"\n"
            "\n"
            "backend:\n"
            f"  url: \"{DEFAULT_CONFIG['backend']['url']}\"\n"
            "\n"
            "refresh:\n"
            f"  interval_ms: {DEFAULT_CONFIG['refresh']['interval_ms']}\n",
            encoding="utf-8",
        )
    return config_path
