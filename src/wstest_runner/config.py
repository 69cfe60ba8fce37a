"""Runner settings and starter suite configuration files."""

from __future__ import annotations

import json
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional


SETTINGS_FILENAME = "wstest_runner.json"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "docker_binary": "docker",
    "image": "crossbario/autobahn-testsuite",
    "container_name": "ws-testsuite",
    "network": "host",
    "interactive": True,
    "remove": True,
    "config_dir": "config",
    "reports_dir": "reports",
}

# Starter files for wstest, following the layout documented by Autobahn.
# "outdir" is resolved inside the container, where reports/ is mounted at /reports.
DEFAULT_SUITE_CONFIGS: Dict[str, Dict[str, Any]] = {
    "client": {
        "outdir": "./reports/servers",
        "servers": [
            {
                "agent": "websocket-server",
                "url": "ws://127.0.0.1:9001",
            }
        ],
        "cases": ["*"],
        "exclude-cases": [],
        "exclude-agent-cases": {},
    },
    "server": {
        "url": "ws://127.0.0.1:9001",
        "outdir": "./reports/clients",
        "cases": ["*"],
        "exclude-cases": [],
        "exclude-agent-cases": {},
    },
}


def expand_env_values(obj: Any) -> Any:
    """Expand environment variables (e.g. ${HOME}) in string values."""
    if isinstance(obj, dict):
        return {key: expand_env_values(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [expand_env_values(item) for item in obj]
    if isinstance(obj, str):
        return os.path.expandvars(obj)
    return obj


def read_json_file(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def write_json_file(path: Path, data: Dict[str, Any], pretty: bool = True) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        if pretty:
            json.dump(data, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
        else:
            json.dump(data, handle, ensure_ascii=False)


def resolve_settings_path(cli_settings: Optional[str], cwd: Optional[Path] = None) -> Optional[Path]:
    """
    Resolve the settings file with the following precedence:
    1) --settings path passed by user
    2) wstest_runner.json in the working directory
    Returns None when neither applies; defaults are used then.
    """
    if cli_settings:
        return Path(cli_settings).expanduser()
    candidate = (cwd or Path.cwd()) / SETTINGS_FILENAME
    if candidate.exists():
        return candidate
    return None


def load_settings(settings_path: Optional[Path]) -> Dict[str, Any]:
    """Load runner settings merged over DEFAULT_SETTINGS."""
    if settings_path is None:
        return deepcopy(DEFAULT_SETTINGS)
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")
    user_settings = read_json_file(settings_path)
    if not isinstance(user_settings, dict):
        raise ValueError(f"Settings file must contain a JSON object: {settings_path}")
    unknown = sorted(set(user_settings) - set(DEFAULT_SETTINGS))
    if unknown:
        raise ValueError(f"Unknown settings keys: {', '.join(unknown)}")
    settings = deepcopy(DEFAULT_SETTINGS)
    for key, value in expand_env_values(user_settings).items():
        expected = type(DEFAULT_SETTINGS[key])
        if type(value) is not expected:
            raise ValueError(
                f"Setting {key!r} must be of type {expected.__name__}, got {value!r}"
            )
        settings[key] = value
    return settings


def write_default_suite_config(config_path: Path, suite: str) -> None:
    """Write a starter wstest config for the given suite."""
    write_json_file(config_path, DEFAULT_SUITE_CONFIGS[suite], pretty=True)
