# npm_runner/config.py
from __future__ import annotations
"""
Configuration loader for npm_runner.

Environment variables:
- NPM_RUNNER_TOOL_PATH=...            # explicit npm executable; skips PATH lookup
- NPM_RUNNER_EXTRA_PATH=...           # extra dirs (os.pathsep-separated) searched before PATH
- NPM_RUNNER_TIMEOUT_SEC=600          # per-process timeout; unset/0 means none
- NPM_RUNNER_IGNORE_EXIT_CODE=0       # 1 to return non-zero codes instead of raising
- NPM_RUNNER_LOG_STRUCTURED=0         # 1 for JSONL logs from the CLI

Project file:
- <package dir>/.npm-runner.json is deep-merged onto DEFAULT_CONFIG.
- <package dir>/.env, then the nearest .env at or above the current directory,
  fill in unset environment variables (see load_env_variables).

Precedence: env > project file > defaults. Explicit per-call settings always
win over all of these.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import jsonschema
from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".npm-runner.json"


def load_env_variables(project_dir: Optional[Union[str, Path]] = None) -> None:
    """
    Load .env files without clobbering existing env.

    `<project_dir>/.env` is read first, then the nearest .env at or above the
    current directory. Lookup never starts from this module's install location.
    """
    if project_dir is not None:
        candidate = Path(project_dir) / ".env"
        if candidate.is_file():
            load_dotenv(candidate, override=False)
    found = find_dotenv(usecwd=True)
    if found:
        load_dotenv(found, override=False)


DEFAULT_CONFIG: Dict[str, Any] = {
    "npm": {
        "tool_path": None,
        "extra_path": None,
        "timeout_sec": None,
        "ignore_exit_code": False,
    },
    "logging": {
        "structured": False,
        "verbose": False,
    },
}


CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "npm": {
            "type": "object",
            "properties": {
                "tool_path": {"type": ["string", "null"]},
                "extra_path": {"type": ["string", "null"]},
                "timeout_sec": {"type": ["number", "null"], "exclusiveMinimum": 0},
                "ignore_exit_code": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "logging": {
            "type": "object",
            "properties": {
                "structured": {"type": "boolean"},
                "verbose": {"type": "boolean"},
            },
        },
    },
    "additionalProperties": True,
}


def _env_str(name: str) -> Optional[str]:
    val = os.getenv(name)
    if val is None or not val.strip():
        return None
    return val.strip()


def _env_float(name: str, default: Optional[float], min_value: Optional[float] = None) -> Optional[float]:
    val = _env_str(name)
    if val is None:
        return default
    try:
        fval = float(val)
    except ValueError:
        return default
    if min_value is not None and fval <= min_value:
        return default
    return fval


def _env_bool(name: str, default: bool) -> bool:
    """Read an environment variable as a boolean with sensible string parsing.

    Accepts (case-insensitive): '1','true','yes','on' -> True; '0','false','no','off' -> False.
    If the variable is not set or the value is unrecognized, returns the provided default.
    """
    val = os.getenv(name)
    if val is None:
        return default
    v = str(val).strip().lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    return default


def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _validate(cfg: Dict[str, Any]) -> bool:
    try:
        jsonschema.validate(cfg, CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        logger.debug("config schema validation failed: %s", e.message)
        return False
    return True


def _apply_env_overrides(cfg: Dict[str, Any]) -> None:
    npm = cfg.setdefault("npm", {})
    tool_path = _env_str("NPM_RUNNER_TOOL_PATH")
    if tool_path:
        npm["tool_path"] = tool_path
    extra_path = _env_str("NPM_RUNNER_EXTRA_PATH")
    if extra_path:
        npm["extra_path"] = extra_path
    npm["timeout_sec"] = _env_float("NPM_RUNNER_TIMEOUT_SEC", npm.get("timeout_sec"), min_value=0)
    npm["ignore_exit_code"] = _env_bool("NPM_RUNNER_IGNORE_EXIT_CODE", bool(npm.get("ignore_exit_code")))

    log_cfg = cfg.setdefault("logging", {})
    log_cfg["structured"] = _env_bool("NPM_RUNNER_LOG_STRUCTURED", bool(log_cfg.get("structured")))


def load_project_config(project_root: Path) -> Tuple[Dict[str, Any], Path]:
    """
    Load `.npm-runner.json` if present, deep-merge onto defaults, then apply
    NPM_RUNNER_* env overrides. A file that is not valid JSON or fails the
    schema is ignored (defaults are used instead).
    Returns (config, path_used).
    """
    root = Path(project_root).resolve()
    path = root / CONFIG_FILENAME

    cfg = json.loads(json.dumps(DEFAULT_CONFIG))
    if path.is_file():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.debug("ignoring unreadable config %s: %s", path, e)
            data = None
        if isinstance(data, dict):
            merged = _deep_merge(cfg, data)
            if _validate(merged):
                cfg = merged

    _apply_env_overrides(cfg)
    return cfg, path


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "CONFIG_SCHEMA",
    "load_env_variables",
    "load_project_config",
]
