"""Configuration loader for familychart_py.

Behavior:
- Load defaults.
- If environment variable `FAMILYCHART_CONFIG` is set, load that JSON file and merge.
- Environment variables override file values (FAMILYCHART_TRANSITION_TIME,
  FAMILYCHART_ANCESTRY_DEPTH, FAMILYCHART_PROGENY_DEPTH,
  FAMILYCHART_SHOW_SIBLINGS, FAMILYCHART_LOG_LEVEL) unless a config path was
  passed explicitly.
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import os
import json
import logging
from typing import Any, Optional


@dataclass
class Config:
    transition_time: float = 2000.0
    ancestry_depth: Optional[int] = None
    progeny_depth: Optional[int] = None
    show_siblings_of_main: bool = False
    log_level: str = "WARNING"


def _load_json_file(path: Path) -> Optional[dict]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        logging.warning("config: could not read %s; using defaults", path)
        return None


def _opt_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from (1) defaults, (2) JSON file, (3) env vars.

    :param config_path: optional path to a JSON config file. If not provided
                        the environment variable `FAMILYCHART_CONFIG` is used.
    """
    cfg = Config()

    cp = config_path or os.environ.get("FAMILYCHART_CONFIG")
    if cp:
        data = _load_json_file(Path(cp))
        if isinstance(data, dict):
            if "transition_time" in data:
                cfg.transition_time = float(data["transition_time"])
            if "ancestry_depth" in data:
                cfg.ancestry_depth = _opt_int(data["ancestry_depth"])
            if "progeny_depth" in data:
                cfg.progeny_depth = _opt_int(data["progeny_depth"])
            if "show_siblings_of_main" in data:
                cfg.show_siblings_of_main = _as_bool(data["show_siblings_of_main"])
            if data.get("log_level"):
                cfg.log_level = str(data["log_level"]).upper()

    # an explicit config_path is authoritative; env vars only apply otherwise
    if config_path is None:
        env = os.environ
        if env.get("FAMILYCHART_TRANSITION_TIME"):
            cfg.transition_time = float(env["FAMILYCHART_TRANSITION_TIME"])
        if env.get("FAMILYCHART_ANCESTRY_DEPTH"):
            cfg.ancestry_depth = _opt_int(env["FAMILYCHART_ANCESTRY_DEPTH"])
        if env.get("FAMILYCHART_PROGENY_DEPTH"):
            cfg.progeny_depth = _opt_int(env["FAMILYCHART_PROGENY_DEPTH"])
        if env.get("FAMILYCHART_SHOW_SIBLINGS"):
            cfg.show_siblings_of_main = _as_bool(env["FAMILYCHART_SHOW_SIBLINGS"])
        if env.get("FAMILYCHART_LOG_LEVEL"):
            cfg.log_level = env["FAMILYCHART_LOG_LEVEL"].upper()

    return cfg
