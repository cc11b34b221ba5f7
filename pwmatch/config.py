# pwmatch/config.py
"""
Simple settings persistence for pwmatch.
Settings saved as JSON in %APPDATA%/PwMatch/config.json (Windows) or ~/.pwmatch/config.json (fallback).
The PWMATCH_CONFIG environment variable points at another file.

Keys:
  dictionaries: {tag: path to a word list}, merged over the built-in lists
  user_inputs:  words always matched as the user_inputs dictionary
"""

import copy
import os
import json
import logging
from typing import Dict, Any

from .frequency_lists import RankedDicts, default_ranked_dicts, load_ranked_dict

_LOGGER = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "dictionaries": {},
    "user_inputs": [],
}

def _appdata_dir() -> str:
    appdata = os.getenv("APPDATA")
    if appdata:
        return os.path.join(appdata, "PwMatch")
    return os.path.join(os.path.expanduser("~"), ".pwmatch")

def config_path() -> str:
    override = os.getenv("PWMATCH_CONFIG")
    if override:
        return override
    return os.path.join(_appdata_dir(), "config.json")

def _defaults() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULTS)

def load_config() -> Dict[str, Any]:
    p = config_path()
    if not os.path.exists(p):
        return _defaults()
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        _LOGGER.warning("ignoring unreadable config %s: %s", p, e)
        return _defaults()
    if not isinstance(data, dict):
        _LOGGER.warning("ignoring config %s: expected a JSON object", p)
        return _defaults()
    # merge defaults
    out = _defaults()
    out.update(data)
    return out

def save_config(cfg: Dict[str, Any]) -> None:
    p = config_path()
    d = os.path.dirname(p)
    if d:
        os.makedirs(d, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2)

def ranked_dicts_from_config(cfg: Dict[str, Any]) -> RankedDicts:
    """Built-in dictionaries plus every readable word list named in cfg."""
    ranked = default_ranked_dicts()
    for tag, path in (cfg.get("dictionaries") or {}).items():
        try:
            ranked[tag] = load_ranked_dict(path)
        except (OSError, ValueError, TypeError) as e:
            _LOGGER.warning("skipping dictionary %r: %s", tag, e)
    return ranked
