"""
addmul.config
=============

Module-wide defaults.  Keyword arguments of the public functions win over
CONFIG; CONFIG is seeded from the environment at import time:

    ADDMUL_MAX_DEPTH   descent level cap
    ADDMUL_WORD_BITS   signed word width to check against ("none" = unbounded)
    ADDMUL_N_JOBS      joblib workers for outer / matrix products
"""
from __future__ import annotations
import os
from pathlib import Path
from typing import Dict

import yaml

__all__ = ["CONFIG", "DEFAULTS", "load_config"]

# ───────────────────────── CONFIG ────────────────────────────────────
DEFAULTS: Dict = dict(
    MAX_DEPTH = 4096,
    WORD_BITS = None,       # None → Python ints, no overflow class
    N_JOBS    = 1,
)


def _parse_word_bits(raw):
    if raw is None or str(raw).strip().lower() in ("", "none", "null"):
        return None
    bits = int(raw)
    if bits < 2:
        raise ValueError("WORD_BITS must be >= 2 or None")
    return bits


def _validate(cfg: Dict) -> Dict:
    unknown = set(cfg) - set(DEFAULTS)
    if unknown:
        raise ValueError(f"unknown config keys: {sorted(unknown)}")
    cfg = dict(cfg)
    cfg["MAX_DEPTH"] = int(cfg["MAX_DEPTH"])
    if cfg["MAX_DEPTH"] < 0:
        raise ValueError("MAX_DEPTH must be >= 0")
    cfg["WORD_BITS"] = _parse_word_bits(cfg["WORD_BITS"])
    cfg["N_JOBS"] = int(cfg["N_JOBS"])
    if cfg["N_JOBS"] == 0:
        raise ValueError("N_JOBS must be non-zero (joblib: -1 = all cores)")
    return cfg


def _from_env(environ=os.environ) -> Dict:
    cfg = dict(DEFAULTS)
    for key in DEFAULTS:
        raw = environ.get(f"ADDMUL_{key}")
        if raw is not None:
            cfg[key] = raw
    return _validate(cfg)


def load_config(path) -> Dict:
    """
    Read a YAML mapping and merge it over DEFAULTS.  Returns a new dict;
    use ``CONFIG.update(load_config(p))`` to make it global.
    """
    data = yaml.safe_load(Path(path).read_text()) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a YAML mapping")
    cfg = dict(DEFAULTS)
    cfg.update({str(k).upper(): v for k, v in data.items()})
    return _validate(cfg)


CONFIG: Dict = _from_env()
