"""
Lightweight configuration validation and loading for keysort.

Public API:
    validate_config(cfg: dict) -> dict
    validate_config_api(cfg: dict) -> (ok, errors, normalized_or_None)
    load_config(path: str | None = None) -> KeysortConfig

- Raises ConfigError with clear messages (field paths + constraints) on invalid input.
- Returns a **new** normalized dict; the input is not mutated.
- Env overrides (applied by load_config only): KEYSORT_PARALLELISM, KEYSORT_FAILURE_LOG_LEVEL.
"""
from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .engine.types import KeysortConfig
from .errors import ConfigError

__all__ = ["DEFAULTS", "CONFIG_VERSION", "validate_config", "validate_config_api", "load_config"]

CONFIG_VERSION = "v1"

# ------------------------------
# Defaults
# ------------------------------

DEFAULTS: Dict[str, Any] = {
    "version": CONFIG_VERSION,
    "prime": {
        "parallelism": 0,  # <= 0 → os.cpu_count()
        "thread_name_prefix": "keysort-prime",
    },
    "failures": {
        "log_level": "WARNING",
    },
}

ALLOWED_TOP = {"version", "prime", "failures"}
ALLOWED_PRIME = {"parallelism", "thread_name_prefix"}
ALLOWED_FAILURES = {"log_level"}
_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


# ------------------------------
# Utilities
# ------------------------------

def _ensure_dict(x: Any) -> Dict[str, Any]:
    if isinstance(x, dict):
        return dict(x)
    return {}


def _lev(a: str, b: str) -> int:
    """Tiny Levenshtein distance (edit distance) for did-you-mean suggestions."""
    la, lb = len(a), len(b)
    dp = list(range(lb + 1))
    for i, ca in enumerate(a, 1):
        prev = dp[0]
        dp[0] = i
        for j, cb in enumerate(b, 1):
            ins = dp[j] + 1
            dele = dp[j - 1] + 1
            sub = prev + (0 if ca == cb else 1)
            prev, dp[j] = dp[j], min(ins, dele, sub)
    return dp[-1]


def _suggest_key(bad: str, allowed: set[str]) -> str | None:
    """Return closest allowed key within distance ≤2, else None."""
    best_key, best_dist = None, 99
    for k in sorted(allowed):
        d = _lev(bad, k)
        if d < best_dist:
            best_key, best_dist = k, d
    return best_key if best_dist <= 2 else None


def _err(errors: List[str], path: str, msg: str) -> None:
    errors.append(f"{path} {msg}")


def _check_unknown(errors: List[str], raw: Dict[str, Any], allowed: set[str], prefix: str) -> None:
    for k in raw.keys():
        if k not in allowed:
            sug = _suggest_key(str(k), allowed)
            hint = f" (did you mean '{sug}')" if sug else ""
            _err(errors, f"{prefix}{k}", f"unknown key{hint}")


# ------------------------------
# Main validator
# ------------------------------

def _validate_config_normalize_impl(cfg: Dict[str, Any]) -> Dict[str, Any]:
    cfg_in = _ensure_dict(cfg)
    errors: List[str] = []

    raw_prime = _ensure_dict(cfg_in.get("prime"))
    raw_failures = _ensure_dict(cfg_in.get("failures"))

    _check_unknown(errors, cfg_in, ALLOWED_TOP, "")
    _check_unknown(errors, raw_prime, ALLOWED_PRIME, "prime.")
    _check_unknown(errors, raw_failures, ALLOWED_FAILURES, "failures.")

    for section in ("prime", "failures"):
        if section in cfg_in and cfg_in[section] is not None and not isinstance(cfg_in[section], dict):
            _err(errors, section, "must be a mapping")

    version = cfg_in.get("version", CONFIG_VERSION)
    if version != CONFIG_VERSION:
        _err(errors, "version", f"must be '{CONFIG_VERSION}' (got {version!r})")

    prime = dict(DEFAULTS["prime"])
    if "parallelism" in raw_prime:
        v = raw_prime["parallelism"]
        if isinstance(v, bool) or (isinstance(v, float) and not v.is_integer()):
            _err(errors, "prime.parallelism", "must be an integer")
        else:
            try:
                # negative means "auto", same as 0
                prime["parallelism"] = max(0, int(v))
            except (TypeError, ValueError):
                _err(errors, "prime.parallelism", "must be an integer")
    if "thread_name_prefix" in raw_prime:
        v = raw_prime["thread_name_prefix"]
        if not isinstance(v, str) or not v.strip():
            _err(errors, "prime.thread_name_prefix", "must be a non-empty string")
        else:
            prime["thread_name_prefix"] = v.strip()

    failures = dict(DEFAULTS["failures"])
    if "log_level" in raw_failures:
        v = str(raw_failures["log_level"]).strip().upper()
        if v not in _ALLOWED_LOG_LEVELS:
            _err(errors, "failures.log_level", f"must be one of {sorted(_ALLOWED_LOG_LEVELS)}")
        else:
            failures["log_level"] = v

    if errors:
        raise ConfigError("\n".join(errors))

    return {"version": CONFIG_VERSION, "prime": prime, "failures": failures}


def validate_config_api(cfg: Dict[str, Any]) -> Tuple[bool, List[str], Optional[Dict[str, Any]]]:
    """Non-raising form: (True, [], normalized) or (False, [messages...], None)."""
    try:
        return True, [], _validate_config_normalize_impl(cfg)
    except ConfigError as e:
        msg = str(e).strip()
        errs = msg.split("\n") if msg else ["invalid configuration"]
        return False, errs, None


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Return the normalized dict or raise ConfigError listing every problem."""
    return _validate_config_normalize_impl(cfg)


# ------------------------------
# Loader
# ------------------------------

def _apply_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = {k: (dict(v) if isinstance(v, dict) else v) for k, v in cfg.items()}
    par = os.getenv("KEYSORT_PARALLELISM")
    if par is not None and par.strip():
        if out.get("prime") is None:
            out["prime"] = {}
        if isinstance(out["prime"], dict):
            out["prime"]["parallelism"] = par.strip()
    lvl = os.getenv("KEYSORT_FAILURE_LOG_LEVEL")
    if lvl is not None and lvl.strip():
        if out.get("failures") is None:
            out["failures"] = {}
        if isinstance(out["failures"], dict):
            out["failures"]["log_level"] = lvl.strip()
    return out


def load_config(path: str | None = None) -> KeysortConfig:
    """
    Load a YAML config if a path is given; otherwise start from defaults.
    Env overrides are applied before validation, so a bad env value raises ConfigError too.
    """
    raw: Dict[str, Any] = {}
    if path:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"cannot read config {path!r}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {path!r}: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top-level must be a mapping")
        raw = data

    normalized = validate_config(_apply_env_overrides(raw))
    return KeysortConfig(
        parallelism=int(normalized["prime"]["parallelism"]),
        thread_name_prefix=str(normalized["prime"]["thread_name_prefix"]),
        failure_log_level=str(normalized["failures"]["log_level"]),
    )
