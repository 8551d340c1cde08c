import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    workers: int
    dealer_hits_soft_17: bool
    max_trials: int
    log_level: str


def _load_env_from_files() -> Dict[str, Optional[str]]:
    """
    Load variables from ``<project root>/.env`` and overlay the process
    environment, without writing anything back to ``os.environ``.
    """
    env: Dict[str, Optional[str]] = {}
    p = Path(__file__).parent / ".env"
    if p.exists():
        env.update(dotenv_values(p))
    env.update({k: v for k, v in os.environ.items() if k.startswith("BJ_")})
    return env


def _int(env, key: str, default: int, minimum: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise RuntimeError(f"{key} must be at least {minimum}, got {value}")
    return value


def _bool(env, key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise RuntimeError(f"{key} must be a boolean, got {raw!r}")


def _log_level(env, key: str, default: str) -> str:
    level = (env.get(key) or "").strip().upper() or default
    if not isinstance(logging.getLevelName(level), int):
        raise RuntimeError(f"{key} must be a logging level name, got {env.get(key)!r}")
    return level


def default_workers() -> int:
    return max(1, (os.cpu_count() or 1) - 1)


def get_settings(env: Optional[Dict[str, Optional[str]]] = None) -> Settings:
    if env is None:
        env = _load_env_from_files()
    return Settings(
        workers=_int(env, "BJ_SIM_WORKERS", default_workers(), minimum=1),
        dealer_hits_soft_17=_bool(env, "BJ_DEALER_HITS_SOFT_17", False),
        max_trials=_int(env, "BJ_MAX_TRIALS", 2_000_000, minimum=0),
        log_level=_log_level(env, "BJ_LOG_LEVEL", "INFO"),
    )
