# -*- coding: utf-8 -*-

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

# --- DEFAULTS ---
DEFAULT_DB_PATH = "focus_timer.db"
DEFAULT_DURATION_SEC = 25 * 60
DEFAULT_TICK_MS = 250  # must stay under a second for a smooth display
DEFAULT_LOG_LEVEL = "INFO"

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off", "")


def _int_var(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _bool_var(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass(frozen=True)
class AppConfig:
    db_path: str = DEFAULT_DB_PATH
    duration_sec: int = DEFAULT_DURATION_SEC
    tick_ms: int = DEFAULT_TICK_MS
    catch_up: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        if self.duration_sec < 0:
            raise ValueError(f"FOCUS_TIMER_DURATION must be >= 0, got {self.duration_sec}")
        if not 0 < self.tick_ms < 1000:
            raise ValueError(f"FOCUS_TIMER_TICK_MS must be in 1..999, got {self.tick_ms}")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"FOCUS_TIMER_LOG_LEVEL is not a logging level, got {self.log_level!r}")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if env is None else env
        return cls(
            db_path=env.get("FOCUS_TIMER_DB", DEFAULT_DB_PATH),
            duration_sec=_int_var(env, "FOCUS_TIMER_DURATION", DEFAULT_DURATION_SEC),
            tick_ms=_int_var(env, "FOCUS_TIMER_TICK_MS", DEFAULT_TICK_MS),
            catch_up=_bool_var(env, "FOCUS_TIMER_CATCH_UP", False),
            log_level=env.get("FOCUS_TIMER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )
