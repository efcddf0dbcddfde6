"""Configuration loading for the reminder host."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path


_TRUE_VALUES = {"1", "true", "yes", "on", "y"}
_FALSE_VALUES = {"0", "false", "no", "off", "n"}


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Runtime configuration for the reminder host."""

    data_dir: str = ".whattodo_data"
    poll_interval_minutes: float = 5.0
    enable_timers: bool = True
    enable_bell: bool = False
    seed: int | None = None
    timezone: str | None = None
    env_file: str = ".env"


def load_app_config(env_file: str = ".env") -> AppConfig:
    """Load app config from env file with safe parsing defaults."""

    env = _parse_env_file(env_file)

    data_dir = env.get("WHATTODO_DATA_DIR", ".whattodo_data").strip() or ".whattodo_data"
    poll_interval_minutes = _env_float(env, "WHATTODO_POLL_MINUTES", default=5.0, minimum=0.01)
    enable_timers = _env_bool(env, "WHATTODO_ENABLE_TIMERS", default=True)
    enable_bell = _env_bool(env, "WHATTODO_BELL", default=False)
    seed = _env_opt_int(env, "WHATTODO_SEED", default=None)
    timezone = env.get("WHATTODO_TIMEZONE", "").strip() or None

    return AppConfig(
        data_dir=data_dir,
        poll_interval_minutes=poll_interval_minutes,
        enable_timers=enable_timers,
        enable_bell=enable_bell,
        seed=seed,
        timezone=timezone,
        env_file=env_file,
    )


def _warn_env(msg: str) -> None:
    print(f"Warning: {msg}", file=sys.stderr)


def _parse_env_file(path: str) -> dict[str, str]:
    env_path = Path(path)
    if not env_path.exists():
        return {}

    env: dict[str, str] = {}
    for lineno, line in enumerate(env_path.read_text(encoding="utf-8").splitlines(), start=1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        if text.startswith("export "):
            text = text[7:].strip()
        if "=" not in text:
            _warn_env(f"Ignoring invalid env line {lineno} in {path!r}: {line!r}")
            continue

        key, value = text.split("=", 1)
        key = key.strip()
        value = value.strip()

        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]

        if key:
            env[key] = value

    return env


def _env_float(env: dict[str, str], key: str, default: float, minimum: float) -> float:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        parsed = float(raw)
    except ValueError:
        _warn_env(f"{key} must be a number, got {raw!r}. Using {default}.")
        return default
    if parsed < minimum:
        _warn_env(f"{key} must be >= {minimum}, got {parsed}. Using {default}.")
        return default
    return parsed


def _env_opt_int(env: dict[str, str], key: str, default: int | None) -> int | None:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        _warn_env(f"{key} must be an integer, got {raw!r}. Using {default}.")
        return default


def _env_bool(env: dict[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw == "":
        return default

    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    _warn_env(f"{key} must be a boolean, got {raw!r}. Using {default}.")
    return default
