"""Environment based configuration for the site monitor."""

import logging
import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

DEFAULT_TEMPLATE_DOWN = "🔴 {site} is down!"
DEFAULT_TEMPLATE_UP = "🟢 {site} is up again!"
DEFAULT_TEMPLATE_ALIVE = "🔵 I'm alive and well!"


class ConfigError(ValueError):
    """Raised when the environment does not describe a usable monitor."""


@dataclass(frozen=True)
class Settings:
    """Monitor configuration, read once at start-up."""

    sites: List[str]
    interval: int = 30
    nervous_interval: int = 1
    cron_alive: str = "0 9 * * 1"
    strict_down_check: bool = False
    bot_token: str = "your_telegram_bot_token"
    chat_id: str = "your_telegram_chat_id"
    template_down: str = DEFAULT_TEMPLATE_DOWN
    template_up: str = DEFAULT_TEMPLATE_UP
    template_alive: str = DEFAULT_TEMPLATE_ALIVE
    probe_timeout: float = 5.0
    log_level: str = "INFO"


def parse_sites(raw: Optional[str]) -> List[str]:
    """Split a comma separated site list, dropping blank entries."""
    if not raw:
        return []
    return [site.strip() for site in raw.split(",") if site.strip()]


def _positive_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a whole number of minutes, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {value}")
    return value


def _positive_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {value}")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (``os.environ`` by default).

    Raises ``ConfigError`` if no site is configured or a numeric value is
    invalid. Everything except ``SITES`` falls back to a default.
    """

    env = os.environ if environ is None else environ

    sites = parse_sites(env.get("SITES"))
    if not sites:
        raise ConfigError("No sites to check!")

    log_level = env.get("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown LOG_LEVEL {log_level!r}")

    return Settings(
        sites=sites,
        interval=_positive_int(env, "INTERVAL", 30),
        nervous_interval=_positive_int(env, "NERVOUS_INTERVAL", 1),
        cron_alive=env.get("CRON_ALIVE_SELF", "0 9 * * 1"),
        strict_down_check=env.get("STRICT_DOWN_CHECK", "false").strip().lower() == "true",
        bot_token=env.get("BOT_TOKEN", "your_telegram_bot_token"),
        chat_id=env.get("CHAT_ID", "your_telegram_chat_id"),
        template_down=env.get("TEMPLATE_DOWN", DEFAULT_TEMPLATE_DOWN),
        template_up=env.get("TEMPLATE_UP", DEFAULT_TEMPLATE_UP),
        template_alive=env.get("TEMPLATE_ALIVE_SELF", DEFAULT_TEMPLATE_ALIVE),
        probe_timeout=_positive_float(env, "PROBE_TIMEOUT", 5.0),
        log_level=log_level,
    )
