"""Site availability monitoring library."""

from .config import ConfigError, Settings, load_settings
from .monitor import CheckResult, check_sites
from .notify import Notifier, render_message, send_telegram_message
from .state import DownSet
from .watcher import SiteWatcher

__all__ = [
    "CheckResult",
    "ConfigError",
    "DownSet",
    "Notifier",
    "Settings",
    "SiteWatcher",
    "check_sites",
    "load_settings",
    "render_message",
    "send_telegram_message",
]
