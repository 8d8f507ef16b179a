"""Telegram delivery of batched site notifications."""

import logging
from typing import Any, Sequence

import requests

logger = logging.getLogger(__name__)

SITE_PLACEHOLDER = "{site}"
TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


def render_message(template: str, site: str) -> str:
    """Substitute ``site`` into the first placeholder of ``template``."""
    return template.replace(SITE_PLACEHOLDER, site, 1)


def build_batch_message(sites: Sequence[str], template: str) -> str:
    """Render one line per site and join them into a single message."""
    return "\n".join(render_message(template, site) for site in sites)


def send_telegram_message(
    bot_token: str,
    chat_id: str,
    text: str,
    timeout: float = 10.0,
    **params: Any,
) -> None:
    """Post ``text`` to a Telegram chat through the Bot API.

    Extra keyword arguments are passed through as ``sendMessage`` fields,
    e.g. ``disable_web_page_preview=True``.
    """

    payload = {"chat_id": chat_id, "text": text}
    payload.update(params)
    response = requests.post(
        TELEGRAM_API.format(token=bot_token),
        json=payload,
        timeout=timeout,
    )
    response.raise_for_status()


class Notifier:
    """Sends messages to one chat and never lets delivery errors escape."""

    def __init__(self, bot_token: str, chat_id: str, timeout: float = 10.0) -> None:
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout = timeout

    def send(self, text: str, **params: Any) -> bool:
        """Deliver ``text``; return False if delivery failed."""
        try:
            send_telegram_message(
                self.bot_token, self.chat_id, text, timeout=self.timeout, **params
            )
        except Exception as exc:
            # Request errors carry the URL, which embeds the bot token
            reason = str(exc)
            if self.bot_token:
                reason = reason.replace(self.bot_token, "***")
            logger.error("Error sending message: %s", reason)
            return False
        return True

    def notify_sites(self, sites: Sequence[str], template: str) -> bool:
        """Send one combined message for ``sites``. Empty input sends nothing."""
        if not sites:
            return False
        return self.send(build_batch_message(sites, template))
