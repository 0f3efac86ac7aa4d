"""Best-effort delivery of report text to a Slack incoming webhook."""

from __future__ import annotations

import logging

import requests

from crawl_report.config import Settings

logger = logging.getLogger(__name__)


def build_payload(settings: Settings, text: str) -> dict[str, str]:
    return {"username": settings.username, "text": text, "channel": settings.channel}


def post_message(settings: Settings, text: str) -> bool:
    """Post ``text`` to the configured webhook.

    Returns True on a 2xx response. Delivery failures are logged and reported
    as False; they never raise.
    """
    if not settings.webhook_url:
        logger.warning("SLACK_WEBHOOK_URL not configured; skipping notification")
        return False

    try:
        response = requests.post(
            settings.webhook_url,
            json=build_payload(settings, text),
            timeout=settings.http_timeout,
        )
    except requests.RequestException as exc:
        logger.error("Slack notification to #%s failed: %s", settings.channel, exc)
        return False

    if not response.ok:
        logger.error(
            "Slack notification to #%s rejected: HTTP %s %s",
            settings.channel,
            response.status_code,
            response.text[:200],
        )
        return False

    logger.info("Slack notification delivered to #%s", settings.channel)
    return True
