"""
Approval notifier.

Posts newly approved articles to an external channel (a web-to-Telegram
relay) as ``{"text": ..., "image_url": ...}``.
"""

import logging
from typing import Optional

import httpx

from core.domain.localization import get_localized_content
from core.errors import UpstreamFailure
from infrastructure.database.models.content import Article

logger = logging.getLogger(__name__)

# Announcements go out in Amharic when available
NOTIFICATION_LANGUAGE = "am"


def build_approval_payload(article: Article, language: str = NOTIFICATION_LANGUAGE) -> dict:
    return {
        "text": get_localized_content(article.content, language),
        "image_url": article.featured_image or "",
    }


class ArticleNotifier:
    """Delivers approval announcements over HTTP."""

    def __init__(
        self,
        url: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    async def article_approved(self, article: Article) -> bool:
        """
        Announce an approved article.

        Returns:
            True if the channel accepted the message, False if dispatch is disabled

        Raises:
            UpstreamFailure: If the request fails or the channel answers with an error
        """
        if not self.enabled:
            logger.debug("Notification URL not configured; skipping article %s", article.id)
            return False

        payload = build_approval_payload(article)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamFailure(
                f"Notification channel responded with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamFailure(f"Notification dispatch failed: {e}") from e

        logger.info("Approval notification sent for article %s", article.id)
        return True
