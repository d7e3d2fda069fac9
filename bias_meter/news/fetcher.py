"""Article batch fetching from the edition API.

One GET per run. Unlike per-article scoring, any failure here is fatal:
without a batch there is nothing to score.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from .models import Article

logger = logging.getLogger(__name__)


class ArticleSourceError(RuntimeError):
    """The article source could not deliver a batch."""


@dataclass
class ArticleBatch:
    """Articles plus the metadata the source reports for them."""

    articles: list[Article] = field(default_factory=list)
    date: Optional[str] = None
    generated_at: Optional[str] = None


class ArticleFetcher:
    """Fetches the latest article edition from the source API."""

    def __init__(
        self,
        api_url: str,
        limit: int = 100,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize article fetcher.

        Args:
            api_url: Edition endpoint URL
            limit: Maximum number of articles to request
            timeout: Request timeout in seconds
            http_client: Pre-built client (default: a new AsyncClient per fetch)
        """
        self.api_url = api_url
        self.limit = limit
        self.timeout = timeout
        self.http_client = http_client

    async def fetch(self) -> ArticleBatch:
        """
        Fetch one batch of articles.

        A missing ``articles`` list is an empty batch, not an error.

        Returns:
            ArticleBatch with articles in source order

        Raises:
            ArticleSourceError: On transport errors, non-2xx status, or a
                body that is not a JSON object
        """
        logger.info("[FETCH] Requesting up to %d articles from %s", self.limit, self.api_url)

        try:
            if self.http_client is not None:
                resp = await self._get(self.http_client)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await self._get(client)
        except httpx.HTTPError as e:
            raise ArticleSourceError(f"Article API request failed: {e}") from e

        if not resp.is_success:
            raise ArticleSourceError(f"Article API error: {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ArticleSourceError(f"Article API returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ArticleSourceError("Article API returned unexpected payload")

        articles = data.get("articles") or []
        logger.info("[FETCH] Found %d articles to analyze", len(articles))

        return ArticleBatch(
            articles=list(articles),
            date=data.get("date"),
            generated_at=data.get("generated_at"),
        )

    async def _get(self, client: httpx.AsyncClient) -> httpx.Response:
        return await client.get(self.api_url, params={"limit": self.limit})
