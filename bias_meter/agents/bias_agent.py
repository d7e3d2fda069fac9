"""Bias scoring agent.

Asks Claude for three numbers per article (political lean, tech
sentiment, source trust) and never lets a single article fail the
batch: request errors and unparseable answers both end in the
fallback score.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import anthropic

from ..news.models import FALLBACK_SCORE, Article, BiasScore
from ..prompts import render
from ..scoring import ScoreValidator
from .base_agent import BaseAgent, UsageData

logger = logging.getLogger(__name__)

TITLE_PREVIEW_CHARS = 40


@dataclass
class BiasResult:
    """Result of scoring one article."""

    score: BiasScore
    used_fallback: bool = False
    raw_text: Optional[str] = None
    error: Optional[str] = None
    usage: Optional[UsageData] = None


def describe_article(article: Article) -> str:
    """Render the article fields the model sees, one "Label: value" per line."""
    bullets = article.get("bullets") or []
    bullets_text = ", ".join(str(b) for b in bullets) or "None"
    why_matters = article.get("why_matters") or "Not provided"

    lines = [
        f"Title: {article.get('title', '')}",
        f"Source: {article.get('source', '')}",
        f"Category: {article.get('category', '')}",
        f"Summary: {article.get('summary', '')}",
        f"Bullets: {bullets_text}",
        f"Why it matters: {why_matters}",
    ]
    return "\n".join(lines).strip()


def title_preview(article: Article, length: int = TITLE_PREVIEW_CHARS) -> str:
    return str(article.get("title") or "")[:length]


class BiasAgent(BaseAgent):
    """
    Scores a single article for bias.

    Scores:
    1. Political (-1 to 1) - left-leaning to right-leaning
    2. Tech (-1 to 1) - critical of tech to optimistic about tech
    3. Trust (1 to 10) - unreliable to highly credible
    """

    def __init__(
        self,
        client: anthropic.Anthropic,
        validator: Optional[ScoreValidator] = None,
        **kwargs,
    ):
        """
        Initialize bias agent.

        Args:
            client: Anthropic API client
            validator: Score validator (default: ScoreValidator())
        """
        super().__init__(client, **kwargs)
        self.validator = validator or ScoreValidator()

    def build_prompt(self, article: Article) -> str:
        """Build the complete scoring prompt for one article."""
        return render("bias_score", analysis_text=describe_article(article))

    async def execute(self, article: Article) -> BiasResult:
        """
        Score one article. Always returns a fully populated score.

        Args:
            article: Article record as received from the source API

        Returns:
            BiasResult with the score and, on success, token usage
        """
        prompt = self.build_prompt(article)

        try:
            loop = asyncio.get_event_loop()
            response = await loop.run_in_executor(None, self._create_message, prompt)
            text = self._extract_text(response)
        except Exception as e:
            logger.error(
                '[SCORE] Error analyzing "%s...": %s', title_preview(article), e
            )
            return BiasResult(score=FALLBACK_SCORE, used_fallback=True, error=str(e))

        usage = self._extract_usage(response)
        validation = self.validator.validate(text)
        if not validation.is_valid:
            logger.warning(
                '[SCORE] Invalid scores for "%s...": %s', title_preview(article), text
            )

        return BiasResult(
            score=validation.score,
            used_fallback=not validation.is_valid,
            raw_text=text,
            usage=usage,
        )
