"""Daily bias scoring pipeline.

Runs strictly in sequence:
1. Fetch the article batch (fatal on failure)
2. Score each article in order, pausing between requests
3. Write the annotated batch as one JSON document (fatal on failure)
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Awaitable, Callable, Optional

import anthropic

from .agents import BiasAgent
from .config.settings import Settings
from .news.fetcher import ArticleFetcher
from .news.models import RunResult, annotate
from .output.formatter import OutputFormatter, format_number
from .utils.cost_tracker import PipelineCosts

logger = logging.getLogger(__name__)

PROGRESS_TITLE_CHARS = 60

Sleep = Callable[[float], Awaitable[None]]
Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class PipelineResult:
    """Full result from one pipeline run."""

    run: RunResult
    costs: PipelineCosts
    output_path: Path
    fallback_count: int = 0


class PipelineRunner:
    """
    Fetches articles, scores them one at a time, and saves the result.

    Collaborators are injected so the run can be driven against fakes:
    the Anthropic client, the article fetcher, the output formatter, the
    sleep primitive used for pacing, and the clock.
    """

    def __init__(
        self,
        client: anthropic.Anthropic,
        config: Settings,
        fetcher: Optional[ArticleFetcher] = None,
        formatter: Optional[OutputFormatter] = None,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = _utc_now,
    ):
        """
        Initialize pipeline runner.

        Args:
            client: Anthropic API client used for scoring
            config: Settings for this run
            fetcher: Article source (default: built from config)
            formatter: Output writer (default: built from config.output_path)
            sleep: Awaitable delay between articles
            clock: Source of the current time
        """
        self.config = config
        self.agent = BiasAgent(
            client=client,
            model_id=config.model_id,
            max_tokens=config.max_tokens,
        )
        self.fetcher = fetcher or ArticleFetcher(
            api_url=config.articles_api_url,
            limit=config.article_limit,
            timeout=config.fetch_timeout_seconds,
        )
        self.formatter = formatter or OutputFormatter(config.output_path)
        self.sleep = sleep
        self.clock = clock

    async def run(self) -> PipelineResult:
        """
        Run the full pipeline once.

        Returns:
            PipelineResult with the written document's contents and costs

        Raises:
            ArticleSourceError: If the article batch can't be fetched
            OSError: If the output document can't be written
        """
        # Step 1: Fetch
        batch = await self.fetcher.fetch()
        articles = batch.articles
        total = len(articles)

        # Step 2: Score sequentially
        costs = PipelineCosts(cost_per_item=self.config.cost_per_article)
        annotated = []
        fallback_count = 0

        for i, article in enumerate(articles):
            logger.info(
                '[PIPELINE] [%d/%d] "%s..."',
                i + 1,
                total,
                str(article.get("title") or "")[:PROGRESS_TITLE_CHARS],
            )

            result = await self.agent.execute(article)
            score = result.score
            logger.info(
                "[PIPELINE]    -> Political: %.2f, Tech: %.2f, Trust: %s",
                score.political_score,
                score.tech_score,
                format_number(score.trust_score),
            )

            if result.used_fallback:
                fallback_count += 1
            if result.usage is not None:
                costs.add_usage(
                    result.usage.model,
                    result.usage.input_tokens,
                    result.usage.output_tokens,
                )

            annotated.append(annotate(article, score))
            costs.add_estimate()

            await self.sleep(self.config.request_delay_seconds)

        # Step 3: Assemble and write
        now = self.clock()
        run = RunResult(
            date=batch.date or now.astimezone(timezone.utc).strftime("%Y-%m-%d"),
            generated_at=format_timestamp(now),
            lovable_generated_at=batch.generated_at,
            articles=annotated,
        )
        output_path = self.formatter.save_run(run)

        logger.info(
            "[PIPELINE] Finished: analyzed=%d, fallbacks=%d, estimated_cost=$%.2f",
            run.count,
            fallback_count,
            costs.estimated_cost_usd,
        )
        logger.debug("[COST] %s", costs.to_dict())

        return PipelineResult(
            run=run,
            costs=costs,
            output_path=output_path,
            fallback_count=fallback_count,
        )

    def run_sync(self) -> PipelineResult:
        """Synchronous wrapper for run()."""
        return asyncio.run(self.run())
