#!/usr/bin/env python3
"""
Daily Bias Meter

Entry point for the bias scoring job.
Fetches the latest article edition, scores every article with Claude,
and writes the annotated set to data/analyzed-articles.json.

Usage:
    python -m bias_meter.main                     # Full run
    python -m bias_meter.main --limit 10          # Smaller batch
    python -m bias_meter.main --output out.json   # Custom output path
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import anthropic

from .config.settings import Settings, settings
from .pipeline import PipelineRunner


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Score news articles for political lean, tech sentiment, and trust"
    )

    parser.add_argument(
        "--output",
        type=Path,
        default=settings.output_path,
        help=f"Output JSON path (default: {settings.output_path})",
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=settings.article_limit,
        help=f"Maximum articles to fetch (default: {settings.article_limit})",
    )

    parser.add_argument(
        "--delay",
        type=float,
        default=settings.request_delay_seconds,
        help=f"Seconds to wait after each article (default: {settings.request_delay_seconds})",
    )

    parser.add_argument(
        "--model",
        default=settings.model_id,
        help=f"Scoring model (default: {settings.model_id})",
    )

    parser.add_argument(
        "--api-url",
        default=settings.articles_api_url,
        help="Article edition endpoint",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Settings:
    """Apply command line overrides on top of the environment settings."""
    return settings.model_copy(
        update={
            "output_path": args.output,
            "article_limit": args.limit,
            "request_delay_seconds": args.delay,
            "model_id": args.model,
            "articles_api_url": args.api_url,
        }
    )


async def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger("bias_meter")

    config = build_config(args)

    # A missing key isn't fatal: every article just falls back
    if not config.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY not set; all articles will get fallback scores")

    client = anthropic.Anthropic(api_key=config.anthropic_api_key or None)
    runner = PipelineRunner(client=client, config=config)

    print("=" * 60)
    print("📰 Bias Meter")
    print("=" * 60)
    print(f"Model: {config.model_id}")
    print(f"Source: {config.articles_api_url}")

    try:
        result = await runner.run()
    except Exception as e:  # top-level guard: report and exit non-zero
        print(f"\n❌ Pipeline failed: {e}", file=sys.stderr)
        logger.debug("Pipeline failure", exc_info=True)
        return 1

    print("\n" + "=" * 60)
    print("✅ COMPLETE!")
    print("=" * 60)
    print(f"📊 Analyzed: {result.run.count} articles")
    if result.fallback_count:
        print(f"⚠️  Fallback scores: {result.fallback_count}")
    print(f"💰 Estimated cost: ${result.costs.estimated_cost_usd:.2f}")
    print(f"   Token-priced cost: ${result.costs.priced_cost_usd:.4f}")
    print(f"📁 Saved to: {result.output_path}")
    print("=" * 60)

    return 0


def cli() -> None:
    """CLI entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
