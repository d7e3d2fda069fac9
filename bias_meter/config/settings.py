"""Configuration settings for the bias meter job."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    anthropic_api_key: str = os.getenv("ANTHROPIC_API_KEY", "")

    # Article source
    articles_api_url: str = "https://tvaljkxvsniaiiqjhogl.supabase.co/functions/v1/edition-latest"
    article_limit: int = 100
    fetch_timeout_seconds: float = 30.0

    # Model Configuration
    model_id: str = "claude-3-haiku-20240307"
    max_tokens: int = 50  # three numbers fit easily

    # Pacing and cost estimate
    request_delay_seconds: float = 0.1  # stay under rate limits
    cost_per_article: float = 0.002  # Haiku pricing, rough

    # Paths
    output_path: Path = Path("data") / "analyzed-articles.json"

    class Config:
        env_file = ".env"
        extra = "ignore"


# Global settings instance
settings = Settings()
