import os
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep LiteLLM from downloading its pricing map during tests
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

from bias_meter.config.settings import Settings  # noqa: E402
from bias_meter.news.fetcher import ArticleFetcher  # noqa: E402

API_URL = "https://articles.example.test/functions/v1/edition-latest"
FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)


@dataclass
class FakeTextBlock:
    text: str
    type: str = "text"


@dataclass
class FakeUsage:
    input_tokens: int = 120
    output_tokens: int = 8


@dataclass
class FakeMessage:
    content: List[FakeTextBlock]
    usage: Optional[FakeUsage] = field(default_factory=FakeUsage)


class FakeMessages:
    def __init__(self, responses: List[Union[str, Exception, FakeMessage]]) -> None:
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs: Any) -> FakeMessage:
        self.calls.append(kwargs)
        response = self.responses.pop(0) if self.responses else "0,0,5"
        if isinstance(response, Exception):
            raise response
        if isinstance(response, FakeMessage):
            return response
        return FakeMessage(content=[FakeTextBlock(text=response)])


class FakeAnthropicClient:
    """Stands in for anthropic.Anthropic; replies are scripted per call."""

    def __init__(self, responses: Optional[List[Union[str, Exception, FakeMessage]]] = None) -> None:
        self.messages = FakeMessages(responses or [])


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_client_factory() -> Callable[..., FakeAnthropicClient]:
    def _factory(*responses: Union[str, Exception, FakeMessage]) -> FakeAnthropicClient:
        return FakeAnthropicClient(list(responses))

    return _factory


@pytest.fixture
def article_source_factory():
    """Build an ArticleFetcher backed by an in-memory HTTP transport."""

    def _factory(
        payload: Any = None,
        status_code: int = 200,
        error: Optional[Exception] = None,
    ):
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if error is not None:
                raise error
            return httpx.Response(status_code, json=payload)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        fetcher = ArticleFetcher(api_url=API_URL, limit=100, http_client=client)
        return fetcher, requests

    return _factory


@pytest.fixture
def output_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "analyzed-articles.json"


@pytest.fixture
def config(output_path: Path) -> Settings:
    return Settings(
        anthropic_api_key="test-key",
        articles_api_url=API_URL,
        output_path=output_path,
        request_delay_seconds=0.1,
        cost_per_article=0.002,
        model_id="claude-3-haiku-20240307",
        max_tokens=50,
    )


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def sample_article() -> Dict[str, Any]:
    return {
        "title": "Parliament passes broadband subsidy bill",
        "source": "Example Times",
        "category": "tech",
        "summary": "Lawmakers approved funding for rural broadband.",
        "bullets": ["$2B over five years", "Targets rural counties"],
        "why_matters": "Connectivity gaps shape access to services.",
    }
