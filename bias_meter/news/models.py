"""Data models for articles, bias scores, and run results."""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

# Articles arrive as JSON objects and are passed through untouched, so they
# stay plain dicts. Known keys: title, source, category, summary,
# bullets (optional), why_matters (optional).
Article = dict[str, Any]


@dataclass(frozen=True)
class BiasScore:
    """Bias scores for a single article."""

    political_score: float  # -1 (left) to 1 (right)
    tech_score: float  # -1 (critical) to 1 (optimistic)
    trust_score: float  # 1 (unreliable) to 10 (credible)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


FALLBACK_SCORE = BiasScore(political_score=0.0, tech_score=0.0, trust_score=7.0)


def annotate(article: Article, score: BiasScore) -> Article:
    """Return a copy of the article with the three score fields appended."""
    return {**article, **score.to_dict()}


@dataclass
class RunResult:
    """Everything written to the output document for one run."""

    date: str
    generated_at: str
    lovable_generated_at: Optional[str] = None
    articles: list[Article] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.articles)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON serialization, in document field order.

        lovable_generated_at is left out entirely when the source sent none.
        """
        data: dict[str, Any] = {
            "date": self.date,
            "count": self.count,
            "generated_at": self.generated_at,
        }
        if self.lovable_generated_at is not None:
            data["lovable_generated_at"] = self.lovable_generated_at
        data["articles"] = self.articles
        return data
