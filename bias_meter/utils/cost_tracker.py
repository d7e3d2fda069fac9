"""Cost tracking for scoring calls.

Keeps two numbers apart: a flat per-article estimate that grows with
every attempted article, and the token-priced cost of the calls that
actually came back, priced with LiteLLM's model cost map.
"""

import logging
from dataclasses import dataclass

import litellm

logger = logging.getLogger(__name__)

# Suppress verbose LiteLLM logging
logging.getLogger("LiteLLM").setLevel(logging.WARNING)

# Per 1M tokens (input, output), used when LiteLLM has no price for a model
_FALLBACK_PRICES = {
    "haiku": (0.25, 1.25),
    "sonnet": (3.0, 15.0),
    "opus": (15.0, 75.0),
}


@dataclass
class PipelineCosts:
    """Cost accounting for one run."""

    cost_per_item: float = 0.002
    estimated_cost_usd: float = 0.0
    items_attempted: int = 0
    model: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    priced_cost_usd: float = 0.0
    call_count: int = 0

    def add_estimate(self) -> None:
        """Count one attempted item, successful or not."""
        self.items_attempted += 1
        self.estimated_cost_usd += self.cost_per_item

    def add_usage(self, model: str, input_tokens: int, output_tokens: int) -> None:
        """Record token usage from one completed call and price it."""
        self.model = model
        self.input_tokens += input_tokens
        self.output_tokens += output_tokens
        self.priced_cost_usd += calculate_cost(model, input_tokens, output_tokens)
        self.call_count += 1

    def total_tokens(self) -> tuple[int, int]:
        """Return (input_tokens, output_tokens) across all calls."""
        return self.input_tokens, self.output_tokens

    def to_dict(self) -> dict:
        """Convert to dict for logging."""
        return {
            "estimated_cost_usd": round(self.estimated_cost_usd, 6),
            "items_attempted": self.items_attempted,
            "model": self.model,
            "priced_cost_usd": round(self.priced_cost_usd, 6),
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "call_count": self.call_count,
        }


def calculate_cost(model: str, input_tokens: int, output_tokens: int) -> float:
    """Price one call's tokens with LiteLLM's cost map.

    Args:
        model: Model identifier (e.g., "claude-3-haiku-20240307")
        input_tokens: Number of input/prompt tokens
        output_tokens: Number of output/completion tokens

    Returns:
        Cost in USD
    """
    try:
        prompt_cost, completion_cost = litellm.cost_per_token(
            model=model,
            prompt_tokens=input_tokens,
            completion_tokens=output_tokens,
        )
        return prompt_cost + completion_cost
    except Exception as e:
        logger.warning("[COST] Failed to calculate cost for model %s: %s", model, e)
        for family, (input_price, output_price) in _FALLBACK_PRICES.items():
            if family in model.lower():
                return (input_tokens * input_price + output_tokens * output_price) / 1_000_000
        return 0.0
