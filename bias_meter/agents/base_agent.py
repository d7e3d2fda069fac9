"""Base agent class for short Claude completions.

Agents share one Anthropic client, passed in by the caller, so tests
can hand over a fake with the same ``messages.create`` surface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import anthropic


@dataclass
class UsageData:
    """Token usage data from an API call."""

    input_tokens: int
    output_tokens: int
    model: str


class BaseAgent(ABC):
    """
    Base class for agents that send a single user prompt to Claude.

    All subclasses should implement the execute() method.
    """

    def __init__(
        self,
        client: anthropic.Anthropic,
        model_id: str = "claude-3-haiku-20240307",
        max_tokens: int = 50,
    ):
        """
        Initialize the base agent.

        Args:
            client: Anthropic API client
            model_id: Model to use
            max_tokens: Maximum tokens for response
        """
        self.client = client
        self.model_id = model_id
        self.max_tokens = max_tokens

    def _create_message(self, prompt: str) -> anthropic.types.Message:
        """
        Create a message using Claude with the given prompt.

        Args:
            prompt: Full prompt content (sent as user message)

        Returns:
            Anthropic Message response
        """
        return self.client.messages.create(
            model=self.model_id,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )

    def _extract_text(self, response: anthropic.types.Message) -> str:
        """Extract the first content block's text, trimmed.

        Raises IndexError/AttributeError when the response has no text block.
        """
        return response.content[0].text.strip()

    def _extract_usage(self, response: anthropic.types.Message) -> Optional[UsageData]:
        """Extract token usage from response, if the response carries any."""
        usage = getattr(response, "usage", None)
        if usage is None:
            return None
        return UsageData(
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            model=self.model_id,
        )

    @abstractmethod
    async def execute(self, *args: Any, **kwargs: Any) -> Any:
        """
        Execute the agent's primary function.

        Must be implemented by all subclasses.
        """
        pass
