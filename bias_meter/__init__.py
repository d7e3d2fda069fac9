"""Daily bias meter: score news articles for political lean, tech sentiment, and trust."""

__version__ = "0.1.0"
