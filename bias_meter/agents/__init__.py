from .base_agent import BaseAgent, UsageData
from .bias_agent import BiasAgent, BiasResult

__all__ = ["BaseAgent", "BiasAgent", "BiasResult", "UsageData"]
