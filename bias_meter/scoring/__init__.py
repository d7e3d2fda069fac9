from .validator import ScoreValidation, ScoreValidator

__all__ = ["ScoreValidation", "ScoreValidator"]
