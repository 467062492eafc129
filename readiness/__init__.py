"""Public-sector bid readiness scoring engine."""

__all__ = [
    "EngineConfig",
    "ReadinessEngine",
    "ScoreReport",
    "Submission",
]

from readiness.engine import EngineConfig, ReadinessEngine, ScoreReport, Submission
