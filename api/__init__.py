"""HTTP boundary for the gap-score readiness engine."""

__version__ = "0.1.0"
