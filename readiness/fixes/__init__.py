"""Advice generation package."""

# from readiness.fixes.advice import AdviceGenerator, ADVICE_RULES
