"""Scoring package: signal catalog, compliance, carbon, issues and composite score."""

# Use explicit imports when needed:
# from readiness.scoring.catalog import SIGNAL_CATALOG, SignalCatalog, Tier
# from readiness.scoring.compliance import ComplianceEvaluator, get_compliance_model
# from readiness.scoring.carbon import CarbonAdvisor
# from readiness.scoring.issues import aggregate_issues
# from readiness.scoring.composite import overall_pct, band_for
