"""Readiness assessment pipeline.

Runs one submission through the scoring components:

1. Gate check on the legal disqualifiers (short-circuits to a fixed report)
2. Compliance evaluation and website scan, independently
3. Carbon advice when the weighting includes carbon
4. Issue aggregation, composite score and band
5. Advice bullets from the aggregated issues

The engine holds configuration only. Every call builds its results from
the inputs, so identical inputs give identical reports.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from readiness.crawler.fetcher import PageFetcher, is_fetchable_url
from readiness.extraction.website import WebsiteScan, extract_website_signals
from readiness.fixes.advice import DISQUALIFIER_ADVICE, AdviceGenerator
from readiness.scoring.carbon import CarbonAdvice, CarbonAdvisor, Clock, utc_today
from readiness.scoring.catalog import SIGNAL_CATALOG, SignalCatalog
from readiness.scoring.composite import (
    BAND_EARLY,
    THREE_FACTOR_WEIGHTS,
    CompositeWeights,
    band_for,
    overall_pct,
)
from readiness.scoring.compliance import ComplianceEvaluator, compliance_band, get_compliance_model
from readiness.scoring.issues import AggregatedIssues, Issue, RagTally, aggregate_issues

logger = structlog.get_logger(__name__)

DEFAULT_NEXT_STEP_URL = "https://example.com/next-steps"
EARLY_STAGE_PCT = 22


@dataclass(frozen=True)
class EngineConfig:
    """Explicit engine configuration, built once at startup."""

    catalog: SignalCatalog = SIGNAL_CATALOG
    compliance_model: str = "penalty"
    weights: CompositeWeights = THREE_FACTOR_WEIGHTS
    next_step_url: str = DEFAULT_NEXT_STEP_URL


@dataclass(frozen=True)
class Submission:
    """One caller submission. Malformed parts are treated as unset."""

    website: str | None = None
    answers: Mapping[str, Any] = field(default_factory=dict)
    carbon: Mapping[str, Any] | None = None
    meta: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "Submission":
        if not isinstance(payload, Mapping):
            return cls()
        website = payload.get("website")
        answers = payload.get("answers")
        carbon = payload.get("carbon")
        meta = payload.get("meta")
        return cls(
            website=website.strip() or None if isinstance(website, str) else None,
            answers=dict(answers) if isinstance(answers, Mapping) else {},
            carbon=dict(carbon) if isinstance(carbon, Mapping) else None,
            meta=dict(meta) if isinstance(meta, Mapping) else {},
        )


@dataclass(frozen=True)
class Subscores:
    compliance_pct: int
    compliance_band: str
    perception_pct: int
    carbon_pct: int | None

    def to_dict(self) -> dict:
        return {
            "compliancePct": self.compliance_pct,
            "complianceBand": self.compliance_band,
            "perceptionPct": self.perception_pct,
            "carbonPct": self.carbon_pct,
        }


@dataclass(frozen=True)
class ScoreReport:
    """Complete readiness report for one submission."""

    overall_pct: int
    band_label: str
    bullets: tuple[str, ...]
    subscore: Subscores
    rag: RagTally
    issues: tuple[Issue, ...]
    website_present: tuple[str, ...]
    website_missing: tuple[str, ...]
    carbon_advice: CarbonAdvice | None
    next_step_url: str

    def to_dict(self) -> dict:
        return {
            "overallPct": self.overall_pct,
            "bandLabel": self.band_label,
            "bullets": list(self.bullets),
            "subscore": self.subscore.to_dict(),
            "rag": self.rag.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
            "websiteFindings": {
                "present": list(self.website_present),
                "missing": list(self.website_missing),
            },
            "carbonAdvice": self.carbon_advice.to_dict() if self.carbon_advice else None,
            "nextStepUrl": self.next_step_url,
        }


def early_stage_report(next_step_url: str = DEFAULT_NEXT_STEP_URL) -> ScoreReport:
    """Fixed report returned when a legal disqualifier fails."""
    return ScoreReport(
        overall_pct=EARLY_STAGE_PCT,
        band_label=BAND_EARLY,
        bullets=(DISQUALIFIER_ADVICE,),
        subscore=Subscores(
            compliance_pct=0,
            compliance_band=compliance_band(0),
            perception_pct=0,
            carbon_pct=0,
        ),
        rag=RagTally(),
        issues=(),
        website_present=(),
        website_missing=(),
        carbon_advice=None,
        next_step_url=next_step_url,
    )


class ReadinessEngine:
    """Scores submissions for public-sector bid readiness."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        fetcher: PageFetcher | None = None,
        clock: Clock = utc_today,
    ):
        self.config = config or EngineConfig()
        self.fetcher = fetcher or PageFetcher()
        self.compliance = ComplianceEvaluator(
            catalog=self.config.catalog,
            model=get_compliance_model(self.config.compliance_model),
        )
        self.carbon = CarbonAdvisor(clock=clock)
        self.advice = AdviceGenerator()

    async def assess(self, submission: Submission) -> ScoreReport:
        """
        Assess a submission, fetching its website if one was given.

        The fetch is the only await point. It happens after the gate check,
        so disqualified submissions never touch the network.
        """
        if self._failed_gates(submission):
            return early_stage_report(self.config.next_step_url)

        html: str | None = None
        fetch_failed = False
        if is_fetchable_url(submission.website):
            page = await self.fetcher.fetch(submission.website)
            html = page.text
            fetch_failed = not page.success

        return self.score(submission, html=html, fetch_failed=fetch_failed)

    def score(
        self,
        submission: Submission,
        html: str | None = None,
        fetch_failed: bool = False,
    ) -> ScoreReport:
        """
        Score a submission against already-fetched page text.

        Args:
            submission: Answers, carbon figures and website URL
            html: Lower-cased body of the website, if it was fetched
            fetch_failed: True when the website fetch was attempted and failed

        Returns:
            ScoreReport, or the fixed early-stage report on a failed gate
        """
        if self._failed_gates(submission):
            return early_stage_report(self.config.next_step_url)

        answers = submission.answers
        evaluation = self.compliance.evaluate(answers)
        compliance = self.compliance.score(answers, evaluation)

        scan = self._scan(submission.website, html, fetch_failed)

        carbon_advice: CarbonAdvice | None = None
        if self.config.weights.includes_carbon:
            carbon_advice = self.carbon.advise(submission.carbon, answers)
        carbon_pct = carbon_advice.pct if carbon_advice else None

        aggregated: AggregatedIssues = aggregate_issues(evaluation.issues, scan.issues)
        overall = overall_pct(
            compliance.pct,
            scan.perception_pct,
            carbon_pct,
            weights=self.config.weights,
        )
        bullets = self.advice.generate(aggregated, scan.missing_labels)

        logger.info(
            "readiness_scored",
            overall_pct=overall,
            compliance_pct=compliance.pct,
            perception_pct=scan.perception_pct,
            carbon_pct=carbon_pct,
            website_status=scan.status,
            red=aggregated.rag.red,
            amber=aggregated.rag.amber,
            green=aggregated.rag.green,
        )

        return ScoreReport(
            overall_pct=overall,
            band_label=band_for(overall),
            bullets=tuple(bullets),
            subscore=Subscores(
                compliance_pct=compliance.pct,
                compliance_band=compliance.band,
                perception_pct=scan.perception_pct,
                carbon_pct=carbon_pct,
            ),
            rag=aggregated.rag,
            issues=aggregated.issues,
            website_present=tuple(scan.present_labels),
            website_missing=tuple(scan.missing_labels),
            carbon_advice=carbon_advice,
            next_step_url=self.config.next_step_url,
        )

    def _failed_gates(self, submission: Submission) -> bool:
        failed = self.compliance.failed_gates(submission.answers)
        if failed:
            logger.info("gate_failed", gates=failed)
        return bool(failed)

    def _scan(self, website: str | None, html: str | None, fetch_failed: bool) -> WebsiteScan:
        url = website if is_fetchable_url(website) else None
        return extract_website_signals(url, html, fetch_failed=fetch_failed)
