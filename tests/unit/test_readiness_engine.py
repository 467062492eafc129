"""Tests for the end-to-end readiness engine."""

import json

import pytest
from conftest import StubFetcher, pinned_clock

from readiness.engine import (
    EngineConfig,
    ReadinessEngine,
    Submission,
    early_stage_report,
)
from readiness.extraction.website import FETCH_FAILED_LABEL, PERCEPTION_FALLBACK
from readiness.fixes.advice import DISQUALIFIER_ADVICE, FOOTER_HYGIENE, SOLID_BASELINE
from readiness.scoring.composite import BAND_EARLY, BAND_NEARLY, BAND_READY, TWO_FACTOR_WEIGHTS

FULL_PAGE = (
    "<p>privacy cookie contact accessibility company number case studies "
    "modern slavery cyber essentials</p>"
)


class TestSubmission:
    """Tests for lenient payload parsing."""

    def test_non_mapping_payload(self) -> None:
        assert Submission.from_payload(["nope"]) == Submission()

    def test_malformed_parts_unset(self) -> None:
        submission = Submission.from_payload(
            {"website": 42, "answers": [1, 2], "carbon": "lots", "meta": None}
        )
        assert submission == Submission()

    def test_blank_website_unset(self) -> None:
        assert Submission.from_payload({"website": "   "}).website is None

    def test_website_trimmed(self) -> None:
        assert Submission.from_payload({"website": " https://a.com "}).website == "https://a.com"


class TestGateShortCircuit:
    """Tests for the fixed early-stage report."""

    @pytest.mark.asyncio
    async def test_failed_gate_returns_fixed_report(self, engine, stub_fetcher) -> None:
        submission = Submission.from_payload(
            {
                "website": "https://example.com",
                "answers": {"insolvency_clear": True, "tax_clear": False, "no_convictions": True},
                "carbon": {"baseline_year": 2019, "baseline_tco2e": 100},
            }
        )

        report = await engine.assess(submission)

        assert report == early_stage_report(engine.config.next_step_url)
        assert stub_fetcher.calls == []

    @pytest.mark.asyncio
    async def test_report_independent_of_other_inputs(self, engine) -> None:
        first = await engine.assess(Submission())
        second = await engine.assess(
            Submission.from_payload(
                {"answers": {"no_convictions": False, "iso_9001": True}, "website": "https://x.io"}
            )
        )
        assert first.to_dict() == second.to_dict()

    def test_fixed_report_shape(self) -> None:
        data = early_stage_report("https://example.com/next").to_dict()

        assert data["overallPct"] == 22
        assert data["bandLabel"] == BAND_EARLY
        assert data["bullets"] == [DISQUALIFIER_ADVICE]
        assert data["subscore"]["compliancePct"] == 0
        assert data["subscore"]["perceptionPct"] == 0
        assert data["subscore"]["carbonPct"] == 0
        assert data["carbonAdvice"] is None
        assert data["issues"] == []
        assert data["nextStepUrl"] == "https://example.com/next"


class TestScoring:
    """Tests for complete reports."""

    def test_mandatory_only_without_website_or_carbon(self, engine, mandatory_answers) -> None:
        report = engine.score(Submission.from_payload({"answers": mandatory_answers}))

        assert report.subscore.compliance_pct == 100
        assert report.subscore.perception_pct == 45
        assert report.subscore.carbon_pct == 45
        # 0.45 * 100 + 0.35 * 45 + 0.20 * 45 = 69.75
        assert report.overall_pct == 70
        assert report.band_label == BAND_NEARLY
        assert report.bullets == (SOLID_BASELINE,)
        assert report.rag.total == 0
        assert report.carbon_advice is not None
        assert report.carbon_advice.is_indicative

    def test_fully_ready(self, engine) -> None:
        answers = {
            "insolvency_clear": True,
            "tax_clear": True,
            "no_convictions": True,
            "insurance_pl": True,
            "insurance_el": True,
            "dp_ukgdpr": True,
            "h_and_s": True,
            "crp_ppn": True,
            "scope12_reporting": True,
            "carbon_targets": True,
        }
        submission = Submission.from_payload(
            {
                "website": "https://example.com",
                "answers": answers,
                "carbon": {"baseline_year": 2019, "baseline_tco2e": 500},
            }
        )

        report = engine.score(submission, html=FULL_PAGE)

        assert report.subscore.perception_pct == 100
        assert report.subscore.carbon_pct == 75
        # 45 + 35 + 15
        assert report.overall_pct == 95
        assert report.band_label == BAND_READY
        assert report.carbon_advice.current_year == 2025

    def test_issues_merged_red_first(self, engine, mandatory_answers) -> None:
        answers = {**mandatory_answers, "h_and_s": False, "iso_9001": False}
        submission = Submission.from_payload(
            {"website": "http://example.com", "answers": answers}
        )

        report = engine.score(submission, html=FULL_PAGE)

        assert [(i.key, i.severity.value) for i in report.issues] == [
            ("h_and_s", "red"),
            ("iso_9001", "amber"),
            ("website_https", "green"),
        ]
        assert report.rag.to_dict() == {"red": 1, "amber": 1, "green": 1}

    def test_non_http_website_is_ignored(self, engine, mandatory_answers) -> None:
        submission = Submission.from_payload(
            {"website": "example.com", "answers": mandatory_answers}
        )

        report = engine.score(submission)

        assert report.subscore.perception_pct == 45
        assert report.website_missing == ()

    def test_fetch_failure_degrades(self, engine, mandatory_answers) -> None:
        submission = Submission.from_payload(
            {"website": "https://down.example", "answers": mandatory_answers}
        )

        report = engine.score(submission, fetch_failed=True)

        assert report.subscore.perception_pct == PERCEPTION_FALLBACK
        assert report.website_missing == (FETCH_FAILED_LABEL,)
        assert report.rag.red == 0
        assert report.bullets == (FOOTER_HYGIENE,)

    def test_two_factor_configuration(self, mandatory_answers) -> None:
        engine = ReadinessEngine(
            config=EngineConfig(weights=TWO_FACTOR_WEIGHTS),
            fetcher=StubFetcher(),
            clock=pinned_clock,
        )

        report = engine.score(Submission.from_payload({"answers": mandatory_answers}))

        assert report.overall_pct == 78
        assert report.carbon_advice is None
        assert report.subscore.carbon_pct is None

    def test_ratio_configuration(self, mandatory_answers) -> None:
        engine = ReadinessEngine(
            config=EngineConfig(compliance_model="ratio"),
            fetcher=StubFetcher(),
            clock=pinned_clock,
        )

        report = engine.score(Submission.from_payload({"answers": mandatory_answers}))

        assert report.subscore.compliance_pct == 28

    @pytest.mark.parametrize("count", [0, 1, 2, 3, 5, 10])
    def test_bullets_between_one_and_three(self, engine, mandatory_answers, count) -> None:
        expected_keys = ["insurance_pi", "iso_27001", "ce_plus", "bcp_dr", "modern_slavery",
                         "crp_ppn", "case_studies_2plus", "edi", "bpss", "iso_9001"]
        answers = {**mandatory_answers, **{k: False for k in expected_keys[:count]}}
        report = engine.score(
            Submission.from_payload({"website": "http://x.io", "answers": answers}), html=""
        )

        assert 1 <= len(report.bullets) <= 3


class TestAssess:
    """Tests for the async path with a fetch."""

    @pytest.mark.asyncio
    async def test_fetches_website_once(self, mandatory_answers) -> None:
        fetcher = StubFetcher(html=FULL_PAGE.upper())
        engine = ReadinessEngine(fetcher=fetcher, clock=pinned_clock)

        report = await engine.assess(
            Submission.from_payload({"website": "https://example.com", "answers": mandatory_answers})
        )

        assert fetcher.calls == ["https://example.com"]
        assert report.subscore.perception_pct == 100

    @pytest.mark.asyncio
    async def test_failed_fetch_degrades(self, mandatory_answers) -> None:
        fetcher = StubFetcher(error="Request timed out")
        engine = ReadinessEngine(fetcher=fetcher, clock=pinned_clock)

        report = await engine.assess(
            Submission.from_payload({"website": "https://example.com", "answers": mandatory_answers})
        )

        assert report.subscore.perception_pct == PERCEPTION_FALLBACK
        assert report.to_dict()["websiteFindings"]["missing"] == [FETCH_FAILED_LABEL]

    @pytest.mark.asyncio
    async def test_no_fetch_without_website(self, engine, stub_fetcher, mandatory_answers) -> None:
        await engine.assess(Submission.from_payload({"answers": mandatory_answers}))
        assert stub_fetcher.calls == []


class TestDeterminism:
    """Identical inputs give byte-identical reports."""

    def test_repeat_runs_identical(self, engine, mandatory_answers) -> None:
        submission = Submission.from_payload(
            {
                "website": "https://example.com",
                "answers": {**mandatory_answers, "iso_9001": False},
                "carbon": {"baseline_year": 2020, "baseline_tco2e": 321},
            }
        )

        first = json.dumps(engine.score(submission, html="<p>privacy</p>").to_dict())
        second = json.dumps(engine.score(submission, html="<p>privacy</p>").to_dict())

        assert first == second

    def test_fresh_engines_agree(self, mandatory_answers) -> None:
        submission = Submission.from_payload({"answers": mandatory_answers})
        engines = [ReadinessEngine(fetcher=StubFetcher(), clock=pinned_clock) for _ in range(2)]

        reports = [e.score(submission).to_dict() for e in engines]

        assert reports[0] == reports[1]
