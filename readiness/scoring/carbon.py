"""Carbon reduction advice.

With a usable baseline the advisor computes the average annual reduction
needed to reach net zero by the target year. Without one it falls back to
an indicative proxy rate. Malformed input always degrades to the
indicative branch; the advisor never raises.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Any

import structlog

from readiness.scoring.numbers import as_number, is_truthy, round1

logger = structlog.get_logger(__name__)

DEFAULT_TARGET_YEAR = 2050
MIN_BASELINE_YEAR = 1990
PROXY_REDUCTION_PCT = 4.2
PROXY_MESSAGE = (
    "Provide a baseline to calculate tonnage. "
    "Proxy: ~4.2% absolute Scope 1+2 reduction per year."
)

# Evidence flags counted towards the data-mode sub-score
EVIDENCE_KEYS = ("crp_ppn", "scope12_reporting", "carbon_targets")
EVIDENCE_SCORES = {0: 45, 1: 55, 2: 62, 3: 75}

# Indicative-mode sub-scores
INDICATIVE_WITH_PLAN = 60
INDICATIVE_WITHOUT_PLAN = 45

Clock = Callable[[], date]


def utc_today() -> date:
    return datetime.now(UTC).date()


@dataclass(frozen=True)
class CarbonAdvice:
    """Carbon trajectory advice and the carbon sub-score."""

    mode: str  # data, indicative
    pct: int
    baseline_year: int | None = None
    baseline_tco2e: float | None = None
    current_year: int | None = None
    current_tco2e: float | None = None
    target_year: int | None = None
    annual_reduction_tco2e: float | None = None
    annual_reduction_pct: float | None = None
    message: str | None = None

    @property
    def is_indicative(self) -> bool:
        return self.mode == "indicative"

    def to_dict(self) -> dict:
        if self.is_indicative:
            return {
                "mode": self.mode,
                "message": self.message,
                "suggestedAnnualReduction_percent": self.annual_reduction_pct,
            }
        return {
            "mode": self.mode,
            "baselineYear": self.baseline_year,
            "baselineTCO2e": self.baseline_tco2e,
            "currentYear": self.current_year,
            "currentTCO2e": self.current_tco2e,
            "targetYear": self.target_year,
            "suggestedAnnualReduction_tCO2e": self.annual_reduction_tco2e,
            "suggestedAnnualReduction_percentOfCurrent": self.annual_reduction_pct,
        }


class CarbonAdvisor:
    """Builds carbon advice from optional emissions figures."""

    def __init__(self, clock: Clock = utc_today):
        self.clock = clock

    def advise(
        self,
        carbon: Mapping[str, Any] | None,
        answers: Mapping[str, Any],
    ) -> CarbonAdvice:
        """
        Compute carbon advice.

        Args:
            carbon: Optional figures (baseline_year, baseline_tco2e,
                current_year, current_tco2e, target_year)
            answers: Questionnaire answers, read for evidence flags

        Returns:
            CarbonAdvice in data mode when a valid baseline is supplied,
            otherwise in indicative mode
        """
        figures = carbon if isinstance(carbon, Mapping) else {}

        baseline = as_number(figures.get("baseline_tco2e"))
        baseline_year = as_number(figures.get("baseline_year"))

        if baseline is None or baseline_year is None or baseline_year <= MIN_BASELINE_YEAR:
            return self._indicative(answers)

        target_year = int(as_number(figures.get("target_year")) or DEFAULT_TARGET_YEAR)
        current_year = int(as_number(figures.get("current_year")) or self.clock().year)
        current = as_number(figures.get("current_tco2e"))
        if current is None:
            current = baseline

        years_left = max(target_year - current_year, 1)
        annual_drop = current / years_left
        pct_drop = annual_drop / current * 100 if current > 0 else 0.0

        evidence = sum(1 for key in EVIDENCE_KEYS if is_truthy(answers.get(key)))

        logger.debug(
            "carbon_trajectory_computed",
            years_left=years_left,
            evidence=evidence,
        )

        return CarbonAdvice(
            mode="data",
            pct=EVIDENCE_SCORES[evidence],
            baseline_year=int(baseline_year),
            baseline_tco2e=baseline,
            current_year=current_year,
            current_tco2e=current,
            target_year=target_year,
            annual_reduction_tco2e=round1(annual_drop),
            annual_reduction_pct=round1(pct_drop),
        )

    def _indicative(self, answers: Mapping[str, Any]) -> CarbonAdvice:
        has_plan = is_truthy(answers.get("crp_ppn"))
        return CarbonAdvice(
            mode="indicative",
            pct=INDICATIVE_WITH_PLAN if has_plan else INDICATIVE_WITHOUT_PLAN,
            annual_reduction_pct=PROXY_REDUCTION_PCT,
            message=PROXY_MESSAGE,
        )
