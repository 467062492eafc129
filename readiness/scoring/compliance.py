"""Compliance evaluation of the questionnaire answers.

Partitions answers into satisfied and missing signals, raises issues for
the gaps that matter and computes the compliance sub-score with a
selectable strategy:

- penalty: 100 minus a fixed penalty per Red/Amber/Green issue (canonical)
- ratio: satisfied weight over total weight across the catalog (legacy)
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from readiness.scoring.catalog import SIGNAL_CATALOG, SignalCatalog, SignalDefinition, Tier
from readiness.scoring.issues import Issue, RagTally, Severity
from readiness.scoring.numbers import clamp_pct, is_truthy

logger = structlog.get_logger(__name__)

# Answer keys that are context, not scored signals
TARGETS_PUBLIC_SECTOR = "targets_public_sector"
MODERN_SLAVERY = "modern_slavery"
FLAG_NO_MODERN_SLAVERY_PS = "no_modern_slavery_ps"


def compliance_band(pct: int) -> str:
    """Coarse label for the compliance sub-score."""
    if pct >= 80:
        return "Strong"
    elif pct >= 60:
        return "Good"
    elif pct >= 40:
        return "Emerging"
    return "Low"


@dataclass(frozen=True)
class ComplianceEvaluation:
    """Outcome of partitioning one answer set against the catalog."""

    issues: tuple[Issue, ...]
    satisfied: tuple[str, ...]
    missing: tuple[str, ...]
    submitted: frozenset[str]
    flags: tuple[str, ...] = ()

    @property
    def rag(self) -> RagTally:
        return RagTally.from_issues(self.issues)

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags


@dataclass(frozen=True)
class ComplianceScore:
    """Compliance sub-score with the strategy that produced it."""

    pct: int
    band: str
    model: str


class ComplianceModel(ABC):
    """Strategy turning an evaluation into a 0-100 percentage."""

    name: str = ""

    @abstractmethod
    def score(
        self,
        evaluation: ComplianceEvaluation,
        answers: Mapping[str, Any],
        catalog: SignalCatalog,
    ) -> int:
        """Compute the compliance percentage."""


@dataclass
class PenaltyComplianceModel(ComplianceModel):
    """Deduct a fixed penalty per outstanding issue."""

    red_penalty: int = 20
    amber_penalty: int = 8
    green_penalty: int = 2
    name: str = field(default="penalty", init=False)

    def score(
        self,
        evaluation: ComplianceEvaluation,
        answers: Mapping[str, Any],
        catalog: SignalCatalog,
    ) -> int:
        rag = evaluation.rag
        penalty = (
            rag.red * self.red_penalty
            + rag.amber * self.amber_penalty
            + rag.green * self.green_penalty
        )
        return clamp_pct(100 - penalty)


@dataclass
class RatioComplianceModel(ComplianceModel):
    """Satisfied weight as a share of the total catalog weight."""

    public_sector_penalty: float = 3
    name: str = field(default="ratio", init=False)

    def score(
        self,
        evaluation: ComplianceEvaluation,
        answers: Mapping[str, Any],
        catalog: SignalCatalog,
    ) -> int:
        earned = 0.0
        possible = 0.0
        for definition in catalog:
            if _is_superseded(definition, answers):
                continue
            possible += definition.weight
            if is_truthy(answers.get(definition.key)):
                earned += definition.weight

        if evaluation.has_flag(FLAG_NO_MODERN_SLAVERY_PS):
            earned -= self.public_sector_penalty

        if possible <= 0:
            return 0
        return clamp_pct(earned / possible * 100)


COMPLIANCE_MODELS: dict[str, type[ComplianceModel]] = {
    "penalty": PenaltyComplianceModel,
    "ratio": RatioComplianceModel,
}


def get_compliance_model(name: str) -> ComplianceModel:
    """Instantiate a compliance model by name with its default parameters."""
    try:
        return COMPLIANCE_MODELS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown compliance model '{name}'. Choose from: {', '.join(COMPLIANCE_MODELS)}"
        ) from None


def _is_superseded(definition: SignalDefinition, answers: Mapping[str, Any]) -> bool:
    return definition.superseded_by is not None and is_truthy(
        answers.get(definition.superseded_by)
    )


class ComplianceEvaluator:
    """Evaluates an answer set against a signal catalog."""

    def __init__(
        self,
        catalog: SignalCatalog = SIGNAL_CATALOG,
        model: ComplianceModel | None = None,
    ):
        self.catalog = catalog
        self.model = model or PenaltyComplianceModel()

    def failed_gates(self, answers: Mapping[str, Any]) -> list[str]:
        """Gate keys that are not satisfied, in catalog order."""
        return [key for key in self.catalog.gate_keys if not is_truthy(answers.get(key))]

    def evaluate(self, answers: Mapping[str, Any]) -> ComplianceEvaluation:
        """
        Partition answers and raise issues for the gaps.

        Mandatory keys that are not truthy become Red issues. Expected keys
        become Amber issues only when the caller submitted them, so partial
        forms are not penalised for questions they never asked. Optional
        keys never raise issues.
        """
        submitted = frozenset(answers)
        flags: list[str] = []
        if is_truthy(answers.get(TARGETS_PUBLIC_SECTOR)) and not is_truthy(
            answers.get(MODERN_SLAVERY)
        ):
            flags.append(FLAG_NO_MODERN_SLAVERY_PS)

        issues: list[Issue] = []
        satisfied: list[str] = []
        missing: list[str] = []

        for definition in self.catalog:
            if is_truthy(answers.get(definition.key)) or _is_superseded(definition, answers):
                satisfied.append(definition.key)
                continue
            missing.append(definition.key)

            if definition.tier == Tier.MANDATORY:
                issues.append(Issue(definition.key, definition.label, Severity.RED))
            elif definition.tier == Tier.EXPECTED:
                forced = definition.key == MODERN_SLAVERY and FLAG_NO_MODERN_SLAVERY_PS in flags
                if definition.key in submitted or forced:
                    issues.append(Issue(definition.key, definition.label, Severity.AMBER))

        return ComplianceEvaluation(
            issues=tuple(issues),
            satisfied=tuple(satisfied),
            missing=tuple(missing),
            submitted=submitted,
            flags=tuple(flags),
        )

    def score(self, answers: Mapping[str, Any], evaluation: ComplianceEvaluation) -> ComplianceScore:
        """Compute the compliance sub-score with the configured model."""
        pct = self.model.score(evaluation, answers, self.catalog)
        logger.debug(
            "compliance_scored",
            model=self.model.name,
            pct=pct,
            red=evaluation.rag.red,
            amber=evaluation.rag.amber,
        )
        return ComplianceScore(pct=pct, band=compliance_band(pct), model=self.model.name)
