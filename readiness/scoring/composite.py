"""Composite readiness score and band mapping."""

from dataclasses import dataclass

from readiness.scoring.numbers import clamp_pct

BAND_READY = "Public-sector ready (indicative)"
BAND_NEARLY = "Nearly there — a few gaps"
BAND_EMERGING = "Emerging — quick wins available"
BAND_EARLY = "Early stage — start with foundations"

# (minimum overall pct, label), highest first
READINESS_BANDS: tuple[tuple[int, str], ...] = (
    (80, BAND_READY),
    (60, BAND_NEARLY),
    (40, BAND_EMERGING),
    (0, BAND_EARLY),
)


@dataclass(frozen=True)
class CompositeWeights:
    """Blend of the sub-scores. A zero carbon weight drops carbon entirely."""

    compliance: float
    perception: float
    carbon: float = 0.0

    def __post_init__(self) -> None:
        total = self.compliance + self.perception + self.carbon
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"Composite weights must sum to 1.0, got {total}")
        if min(self.compliance, self.perception, self.carbon) < 0:
            raise ValueError("Composite weights must be non-negative")

    @property
    def includes_carbon(self) -> bool:
        return self.carbon > 0


THREE_FACTOR_WEIGHTS = CompositeWeights(compliance=0.45, perception=0.35, carbon=0.20)
TWO_FACTOR_WEIGHTS = CompositeWeights(compliance=0.60, perception=0.40, carbon=0.0)


def band_for(overall_pct: int) -> str:
    """Map an overall percentage to its readiness band."""
    for minimum, label in READINESS_BANDS:
        if overall_pct >= minimum:
            return label
    return BAND_EARLY


def overall_pct(
    compliance_pct: int,
    perception_pct: int,
    carbon_pct: int | None = None,
    weights: CompositeWeights = THREE_FACTOR_WEIGHTS,
) -> int:
    """
    Blend the sub-scores into one rounded percentage.

    Raises:
        ValueError: If the weights include carbon but no carbon score is given
    """
    total = weights.compliance * compliance_pct + weights.perception * perception_pct
    if weights.includes_carbon:
        if carbon_pct is None:
            raise ValueError("Carbon score required by the configured weights")
        total += weights.carbon * carbon_pct
    return clamp_pct(total)
