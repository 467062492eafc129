"""Signal catalog for the compliance questionnaire.

Defines every recognised questionnaire key, the tier it belongs to, its
weight and a human-readable label. Tier membership and weights are data:
scoring strategies read them through the catalog and never hard-code keys.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

CATALOG_VERSION = "2024.3"


class Tier(str, Enum):
    """Severity class of a questionnaire signal."""

    MANDATORY = "mandatory"  # Absence is a blocking gap
    EXPECTED = "expected"  # Absence is a moderate gap
    OPTIONAL = "optional"  # Bonus only, never penalised


@dataclass(frozen=True)
class SignalDefinition:
    """A single questionnaire signal."""

    key: str
    label: str
    tier: Tier
    weight: float
    gate: bool = False  # Legal disqualifier: failing it ends the assessment
    superseded_by: str | None = None  # Satisfied when this other key is truthy

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "tier": self.tier.value,
            "weight": self.weight,
            "gate": self.gate,
            "superseded_by": self.superseded_by,
        }


class SignalCatalog:
    """Immutable, ordered collection of signal definitions."""

    def __init__(self, definitions: Iterable[SignalDefinition], version: str = CATALOG_VERSION):
        self.version = version
        self._definitions: tuple[SignalDefinition, ...] = tuple(definitions)
        self._by_key: dict[str, SignalDefinition] = {}
        for definition in self._definitions:
            if definition.key in self._by_key:
                raise ValueError(f"Duplicate signal key: {definition.key}")
            self._by_key[definition.key] = definition

    def __iter__(self) -> Iterator[SignalDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def get(self, key: str) -> SignalDefinition | None:
        """Get the definition for a key, or None if unknown."""
        return self._by_key.get(key)

    def tier_of(self, key: str) -> Tier | None:
        definition = self._by_key.get(key)
        return definition.tier if definition else None

    def weight_of(self, key: str) -> float:
        definition = self._by_key.get(key)
        return definition.weight if definition else 0.0

    def keys_in(self, tier: Tier) -> list[str]:
        """All keys in a tier, in declaration order."""
        return [d.key for d in self._definitions if d.tier == tier]

    @property
    def gate_keys(self) -> list[str]:
        return [d.key for d in self._definitions if d.gate]

    @property
    def total_weight(self) -> float:
        return sum(d.weight for d in self._definitions)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "signals": [d.to_dict() for d in self._definitions],
        }


def _mandatory(key: str, label: str, weight: float, gate: bool = False) -> SignalDefinition:
    return SignalDefinition(key=key, label=label, tier=Tier.MANDATORY, weight=weight, gate=gate)


def _expected(
    key: str, label: str, weight: float, superseded_by: str | None = None
) -> SignalDefinition:
    return SignalDefinition(
        key=key,
        label=label,
        tier=Tier.EXPECTED,
        weight=weight,
        superseded_by=superseded_by,
    )


def _optional(key: str, label: str, weight: float) -> SignalDefinition:
    return SignalDefinition(key=key, label=label, tier=Tier.OPTIONAL, weight=weight)


SIGNAL_CATALOG = SignalCatalog(
    [
        # Legal and financial disqualifiers
        _mandatory("insolvency_clear", "Not insolvent or in administration", 12, gate=True),
        _mandatory("tax_clear", "Tax affairs in order", 10, gate=True),
        _mandatory("no_convictions", "No disqualifying convictions", 8, gate=True),
        # Core cover and policies
        _mandatory("insurance_pl", "Public Liability insurance", 3),
        _mandatory("insurance_el", "Employer's Liability insurance", 3),
        _mandatory("dp_ukgdpr", "UK GDPR / DPA 2018 policy", 8),
        _mandatory("h_and_s", "Health & Safety policy", 4),
        # Insurance and certifications
        _expected("insurance_pi", "Professional Indemnity insurance", 3),
        _expected("iso_9001", "ISO 9001 quality management", 6),
        _expected("iso_27001", "ISO 27001 information security", 8),
        _expected("iso_14001", "ISO 14001 environmental management", 4),
        _expected("ce_plus", "Cyber Essentials Plus", 6),
        _expected("ce_basic", "Cyber Essentials", 3, superseded_by="ce_plus"),
        _expected("bpss", "BPSS-vetted staff", 5),
        # Policies buyers ask for
        _expected("modern_slavery", "Modern Slavery statement", 6),
        _expected("edi", "Equality, diversity & inclusion policy", 4),
        _expected("anti_bribery", "Anti-bribery policy", 4),
        _expected("whistleblowing", "Whistleblowing policy", 2),
        _expected("bcp_dr", "Business continuity & disaster recovery plan", 5),
        # Carbon reporting maturity
        _expected("crp_ppn", "Carbon Reduction Plan (PPN 06/21)", 6),
        _expected("scope12_reporting", "Scope 1 & 2 emissions reporting", 3),
        _expected("carbon_targets", "Published carbon targets", 2),
        # Track record
        _expected("ps_experience_some", "Some public-sector delivery experience", 5),
        _expected("case_studies_2plus", "Two or more case studies", 3),
        _expected("financial_stability", "Financial stability evidence", 6),
        _expected("bid_process", "Documented bid process", 3),
        # Bonus signals
        _optional("insurance_pl_10m_bonus", "Public Liability cover of £10m or more", 1),
        _optional("iso_20000", "ISO 20000 IT service management", 5),
        _optional("csa_star", "CSA STAR cloud security", 4),
        _optional("sc_or_dv", "SC or DV cleared staff", 3),
        _optional("supplier_mgmt", "Supplier management process", 2),
        _optional("iso_50001", "ISO 50001 energy management", 1),
        _optional("sbti", "Science Based Targets commitment", 1),
        _optional("carbon_trust", "Carbon Trust certification", 1),
        _optional("ps_experience_strong", "Strong public-sector delivery record", 7),
        _optional("portals_registered", "Registered on procurement portals", 3),
        _optional("prev_framework_award", "Previous framework award", 2),
        # Social value themes
        _optional("sv_local_employment", "Social value: local employment", 2),
        _optional("sv_apprenticeships", "Social value: apprenticeships", 2),
        _optional("sv_sme_supply_chain", "Social value: SME supply chain", 1),
        _optional("sv_community", "Social value: community benefit", 1),
        _optional("sv_environment", "Social value: environmental improvement", 1),
    ]
)
