"""Advice generation from outstanding issues.

Maps issue keys and missing website findings to short recommended
actions. Rules are declared in priority order: mandatory gaps first, then
expected gaps, then website hygiene. The output is deduplicated, capped
and never empty.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from readiness.extraction.website import WEBSITE_PREDICATES
from readiness.scoring.issues import AggregatedIssues, Severity

MAX_BULLETS = 3

FOOTER_HYGIENE = "Tidy footer hygiene and clarify outcomes."
SOLID_BASELINE = (
    "Solid baseline: keep certificates and policies in date and tailor each bid to the "
    "buyer's outcomes."
)
DISQUALIFIER_ADVICE = "Resolve legal/financial disqualifiers before bidding."

_LABELS = {p.key: p.label for p in WEBSITE_PREDICATES}


@dataclass(frozen=True)
class AdviceContext:
    """What the rules can see."""

    red: frozenset[str]
    amber: frozenset[str]
    missing_website: frozenset[str]  # Labels of missing findings

    @classmethod
    def from_issues(
        cls, aggregated: AggregatedIssues, missing_website: Iterable[str]
    ) -> "AdviceContext":
        return cls(
            red=frozenset(aggregated.keys_with(Severity.RED)),
            amber=frozenset(aggregated.keys_with(Severity.AMBER)),
            missing_website=frozenset(missing_website),
        )


@dataclass(frozen=True)
class AdviceRule:
    """One trigger and the sentence it produces."""

    id: str
    sentence: str
    applies: Callable[[AdviceContext], bool]


def _red(*keys: str) -> Callable[[AdviceContext], bool]:
    return lambda ctx: any(key in ctx.red for key in keys)


def _amber(*keys: str) -> Callable[[AdviceContext], bool]:
    return lambda ctx: any(key in ctx.amber for key in keys)


def _amber_all(*keys: str) -> Callable[[AdviceContext], bool]:
    return lambda ctx: all(key in ctx.amber for key in keys)


def _site_missing(predicate_key: str) -> Callable[[AdviceContext], bool]:
    label = _LABELS[predicate_key]
    return lambda ctx: label in ctx.missing_website


ADVICE_RULES: tuple[AdviceRule, ...] = (
    # Mandatory gaps
    AdviceRule(
        "insurance_cover",
        "Put Public and Employer's Liability cover in place and keep the certificates ready to upload.",
        _red("insurance_pl", "insurance_el"),
    ),
    AdviceRule(
        "data_protection",
        "Publish a UK GDPR + DPA 2018 policy with DPO/contact.",
        _red("dp_ukgdpr"),
    ),
    AdviceRule(
        "health_and_safety",
        "Adopt a written Health & Safety policy signed off by a director.",
        _red("h_and_s"),
    ),
    # Expected gaps
    AdviceRule(
        "professional_indemnity",
        "Add Professional Indemnity cover sized to the contracts you target.",
        _amber("insurance_pi"),
    ),
    AdviceRule(
        "security_assurance",
        "Strengthen information security assurance (CE+ or ISO 27001).",
        _amber_all("iso_27001", "ce_plus"),
    ),
    AdviceRule(
        "continuity",
        "Document Business Continuity & Disaster Recovery basics.",
        _amber("bcp_dr"),
    ),
    AdviceRule(
        "modern_slavery",
        "Publish a Modern Slavery statement and link it in the footer.",
        _amber("modern_slavery"),
    ),
    AdviceRule(
        "carbon_plan",
        "Publish a Carbon Reduction Plan in the PPN 06/21 format.",
        _amber("crp_ppn"),
    ),
    AdviceRule(
        "track_record",
        "Prepare 2–3 public-sector case studies with measurable outcomes.",
        _amber("ps_experience_some", "case_studies_2plus"),
    ),
    # Website signals
    AdviceRule(
        "accessibility",
        "Publish an accessibility statement referencing WCAG 2.2 AA.",
        _site_missing("accessibility"),
    ),
    AdviceRule(
        "cyber_badge",
        "Show your Cyber Essentials certification on the website.",
        _site_missing("cyber_essentials"),
    ),
    AdviceRule(
        "social_proof",
        "Add 2–3 outcome-led case studies or link to reviews.",
        _site_missing("social_proof"),
    ),
    AdviceRule(
        "privacy_page",
        "Ensure a visible Privacy page in the footer.",
        _site_missing("privacy"),
    ),
    AdviceRule(
        "company_details",
        "Display registered company info to reassure public buyers.",
        _site_missing("company_number"),
    ),
    AdviceRule(
        "modern_slavery_link",
        "Publish a Modern Slavery statement and link it in the footer.",
        _site_missing("modern_slavery"),
    ),
)


class AdviceGenerator:
    """Selects the top recommended actions."""

    def __init__(self, rules: tuple[AdviceRule, ...] = ADVICE_RULES, limit: int = MAX_BULLETS):
        self.rules = rules
        self.limit = limit

    def generate(self, aggregated: AggregatedIssues, missing_website: Iterable[str]) -> list[str]:
        """
        Generate advice bullets.

        Args:
            aggregated: Severity-ordered issues
            missing_website: Labels of website findings that were not present

        Returns:
            Between 1 and `limit` sentences, in rule order
        """
        missing = list(missing_website)
        ctx = AdviceContext.from_issues(aggregated, missing)

        bullets: list[str] = []
        for rule in self.rules:
            if rule.applies(ctx) and rule.sentence not in bullets:
                bullets.append(rule.sentence)

        if bullets:
            return bullets[: self.limit]
        if missing:
            return [FOOTER_HYGIENE]
        return [SOLID_BASELINE]

