"""Website trust-signal extraction.

Runs a fixed, ordered list of text predicates over one lower-cased HTML
document and scores how many public-buyer trust signals the page shows.
A missing page never fails the request: it degrades to a fixed fallback
perception score with a single fetch-failure finding.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from readiness.scoring.issues import Issue, Severity
from readiness.scoring.numbers import clamp_pct, round_half_up

# Perception score parameters
PERCEPTION_BASE = 45  # No website supplied
PERCEPTION_FALLBACK = 40  # Website supplied but could not be fetched
PERCEPTION_SPAN = 55  # Added in proportion to predicates satisfied

FETCH_FAILED_KEY = "fetch_failed"
FETCH_FAILED_LABEL = "Website could not be fetched"

STATUS_NOT_PROVIDED = "not_provided"
STATUS_SCANNED = "scanned"
STATUS_FETCH_FAILED = "fetch_failed"


@dataclass(frozen=True)
class WebsitePredicate:
    """A named check against the page."""

    key: str
    label: str
    check: Callable[[str, str], bool]  # (url, lower-cased html) -> present
    missing_severity: Severity = Severity.GREEN


def _contains_any(*markers: str) -> Callable[[str, str], bool]:
    def check(url: str, html: str) -> bool:
        return any(marker in html for marker in markers)

    return check


def _uses_https(url: str, html: str) -> bool:
    return url.lower().startswith("https://")


WEBSITE_PREDICATES: tuple[WebsitePredicate, ...] = (
    WebsitePredicate("https", "HTTPS", _uses_https),
    WebsitePredicate("privacy", "Privacy policy", _contains_any("privacy")),
    WebsitePredicate("cookies", "Cookie policy", _contains_any("cookie")),
    WebsitePredicate("contact", "Contact details", _contains_any("contact")),
    WebsitePredicate(
        "accessibility",
        "Accessibility statement",
        _contains_any("accessibility", "wcag"),
        missing_severity=Severity.AMBER,
    ),
    WebsitePredicate(
        "company_number",
        "Company registration details",
        _contains_any("company number", "registered in", "company no"),
    ),
    WebsitePredicate(
        "social_proof",
        "Case studies or reviews",
        _contains_any("case stud", "testimonial", "trustpilot", "google reviews", "reviews"),
    ),
    WebsitePredicate(
        "modern_slavery", "Modern slavery statement", _contains_any("modern slavery")
    ),
    WebsitePredicate(
        "cyber_essentials",
        "Cyber Essentials",
        _contains_any("cyber essentials", "iasme"),
        missing_severity=Severity.AMBER,
    ),
)


@dataclass(frozen=True)
class WebsiteFinding:
    """Whether one trust signal was found on the page."""

    key: str
    label: str
    present: bool
    missing_severity: Severity = Severity.GREEN

    @property
    def issue_key(self) -> str:
        return f"website_{self.key}"

    def to_issue(self) -> Issue | None:
        if self.present:
            return None
        return Issue(self.issue_key, self.label, self.missing_severity)


@dataclass(frozen=True)
class WebsiteScan:
    """Findings and perception sub-score for one page."""

    url: str | None
    status: str
    perception_pct: int
    findings: tuple[WebsiteFinding, ...] = field(default_factory=tuple)

    @property
    def present_labels(self) -> list[str]:
        return [f.label for f in self.findings if f.present]

    @property
    def missing_labels(self) -> list[str]:
        return [f.label for f in self.findings if not f.present]

    @property
    def issues(self) -> list[Issue]:
        return [issue for f in self.findings if (issue := f.to_issue()) is not None]

    def to_dict(self) -> dict:
        return {"present": self.present_labels, "missing": self.missing_labels}


def no_website_scan() -> WebsiteScan:
    """Scan result when no usable URL was supplied."""
    return WebsiteScan(url=None, status=STATUS_NOT_PROVIDED, perception_pct=PERCEPTION_BASE)


def failed_scan(url: str) -> WebsiteScan:
    """Scan result when the page could not be fetched."""
    return WebsiteScan(
        url=url,
        status=STATUS_FETCH_FAILED,
        perception_pct=PERCEPTION_FALLBACK,
        findings=(WebsiteFinding(FETCH_FAILED_KEY, FETCH_FAILED_LABEL, present=False),),
    )


def perception_pct(satisfied: int, total: int) -> int:
    """Base score plus an increment proportional to the predicates satisfied."""
    if total <= 0:
        return PERCEPTION_BASE
    return clamp_pct(PERCEPTION_BASE + round_half_up(PERCEPTION_SPAN * satisfied / total))


def extract_website_signals(
    url: str | None,
    html: str | None,
    fetch_failed: bool = False,
    predicates: tuple[WebsitePredicate, ...] = WEBSITE_PREDICATES,
) -> WebsiteScan:
    """
    Evaluate the trust-signal predicates against a fetched page.

    Args:
        url: The page URL (used for the HTTPS check)
        html: Lower-cased page body, or None if unavailable
        fetch_failed: True when a fetch was attempted and failed
        predicates: Ordered predicates to run

    Returns:
        WebsiteScan with one finding per predicate
    """
    if not url:
        return no_website_scan()
    if fetch_failed or html is None:
        return failed_scan(url)

    text = html.lower()
    findings = tuple(
        WebsiteFinding(
            key=p.key,
            label=p.label,
            present=p.check(url, text),
            missing_severity=p.missing_severity,
        )
        for p in predicates
    )
    satisfied = sum(1 for f in findings if f.present)

    return WebsiteScan(
        url=url,
        status=STATUS_SCANNED,
        perception_pct=perception_pct(satisfied, len(findings)),
        findings=findings,
    )
