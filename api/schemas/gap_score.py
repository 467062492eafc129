"""Gap-score request and response schemas.

The request schema never rejects a body: fields of the wrong type are
treated as unset. The response uses camelCase keys on the wire.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from readiness.engine import Submission


class GapScoreRequest(BaseModel):
    """Questionnaire answers, optional carbon figures and website."""

    model_config = ConfigDict(extra="ignore")

    website: str | None = Field(None, description="Public website URL (http or https)")
    answers: dict[str, Any] = Field(default_factory=dict, description="Questionnaire answers")
    carbon: dict[str, Any] | None = Field(None, description="Optional emissions figures")
    meta: dict[str, Any] = Field(default_factory=dict, description="Caller metadata, not scored")

    @field_validator("website", mode="before")
    @classmethod
    def website_as_string(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None

    @field_validator("answers", "meta", mode="before")
    @classmethod
    def mapping_or_empty(cls, v: Any) -> dict[str, Any]:
        return v if isinstance(v, dict) else {}

    @field_validator("carbon", mode="before")
    @classmethod
    def mapping_or_none(cls, v: Any) -> dict[str, Any] | None:
        return v if isinstance(v, dict) else None

    def to_submission(self) -> Submission:
        return Submission.from_payload(self.model_dump())


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Subscore(_CamelModel):
    compliance_pct: int = Field(..., ge=0, le=100)
    compliance_band: str
    perception_pct: int = Field(..., ge=0, le=100)
    carbon_pct: int | None = Field(None, ge=0, le=100)


class RagBreakdown(_CamelModel):
    red: int = Field(..., ge=0)
    amber: int = Field(..., ge=0)
    green: int = Field(..., ge=0)


class IssueOut(_CamelModel):
    key: str
    label: str
    severity: str = Field(..., description="red, amber or green")


class WebsiteFindings(_CamelModel):
    present: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)


class GapScoreResponse(_CamelModel):
    """Readiness report."""

    overall_pct: int = Field(..., ge=0, le=100)
    band_label: str
    bullets: list[str] = Field(..., min_length=1, max_length=3)
    subscore: Subscore
    rag: RagBreakdown
    issues: list[IssueOut] = Field(default_factory=list)
    website_findings: WebsiteFindings
    carbon_advice: dict[str, Any] | None = None
    next_step_url: str
