"""Gap-score endpoint.

POST only, authenticated with the x-key header. Any body is accepted:
missing or malformed parts degrade to defaults rather than a 4xx.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Request

from api.auth import ApiKeyDep
from api.deps import EngineDep
from api.schemas import ErrorResponse
from api.schemas.gap_score import GapScoreRequest, GapScoreResponse

router = APIRouter(tags=["Gap score"])
logger = structlog.get_logger(__name__)


async def _read_payload(request: Request) -> dict[str, Any]:
    """Parse the JSON body, treating anything unreadable as empty."""
    try:
        payload = await request.json()
    except ValueError:
        logger.info("gap_score_body_unreadable")
        return {}
    return payload if isinstance(payload, dict) else {}


@router.post(
    "/gap-score",
    response_model=GapScoreResponse,
    dependencies=[ApiKeyDep],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def gap_score(request: Request, engine: EngineDep) -> GapScoreResponse:
    """
    Score public-sector bid readiness.

    Returns the overall percentage, band, up to three recommended actions,
    sub-scores, RAG breakdown, issues, website findings and carbon advice.
    """
    body = GapScoreRequest.model_validate(await _read_payload(request))
    submission = body.to_submission()

    logger.info(
        "gap_score_requested",
        has_website=submission.website is not None,
        answer_count=len(submission.answers),
        has_carbon=submission.carbon is not None,
        meta_source=submission.meta.get("source"),
    )

    report = await engine.assess(submission)
    return GapScoreResponse.model_validate(report.to_dict())
