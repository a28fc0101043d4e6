from fastapi import APIRouter, Depends, Request

from app.ai.types import AIClient
from app.api.deps import get_ai_client
from app.core.errors import AppError
from app.core.rate_limit import rate_limit
from app.features.keyword_extract import extract_keywords_from_text
from app.schemas.ats import (
    AtsScoreRequest,
    AtsScoreResponse,
    KeywordExtractRequest,
    KeywordExtractResponse,
    KeywordExtractResult,
    KeywordItem,
)
from app.services.ats_service import calculate_ats_score, resume_data_to_text

router = APIRouter()


@router.post("/ats/score", response_model=AtsScoreResponse)
@rate_limit()
async def ats_score(
    request: Request,
    payload: AtsScoreRequest,
    ai_client: AIClient | None = Depends(get_ai_client),
):
    _ = request
    resume_text = payload.resume_text or resume_data_to_text(payload.resume_data)
    if not resume_text.strip():
        raise AppError("No resume text found. Upload a resume first or provide resumeText.", 400)

    result = await calculate_ats_score(resume_text, payload.resume_data, ai_client=ai_client)
    return AtsScoreResponse(message="ATS score calculated successfully", data=result)


@router.post("/ats/keywords", response_model=KeywordExtractResponse)
@rate_limit()
async def ats_keywords(request: Request, payload: KeywordExtractRequest):
    _ = request
    candidates = extract_keywords_from_text(payload.text, payload.max_keywords)
    return KeywordExtractResponse(
        message="Keywords extracted successfully",
        data=KeywordExtractResult(
            keywords=[KeywordItem(term=candidate.term, score=candidate.score) for candidate in candidates]
        ),
    )
