"""
API Routes for the ResumeMatch Scoring API.

Provides endpoints for:
- Keyword extraction and job-type detection
- ATS score (deterministic simulation reconciled with AI judgment)
- HR score (formatting, semantic and recruiter-review layers)
- Health checks
"""
from datetime import datetime, timezone
import logging

from fastapi import APIRouter

from app.models.scoring import (
    ATSIssueResponse,
    ATSScoreRequest,
    ATSScoreResponse,
    FormattingSuggestionResponse,
    HealthResponse,
    HRFeedbackResponse,
    HRScoreRequest,
    HRScoreResponse,
    KeywordsRequest,
    KeywordsResponse,
    SemanticSectionScoreResponse,
    TextRangeResponse,
    WeightsResponse,
)
from app.services.analysis import run_ats_pipeline, run_hr_pipeline
from app.services.ats_scorer import detect_job_type
from app.services.cache import ping_redis
from app.services.keywords import extract_keywords
from app.services.results import ATSIssue, HRFeedback, TextRange
from app.services.scoring_policy import WEIGHT_PROFILES, WeightProfile
from app.config import get_settings

logger = logging.getLogger(__name__)
router = APIRouter()


def _text_range(text_range: TextRange | None) -> TextRangeResponse | None:
    if text_range is None:
        return None
    return TextRangeResponse(start=text_range.start, end=text_range.end)


def _weights(weights: WeightProfile) -> WeightsResponse:
    return WeightsResponse(keywords=weights.keywords, formatting=weights.formatting, sections=weights.sections)


def _issue(issue: ATSIssue) -> ATSIssueResponse:
    return ATSIssueResponse(
        kind=issue.kind,
        severity=issue.severity,
        message=issue.message,
        suggestion=issue.suggestion,
        text_range=_text_range(issue.text_range),
    )


def _feedback(item: HRFeedback) -> HRFeedbackResponse:
    return HRFeedbackResponse(
        kind=item.kind,
        layer=item.layer,
        severity=item.severity,
        message=item.message,
        suggestion=item.suggestion,
        text_range=_text_range(item.text_range),
    )


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Reports the service version, whether Redis answers (null when Redis is
    not configured) and whether a Gemini key is configured. Scoring still
    works without either, with AI enrichments skipped.
    """
    settings = get_settings()
    redis_available = await ping_redis()

    return HealthResponse(
        status="degraded" if redis_available is False else "healthy",
        version=settings.app_version,
        timestamp=datetime.now(timezone.utc),
        redis_available=redis_available,
        gemini_configured=bool(settings.gemini_api_key),
    )


@router.post("/keywords", response_model=KeywordsResponse, tags=["Scoring"])
async def keywords(request: KeywordsRequest):
    """
    Extract ranked keywords from a job description.

    Returns:
    - keywords: Multi-word phrases first, then single words by frequency
    - jobType: Detected job type (tech, senior, entry, general)
    - weights: ATS component weights for that job type
    """
    job_type = detect_job_type(request.job_description)
    return KeywordsResponse(
        keywords=extract_keywords(request.job_description),
        job_type=job_type,
        weights=_weights(WEIGHT_PROFILES[job_type]),
    )


@router.post("/ats-score", response_model=ATSScoreResponse, tags=["Scoring"])
async def ats_score(request: ATSScoreRequest):
    """
    Simulate an Applicant Tracking System filter.

    Request body:
    - resumeText: Plain resume text
    - jobDescription: Job description text
    - metadata.pageCount: Optional page count of the source document
    - strictMode: Optional whole-word keyword matching
    - jobType: Optional job type override

    The deterministic score (keywords, formatting, sections) is reconciled
    with a supplementary AI analysis when one is available. `passed` is true
    at 75 or above.
    """
    result = await run_ats_pipeline(
        request.resume_text,
        request.job_description,
        page_count=request.page_count,
        strict_mode=request.strict_mode,
        job_type=request.job_type,
    )
    score = result.score

    return ATSScoreResponse(
        overall=score.overall,
        keyword_match_pct=score.keyword_match_pct,
        formatting_score=score.formatting_score,
        section_score=score.section_score,
        matched_keywords=score.matched_keywords,
        missing_keywords=score.missing_keywords,
        issues=[_issue(i) for i in score.issues],
        passed=score.passed,
        job_type=score.job_type,
        weights=_weights(score.weights),
        supplementary_applied=result.supplementary is not None,
        keyword_priorities=result.supplementary.keywordPriorities if result.supplementary else [],
    )


@router.post("/hr-score", response_model=HRScoreResponse, tags=["Scoring"])
async def hr_score(request: HRScoreRequest):
    """
    Simulate a human recruiter review.

    Request body:
    - resumeText, jobDescription, metadata.pageCount: as for /ats-score
    - userContext: Optional targetRole, yearsExperience, visaStatus
    - industry, roleLevel: Optional filters for the reference resume corpus

    Combines formatting against reference resumes, semantic similarity and
    an AI recruiter review. Unavailable layers are skipped or reweighted.
    """
    context = request.user_context
    result = await run_hr_pipeline(
        request.resume_text,
        request.job_description,
        page_count=request.page_count,
        target_role=context.target_role if context else None,
        years_experience=context.years_experience if context else None,
        visa_status=context.visa_status if context else None,
        industry=request.industry,
        role_level=request.role_level,
    )
    score = result.score
    review = result.llm_review

    return HRScoreResponse(
        overall=score.overall,
        formatting_score=score.formatting_score,
        semantic_score=score.semantic_score,
        llm_score=score.llm_score,
        feedback=[_feedback(f) for f in score.feedback],
        reference_count=result.formatting.reference_count,
        formatting_suggestions=[
            FormattingSuggestionResponse(
                aspect=s.aspect,
                user_value=s.user_value,
                reference_value=s.reference_value,
                percentage_support=s.percentage_support,
                message=s.message,
                severity=s.severity,
            )
            for s in result.formatting.suggestions
        ],
        section_scores=[
            SemanticSectionScoreResponse(section=s.section, score=s.score)
            for s in result.semantic.section_scores
        ],
        llm_review_applied=review is not None,
        first_impression=review.firstImpression if review else None,
        callback_decision=review.callbackDecision if review else None,
    )
