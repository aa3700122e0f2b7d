"""
Scoring pipelines.

Each pipeline runs the deterministic core and then the optional AI
enrichments. Enrichments fail soft: a failure is logged and replaced by a
safe default, so a score is always produced.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from app.config import get_settings
from app.models.judgments import HRReviewResult, SupplementaryATSAnalysis
from app.services.ats_scorer import ATSAnalysisResult, combine_ats_results, get_ats_scorer
from app.services.hr_formatting import (
    FormattingAnalysisResult,
    analyze_formatting,
    fetch_reference_resumes,
)
from app.services.hr_scorer import HRScore, compute_hr_score
from app.services.llm_reviewer import run_hr_review, run_supplementary_ats_analysis
from app.services.scoring_policy import JobType
from app.services.semantic import SemanticScore, run_semantic_analysis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ATSPipelineResult:
    score: ATSAnalysisResult
    supplementary: Optional[SupplementaryATSAnalysis] = None


@dataclass(frozen=True)
class HRPipelineResult:
    score: HRScore
    formatting: FormattingAnalysisResult
    semantic: SemanticScore
    llm_review: Optional[HRReviewResult] = None


async def run_ats_pipeline(
    resume_text: str,
    job_description: str,
    page_count: Optional[int] = None,
    strict_mode: Optional[bool] = None,
    job_type: Optional[JobType] = None,
) -> ATSPipelineResult:
    """
    Deterministic ATS analysis, then supplementary AI analysis, then reconciliation.

    Args:
        resume_text: Plain resume text
        job_description: Job description text
        page_count: Page count of the source document, if known
        strict_mode: Whole-word keyword matching; defaults to the configured flag
        job_type: Override for the detected job type

    Returns:
        ATSPipelineResult with the reconciled score and the AI judgment (if any)
    """
    settings = get_settings()
    deterministic = get_ats_scorer().analyze(
        resume_text,
        job_description,
        page_count=page_count,
        job_type=job_type,
        strict_mode=strict_mode,
    )

    supplementary = None
    if settings.enable_supplementary_ats:
        try:
            supplementary = await run_supplementary_ats_analysis(
                resume_text,
                job_description,
                deterministic.matched_keywords,
                deterministic.missing_keywords,
                deterministic.keyword_match_pct,
            )
        except Exception as e:
            logger.warning(f"Supplementary ATS analysis unavailable, using deterministic score: {e}")

    score = combine_ats_results(deterministic, supplementary)
    return ATSPipelineResult(score=score, supplementary=supplementary)


async def _formatting_layer(
    resume_text: str,
    page_count: Optional[int],
    industry: Optional[str],
    role_level: Optional[str],
) -> FormattingAnalysisResult:
    # Corpus fetch and comparison succeed or fail together
    try:
        references = await fetch_reference_resumes(industry=industry, role_level=role_level)
        return analyze_formatting(resume_text, page_count, references)
    except Exception as e:
        logger.warning(f"Reference comparison failed, using standalone formatting analysis: {e}")
        return analyze_formatting(resume_text, page_count)


async def _semantic_layer(resume_text: str, job_description: str) -> SemanticScore:
    if not get_settings().enable_semantic_analysis:
        return SemanticScore()
    try:
        return await run_semantic_analysis(resume_text, job_description)
    except Exception as e:
        logger.warning(f"Semantic analysis unavailable: {e}")
        return SemanticScore()


async def _review_layer(
    resume_text: str,
    job_description: str,
    target_role: Optional[str],
    years_experience: Optional[str],
    visa_status: Optional[str],
) -> Optional[HRReviewResult]:
    if not get_settings().enable_llm_review:
        return None
    try:
        return await run_hr_review(resume_text, job_description, target_role, years_experience, visa_status)
    except Exception as e:
        logger.warning(f"HR review unavailable, reweighting without it: {e}")
        return None


async def run_hr_pipeline(
    resume_text: str,
    job_description: str,
    page_count: Optional[int] = None,
    target_role: Optional[str] = None,
    years_experience: Optional[str] = None,
    visa_status: Optional[str] = None,
    industry: Optional[str] = None,
    role_level: Optional[str] = None,
) -> HRPipelineResult:
    """Run the three HR layers concurrently and fuse them."""
    formatting, semantic, review = await asyncio.gather(
        _formatting_layer(resume_text, page_count, industry, role_level),
        _semantic_layer(resume_text, job_description),
        _review_layer(resume_text, job_description, target_role, years_experience, visa_status),
    )

    score = compute_hr_score(formatting, semantic, review)
    logger.info(
        f"HR score {score.overall} (formatting={score.formatting_score}, "
        f"semantic={score.semantic_score}, llm={score.llm_score})"
    )
    return HRPipelineResult(score=score, formatting=formatting, semantic=semantic, llm_review=review)
