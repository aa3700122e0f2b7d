"""
ATS (Applicant Tracking System) score analysis service.

This module simulates how real ATS filters rank a resume against a job
description:
- Keyword extraction and matching
- Formatting checks for parser-hostile layouts
- Standard section detection
- A weighted composite score with a pass/fail verdict
- Reconciliation with an optional AI judgment (alias recovery, weak usages)

Component weights depend on the kind of job being applied for; the default
"general" profile weighs keywords 50%, formatting 25% and sections 25%.
Reconciliation with the AI judgment always rescores with the general profile.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Optional

from app.models.judgments import SupplementaryATSAnalysis
from app.services.formatting import FormattingResult, check_formatting
from app.services.keywords import (
    KeywordMatchResult,
    extract_keywords,
    keyword_match_pct,
    match_keywords,
)
from app.services.results import ATSIssue
from app.services.scoring_policy import (
    DEFAULT_JOB_TYPE,
    DEFAULT_WEIGHTS,
    WEIGHT_PROFILES,
    JobType,
    WeightProfile,
    is_passing,
    weighted_ats_overall,
)
from app.services.sections import CRITICAL_SECTIONS, SectionValidationResult, validate_sections

logger = logging.getLogger(__name__)


# Signals for detecting job type from job description
TECH_SIGNALS = [
    "engineer", "developer", "programming", "software", "backend", "frontend",
    "devops", "data scientist", "machine learning", "full stack", "fullstack",
    "sre", "infrastructure", "platform",
]

SENIOR_SIGNALS = [
    "senior", "lead", "principal", "staff", "architect", "director", "manager",
    "head of", "vp ", "vice president", "10+ years", "8+ years", "7+ years",
    "extensive experience",
]

ENTRY_SIGNALS = [
    "junior", "entry", "entry-level", "intern", "internship", "graduate",
    "new grad", "associate", "0-2 years", "1-3 years", "0-3 years",
    "early career", "no experience required",
]

# A family needs at least this many distinct signals to win
JOB_TYPE_SIGNAL_THRESHOLD = 2

MISSING_KEYWORD_MESSAGE = re.compile(r'Missing keyword: "(.+?)"')


@dataclass(frozen=True)
class ATSScore:
    """Composite ATS result."""
    overall: int  # 0-100
    keyword_match_pct: int
    formatting_score: int
    section_score: int
    matched_keywords: list[str] = field(default_factory=list)
    missing_keywords: list[str] = field(default_factory=list)
    issues: list[ATSIssue] = field(default_factory=list)
    passed: bool = False


@dataclass(frozen=True)
class ATSAnalysisResult(ATSScore):
    """ATS result plus the job type and weights that produced it."""
    job_type: JobType = DEFAULT_JOB_TYPE
    weights: WeightProfile = DEFAULT_WEIGHTS


def detect_job_type(job_description: str) -> JobType:
    """
    Detect the job type from job description text.

    Senior roles are often tech roles too, so senior is checked first:
    senior > entry > tech > general.
    """
    lower = job_description.lower()

    senior_score = sum(1 for s in SENIOR_SIGNALS if s in lower)
    entry_score = sum(1 for s in ENTRY_SIGNALS if s in lower)
    tech_score = sum(1 for s in TECH_SIGNALS if s in lower)

    if senior_score >= JOB_TYPE_SIGNAL_THRESHOLD:
        return "senior"
    if entry_score >= JOB_TYPE_SIGNAL_THRESHOLD:
        return "entry"
    if tech_score >= JOB_TYPE_SIGNAL_THRESHOLD:
        return "tech"
    return "general"


def missing_keyword_issue(keyword: str) -> ATSIssue:
    return ATSIssue(
        kind="missing_keyword",
        severity="critical",
        message=f'Missing keyword: "{keyword}" appears in the job description but not in your resume.',
        suggestion=f'Add "{keyword}" to your resume if it reflects your actual skills or experience.',
    )


def _section_issue(name: str) -> ATSIssue:
    return ATSIssue(
        kind="section",
        severity="critical" if name in CRITICAL_SECTIONS else "warning",
        message=(
            f'"{name}" section not detected. ATS systems expect standard resume '
            "sections to properly categorize your information."
        ),
        suggestion=f'Add a clearly labeled "{name}" section with a standard heading.',
    )


def compute_ats_score(
    keyword_result: KeywordMatchResult,
    formatting_result: FormattingResult,
    section_result: SectionValidationResult,
    job_type: JobType = DEFAULT_JOB_TYPE,
) -> ATSScore:
    """
    Combine keyword, formatting and section results into one ATS score.

    Issues are ordered: formatting issues, one critical issue per missing
    keyword, then one issue per undetected section.
    """
    weights = WEIGHT_PROFILES[job_type]
    overall = weighted_ats_overall(
        keyword_result.match_pct,
        formatting_result.score,
        section_result.score,
        weights,
    )

    issues: list[ATSIssue] = list(formatting_result.issues)
    issues.extend(missing_keyword_issue(kw) for kw in keyword_result.missing)
    issues.extend(_section_issue(s.name) for s in section_result.sections if not s.found)

    return ATSScore(
        overall=overall,
        keyword_match_pct=keyword_result.match_pct,
        formatting_score=formatting_result.score,
        section_score=section_result.score,
        matched_keywords=list(keyword_result.matched),
        missing_keywords=list(keyword_result.missing),
        issues=issues,
        passed=is_passing(overall),
    )


def _recovered_keyword(issue: ATSIssue, recovered: set[str]) -> bool:
    if issue.kind != "missing_keyword":
        return False
    match = MISSING_KEYWORD_MESSAGE.search(issue.message)
    return bool(match and match.group(1).lower() in recovered)


def combine_ats_results(
    deterministic: ATSScore,
    supplementary: Optional[SupplementaryATSAnalysis],
    weights: WeightProfile = DEFAULT_WEIGHTS,
) -> ATSScore:
    """
    Merge the deterministic ATS score with the supplementary AI judgment.

    The judgment can recover alias matches (keywords present under an
    abbreviation or synonym), flag weak keyword usages and suggest extra
    keywords. Formatting and section scores are never changed. Without a
    judgment the deterministic score is returned as is.

    Args:
        deterministic: Result of the deterministic pipeline
        supplementary: AI judgment, or None when it was unavailable
        weights: Weights for recomputing overall; the general profile
            unless given, whatever job type the deterministic result used

    Returns:
        Reconciled ATSScore (same type as ``deterministic``)
    """
    if supplementary is None:
        return deterministic

    recovered = {a.original.lower() for a in supplementary.aliasMatches}

    matched = list(deterministic.matched_keywords)
    missing: list[str] = []
    for keyword in deterministic.missing_keywords:
        if keyword.lower() in recovered:
            matched.append(keyword)
        else:
            missing.append(keyword)

    match_pct = keyword_match_pct(len(matched), len(matched) + len(missing))
    overall = weighted_ats_overall(
        match_pct,
        deterministic.formatting_score,
        deterministic.section_score,
        weights,
    )

    issues = [i for i in deterministic.issues if not _recovered_keyword(i, recovered)]

    for weak in supplementary.weakUsages:
        issues.append(ATSIssue(
            kind="weak_keyword",
            severity="warning",
            message=f'Weak usage of "{weak.keyword}": {weak.issue}',
            suggestion=weak.suggestedImprovement or None,
        ))

    for keyword in supplementary.additionalKeywords:
        issues.append(ATSIssue(
            kind="missing_keyword",
            severity="info",
            message=(
                f'Consider adding "{keyword}": identified as relevant for this role '
                "but not found in your resume."
            ),
            suggestion=f'Add "{keyword}" to a relevant section if it reflects your actual skills or experience.',
        ))

    recovered_count = len(deterministic.missing_keywords) - len(missing)
    if recovered_count:
        logger.info(f"Recovered {recovered_count} keyword(s) through alias matches")

    changes = {"weights": weights} if isinstance(deterministic, ATSAnalysisResult) else {}
    return replace(
        deterministic,
        **changes,
        overall=overall,
        keyword_match_pct=match_pct,
        matched_keywords=matched,
        missing_keywords=missing,
        issues=issues,
        passed=is_passing(overall),
    )


class ATSScorer:
    """
    Deterministic ATS scoring engine.

    Runs the full pipeline for one resume/job-description pair:
    1. Keyword extraction from the job description
    2. Keyword matching against the resume
    3. Formatting checks
    4. Section validation
    5. Weighted composite score using the job-type weight profile
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode

    def analyze(
        self,
        resume_text: str,
        job_description: str,
        page_count: Optional[int] = None,
        job_type: Optional[JobType] = None,
        strict_mode: Optional[bool] = None,
    ) -> ATSAnalysisResult:
        """
        Perform ATS analysis of resume text against a job description.

        Args:
            resume_text: Plain resume text
            job_description: Job description text
            page_count: Page count of the source document, if known
            job_type: Override for the detected job type
            strict_mode: Override for whole-word-only keyword matching

        Returns:
            ATSAnalysisResult with the score, job type and weights used
        """
        strict = self.strict_mode if strict_mode is None else strict_mode
        resolved_type = job_type or detect_job_type(job_description)

        keywords = extract_keywords(job_description)
        keyword_result = match_keywords(resume_text, keywords, strict_mode=strict)
        formatting_result = check_formatting(resume_text, page_count=page_count)
        section_result = validate_sections(resume_text)

        score = compute_ats_score(keyword_result, formatting_result, section_result, resolved_type)
        logger.debug(
            f"ATS analysis: job_type={resolved_type} keywords={len(keywords)} "
            f"overall={score.overall}"
        )

        return ATSAnalysisResult(
            **vars(score),
            job_type=resolved_type,
            weights=WEIGHT_PROFILES[resolved_type],
        )


def run_ats_analysis(
    resume_text: str,
    job_description: str,
    page_count: Optional[int] = None,
    strict_mode: bool = False,
    job_type: Optional[JobType] = None,
) -> ATSAnalysisResult:
    """Convenience wrapper running the full deterministic ATS pipeline."""
    return ATSScorer(strict_mode=strict_mode).analyze(
        resume_text, job_description, page_count=page_count, job_type=job_type
    )


# Singleton instance
_ats_scorer: Optional[ATSScorer] = None


def get_ats_scorer() -> ATSScorer:
    """Get or create the ATS scorer singleton."""
    global _ats_scorer
    if _ats_scorer is None:
        from app.config import get_settings

        _ats_scorer = ATSScorer(strict_mode=get_settings().ats_strict_matching)
    return _ats_scorer
