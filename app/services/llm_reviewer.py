"""
AI judgments using Google Gemini (google-genai SDK).

Two collaborators:
- Supplementary ATS analysis: alias matches, keyword priorities, weak
  keyword usages and extra keywords on top of deterministic matching.
- HR review (layer 3): a holistic recruiter-style evaluation.

Both use structured output (pydantic response schemas) and cache their
results in Redis keyed by a hash of the inputs.
"""
import hashlib
import json
import logging
from typing import Optional, Sequence, Type, TypeVar

from google.genai import types
from pydantic import BaseModel

from app.config import get_settings
from app.models.judgments import HRReviewResult, SupplementaryATSAnalysis
from app.services.cache import cache_get_json, cache_set_json
from app.services.gemini import get_gemini_client

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

ATS_SUPPLEMENTARY_SYSTEM_PROMPT = """You are an ATS (Applicant Tracking System) analyst. A deterministic keyword matcher has already compared a resume with a job description. Add the contextual judgment that string matching cannot provide.

You receive the job description, the resume, and the matcher's results (matched keywords, missing keywords, match percentage).

## 1. aliasMatches
Keywords the matcher marked missing that ARE in the resume under another form:
- Abbreviations: "JS" for "JavaScript", "K8s" for "Kubernetes", "ML" for "Machine Learning"
- Spelling variants: "front-end" and "frontend", "e-commerce" and "ecommerce"
- Names a recruiter treats as the same thing: "React.js", "ReactJS", "React"
Only list real equivalents. "Python" is NOT an alias for "programming".
"original" must be the missing keyword exactly as given; "alias" is the form found in the resume.

## 2. keywordPriorities
Rank every extracted keyword for this role:
- "critical": core must-have skills
- "important": strongly preferred or repeated requirements
- "nice_to_have": bonus skills, soft skills, preferred-only items

## 3. weakUsages
Keywords present in the resume but weakly supported: only in a skills list, mentioned once in passing, or placed in an unrelated section. Explain the issue and how to strengthen it.

## 4. additionalKeywords
Important skills the job description implies but the matcher did not extract (tools usually paired with the listed stack, implied skills such as "leadership" for "lead a team").

Respond with JSON only."""

ATS_USER_PROMPT = """## Job Description
{job_description}

## Resume
{resume_text}

## Deterministic ATS Engine Results
- Match percentage: {match_pct}%
- Matched keywords ({matched_count}): {matched}
- Missing keywords ({missing_count}): {missing}

Provide your supplementary ATS analysis as JSON."""

HR_REVIEWER_SYSTEM_PROMPT = """You are a senior HR recruiter with many years of resume screening across industries. Review the candidate's resume for the job below the way a human recruiter would, beyond keyword matching.

You receive the job description, the resume, and optionally the candidate's target role, years of experience and work authorization.

Evaluate:

## firstImpression
What stands out in the first 6 seconds? Is the layout scannable and the most relevant information visible?

## careerNarrative
Does the progression make sense and point towards this position? Do the roles build on each other?

## achievementStrength
Are accomplishments specific and quantified (numbers, percentages, dollar amounts)? Are they framed as impact rather than duties?

## roleRelevance
How well does the experience map to the requirements? Could the candidate contribute from day one?

## redFlags
Use type employment_gap, job_hopping, vague_description, overqualified, underqualified, inconsistency or other. Give a severity (critical, warning, info) and a mitigation the candidate can apply.

## sectionComments
For each major resume section: a comment, a concrete suggestion, and a 0-100 score.

## callbackDecision
"yes" (clearly qualified), "maybe" (needs a phone screen to clarify concerns) or "no" (does not meet the bar, explain constructively).

All scores are integers from 0 to 100. Respond with JSON only."""

HR_USER_PROMPT = """## Job Description
{job_description}

## Candidate's Resume
{resume_text}{context}

Review this resume as an experienced HR recruiter hiring for the role described above. Provide your complete evaluation as JSON."""


def _cache_key(kind: str, *parts: str) -> str:
    digest = hashlib.sha256(json.dumps(parts).encode("utf-8")).hexdigest()
    return f"llm:{kind}:{digest}"


def build_ats_user_prompt(
    resume_text: str,
    job_description: str,
    matched_keywords: Sequence[str],
    missing_keywords: Sequence[str],
    match_pct: int,
) -> str:
    return ATS_USER_PROMPT.format(
        job_description=job_description,
        resume_text=resume_text,
        match_pct=match_pct,
        matched_count=len(matched_keywords),
        matched=", ".join(matched_keywords) or "none",
        missing_count=len(missing_keywords),
        missing=", ".join(missing_keywords) or "none",
    )


def build_hr_user_prompt(
    resume_text: str,
    job_description: str,
    target_role: Optional[str] = None,
    years_experience: Optional[str] = None,
    visa_status: Optional[str] = None,
) -> str:
    """Build the reviewer prompt; work authorization is left out when the candidate prefers not to say."""
    context = []
    if target_role:
        context.append(f"Target role: {target_role}")
    if years_experience:
        context.append(f"Years of experience: {years_experience}")
    if visa_status and visa_status != "prefer_not_to_say":
        context.append(f"Work authorization: {visa_status}")

    context_section = "\n\n## Candidate Context\n" + "\n".join(context) if context else ""
    return HR_USER_PROMPT.format(
        job_description=job_description,
        resume_text=resume_text,
        context=context_section,
    )


async def _generate_judgment(
    schema: Type[T],
    system_prompt: str,
    user_prompt: str,
    temperature: float,
    cache_key: str,
) -> T:
    cached = await cache_get_json(cache_key)
    if cached is not None:
        logger.info(f"Cache hit for {cache_key}")
        return schema.model_validate(cached)

    settings = get_settings()
    client = get_gemini_client()

    logger.info(f"Requesting {schema.__name__} from Gemini...")
    response = await client.aio.models.generate_content(
        model=settings.gemini_model,
        contents=user_prompt,
        config=types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=temperature,
            response_mime_type="application/json",
            response_schema=schema,
        ),
    )

    if not response.text:
        raise ValueError(f"Empty response from Gemini for {schema.__name__}")

    result = schema.model_validate_json(response.text)
    logger.info(f"Received {schema.__name__} from Gemini")

    await cache_set_json(cache_key, result.model_dump(), settings.llm_cache_ttl)
    return result


async def run_supplementary_ats_analysis(
    resume_text: str,
    job_description: str,
    matched_keywords: Sequence[str],
    missing_keywords: Sequence[str],
    match_pct: int,
) -> SupplementaryATSAnalysis:
    """
    Ask Gemini to supplement the deterministic keyword match.

    Raises:
        ValueError: If Gemini is not configured or returns nothing usable
    """
    settings = get_settings()
    prompt = build_ats_user_prompt(resume_text, job_description, matched_keywords, missing_keywords, match_pct)
    return await _generate_judgment(
        SupplementaryATSAnalysis,
        ATS_SUPPLEMENTARY_SYSTEM_PROMPT,
        prompt,
        settings.ats_llm_temperature,
        _cache_key("ats", settings.gemini_model, prompt),
    )


async def run_hr_review(
    resume_text: str,
    job_description: str,
    target_role: Optional[str] = None,
    years_experience: Optional[str] = None,
    visa_status: Optional[str] = None,
) -> HRReviewResult:
    """
    Ask Gemini for a holistic recruiter review.

    Raises:
        ValueError: If Gemini is not configured or returns nothing usable
    """
    settings = get_settings()
    prompt = build_hr_user_prompt(resume_text, job_description, target_role, years_experience, visa_status)
    return await _generate_judgment(
        HRReviewResult,
        HR_REVIEWER_SYSTEM_PROMPT,
        prompt,
        settings.hr_llm_temperature,
        _cache_key("hr", settings.gemini_model, prompt),
    )
