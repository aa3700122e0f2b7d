"""Structured-output models for the AI collaborators (Gemini response schemas)."""
import math
from typing import List, Literal

from pydantic import BaseModel, Field, field_validator


def _clamp(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, min(100, int(math.floor(value + 0.5))))


# ============================================
# Supplementary ATS analysis
# ============================================


class KeywordAlias(BaseModel):
    original: str = Field(description="Keyword from the job description missed by deterministic matching")
    alias: str = Field(description="Alternate form found in the resume (abbreviation, synonym, spelling)")
    reasoning: str = ""


class KeywordPriority(BaseModel):
    keyword: str
    priority: Literal["critical", "important", "nice_to_have"] = "important"
    reasoning: str = ""


class WeakKeywordUsage(BaseModel):
    keyword: str
    currentContext: str = ""
    issue: str
    suggestedImprovement: str = ""


class SupplementaryATSAnalysis(BaseModel):
    """AI judgment that supplements deterministic keyword matching."""
    aliasMatches: List[KeywordAlias] = []
    keywordPriorities: List[KeywordPriority] = []
    weakUsages: List[WeakKeywordUsage] = []
    additionalKeywords: List[str] = []

    @field_validator("additionalKeywords", mode="before")
    @classmethod
    def filter_empty_keywords(cls, v):
        if isinstance(v, list):
            return [item.strip() for item in v if isinstance(item, str) and item.strip()]
        return v


# ============================================
# HR reviewer (layer 3)
# ============================================

RedFlagType = Literal[
    "employment_gap",
    "job_hopping",
    "vague_description",
    "overqualified",
    "underqualified",
    "inconsistency",
    "other",
]
RED_FLAG_TYPES = {
    "employment_gap", "job_hopping", "vague_description", "overqualified",
    "underqualified", "inconsistency", "other",
}


class DimensionAssessment(BaseModel):
    score: int = 0
    assessment: str = "No assessment provided."
    suggestion: str = "No suggestion provided."

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, v):
        return _clamp(v)


class HRRedFlag(BaseModel):
    type: RedFlagType = "other"
    description: str = "Unknown issue."
    severity: Literal["critical", "warning", "info"] = "warning"
    mitigation: str = "No mitigation suggested."

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        return v if isinstance(v, str) and v in RED_FLAG_TYPES else "other"

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, v):
        return v if isinstance(v, str) and v in ("critical", "warning", "info") else "warning"


class HRSectionComment(BaseModel):
    section: str = "Unknown Section"
    comment: str = "No comment."
    suggestion: str = "No suggestion."
    score: int = 0

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, v):
        return _clamp(v)


class CallbackDecision(BaseModel):
    decision: Literal["yes", "no", "maybe"] = "maybe"
    reasoning: str = "No reasoning provided."

    @field_validator("decision", mode="before")
    @classmethod
    def normalize_decision(cls, v):
        return v if isinstance(v, str) and v in ("yes", "no", "maybe") else "maybe"


class HRReviewResult(BaseModel):
    """Holistic recruiter-style review of a resume against a job description."""
    overallScore: int = 0
    firstImpression: str = "No first impression provided."
    careerNarrative: DimensionAssessment = Field(default_factory=DimensionAssessment)
    achievementStrength: DimensionAssessment = Field(default_factory=DimensionAssessment)
    roleRelevance: DimensionAssessment = Field(default_factory=DimensionAssessment)
    redFlags: List[HRRedFlag] = []
    sectionComments: List[HRSectionComment] = []
    callbackDecision: CallbackDecision = Field(default_factory=CallbackDecision)

    @field_validator("overallScore", mode="before")
    @classmethod
    def clamp_overall(cls, v):
        return _clamp(v)
