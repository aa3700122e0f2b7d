"""Request and response models for the scoring API (camelCase on the wire)."""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.models.judgments import CallbackDecision, KeywordPriority

SeverityType = Literal["critical", "warning", "info"]
JobTypeType = Literal["tech", "senior", "entry", "general"]


# ============================================
# Requests
# ============================================


class UserContext(BaseModel):
    """Optional candidate context passed to the HR reviewer."""
    target_role: Optional[str] = Field(None, alias="targetRole")
    years_experience: Optional[str] = Field(None, alias="yearsExperience")
    visa_status: Optional[str] = Field(
        None,
        alias="visaStatus",
        description="Work authorization; 'prefer_not_to_say' keeps it out of the review",
    )

    class Config:
        populate_by_name = True


class ResumeMetadata(BaseModel):
    page_count: Optional[int] = Field(None, alias="pageCount", ge=1, description="Pages in the source document")

    class Config:
        populate_by_name = True


class ScoreRequest(BaseModel):
    """Resume text plus the job description it is matched against."""
    resume_text: str = Field(..., alias="resumeText", min_length=1)
    job_description: str = Field(..., alias="jobDescription", min_length=1)
    metadata: Optional[ResumeMetadata] = None

    class Config:
        populate_by_name = True

    @property
    def page_count(self) -> Optional[int]:
        return self.metadata.page_count if self.metadata else None


class ATSScoreRequest(ScoreRequest):
    strict_mode: Optional[bool] = Field(
        None, alias="strictMode", description="Whole-word keyword matching only"
    )
    job_type: Optional[JobTypeType] = Field(
        None, alias="jobType", description="Override the job type detected from the job description"
    )


class HRScoreRequest(ScoreRequest):
    user_context: Optional[UserContext] = Field(None, alias="userContext")
    industry: Optional[str] = Field(None, description="Filter for the reference resume corpus")
    role_level: Optional[str] = Field(None, alias="roleLevel", description="Filter for the reference resume corpus")


class KeywordsRequest(BaseModel):
    job_description: str = Field(..., alias="jobDescription", min_length=1)

    class Config:
        populate_by_name = True


# ============================================
# Responses
# ============================================


class TextRangeResponse(BaseModel):
    start: int
    end: int


class WeightsResponse(BaseModel):
    keywords: float
    formatting: float
    sections: float


class ATSIssueResponse(BaseModel):
    kind: Literal["missing_keyword", "weak_keyword", "formatting", "section"] = Field(..., alias="type")
    severity: SeverityType
    message: str
    suggestion: Optional[str] = None
    text_range: Optional[TextRangeResponse] = Field(None, alias="textRange")

    class Config:
        populate_by_name = True


class HRFeedbackResponse(BaseModel):
    kind: Literal["formatting", "semantic", "llm_review"] = Field(..., alias="type")
    layer: int = Field(..., ge=1, le=3)
    severity: SeverityType
    message: str
    suggestion: Optional[str] = None
    text_range: Optional[TextRangeResponse] = Field(None, alias="textRange")

    class Config:
        populate_by_name = True


class KeywordsResponse(BaseModel):
    keywords: List[str] = Field(default_factory=list)
    job_type: JobTypeType = Field(..., alias="jobType")
    weights: WeightsResponse

    class Config:
        populate_by_name = True


class ATSScoreResponse(BaseModel):
    """Reconciled ATS score."""
    overall: int = Field(..., ge=0, le=100)
    keyword_match_pct: int = Field(..., alias="keywordMatchPct", ge=0, le=100)
    formatting_score: int = Field(..., alias="formattingScore", ge=0, le=100)
    section_score: int = Field(..., alias="sectionScore", ge=0, le=100)
    matched_keywords: List[str] = Field(default_factory=list, alias="matchedKeywords")
    missing_keywords: List[str] = Field(default_factory=list, alias="missingKeywords")
    issues: List[ATSIssueResponse] = Field(default_factory=list)
    passed: bool
    job_type: JobTypeType = Field(..., alias="jobType")
    weights: WeightsResponse
    supplementary_applied: bool = Field(False, alias="supplementaryApplied")
    keyword_priorities: List[KeywordPriority] = Field(default_factory=list, alias="keywordPriorities")

    class Config:
        populate_by_name = True


class SemanticSectionScoreResponse(BaseModel):
    section: str
    score: int = Field(..., ge=0, le=100)


class FormattingSuggestionResponse(BaseModel):
    aspect: str
    user_value: str = Field(..., alias="userValue")
    reference_value: str = Field(..., alias="referenceValue")
    percentage_support: int = Field(..., alias="percentageSupport")
    message: str
    severity: SeverityType

    class Config:
        populate_by_name = True


class HRScoreResponse(BaseModel):
    """Fused HR score with per-layer details."""
    overall: int = Field(..., ge=0, le=100)
    formatting_score: int = Field(..., alias="formattingScore", ge=0, le=100)
    semantic_score: int = Field(..., alias="semanticScore", ge=0, le=100)
    llm_score: int = Field(..., alias="llmScore", ge=0, le=100)
    feedback: List[HRFeedbackResponse] = Field(default_factory=list)
    reference_count: int = Field(0, alias="referenceCount")
    formatting_suggestions: List[FormattingSuggestionResponse] = Field(
        default_factory=list, alias="formattingSuggestions"
    )
    section_scores: List[SemanticSectionScoreResponse] = Field(default_factory=list, alias="sectionScores")
    llm_review_applied: bool = Field(False, alias="llmReviewApplied")
    first_impression: Optional[str] = Field(None, alias="firstImpression")
    callback_decision: Optional[CallbackDecision] = Field(None, alias="callbackDecision")

    class Config:
        populate_by_name = True


class HealthResponse(BaseModel):
    """Health check response."""
    status: Literal["healthy", "degraded"]
    version: str
    timestamp: datetime
    redis_available: Optional[bool] = Field(None, alias="redisAvailable")
    gemini_configured: bool = Field(alias="geminiConfigured")

    class Config:
        populate_by_name = True
