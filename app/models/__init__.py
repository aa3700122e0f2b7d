"""Data models for the ResumeMatch Scoring API."""
from app.models.judgments import (
    HRReviewResult,
    SupplementaryATSAnalysis,
)
from app.models.patterns import (
    FormattingPatterns,
    ReferenceResume,
)
from app.models.scoring import (
    ATSScoreRequest,
    ATSScoreResponse,
    HealthResponse,
    HRScoreRequest,
    HRScoreResponse,
    KeywordsRequest,
    KeywordsResponse,
    UserContext,
)

__all__ = [
    "HRReviewResult",
    "SupplementaryATSAnalysis",
    "FormattingPatterns",
    "ReferenceResume",
    "ATSScoreRequest",
    "ATSScoreResponse",
    "HealthResponse",
    "HRScoreRequest",
    "HRScoreResponse",
    "KeywordsRequest",
    "KeywordsResponse",
    "UserContext",
]
