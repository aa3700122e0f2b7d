"""Immutable result values shared by the ATS and HR scorers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from app.services.scoring_policy import Severity

ATSIssueKind = Literal["missing_keyword", "weak_keyword", "formatting", "section"]
HRFeedbackKind = Literal["formatting", "semantic", "llm_review"]


@dataclass(frozen=True)
class TextRange:
    start: int
    end: int


@dataclass(frozen=True)
class ATSIssue:
    """A single actionable problem found by the ATS simulation."""
    kind: ATSIssueKind
    severity: Severity
    message: str
    suggestion: Optional[str] = None
    text_range: Optional[TextRange] = None


@dataclass(frozen=True)
class HRFeedback:
    """A feedback item from one of the three HR layers (1=formatting, 2=semantic, 3=LLM review)."""
    kind: HRFeedbackKind
    layer: int
    severity: Severity
    message: str
    suggestion: Optional[str] = None
    text_range: Optional[TextRange] = None
