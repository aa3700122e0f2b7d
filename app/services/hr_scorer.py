"""
HR score fusion.

Combines the three HR layers into one score and one feedback list:
- Layer 1: formatting against reference resumes (hr_formatting)
- Layer 2: semantic similarity with the job description (semantic)
- Layer 3: holistic recruiter review by the LLM (optional)

When the LLM review is unavailable the remaining layers are reweighted
(formatting 30%, semantic 70%) instead of counting the review as zero.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from app.models.judgments import DimensionAssessment, HRReviewResult
from app.services.hr_formatting import FormattingAnalysisResult
from app.services.results import HRFeedback
from app.services.scoring_policy import (
    HR_WEIGHTS_WITH_LLM,
    HR_WEIGHTS_WITHOUT_LLM,
    round_score,
    severity_for_score,
)
from app.services.semantic import SemanticScore


@dataclass(frozen=True)
class HRScore:
    overall: int
    formatting_score: int
    semantic_score: int
    llm_score: int
    feedback: List[HRFeedback] = field(default_factory=list)


def _semantic_feedback(semantic: SemanticScore) -> List[HRFeedback]:
    items = []
    for section in semantic.section_scores:
        severity = severity_for_score(section.score)
        if severity == "critical":
            items.append(HRFeedback(
                kind="semantic",
                layer=2,
                severity="critical",
                message=(
                    f'Your "{section.section}" section has low semantic match '
                    f"({section.score}%) with the job description."
                ),
                suggestion=(
                    f"Revise your {section.section} section to better reflect the language "
                    "and requirements in the job description."
                ),
            ))
        elif severity == "warning":
            items.append(HRFeedback(
                kind="semantic",
                layer=2,
                severity="warning",
                message=(
                    f'Your "{section.section}" section has moderate semantic match '
                    f"({section.score}%) with the job description."
                ),
                suggestion=(
                    f"Consider strengthening the alignment of your {section.section} "
                    "section with the job requirements."
                ),
            ))
    return items


def _review_item(severity, message: str, suggestion: Optional[str] = None) -> HRFeedback:
    return HRFeedback(kind="llm_review", layer=3, severity=severity, message=message, suggestion=suggestion)


def _review_feedback(review: HRReviewResult) -> List[HRFeedback]:
    items = [
        _review_item(
            flag.severity,
            f"Red flag ({flag.type.replace('_', ' ')}): {flag.description}",
            flag.mitigation,
        )
        for flag in review.redFlags
    ]

    for comment in review.sectionComments:
        severity = severity_for_score(comment.score)
        if severity:
            items.append(_review_item(severity, f"{comment.section}: {comment.comment}", comment.suggestion))

    dimensions: List[tuple[str, DimensionAssessment]] = [
        ("Career narrative", review.careerNarrative),
        ("Achievement strength", review.achievementStrength),
        ("Role relevance", review.roleRelevance),
    ]
    for label, dimension in dimensions:
        severity = severity_for_score(dimension.score)
        if severity:
            items.append(_review_item(severity, f"{label}: {dimension.assessment}", dimension.suggestion))

    decision = review.callbackDecision
    if decision.decision == "no":
        items.append(_review_item(
            "critical", f"HR verdict: Would NOT call for interview. {decision.reasoning}"
        ))
    elif decision.decision == "maybe":
        items.append(_review_item(
            "warning", f"HR verdict: Maybe call for interview. {decision.reasoning}"
        ))

    return items


def compute_hr_score(
    formatting: FormattingAnalysisResult,
    semantic: SemanticScore,
    llm_review: Optional[HRReviewResult],
) -> HRScore:
    """
    Fuse the three HR layers.

    Args:
        formatting: Layer 1 result
        semantic: Layer 2 result (use an empty SemanticScore when unavailable)
        llm_review: Layer 3 review, or None when unavailable

    Returns:
        HRScore with feedback ordered formatting, semantic, then review items
    """
    if llm_review is not None:
        weights = HR_WEIGHTS_WITH_LLM
        llm_score = llm_review.overallScore
    else:
        weights = HR_WEIGHTS_WITHOUT_LLM
        llm_score = 0

    overall = round_score(
        formatting.score * weights.formatting
        + semantic.overall_score * weights.semantic
        + llm_score * weights.llm
    )

    feedback = list(formatting.feedback)
    feedback.extend(_semantic_feedback(semantic))
    if llm_review is not None:
        feedback.extend(_review_feedback(llm_review))

    return HRScore(
        overall=overall,
        formatting_score=formatting.score,
        semantic_score=semantic.overall_score,
        llm_score=llm_score,
        feedback=feedback,
    )
