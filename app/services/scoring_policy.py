"""Scoring weights, thresholds and severity mapping shared by the ATS and HR scorers."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

Severity = Literal["critical", "warning", "info"]
JobType = Literal["tech", "senior", "entry", "general"]

ATS_PASS_THRESHOLD = 75

# Severity bands for 0-100 sub-scores (semantic sections, LLM dimensions)
CRITICAL_BELOW = 40
WARNING_BELOW = 60


@dataclass(frozen=True)
class WeightProfile:
    """Relative weight of each ATS component. Weights sum to 1."""
    keywords: float
    formatting: float
    sections: float


WEIGHT_PROFILES: dict[str, WeightProfile] = {
    "tech": WeightProfile(keywords=0.45, formatting=0.35, sections=0.20),
    "senior": WeightProfile(keywords=0.50, formatting=0.30, sections=0.20),
    "entry": WeightProfile(keywords=0.35, formatting=0.40, sections=0.25),
    "general": WeightProfile(keywords=0.50, formatting=0.25, sections=0.25),
}

DEFAULT_JOB_TYPE: JobType = "general"
DEFAULT_WEIGHTS = WEIGHT_PROFILES[DEFAULT_JOB_TYPE]


@dataclass(frozen=True)
class HRWeights:
    formatting: float
    semantic: float
    llm: float


HR_WEIGHTS_WITH_LLM = HRWeights(formatting=0.2, semantic=0.4, llm=0.4)
HR_WEIGHTS_WITHOUT_LLM = HRWeights(formatting=0.3, semantic=0.7, llm=0.0)


def round_score(value: float) -> int:
    """Round half up, so 72.5 -> 73 (Python's round() would give 72)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_score(value)))


def weighted_ats_overall(
    keyword_pct: int,
    formatting_score: int,
    section_score: int,
    weights: WeightProfile = DEFAULT_WEIGHTS,
) -> int:
    return round_score(
        keyword_pct * weights.keywords
        + formatting_score * weights.formatting
        + section_score * weights.sections
    )


def is_passing(overall: int) -> bool:
    return overall >= ATS_PASS_THRESHOLD


def severity_for_score(score: int) -> Severity | None:
    """Map a 0-100 sub-score to a feedback severity, or None when no feedback is due."""
    if score < CRITICAL_BELOW:
        return "critical"
    if score < WARNING_BELOW:
        return "warning"
    return None
