"""Detection of the standard resume sections an ATS expects to find."""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from app.services.scoring_policy import round_score

SECTION_PATTERNS: dict[str, re.Pattern] = {
    "Contact": re.compile(
        r"(?:email|phone|address|linkedin|github|portfolio|contact|website|www\.|@)",
        re.IGNORECASE,
    ),
    "Summary": re.compile(
        r"(?:summary|objective|profile|about\s*me|professional\s+summary|"
        r"career\s+summary|personal\s+statement)",
        re.IGNORECASE,
    ),
    "Experience": re.compile(
        r"(?:experience|employment|work\s+history|professional\s+experience|"
        r"career\s+history|positions?\s+held)",
        re.IGNORECASE,
    ),
    "Education": re.compile(
        r"(?:education|academic|university|college|degree|bachelor|master|phd|"
        r"mba|diploma|certifications?)",
        re.IGNORECASE,
    ),
    "Skills": re.compile(
        r"(?:skills|technical\s+skills|competencies|proficiencies|technologies|"
        r"tools|expertise|core\s+skills)",
        re.IGNORECASE,
    ),
}

# Missing any of these is a critical ATS problem; the rest are warnings
CRITICAL_SECTIONS = frozenset({"Contact", "Experience"})


@dataclass(frozen=True)
class SectionPresence:
    name: str
    found: bool


@dataclass(frozen=True)
class SectionValidationResult:
    score: int
    sections: list[SectionPresence] = field(default_factory=list)


def validate_sections(
    resume_text: str,
    patterns: dict[str, re.Pattern] = SECTION_PATTERNS,
) -> SectionValidationResult:
    sections = [
        SectionPresence(name=name, found=bool(pattern.search(resume_text)))
        for name, pattern in patterns.items()
    ]
    found_count = sum(1 for s in sections if s.found)
    score = round_score(found_count / len(patterns) * 100) if patterns else 100
    return SectionValidationResult(score=score, sections=sections)
