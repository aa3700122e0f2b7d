"""
Rule-based formatting checks for ATS compatibility.

Each rule inspects the raw resume text and, when it fires, contributes one
issue and a fixed score deduction. Rules are independent: every rule is
evaluated and deductions accumulate before the final score is clamped.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from app.services.results import ATSIssue
from app.services.scoring_policy import Severity, clamp_score

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"(\+?1?[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")

# Checked in order; only the first signal that fires is reported
TABLE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\t{2,}"),
    re.compile(r"\|.*\|.*\|"),
)

# Two wide horizontal gaps between tokens on the same line
MULTI_COLUMN_PATTERN = re.compile(r"[ \t]{5,}\S+.*[ \t]{5,}\S+")

DATE_FORMAT_PATTERNS: dict[str, re.Pattern] = {
    "MM/YYYY": re.compile(r"\b\d{1,2}/\d{4}\b"),
    "MM-YYYY": re.compile(r"\b\d{1,2}-\d{4}\b"),
    "Month YYYY": re.compile(
        r"\b(?:January|February|March|April|May|June|July|August|September|"
        r"October|November|December)\s+\d{4}\b",
        re.IGNORECASE,
    ),
    # "May" is a full month name; leaving it out keeps "May 2020" from counting twice
    "Mon YYYY": re.compile(
        r"\b(?:Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\.?\s+\d{4}\b",
        re.IGNORECASE,
    ),
}

SPECIAL_BULLETS = re.compile(
    "[\u2022\u2023\u25e6\u2043\u2219\u25aa\u25ab\u25cf\u25cb\u25a0\u25a1]"
)
IMAGE_MARKERS = re.compile(r"\[(?:image|graphic|logo|photo)\]", re.IGNORECASE)

MIN_WORD_COUNT = 100
MAX_WORDS_PER_LINE = 50
MAX_PAGES = 2
MAX_BULLET_GLYPHS = 2


@dataclass(frozen=True)
class FormattingResult:
    score: int
    issues: list[ATSIssue] = field(default_factory=list)


@dataclass(frozen=True)
class ResumeDocument:
    """Resume text plus the derived values the rules need."""
    text: str
    page_count: int

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    @property
    def lines(self) -> list[str]:
        return [line for line in self.text.split("\n") if line.strip()]


@dataclass(frozen=True)
class FormattingRule:
    name: str
    fires: Callable[[ResumeDocument], bool]
    severity: Severity
    penalty: int
    message: Callable[[ResumeDocument], str]
    suggestion: str

    def issue(self, doc: ResumeDocument) -> ATSIssue:
        return ATSIssue(
            kind="formatting",
            severity=self.severity,
            message=self.message(doc),
            suggestion=self.suggestion,
        )


def _missing_email(doc: ResumeDocument) -> bool:
    return not EMAIL_PATTERN.search(doc.text)


def _missing_phone(doc: ResumeDocument) -> bool:
    return not PHONE_PATTERN.search(doc.text)


def _has_table_layout(doc: ResumeDocument) -> bool:
    return any(pattern.search(doc.text) for pattern in TABLE_PATTERNS)


def _has_multi_column_layout(doc: ResumeDocument) -> bool:
    return bool(MULTI_COLUMN_PATTERN.search(doc.text))


def detect_date_formats(text: str) -> list[str]:
    return [name for name, pattern in DATE_FORMAT_PATTERNS.items() if pattern.search(text)]


def _has_mixed_date_formats(doc: ResumeDocument) -> bool:
    return len(detect_date_formats(doc.text)) > 1


def _too_many_pages(doc: ResumeDocument) -> bool:
    return doc.page_count > MAX_PAGES


def _mixed_bullet_glyphs(doc: ResumeDocument) -> bool:
    return len(set(SPECIAL_BULLETS.findall(doc.text))) > MAX_BULLET_GLYPHS


def _too_short(doc: ResumeDocument) -> bool:
    return doc.word_count < MIN_WORD_COUNT


def _has_wall_of_text(doc: ResumeDocument) -> bool:
    return any(len(line.split()) > MAX_WORDS_PER_LINE for line in doc.lines)


def _has_image_markers(doc: ResumeDocument) -> bool:
    return bool(IMAGE_MARKERS.search(doc.text))


FORMATTING_RULES: tuple[FormattingRule, ...] = (
    FormattingRule(
        name="missing_email",
        fires=_missing_email,
        severity="critical",
        penalty=15,
        message=lambda doc: (
            "No email address detected. ATS systems require contact information "
            "to process your application."
        ),
        suggestion="Add your email address to the top of your resume in the contact section.",
    ),
    FormattingRule(
        name="missing_phone",
        fires=_missing_phone,
        severity="warning",
        penalty=5,
        message=lambda doc: (
            "No phone number detected. Most ATS systems extract phone numbers "
            "as a required contact field."
        ),
        suggestion="Add your phone number to your contact section.",
    ),
    FormattingRule(
        name="table_layout",
        fires=_has_table_layout,
        severity="warning",
        penalty=10,
        message=lambda doc: (
            "Possible table-based layout detected. ATS systems often fail to parse "
            "tables correctly, resulting in garbled text."
        ),
        suggestion="Replace table layouts with simple left-aligned text and standard headings.",
    ),
    FormattingRule(
        name="multi_column_layout",
        fires=_has_multi_column_layout,
        severity="warning",
        penalty=10,
        message=lambda doc: (
            "Possible multi-column layout detected. ATS may merge columns, "
            "scrambling your content order."
        ),
        suggestion="Use a single-column layout for maximum ATS compatibility.",
    ),
    FormattingRule(
        name="inconsistent_dates",
        fires=_has_mixed_date_formats,
        severity="warning",
        penalty=5,
        message=lambda doc: (
            "Inconsistent date formats detected "
            f"({', '.join(detect_date_formats(doc.text))}). "
            "ATS systems may fail to parse dates in different formats."
        ),
        suggestion=(
            "Use a consistent date format throughout your resume "
            "(e.g., 'Month YYYY' like 'January 2024')."
        ),
    ),
    FormattingRule(
        name="page_count",
        fires=_too_many_pages,
        severity="warning",
        penalty=10,
        message=lambda doc: (
            f"Resume is {doc.page_count} pages. Most ATS systems and recruiters prefer "
            "1-2 pages. Longer resumes may have content truncated."
        ),
        suggestion="Condense your resume to 1-2 pages by focusing on the most relevant experience.",
    ),
    FormattingRule(
        name="special_bullets",
        fires=_mixed_bullet_glyphs,
        severity="info",
        penalty=3,
        message=lambda doc: (
            "Multiple special bullet characters detected. Some ATS systems may "
            "not render these correctly."
        ),
        suggestion="Use standard hyphens (-) or asterisks (*) as bullet points for maximum compatibility.",
    ),
    FormattingRule(
        name="too_short",
        fires=_too_short,
        severity="critical",
        penalty=20,
        message=lambda doc: (
            f"Resume appears too short ({doc.word_count} words, fewer than "
            f"{MIN_WORD_COUNT}). ATS systems may flag this as incomplete."
        ),
        suggestion="Expand your resume with detailed work experience, skills, and achievements.",
    ),
    FormattingRule(
        name="wall_of_text",
        fires=_has_wall_of_text,
        severity="info",
        penalty=5,
        message=lambda doc: (
            "Long paragraphs detected. ATS systems parse bullet points more "
            "reliably than dense paragraphs."
        ),
        suggestion="Break long paragraphs into bullet points starting with action verbs.",
    ),
    FormattingRule(
        name="image_content",
        fires=_has_image_markers,
        severity="critical",
        penalty=15,
        message=lambda doc: (
            "Image or graphic content detected. ATS systems cannot read images, "
            "charts, or graphics, so this content will be ignored."
        ),
        suggestion="Replace all images and graphics with plain text equivalents.",
    ),
)


def check_formatting(
    resume_text: str,
    page_count: Optional[int] = None,
    rules: Sequence[FormattingRule] = FORMATTING_RULES,
) -> FormattingResult:
    """
    Check resume text for formatting problems that break real ATS parsers.

    Args:
        resume_text: Plain resume text
        page_count: Page count from the source document; 1 when unknown
        rules: Rule table to evaluate

    Returns:
        FormattingResult with a 0-100 score and one issue per fired rule
    """
    doc = ResumeDocument(text=resume_text, page_count=page_count or 1)

    score = 100
    issues: list[ATSIssue] = []
    for rule in rules:
        if rule.fires(doc):
            issues.append(rule.issue(doc))
            score -= rule.penalty

    return FormattingResult(score=clamp_score(score), issues=issues)
