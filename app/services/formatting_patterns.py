"""
Formatting pattern extraction for HR layer 1.

Pulls deterministic formatting metadata out of resume text. The same
extraction runs on reference resumes (whose patterns are stored in the
corpus) and on the user's resume, so the two can be compared.
"""
import math
import re
from typing import List, Optional

from app.models.patterns import (
    BulletStyle,
    DateFormat,
    FormattingPatterns,
    HeadingStyle,
    QuantifiedMetrics,
)
from app.services.formatting import EMAIL_PATTERN, PHONE_PATTERN
from app.services.scoring_policy import round_score

WORDS_PER_PAGE = 500
CONTACT_SCAN_LINES = 5
MAX_HEADING_LENGTH = 50
MAX_METRIC_EXAMPLES = 10


def _heading(alternatives: str) -> re.Pattern:
    return re.compile(rf"^(?:{alternatives})\s*$", re.IGNORECASE | re.MULTILINE)


# Ordered by typical resume placement
SECTION_HEADINGS: dict[str, re.Pattern] = {
    "Contact": _heading(r"contact(?:\s+info(?:rmation)?)?|personal\s+info(?:rmation)?"),
    "Summary": _heading(
        r"summary|objective|profile|about\s*me|professional\s+summary|career\s+summary|"
        r"personal\s+statement|executive\s+summary"
    ),
    "Experience": _heading(
        r"experience|employment|work\s+history|professional\s+experience|career\s+history|"
        r"positions?\s+held|work\s+experience"
    ),
    "Education": _heading(
        r"education|academic(?:\s+background)?|degrees?|certifications?(?:\s+and\s+education)?"
    ),
    "Skills": _heading(
        r"skills|technical\s+skills|core\s+(?:competencies|skills)|proficiencies|technologies|"
        r"tools?\s+(?:and|&)\s+technologies|expertise|key\s+skills"
    ),
    "Projects": _heading(r"projects|personal\s+projects|key\s+projects|selected\s+projects"),
    "Certifications": _heading(
        r"certifications?|licenses?(?:\s+and\s+certifications?)?|professional\s+certifications?"
    ),
    "Awards": _heading(r"awards?|honors?|achievements?|recognition"),
    "Publications": _heading(r"publications?|papers?|research"),
    "Volunteer": _heading(r"volunteer(?:ing)?|community\s+(?:service|involvement)"),
}

# First match wins per line
BULLET_PATTERNS: dict[str, re.Pattern] = {
    "dash": re.compile("^\\s*[-\u2013\u2014]\\s+"),
    "dot": re.compile("^\\s*[\u2022\u00b7\u2219\u25cf\u25cb\u25e6\u29be]\\s*"),
    "asterisk": re.compile(r"^\s*\*\s+"),
    "number": re.compile(r"^\s*\d+[.)]\s+"),
    "arrow": re.compile("^\\s*[\u25ba\u25b8\u2192\u27a4\u00bb]\\s*"),
}

# Start/end dates of job entries; two dates make one entry
ENTRY_DATE_PATTERN = re.compile(
    r"(?:\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec|January|February|March|April|"
    r"May|June|July|August|September|October|November|December)\b\s*\d{4}|\b\d{1,2}/\d{4}\b)",
    re.IGNORECASE,
)

METRIC_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\b\d{1,3}(?:,\d{3})*(?:\.\d+)?%"),  # 15%, 3.5%
    re.compile(r"\$\d{1,3}(?:,\d{3})*(?:\.\d+)?(?:\s*[MBKmk])?"),  # $50K, $1.2M
    re.compile(r"\b\d{1,3}(?:,\d{3})+\b"),  # 10,000
    re.compile(r"\b\d+x\b", re.IGNORECASE),  # 3x
    re.compile(
        r"\b\d+\+?\s*(?:users?|clients?|customers?|employees?|team\s*members?|people|"
        r"projects?|applications?|servers?|repositories|repos)\b",
        re.IGNORECASE,
    ),
)

TITLE_CASE_PATTERN = re.compile(r"^[A-Z][a-z]+(\s+[A-Z][a-z]+)*$")
SENTENCE_CASE_PATTERN = re.compile(r"^[A-Z][a-z]")


def detect_section_order(text: str) -> List[str]:
    """
    Detect the order in which known section headings appear.

    When there is no explicit Contact heading but an email or phone number
    appears in the first few lines, Contact is assumed to come first.
    """
    lines = text.split("\n")
    order: List[str] = []

    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        for name, pattern in SECTION_HEADINGS.items():
            if pattern.search(line):
                if name not in order:
                    order.append(name)
                break

    if "Contact" not in order:
        head = " ".join(lines[:CONTACT_SCAN_LINES])
        if EMAIL_PATTERN.search(head) or PHONE_PATTERN.search(head):
            order.insert(0, "Contact")

    return order


def detect_bullet_style(text: str) -> BulletStyle:
    types: List[str] = []
    total = 0

    for line in text.split("\n"):
        for kind, pattern in BULLET_PATTERNS.items():
            if pattern.search(line):
                if kind not in types:
                    types.append(kind)
                total += 1
                break

    dates = ENTRY_DATE_PATTERN.findall(text)
    entry_count = math.ceil(len(dates) / 2) if dates else 1

    return BulletStyle(
        types=types,
        total_bullets=total,
        avg_bullets_per_entry=round_score(total / entry_count) if entry_count > 0 else total,
    )


def detect_heading_style(text: str) -> HeadingStyle:
    styles: List[str] = []

    for raw in text.split("\n"):
        line = raw.strip()
        if not line or len(line) > MAX_HEADING_LENGTH:
            continue
        if not any(p.search(line) for p in SECTION_HEADINGS.values()):
            continue

        if line == line.upper() and re.search(r"[A-Z]", line):
            style = "ALL_CAPS"
        elif TITLE_CASE_PATTERN.match(line):
            style = "Title Case"
        elif SENTENCE_CASE_PATTERN.match(line):
            style = "Sentence case"
        else:
            continue
        if style not in styles:
            styles.append(style)

    return HeadingStyle(styles=styles, consistent=len(styles) <= 1)


def detect_quantified_metrics(text: str) -> QuantifiedMetrics:
    examples: List[str] = []
    for pattern in METRIC_PATTERNS:
        for match in pattern.findall(text):
            if len(examples) < MAX_METRIC_EXAMPLES and match not in examples:
                examples.append(match)
    return QuantifiedMetrics(count=len(examples), examples=examples)


def detect_date_formats(text: str) -> DateFormat:
    """
    Detect date format families.

    "May 2020" is counted as a full month name. A bare year counts as
    "YYYY" only when no other family is present.
    """
    formats: List[str] = []

    if re.search(r"\b\d{1,2}/\d{4}\b", text):
        formats.append("MM/YYYY")
    if re.search(r"\b\d{1,2}-\d{4}\b", text):
        formats.append("MM-YYYY")
    if re.search(
        r"\b(?:January|February|March|April|June|July|August|September|October|November|December)"
        r"\s+\d{4}\b",
        text,
        re.IGNORECASE,
    ):
        formats.append("Month YYYY")
    if re.search(r"\b(?:Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\.?\s+\d{4}\b", text, re.IGNORECASE):
        formats.append("Mon YYYY")
    if re.search(r"\bMay\s+\d{4}\b", text, re.IGNORECASE) and "Month YYYY" not in formats:
        formats.append("Month YYYY")
    if not formats and re.search(r"\b\d{4}\b", text):
        formats.append("YYYY")

    return DateFormat(formats=formats, consistent=len(formats) <= 1)


def extract_formatting_patterns(text: str, page_count: Optional[int] = None) -> FormattingPatterns:
    """
    Extract all formatting patterns from resume text.

    Args:
        text: Plain resume text
        page_count: Known page count; estimated at 500 words per page otherwise

    Returns:
        FormattingPatterns record
    """
    lines = text.split("\n")
    has_content = bool(text.strip())
    non_empty = [line for line in lines if line.strip()]
    empty_count = len(lines) - len(non_empty) if has_content else 0

    word_count = len(text.split())
    if page_count is None:
        page_count = max(1, math.ceil(word_count / WORDS_PER_PAGE))

    line_words = sum(len(line.split()) for line in non_empty)
    avg_words_per_line = round_score(line_words / len(non_empty)) if non_empty else 0

    section_order = detect_section_order(text)

    return FormattingPatterns(
        page_count=page_count,
        section_order=section_order,
        bullet_style=detect_bullet_style(text),
        has_summary="Summary" in section_order,
        quantified_metrics=detect_quantified_metrics(text),
        heading_style=detect_heading_style(text),
        white_space_ratio=round_score(empty_count / len(lines) * 100) / 100 if has_content else 0.0,
        date_format=detect_date_formats(text),
        word_count=word_count,
        avg_words_per_line=avg_words_per_line,
    )
