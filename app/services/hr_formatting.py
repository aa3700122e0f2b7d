"""
HR layer 1: formatting analysis.

Compares the formatting of a resume against a corpus of known-successful
reference resumes and produces a 0-100 score plus statistical suggestions
("85% of successful resumes..."). Without a usable corpus the resume is
checked against general industry conventions instead.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from pydantic import ValidationError

from app.config import get_settings
from app.models.patterns import FormattingPatterns, ReferenceResume
from app.services.cache import cache_get_json
from app.services.formatting_patterns import extract_formatting_patterns
from app.services.results import HRFeedback
from app.services.scoring_policy import Severity, clamp_score, round_score

logger = logging.getLogger(__name__)

KEY_SECTIONS = ("Experience", "Education", "Skills")

# Minimum share of references (in %) that must agree before a deviation is reported
PAGE_COUNT_AGREEMENT = 60
SUMMARY_AGREEMENT = 60
BULLET_AGREEMENT = 50
CONSISTENCY_AGREEMENT = 50

# Sections present in fewer than this share of references are left out of the common order
SECTION_ORDER_MIN_SHARE = 0.3
SECTION_ORDER_SUPPORT = 70


@dataclass(frozen=True)
class FormattingSuggestion:
    aspect: str
    user_value: str
    reference_value: str
    percentage_support: int  # e.g. 85 means "85% of successful resumes"
    message: str
    severity: Severity


@dataclass(frozen=True)
class FormattingAnalysisResult:
    score: int  # 0-100
    suggestions: List[FormattingSuggestion] = field(default_factory=list)
    feedback: List[HRFeedback] = field(default_factory=list)
    user_patterns: FormattingPatterns = field(default_factory=FormattingPatterns)
    reference_count: int = 0


def _suggestion_text(s: FormattingSuggestion) -> Optional[str]:
    """Concrete fix for each formatting aspect."""
    if s.aspect == "quantified_metrics":
        return "Add specific numbers, percentages, and dollar amounts to your bullet points."
    if s.aspect == "bullet_points":
        return "Use dash (-) or dot bullet points for each achievement."
    if s.aspect == "missing_sections":
        return f"Add the missing section(s): {s.user_value.replace('Missing: ', '')}."
    if s.aspect == "summary_section":
        return "Add a 2-3 sentence professional summary at the top of your resume."
    if s.aspect == "page_count":
        return f"Trim your resume to {s.reference_value}."
    if s.aspect == "heading_consistency":
        return "Choose one heading style (e.g., ALL CAPS) and use it consistently."
    if s.aspect == "date_consistency":
        return "Pick one date format (e.g., Month YYYY) and use it throughout."
    if s.aspect == "section_order":
        return f"Reorder your sections: {s.reference_value}."
    if s.aspect == "bullet_density":
        return f"Aim for {s.reference_value} for readability."
    return None


def suggestions_to_feedback(suggestions: Sequence[FormattingSuggestion]) -> List[HRFeedback]:
    return [
        HRFeedback(
            kind="formatting",
            layer=1,
            severity=s.severity,
            message=s.message,
            suggestion=_suggestion_text(s),
        )
        for s in suggestions
    ]


def _result(
    score: int,
    suggestions: List[FormattingSuggestion],
    user_patterns: FormattingPatterns,
    reference_count: int,
) -> FormattingAnalysisResult:
    return FormattingAnalysisResult(
        score=clamp_score(score),
        suggestions=suggestions,
        feedback=suggestions_to_feedback(suggestions),
        user_patterns=user_patterns,
        reference_count=reference_count,
    )


def _missing_key_sections(patterns: FormattingPatterns) -> List[str]:
    return [s for s in KEY_SECTIONS if s not in patterns.section_order]


# ============================================
# Standalone analysis (no reference resumes)
# ============================================


def analyze_standalone(user: FormattingPatterns) -> FormattingAnalysisResult:
    """Check formatting against general conventions (1-2 pages, summary, bullets...)."""
    suggestions: List[FormattingSuggestion] = []
    score = 100

    if user.page_count > 2:
        score -= 15
        suggestions.append(FormattingSuggestion(
            aspect="page_count",
            user_value=f"{user.page_count} pages",
            reference_value="1-2 pages",
            percentage_support=90,
            message=f"Your resume is {user.page_count} pages. Most successful resumes are 1-2 pages.",
            severity="warning",
        ))

    if not user.has_summary:
        score -= 10
        suggestions.append(FormattingSuggestion(
            aspect="summary_section",
            user_value="No summary section",
            reference_value="Has summary section",
            percentage_support=75,
            message=(
                "Your resume doesn't have a summary or objective section. "
                "Most successful resumes include one."
            ),
            severity="warning",
        ))

    if not user.heading_style.consistent:
        styles = ", ".join(user.heading_style.styles)
        score -= 10
        suggestions.append(FormattingSuggestion(
            aspect="heading_consistency",
            user_value=f"Mixed styles: {styles}",
            reference_value="Consistent heading style",
            percentage_support=88,
            message=f"Your headings use mixed styles ({styles}). Use a consistent heading style throughout.",
            severity="warning",
        ))

    if not user.date_format.consistent:
        formats = ", ".join(user.date_format.formats)
        score -= 8
        suggestions.append(FormattingSuggestion(
            aspect="date_consistency",
            user_value=f"Mixed formats: {formats}",
            reference_value="Consistent date format",
            percentage_support=85,
            message=f"Your resume uses mixed date formats ({formats}). Use a single consistent format.",
            severity="warning",
        ))

    metric_count = user.quantified_metrics.count
    if metric_count < 3:
        score -= 10
        suggestions.append(FormattingSuggestion(
            aspect="quantified_metrics",
            user_value=f"{metric_count} metrics found",
            reference_value="3+ quantified metrics",
            percentage_support=80,
            message=(
                f"Your resume has only {metric_count} quantified metric(s). Strong resumes include "
                "numbers, percentages, and dollar amounts to demonstrate impact."
            ),
            severity="critical" if metric_count == 0 else "warning",
        ))

    bullets = user.bullet_style
    if bullets.total_bullets == 0:
        score -= 12
        suggestions.append(FormattingSuggestion(
            aspect="bullet_points",
            user_value="No bullet points detected",
            reference_value="Uses bullet points",
            percentage_support=92,
            message=(
                "No bullet points were detected. Use bullet points to list your "
                "achievements and responsibilities."
            ),
            severity="critical",
        ))
    elif bullets.avg_bullets_per_entry > 7:
        score -= 5
        suggestions.append(FormattingSuggestion(
            aspect="bullet_density",
            user_value=f"{bullets.avg_bullets_per_entry} bullets per entry",
            reference_value="3-5 bullets per entry",
            percentage_support=78,
            message=(
                f"You have an average of {bullets.avg_bullets_per_entry} bullets per role. "
                "Most successful resumes use 3-5 bullets per role for readability."
            ),
            severity="info",
        ))

    missing = _missing_key_sections(user)
    if missing:
        score -= len(missing) * 5
        suggestions.append(FormattingSuggestion(
            aspect="missing_sections",
            user_value=f"Missing: {', '.join(missing)}",
            reference_value="Has Experience, Education, Skills sections",
            percentage_support=95,
            message=(
                f"Your resume is missing key section(s): {', '.join(missing)}. "
                "Include these sections for a complete resume."
            ),
            severity="critical",
        ))

    return _result(score, suggestions, user, reference_count=0)


# ============================================
# Corpus-relative analysis
# ============================================


def mode(values: Sequence[int]) -> int:
    """Most common value; the first value to reach the top count wins ties."""
    counts: Dict[int, int] = {}
    best_count = 0
    best = values[0] if values else 1
    for value in values:
        counts[value] = counts.get(value, 0) + 1
        if counts[value] > best_count:
            best_count = counts[value]
            best = value
    return best


def percentage(values: Sequence[int], target: int) -> int:
    if not values:
        return 0
    return round_score(sum(1 for v in values if v == target) / len(values) * 100)


def _share(count: int, total: int) -> int:
    return round_score(count / total * 100)


def compute_common_section_order(references: Sequence[FormattingPatterns]) -> List[str]:
    """
    Most common relative section order across the references.

    Sections are ranked by their mean position; sections that appear in
    fewer than 30% of references are ignored.
    """
    positions: Dict[str, List[int]] = {}
    for patterns in references:
        for index, section in enumerate(patterns.section_order):
            positions.setdefault(section, []).append(index)

    averages = [
        (section, sum(found) / len(found))
        for section, found in positions.items()
        if len(found) >= len(references) * SECTION_ORDER_MIN_SHARE
    ]
    averages.sort(key=lambda item: item[1])
    return [section for section, _ in averages]


def check_section_order(user_order: Sequence[str], common_order: Sequence[str]) -> List[FormattingSuggestion]:
    """Report the first adjacent pair of common sections that the user has reversed."""
    for first, second in zip(common_order, common_order[1:]):
        if first not in user_order or second not in user_order:
            continue
        if user_order.index(first) > user_order.index(second):
            return [FormattingSuggestion(
                aspect="section_order",
                user_value=f"{second} before {first}",
                reference_value=f"{first} before {second}",
                percentage_support=SECTION_ORDER_SUPPORT,
                message=(
                    f'Most successful resumes place "{first}" before "{second}". '
                    "Consider reordering your sections."
                ),
                severity="info",
            )]
    return []


def analyze_against_references(
    user: FormattingPatterns,
    references: Sequence[FormattingPatterns],
) -> FormattingAnalysisResult:
    """Compare user formatting with the statistical norms of the reference corpus."""
    suggestions: List[FormattingSuggestion] = []
    score = 100
    total = len(references)

    # Page count
    page_counts = [p.page_count for p in references]
    common_pages = mode(page_counts)
    pct_at_mode = percentage(page_counts, common_pages)
    if user.page_count != common_pages and pct_at_mode >= PAGE_COUNT_AGREEMENT:
        deduction = 15 if user.page_count > common_pages + 1 else 8
        score -= deduction
        suggestions.append(FormattingSuggestion(
            aspect="page_count",
            user_value=f"{user.page_count} page(s)",
            reference_value=f"{common_pages} page(s)",
            percentage_support=pct_at_mode,
            message=(
                f"{pct_at_mode}% of successful resumes at your level use {common_pages} page(s). "
                f"Yours is {user.page_count} page(s)."
            ),
            severity="critical" if deduction >= 15 else "warning",
        ))

    # Summary section
    pct_summary = _share(sum(1 for p in references if p.has_summary), total)
    if not user.has_summary and pct_summary >= SUMMARY_AGREEMENT:
        score -= 10
        suggestions.append(FormattingSuggestion(
            aspect="summary_section",
            user_value="No summary section",
            reference_value="Has summary section",
            percentage_support=pct_summary,
            message=f"{pct_summary}% of successful resumes include a summary section. Consider adding one.",
            severity="warning",
        ))

    # Section order
    common_order = compute_common_section_order(references)
    if len(common_order) >= 2:
        for suggestion in check_section_order(user.section_order, common_order):
            score -= 5
            suggestions.append(suggestion)

    # Bullet points
    avg_ref_bullets = round_score(sum(p.bullet_style.avg_bullets_per_entry for p in references) / total)
    user_bullets = user.bullet_style
    if user_bullets.total_bullets == 0:
        pct_with_bullets = _share(sum(1 for p in references if p.bullet_style.total_bullets > 0), total)
        if pct_with_bullets >= BULLET_AGREEMENT:
            score -= 12
            suggestions.append(FormattingSuggestion(
                aspect="bullet_points",
                user_value="No bullet points detected",
                reference_value=f"Uses bullet points (avg {avg_ref_bullets} per role)",
                percentage_support=pct_with_bullets,
                message=(
                    f"{pct_with_bullets}% of successful resumes use bullet points. "
                    "Add bullet points to describe your experience."
                ),
                severity="critical",
            ))
    elif abs(user_bullets.avg_bullets_per_entry - avg_ref_bullets) > 3:
        score -= 5
        pct_in_range = _share(
            sum(1 for p in references if abs(p.bullet_style.avg_bullets_per_entry - avg_ref_bullets) <= 2),
            total,
        )
        suggestions.append(FormattingSuggestion(
            aspect="bullet_density",
            user_value=f"{user_bullets.avg_bullets_per_entry} bullets per entry",
            reference_value=f"{avg_ref_bullets} bullets per entry",
            percentage_support=pct_in_range,
            message=(
                f"{pct_in_range}% of successful resumes have {avg_ref_bullets - 2}-{avg_ref_bullets + 2} "
                f"bullet points per role. You have {user_bullets.avg_bullets_per_entry}."
            ),
            severity="info",
        ))

    # Quantified metrics
    user_metrics = user.quantified_metrics.count
    avg_ref_metrics = round_score(sum(p.quantified_metrics.count for p in references) / total)
    if user_metrics < avg_ref_metrics * 0.5:
        pct_with_more = _share(sum(1 for p in references if p.quantified_metrics.count > user_metrics), total)
        score -= 12 if user_metrics == 0 else 8
        suggestions.append(FormattingSuggestion(
            aspect="quantified_metrics",
            user_value=f"{user_metrics} metrics found",
            reference_value=f"Average {avg_ref_metrics} metrics",
            percentage_support=pct_with_more,
            message=(
                f"{pct_with_more}% of successful resumes have more quantified metrics than yours. "
                "Add numbers, percentages, and dollar amounts to demonstrate impact."
            ),
            severity="critical" if user_metrics == 0 else "warning",
        ))

    # Heading style consistency
    if not user.heading_style.consistent:
        pct_consistent = _share(sum(1 for p in references if p.heading_style.consistent), total)
        if pct_consistent >= CONSISTENCY_AGREEMENT:
            score -= 8
            suggestions.append(FormattingSuggestion(
                aspect="heading_consistency",
                user_value=f"Mixed styles: {', '.join(user.heading_style.styles)}",
                reference_value="Consistent heading style",
                percentage_support=pct_consistent,
                message=(
                    f"{pct_consistent}% of successful resumes use a consistent heading style. "
                    f"Yours mixes {' and '.join(user.heading_style.styles)}."
                ),
                severity="warning",
            ))

    # Date format consistency
    if not user.date_format.consistent:
        pct_consistent = _share(sum(1 for p in references if p.date_format.consistent), total)
        if pct_consistent >= CONSISTENCY_AGREEMENT:
            score -= 6
            suggestions.append(FormattingSuggestion(
                aspect="date_consistency",
                user_value=f"Mixed formats: {', '.join(user.date_format.formats)}",
                reference_value="Consistent date format",
                percentage_support=pct_consistent,
                message=(
                    f"{pct_consistent}% of successful resumes use a consistent date format. "
                    "Use one format throughout."
                ),
                severity="warning",
            ))

    # Key sections
    missing = _missing_key_sections(user)
    if missing:
        pct_with_all = _share(sum(1 for p in references if not _missing_key_sections(p)), total)
        score -= len(missing) * 5
        suggestions.append(FormattingSuggestion(
            aspect="missing_sections",
            user_value=f"Missing: {', '.join(missing)}",
            reference_value="Has Experience, Education, Skills sections",
            percentage_support=pct_with_all,
            message=(
                f"{pct_with_all}% of successful resumes include Experience, Education, and Skills. "
                f"You're missing: {', '.join(missing)}."
            ),
            severity="critical",
        ))

    return _result(score, suggestions, user, reference_count=total)


def analyze_formatting(
    resume_text: str,
    page_count: Optional[int] = None,
    references: Optional[Sequence[ReferenceResume]] = None,
) -> FormattingAnalysisResult:
    """
    Analyze resume formatting, against the reference corpus when one is available.

    Args:
        resume_text: Plain resume text
        page_count: Known page count of the source document
        references: Reference resumes; entries without stored patterns are ignored

    Returns:
        FormattingAnalysisResult (reference_count is 0 for a standalone analysis)
    """
    user_patterns = extract_formatting_patterns(resume_text, page_count)
    usable = [r.formatting_patterns for r in references or [] if r.formatting_patterns is not None]

    if not usable:
        return analyze_standalone(user_patterns)
    return analyze_against_references(user_patterns, usable)


async def fetch_reference_resumes(
    industry: Optional[str] = None,
    role_level: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[ReferenceResume]:
    """
    Load the reference corpus from the JSON cache, optionally filtered.

    Returns an empty list when Redis is not configured or the corpus is
    missing. Records that fail validation are skipped.
    """
    settings = get_settings()
    if limit is None:
        limit = settings.reference_corpus_limit

    records = await cache_get_json(settings.reference_corpus_key)
    if not isinstance(records, list):
        return []

    references: List[ReferenceResume] = []
    for record in records:
        try:
            reference = ReferenceResume.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Skipping invalid reference resume record: {e}")
            continue
        if industry and reference.industry != industry:
            continue
        if role_level and reference.role_level != role_level:
            continue
        references.append(reference)
        if len(references) >= limit:
            break

    logger.info(f"Loaded {len(references)} reference resume(s)")
    return references
