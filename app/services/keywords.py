"""Keyword extraction from job descriptions and matching against resume text."""
from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Collection, Sequence

from app.services.nlp_utils import SHORT_TECH_TERMS, STOP_WORDS, stem, stem_all, tokenize
from app.services.scoring_policy import round_score


# Known multi-word technical phrases, scanned in this order
MULTI_WORD_PATTERNS: tuple[re.Pattern, ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"machine\s+learning",
        r"deep\s+learning",
        r"artificial\s+intelligence",
        r"natural\s+language\s+processing",
        r"computer\s+vision",
        r"data\s+science",
        r"data\s+engineering",
        r"data\s+analysis",
        r"data\s+analytics",
        r"data\s+pipeline",
        r"data\s+warehouse",
        r"data\s+modeling",
        r"project\s+management",
        r"product\s+management",
        r"full\s+stack",
        r"front\s+end",
        r"back\s+end",
        r"user\s+experience",
        r"user\s+interface",
        r"quality\s+assurance",
        r"continuous\s+integration",
        r"continuous\s+delivery",
        r"continuous\s+deployment",
        r"version\s+control",
        r"cloud\s+computing",
        r"software\s+engineering",
        r"software\s+development",
        r"web\s+development",
        r"mobile\s+development",
        r"api\s+development",
        r"test\s+driven",
        r"cross[\s-]+functional",
        r"object[\s-]+oriented",
        r"event[\s-]+driven",
        r"micro[\s-]?services",
        r"rest(?:ful)?\s+api",
        r"supply\s+chain",
        r"business\s+intelligence",
        r"business\s+analysis",
        r"customer\s+service",
        r"customer\s+success",
        r"human\s+resources",
        r"real[\s-]+time",
        r"open[\s-]+source",
        r"unit\s+test(?:ing|s)?",
        r"end[\s-]+to[\s-]+end",
        r"a/b\s+test(?:ing|s)?",
        r"ci[\s/]+cd",
    )
)

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class KeywordMatchResult:
    """Partition of the keyword list into matched and missing keywords."""
    matched: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    match_pct: int = 100


def extract_multi_word_phrases(
    text: str,
    patterns: Sequence[re.Pattern] = MULTI_WORD_PATTERNS,
) -> list[str]:
    phrases: list[str] = []
    for pattern in patterns:
        for match in pattern.finditer(text):
            normalized = _WHITESPACE.sub(" ", match.group(0).lower()).strip()
            if normalized not in phrases:
                phrases.append(normalized)
    return phrases


def _is_candidate_word(
    word: str,
    stop_words: Collection[str],
    short_terms: Collection[str],
) -> bool:
    if word in stop_words:
        return False
    if len(word) <= 2 and word not in short_terms:
        return False
    return True


def extract_keywords(
    job_description: str,
    patterns: Sequence[re.Pattern] = MULTI_WORD_PATTERNS,
    stop_words: Collection[str] = STOP_WORDS,
    short_terms: Collection[str] = SHORT_TECH_TERMS,
) -> list[str]:
    """
    Extract significant keywords and phrases from a job description.

    Multi-word phrases come first (catalogue order), followed by single words
    ranked by frequency in the description.

    Args:
        job_description: Raw job description text
        patterns: Multi-word phrase catalogue
        stop_words: Words that never become keywords
        short_terms: Two-letter acronyms that survive the length filter

    Returns:
        Ordered, deduplicated keyword list
    """
    text = job_description.lower()
    phrases = extract_multi_word_phrases(text, patterns)

    # Counter preserves first-encounter order, and sorted() is stable, so
    # equal frequencies keep the order in which they appeared.
    frequencies = Counter(
        word for word in tokenize(text) if _is_candidate_word(word, stop_words, short_terms)
    )
    ranked = sorted(frequencies, key=lambda w: frequencies[w], reverse=True)

    phrase_words = {word for phrase in phrases for word in phrase.split()}
    keywords = list(phrases)
    keywords.extend(word for word in ranked if word not in phrase_words)
    return keywords


def _match_exact(keyword: str, resume_text: str) -> bool:
    pattern = re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)
    return bool(pattern.search(resume_text))


def _match_fuzzy(keyword: str, resume_lower: str, resume_stems: set[str]) -> bool:
    if keyword.lower() in resume_lower:
        return True

    words = keyword.split()
    if len(words) > 1:
        return all(w in resume_lower or stem(w) in resume_stems for w in words)
    return stem(keyword) in resume_stems


def match_keywords(
    resume_text: str,
    keywords: Sequence[str],
    strict_mode: bool = False,
) -> KeywordMatchResult:
    """
    Match job-description keywords against resume text.

    Fuzzy mode (default) accepts a case-insensitive substring, then stemmed
    matches. Strict mode accepts only whole-word matches, the way simple
    ATS pattern matchers behave.
    """
    unique = list(dict.fromkeys(keywords))
    if not unique:
        return KeywordMatchResult(matched=[], missing=[], match_pct=100)

    resume_lower = resume_text.lower()
    resume_stems = set() if strict_mode else stem_all(tokenize(resume_text))

    matched: list[str] = []
    missing: list[str] = []
    for keyword in unique:
        if strict_mode:
            found = _match_exact(keyword, resume_text)
        else:
            found = _match_fuzzy(keyword, resume_lower, resume_stems)
        (matched if found else missing).append(keyword)

    return KeywordMatchResult(
        matched=matched,
        missing=missing,
        match_pct=keyword_match_pct(len(matched), len(unique)),
    )


def keyword_match_pct(matched_count: int, total: int) -> int:
    if total == 0:
        return 100
    return round_score(matched_count / total * 100)
