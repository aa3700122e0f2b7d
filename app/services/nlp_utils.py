"""Lightweight NLP utilities for ATS scoring.

This module intentionally avoids heavyweight dependencies so it can run in
constrained environments. It provides:
- Tokenization
- A suffix-stripping stemmer driven by an ordered rule table
- The stop-word list and acronym allow-list used by keyword extraction

The stemmer is an approximation, not a morphological analyzer. Keyword
matching depends on its exact behaviour, so the rule table and its order are
part of the contract.
"""

from __future__ import annotations

import re
from typing import Iterable, NamedTuple, Sequence


class SuffixRule(NamedTuple):
    """Strip ``suffix`` and append ``replacement`` when the word is longer than ``min_length``."""

    suffix: str
    replacement: str = ""
    min_length: int = 0
    exclude_suffix: str | None = None

    def applies(self, word: str) -> bool:
        if not word.endswith(self.suffix) or len(word) <= self.min_length:
            return False
        if self.exclude_suffix and word.endswith(self.exclude_suffix):
            return False
        return True

    def apply(self, word: str) -> str:
        return word[: -len(self.suffix)] + self.replacement


# First matching rule wins; order is significant.
SUFFIX_RULES: tuple[SuffixRule, ...] = (
    SuffixRule("iness", "y"),
    SuffixRule("ies", "y", min_length=4),
    SuffixRule("ational", "ate"),
    SuffixRule("ization", "ize"),
    SuffixRule("fulness", "ful"),
    SuffixRule("ousness", "ous"),
    SuffixRule("iveness", "ive"),
    SuffixRule("ement"),
    SuffixRule("ment"),
    SuffixRule("tion", "t"),
    SuffixRule("sion", "s"),
    SuffixRule("ness"),
    SuffixRule("able"),
    SuffixRule("ible"),
    SuffixRule("ally", "al"),
    SuffixRule("ful"),
    SuffixRule("ous"),
    SuffixRule("ive"),
    SuffixRule("ing", min_length=5),
    SuffixRule("ied", "y"),
    SuffixRule("ted", "t", min_length=5),
    SuffixRule("ed", min_length=4),
    SuffixRule("ly", min_length=4),
    SuffixRule("er", min_length=4),
    SuffixRule("es", min_length=4),
    SuffixRule("al", min_length=4),
    SuffixRule("s", min_length=3, exclude_suffix="ss"),
)

MIN_STEM_LENGTH = 3

STOP_WORDS = frozenset({
    # Common English words
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "from", "as", "is", "was", "are", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would",
    "could", "should", "may", "might", "shall", "can", "need", "must",
    "about", "above", "after", "again", "all", "also", "am", "any", "because",
    "before", "between", "both", "during", "each", "few", "further", "get",
    "got", "he", "her", "here", "him", "his", "how", "i", "if", "into", "it",
    "its", "just", "let", "like", "me", "more", "most", "my", "no", "nor",
    "not", "now", "only", "other", "our", "out", "over", "own", "same", "she",
    "so", "some", "such", "than", "that", "their", "them", "then", "there",
    "these", "they", "this", "those", "through", "too", "under", "until", "up",
    "us", "very", "we", "what", "when", "where", "which", "while", "who",
    "whom", "why", "you", "your", "able", "across", "already", "among",
    "around", "become", "within", "without", "work", "working", "including",
    "well", "using", "used", "use", "new", "make", "ensure", "based",
    "related", "per", "via", "etc", "e.g", "i.e",

    # Job posting filler words
    "experience", "role", "position", "team", "company", "opportunity",
    "responsibilities", "requirements", "qualifications", "candidate",
    "looking", "join", "apply", "ideal", "required", "preferred", "plus",
    "strong", "excellent", "proven", "ability", "skills", "knowledge",
    "understanding", "years", "minimum", "bachelor", "master", "degree",

    # Location terms
    "san", "francisco", "york", "los", "angeles", "chicago", "denver",
    "seattle", "austin", "boston", "atlanta", "dallas", "houston", "remote",
    "hybrid", "onsite", "on-site", "location", "located", "area",
    "region", "city", "state", "headquarters", "hq", "office", "bay",
    "california", "texas", "washington", "florida", "virginia", "colorado",
    "massachusetts", "georgia", "illinois", "oregon", "arizona", "carolina",

    # Compensation & benefits
    "salary", "salaries", "equity", "compensation", "bonus", "bonuses",
    "benefits", "perks", "package", "stock", "options", "rrsp", "401k",
    "pension", "insurance", "health", "dental", "vision", "pto", "vacation",
    "competitive", "range", "annual", "base", "total", "hourly", "pay",

    # Job posting metadata
    "posting", "posted", "applying", "application", "submit",
    "deadline", "asap", "immediately", "urgent", "available", "seeking",
    "hiring", "opportunities", "opening", "openings", "requisition",
    "employment", "employer", "employee", "employees", "staff", "workforce",

    # Generic fillers
    "approximately", "circa", "includes", "similar",
    "desired", "nice", "preparation", "assist", "support", "help",
    "provide", "create", "develop", "implement", "maintain", "manage",
    "build", "drive", "deliver", "execute", "lead", "partner", "collaborate",
    "effectively", "efficiently", "successfully", "consistently", "regularly",
})

# Two-letter tokens that are meaningful in job descriptions
SHORT_TECH_TERMS = frozenset({
    "ai", "ml", "ui", "ux", "qa", "ci", "cd", "db", "os", "it", "bi", "hr",
})

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9\s\-/+#]")
_EDGE_SPECIALS = re.compile(r"^[-/#+]+|[-/#+]+$")
_PURE_NUMBER = re.compile(r"^\d+$")


def tokenize(text: str) -> list[str]:
    """Split text into lowercase word tokens; ``- / + #`` survive only inside a token (ci/cd, front-end)."""
    cleaned = _DISALLOWED_CHARS.sub(" ", text.lower())
    tokens = []
    for raw in cleaned.split():
        token = _EDGE_SPECIALS.sub("", raw)
        if len(token) <= 1:
            continue
        # Salary figures and other bare numbers are never keywords
        if _PURE_NUMBER.match(token):
            continue
        tokens.append(token)
    return tokens


def stem(word: str, rules: Sequence[SuffixRule] = SUFFIX_RULES) -> str:
    w = word.lower()
    if len(w) <= MIN_STEM_LENGTH:
        return w

    for rule in rules:
        if rule.applies(w):
            return rule.apply(w)
    return w


def stem_all(tokens: Iterable[str]) -> set[str]:
    return {stem(t) for t in tokens}
