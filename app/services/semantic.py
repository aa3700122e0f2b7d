"""
HR layer 2: semantic similarity between resume sections and the job description.

The resume is split into named sections, each section and the job
description are embedded with Gemini, and each section is scored by
cosine similarity. Experience and skills count most towards the overall
score.
"""
import asyncio
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from app.config import get_settings
from app.services.gemini import get_gemini_client
from app.services.scoring_policy import round_score

logger = logging.getLogger(__name__)

# Rough cap at ~4 chars per token
MAX_EMBEDDING_CHARS = 8192
MIN_SECTION_CHARS = 20


def _heading(alternatives: str) -> re.Pattern:
    return re.compile(rf"^(?:{alternatives})\s*:?\s*$", re.IGNORECASE)


SECTION_HEADINGS: Dict[str, re.Pattern] = {
    "summary": _heading(
        r"summary|objective|profile|about\s*me|professional\s+summary|career\s+summary|"
        r"personal\s+statement|executive\s+summary"
    ),
    "experience": _heading(
        r"experience|employment|work\s+history|professional\s+experience|career\s+history|"
        r"positions?\s+held|work\s+experience"
    ),
    "education": _heading(r"education|academic|academic\s+background|educational\s+background|degrees?"),
    "skills": _heading(
        r"skills|technical\s+skills|competencies|proficiencies|technologies|tools|expertise|"
        r"core\s+skills|key\s+skills|areas?\s+of\s+expertise"
    ),
    "projects": _heading(r"projects|personal\s+projects|key\s+projects"),
    "certifications": _heading(
        r"certifications?|licenses?|credentials?|certifications?\s*(?:&|and)\s*licenses?"
    ),
}

SECTION_WEIGHTS: Dict[str, float] = {
    "experience": 3,
    "skills": 2.5,
    "summary": 2,
    "projects": 1.5,
    "education": 1,
    "certifications": 1,
    "header": 0.5,
    "full": 1,
}
DEFAULT_SECTION_WEIGHT = 1


@dataclass(frozen=True)
class ResumeSection:
    name: str
    content: str


@dataclass(frozen=True)
class SectionEmbedding:
    section: str
    embedding: List[float]
    content: str = ""


@dataclass(frozen=True)
class SemanticSectionScore:
    section: str
    score: int


@dataclass(frozen=True)
class SemanticScore:
    overall_score: int = 0
    section_scores: List[SemanticSectionScore] = field(default_factory=list)


def split_into_sections(resume_text: str) -> List[ResumeSection]:
    """
    Split resume text into named sections at heading lines.

    Text before the first heading becomes a "header" section (usually
    contact details). Without any heading the whole text is one "full"
    section. Empty sections are dropped.
    """
    sections: List[ResumeSection] = []
    current = None
    body: List[str] = []
    header: List[str] = []

    def flush(name: str, lines: List[str]) -> None:
        content = "\n".join(lines).strip()
        if content:
            sections.append(ResumeSection(name=name, content=content))

    for line in resume_text.split("\n"):
        stripped = line.strip()
        matched = next((name for name, p in SECTION_HEADINGS.items() if p.search(stripped)), None)

        if matched is None:
            (body if current else header).append(line)
            continue

        if current:
            flush(current, body)
        else:
            flush("header", header)
        current = matched
        body = []

    if current:
        flush(current, body)
    else:
        flush("full", [resume_text])

    return sections


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two equal-length vectors, in [-1, 1].

    Raises:
        ValueError: On length mismatch or empty vectors
    """
    if len(a) != len(b):
        raise ValueError(f"Vector length mismatch: a has {len(a)} dimensions, b has {len(b)}")
    if not a:
        raise ValueError("Cannot compute cosine similarity of empty vectors")

    dot = sum(x * y for x, y in zip(a, b))
    magnitude = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if magnitude == 0:
        return 0.0
    return dot / magnitude


def compute_semantic_score(
    section_embeddings: Sequence[SectionEmbedding],
    jd_embedding: Sequence[float],
) -> SemanticScore:
    """Score each section 0-100 by similarity to the job description; overall is the weighted mean."""
    if not section_embeddings:
        return SemanticScore()

    section_scores: List[SemanticSectionScore] = []
    weighted_sum = 0.0
    total_weight = 0.0

    for item in section_embeddings:
        similarity = cosine_similarity(item.embedding, jd_embedding)
        score = round_score(max(0.0, min(100.0, similarity * 100)))
        section_scores.append(SemanticSectionScore(section=item.section, score=score))

        weight = SECTION_WEIGHTS.get(item.section, DEFAULT_SECTION_WEIGHT)
        weighted_sum += score * weight
        total_weight += weight

    overall = round_score(weighted_sum / total_weight) if total_weight > 0 else 0
    return SemanticScore(overall_score=overall, section_scores=section_scores)


async def generate_embedding(text: str) -> List[float]:
    """Embed a single text with the configured Gemini embedding model."""
    if not text or not text.strip():
        raise ValueError("Cannot generate embedding for empty text")

    settings = get_settings()
    client = get_gemini_client()
    response = await client.aio.models.embed_content(
        model=settings.gemini_embedding_model,
        contents=text[:MAX_EMBEDDING_CHARS].strip(),
    )
    return list(response.embeddings[0].values)


async def generate_section_embeddings(resume_text: str) -> List[SectionEmbedding]:
    sections = [s for s in split_into_sections(resume_text) if len(s.content) >= MIN_SECTION_CHARS]
    if not sections:
        raise ValueError("No meaningful sections found in resume text for embedding generation")

    embeddings = await asyncio.gather(*(generate_embedding(s.content) for s in sections))
    return [
        SectionEmbedding(section=s.name, embedding=e, content=s.content)
        for s, e in zip(sections, embeddings)
    ]


async def run_semantic_analysis(resume_text: str, job_description: str) -> SemanticScore:
    """Embed resume sections and the job description concurrently, then score them."""
    section_embeddings, jd_embedding = await asyncio.gather(
        generate_section_embeddings(resume_text),
        generate_embedding(job_description),
    )
    score = compute_semantic_score(section_embeddings, jd_embedding)
    logger.info(f"Semantic analysis complete: {len(section_embeddings)} section(s), overall={score.overall_score}")
    return score
