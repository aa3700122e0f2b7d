"""Formatting pattern records stored for reference resumes (HR layer 1)."""
from typing import List, Optional

from pydantic import BaseModel, Field


class BulletStyle(BaseModel):
    """Bullet point usage in a resume."""
    types: List[str] = Field(default_factory=list, description="Bullet kinds, e.g. dash, dot, number")
    avg_bullets_per_entry: int = Field(0, alias="avgBulletsPerEntry")
    total_bullets: int = Field(0, alias="totalBullets")

    class Config:
        populate_by_name = True


class QuantifiedMetrics(BaseModel):
    count: int = 0
    examples: List[str] = Field(default_factory=list)


class HeadingStyle(BaseModel):
    consistent: bool = True
    styles: List[str] = Field(default_factory=list, description="ALL_CAPS, Title Case or Sentence case")


class DateFormat(BaseModel):
    formats: List[str] = Field(default_factory=list)
    consistent: bool = True


class FormattingPatterns(BaseModel):
    """Deterministic formatting metadata extracted from resume text."""
    page_count: int = Field(1, alias="pageCount")
    section_order: List[str] = Field(default_factory=list, alias="sectionOrder")
    bullet_style: BulletStyle = Field(default_factory=BulletStyle, alias="bulletStyle")
    has_summary: bool = Field(False, alias="hasSummary")
    quantified_metrics: QuantifiedMetrics = Field(default_factory=QuantifiedMetrics, alias="quantifiedMetrics")
    heading_style: HeadingStyle = Field(default_factory=HeadingStyle, alias="headingStyle")
    white_space_ratio: float = Field(0.0, alias="whiteSpaceRatio", description="Empty lines / total lines")
    date_format: DateFormat = Field(default_factory=DateFormat, alias="dateFormat")
    word_count: int = Field(0, alias="wordCount")
    avg_words_per_line: int = Field(0, alias="avgWordsPerLine")

    class Config:
        populate_by_name = True


class ReferenceResume(BaseModel):
    """A known-successful resume from the reference corpus."""
    id: str
    title: str = ""
    industry: Optional[str] = None
    role_level: Optional[str] = Field(None, alias="roleLevel")
    formatting_patterns: Optional[FormattingPatterns] = Field(None, alias="formattingPatterns")

    class Config:
        populate_by_name = True
