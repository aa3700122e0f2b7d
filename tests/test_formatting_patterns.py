import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.services.formatting_patterns import (  # noqa: E402
    detect_bullet_style,
    detect_date_formats,
    detect_heading_style,
    detect_quantified_metrics,
    detect_section_order,
    extract_formatting_patterns,
)
from tests.fixtures import CLEAN_RESUME, WEAK_RESUME  # noqa: E402


class ExtractFormattingPatternsTests(unittest.TestCase):
    def test_clean_resume(self):
        patterns = extract_formatting_patterns(CLEAN_RESUME)

        self.assertEqual(patterns.page_count, 1)
        self.assertEqual(
            patterns.section_order,
            ["Contact", "Summary", "Experience", "Education", "Skills"],
        )
        self.assertTrue(patterns.has_summary)
        self.assertEqual(patterns.bullet_style.types, ["dash"])
        self.assertEqual(patterns.bullet_style.total_bullets, 5)
        self.assertEqual(patterns.bullet_style.avg_bullets_per_entry, 3)
        self.assertEqual(patterns.quantified_metrics.count, 3)
        self.assertEqual(patterns.heading_style.styles, ["Title Case"])
        self.assertTrue(patterns.heading_style.consistent)
        self.assertEqual(patterns.date_format.formats, ["Month YYYY"])
        self.assertTrue(patterns.date_format.consistent)

    def test_explicit_page_count_wins(self):
        self.assertEqual(extract_formatting_patterns(CLEAN_RESUME, page_count=3).page_count, 3)

    def test_weak_resume(self):
        patterns = extract_formatting_patterns(WEAK_RESUME)
        self.assertEqual(patterns.section_order, [])
        self.assertFalse(patterns.has_summary)
        self.assertEqual(patterns.bullet_style.total_bullets, 0)
        self.assertEqual(patterns.word_count, 6)
        self.assertEqual(patterns.avg_words_per_line, 3)

    def test_empty_text(self):
        patterns = extract_formatting_patterns("")
        self.assertEqual(patterns.page_count, 1)
        self.assertEqual(patterns.white_space_ratio, 0.0)
        self.assertEqual(patterns.word_count, 0)

    def test_white_space_ratio(self):
        patterns = extract_formatting_patterns("one\n\ntwo\n")
        self.assertEqual(patterns.white_space_ratio, 0.5)

    def test_serializes_with_camel_case_aliases(self):
        dumped = extract_formatting_patterns(CLEAN_RESUME).model_dump(by_alias=True)
        self.assertIn("sectionOrder", dumped)
        self.assertIn("avgBulletsPerEntry", dumped["bulletStyle"])


class DetectorTests(unittest.TestCase):
    def test_contact_not_inferred_from_late_email(self):
        text = "A\nB\nC\nD\nE\nF\nme@example.com\nExperience"
        self.assertEqual(detect_section_order(text), ["Experience"])

    def test_headings_must_fill_the_line(self):
        self.assertEqual(detect_section_order("Ten years of experience in sales"), [])

    def test_bullets_without_dates_count_as_one_entry(self):
        style = detect_bullet_style("* one\n* two\n1. three\n")
        self.assertEqual(style.types, ["asterisk", "number"])
        self.assertEqual(style.total_bullets, 3)
        self.assertEqual(style.avg_bullets_per_entry, 3)

    def test_mixed_heading_styles(self):
        style = detect_heading_style("EXPERIENCE\nwork\nTechnical skills\n")
        self.assertEqual(style.styles, ["ALL_CAPS", "Sentence case"])
        self.assertFalse(style.consistent)

    def test_metrics_are_deduplicated(self):
        metrics = detect_quantified_metrics("Cut costs 20% and 20%, saved $1.2M for 500 users")
        self.assertEqual(metrics.examples, ["20%", "$1.2M", "500 users"])

    def test_may_and_bare_years(self):
        self.assertEqual(detect_date_formats("May 2020 - Present").formats, ["Month YYYY"])
        self.assertEqual(detect_date_formats("2018 - 2020").formats, ["YYYY"])
        mixed = detect_date_formats("Jan 2020 - 03/2021")
        self.assertEqual(mixed.formats, ["MM/YYYY", "Mon YYYY"])
        self.assertFalse(mixed.consistent)


if __name__ == "__main__":
    unittest.main()
