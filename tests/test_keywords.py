import re
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.services.keywords import (  # noqa: E402
    extract_keywords,
    extract_multi_word_phrases,
    keyword_match_pct,
    match_keywords,
)


class ExtractKeywordsTests(unittest.TestCase):
    def test_phrases_first_then_words_by_frequency(self):
        jd = (
            "We need machine learning and Python. "
            "Python experience with machine learning models."
        )
        self.assertEqual(extract_keywords(jd), ["machine learning", "python", "models"])

    def test_frequency_ties_keep_encounter_order(self):
        jd = "Kafka Spark Kafka Airflow Spark Kafka"
        self.assertEqual(extract_keywords(jd), ["kafka", "spark", "airflow"])

    def test_short_acronyms_survive(self):
        self.assertEqual(extract_keywords("Experience with AI and ML, plus go"), ["ai", "ml"])

    def test_filler_and_location_words_removed(self):
        jd = "Remote role in San Francisco. Competitive salary and benefits. Golang required."
        self.assertEqual(extract_keywords(jd), ["golang"])

    def test_phrase_whitespace_normalized_and_deduplicated(self):
        phrases = extract_multi_word_phrases("Machine   learning, machine learning, CI/CD")
        self.assertEqual(phrases, ["machine learning", "ci/cd"])

    def test_custom_catalogues(self):
        patterns = (re.compile(r"pair\s+programming", re.IGNORECASE),)
        keywords = extract_keywords(
            "Pair programming daily with rust",
            patterns=patterns,
            stop_words={"daily", "with"},
        )
        self.assertEqual(keywords, ["pair programming", "rust"])

    def test_empty_description(self):
        self.assertEqual(extract_keywords(""), [])


class MatchKeywordsTests(unittest.TestCase):
    def test_empty_keyword_list_is_full_match(self):
        result = match_keywords("anything", [])
        self.assertEqual(result.matched, [])
        self.assertEqual(result.missing, [])
        self.assertEqual(result.match_pct, 100)

    def test_substring_and_stem_matching(self):
        result = match_keywords(
            "Deployed Kubernetes clusters",
            ["kubernetes", "deployment", "terraform"],
        )
        self.assertEqual(result.matched, ["kubernetes", "deployment"])
        self.assertEqual(result.missing, ["terraform"])
        self.assertEqual(result.match_pct, 67)

    def test_multi_word_keyword_matches_constituents(self):
        result = match_keywords("Built pipelines for data ingestion", ["data pipeline"])
        self.assertEqual(result.matched, ["data pipeline"])

    def test_multi_word_keyword_needs_every_word(self):
        result = match_keywords("Strong data background", ["data pipeline"])
        self.assertEqual(result.missing, ["data pipeline"])

    def test_strict_mode_requires_whole_words(self):
        self.assertEqual(match_keywords("Used javascript daily", ["java"]).matched, ["java"])
        strict = match_keywords("Used javascript daily", ["java"], strict_mode=True)
        self.assertEqual(strict.missing, ["java"])
        self.assertEqual(strict.match_pct, 0)

    def test_strict_mode_is_case_insensitive(self):
        strict = match_keywords("Shipped services in Go and PYTHON", ["python"], strict_mode=True)
        self.assertEqual(strict.matched, ["python"])

    def test_partition_covers_deduplicated_keywords(self):
        keywords = ["python", "docker", "python", "aws"]
        result = match_keywords("Python and AWS", keywords)
        self.assertEqual(len(result.matched) + len(result.missing), 3)
        self.assertEqual(result.matched, ["python", "aws"])
        self.assertEqual(result.missing, ["docker"])
        self.assertEqual(result.match_pct, 67)

    def test_match_pct_rounds_half_up(self):
        self.assertEqual(keyword_match_pct(1, 8), 13)
        self.assertEqual(keyword_match_pct(0, 0), 100)


if __name__ == "__main__":
    unittest.main()
