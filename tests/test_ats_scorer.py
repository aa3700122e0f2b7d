import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.models.judgments import SupplementaryATSAnalysis  # noqa: E402
from app.services.ats_scorer import (  # noqa: E402
    ATSScore,
    ATSScorer,
    combine_ats_results,
    compute_ats_score,
    detect_job_type,
    run_ats_analysis,
)
from app.services.formatting import FormattingResult  # noqa: E402
from app.services.keywords import KeywordMatchResult  # noqa: E402
from app.services.scoring_policy import DEFAULT_WEIGHTS, WEIGHT_PROFILES, clamp_score, round_score  # noqa: E402
from app.services.sections import SectionPresence, SectionValidationResult  # noqa: E402
from tests.fixtures import BACKEND_JD, CLEAN_RESUME, WEAK_RESUME  # noqa: E402


def _sections(missing=()):
    names = ["Contact", "Summary", "Experience", "Education", "Skills"]
    presence = [SectionPresence(name=n, found=n not in missing) for n in names]
    found = sum(1 for p in presence if p.found)
    return SectionValidationResult(score=found * 20, sections=presence)


class ScorePolicyTests(unittest.TestCase):
    def test_round_half_up(self):
        self.assertEqual(round_score(72.5), 73)
        self.assertEqual(round_score(20.5), 21)

    def test_clamp_score_bounds_and_rounds(self):
        self.assertEqual(clamp_score(-5), 0)
        self.assertEqual(clamp_score(150), 100)
        self.assertEqual(clamp_score(72.5), 73)


class DetectJobTypeTests(unittest.TestCase):
    def test_senior_wins_over_tech(self):
        self.assertEqual(detect_job_type("Senior Staff Engineer to lead our platform"), "senior")

    def test_entry(self):
        self.assertEqual(detect_job_type("Junior developer internship for new grad"), "entry")

    def test_tech(self):
        self.assertEqual(detect_job_type("Backend software engineer working on APIs"), "tech")

    def test_general_fallback(self):
        self.assertEqual(detect_job_type("Friendly barista wanted"), "general")

    def test_single_signal_is_not_enough(self):
        self.assertEqual(detect_job_type(BACKEND_JD), "general")


class ComputeATSScoreTests(unittest.TestCase):
    def test_weighted_composite_and_issue_order(self):
        keywords = KeywordMatchResult(matched=["python"], missing=["docker"], match_pct=50)
        score = compute_ats_score(keywords, FormattingResult(score=100), _sections(missing=("Summary",)))

        self.assertEqual(score.overall, 70)
        self.assertFalse(score.passed)
        self.assertEqual([i.kind for i in score.issues], ["missing_keyword", "section"])
        self.assertEqual(score.issues[0].severity, "critical")
        self.assertIn('"docker"', score.issues[0].message)
        self.assertEqual(score.issues[1].severity, "warning")

    def test_pass_threshold_is_inclusive(self):
        keywords = KeywordMatchResult(matched=["python"], missing=["docker"], match_pct=50)
        score = compute_ats_score(keywords, FormattingResult(score=100), _sections())
        self.assertEqual(score.overall, 75)
        self.assertTrue(score.passed)

    def test_missing_contact_is_critical(self):
        keywords = KeywordMatchResult(matched=[], missing=[], match_pct=100)
        score = compute_ats_score(keywords, FormattingResult(score=100), _sections(missing=("Contact",)))
        self.assertEqual(score.issues[0].severity, "critical")

    def test_job_type_changes_weights(self):
        keywords = KeywordMatchResult(matched=[], missing=["go"], match_pct=0)
        general = compute_ats_score(keywords, FormattingResult(score=100), _sections())
        entry = compute_ats_score(keywords, FormattingResult(score=100), _sections(), job_type="entry")
        self.assertEqual(general.overall, 50)
        self.assertEqual(entry.overall, 65)


class CombineATSResultsTests(unittest.TestCase):
    def setUp(self):
        keywords = KeywordMatchResult(
            matched=["python"], missing=["docker", "kubernetes"], match_pct=33
        )
        self.deterministic = compute_ats_score(keywords, FormattingResult(score=100), _sections())

    def test_without_judgment_returns_deterministic(self):
        self.assertIs(combine_ats_results(self.deterministic, None), self.deterministic)

    def test_alias_matches_recover_keywords(self):
        supplementary = SupplementaryATSAnalysis.model_validate({
            "aliasMatches": [{"original": "Docker", "alias": "containers", "reasoning": ""}],
            "weakUsages": [{
                "keyword": "python",
                "currentContext": "Skills: Python",
                "issue": "only listed, never demonstrated",
                "suggestedImprovement": "Describe a Python project",
            }],
            "additionalKeywords": ["terraform", "  "],
        })

        combined = combine_ats_results(self.deterministic, supplementary)

        self.assertIsInstance(combined, ATSScore)
        self.assertEqual(combined.matched_keywords, ["python", "docker"])
        self.assertEqual(combined.missing_keywords, ["kubernetes"])
        self.assertEqual(combined.keyword_match_pct, 67)
        self.assertEqual(combined.overall, 84)
        self.assertTrue(combined.passed)
        self.assertEqual(combined.formatting_score, 100)
        self.assertEqual(combined.section_score, 100)

        messages = [i.message for i in combined.issues]
        self.assertFalse(any('"docker"' in m for m in messages))
        self.assertTrue(any('"kubernetes"' in m for m in messages))

        weak = [i for i in combined.issues if i.kind == "weak_keyword"]
        self.assertEqual(len(weak), 1)
        self.assertEqual(weak[0].message, 'Weak usage of "python": only listed, never demonstrated')

        suggested = [i for i in combined.issues if i.severity == "info"]
        self.assertEqual(len(suggested), 1)
        self.assertIn('"terraform"', suggested[0].message)

    def test_explicit_weights(self):
        supplementary = SupplementaryATSAnalysis(aliasMatches=[
            {"original": "docker", "alias": "containers"},
            {"original": "kubernetes", "alias": "k8s"},
        ])
        combined = combine_ats_results(
            self.deterministic, supplementary, weights=WEIGHT_PROFILES["entry"]
        )
        self.assertEqual(combined.keyword_match_pct, 100)
        self.assertEqual(combined.overall, 100)
        self.assertEqual(combined.missing_keywords, [])


class ATSScorerTests(unittest.TestCase):
    def test_weak_resume_fails(self):
        result = run_ats_analysis(WEAK_RESUME, BACKEND_JD)
        self.assertEqual(result.job_type, "general")
        self.assertEqual(result.formatting_score, 60)
        self.assertEqual(result.section_score, 0)
        self.assertEqual(result.keyword_match_pct, 0)
        self.assertEqual(result.matched_keywords, [])
        self.assertEqual(result.overall, 15)
        self.assertFalse(result.passed)

    def test_clean_resume_keeps_job_type_and_weights(self):
        result = ATSScorer().analyze(CLEAN_RESUME, BACKEND_JD, job_type="tech")
        self.assertEqual(result.job_type, "tech")
        self.assertEqual(result.weights, WEIGHT_PROFILES["tech"])
        self.assertEqual(result.formatting_score, 100)
        self.assertEqual(result.section_score, 100)
        self.assertIn("python", result.matched_keywords)
        self.assertIn("kubernetes", result.matched_keywords)

    def test_combine_rescores_with_general_weights(self):
        result = ATSScorer().analyze(WEAK_RESUME, BACKEND_JD, job_type="tech")
        supplementary = SupplementaryATSAnalysis(
            aliasMatches=[{"original": "python", "alias": "Py"}]
        )
        combined = combine_ats_results(result, supplementary)

        kw, fmt, sec = combined.keyword_match_pct, combined.formatting_score, combined.section_score
        self.assertGreater(kw, 0)
        self.assertEqual((fmt, sec), (60, 0))
        self.assertEqual(combined.overall, round_score(kw * 0.5 + fmt * 0.25 + sec * 0.25))
        self.assertNotEqual(combined.overall, round_score(kw * 0.45 + fmt * 0.35 + sec * 0.20))
        self.assertEqual(combined.job_type, "tech")
        self.assertEqual(combined.weights, DEFAULT_WEIGHTS)

    def test_combine_without_alias_matches_uses_general_weights(self):
        result = ATSScorer().analyze(CLEAN_RESUME, BACKEND_JD, job_type="entry")
        combined = combine_ats_results(result, SupplementaryATSAnalysis())
        expected = round_score(
            result.keyword_match_pct * 0.5 + result.formatting_score * 0.25 + result.section_score * 0.25
        )
        self.assertEqual(combined.overall, expected)
        self.assertEqual(combined.job_type, "entry")


if __name__ == "__main__":
    unittest.main()
