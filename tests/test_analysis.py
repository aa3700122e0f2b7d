import asyncio
import sys
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.config import Settings  # noqa: E402
from app.models.judgments import HRReviewResult, SupplementaryATSAnalysis  # noqa: E402
from app.services.analysis import run_ats_pipeline, run_hr_pipeline  # noqa: E402
from app.services.scoring_policy import round_score  # noqa: E402
from app.services.semantic import SemanticScore  # noqa: E402
from tests.fixtures import BACKEND_JD, CLEAN_RESUME, WEAK_RESUME  # noqa: E402


class ATSPipelineTests(unittest.TestCase):
    def test_alias_matches_are_applied(self):
        supplementary = SupplementaryATSAnalysis(
            aliasMatches=[{"original": "developer", "alias": "Software Engineer"}]
        )
        mock = AsyncMock(return_value=supplementary)
        with patch("app.services.analysis.run_supplementary_ats_analysis", new=mock):
            result = asyncio.run(run_ats_pipeline(CLEAN_RESUME, BACKEND_JD))

        missing_before = mock.await_args.args[3]
        self.assertEqual(missing_before, ["developer"])
        self.assertIs(result.supplementary, supplementary)
        self.assertEqual(result.score.missing_keywords, [])
        self.assertEqual(result.score.keyword_match_pct, 100)
        self.assertEqual(result.score.overall, 100)
        self.assertTrue(result.score.passed)

    def test_supplementary_failure_keeps_deterministic_score(self):
        mock = AsyncMock(side_effect=ValueError("GEMINI key missing"))
        with patch("app.services.analysis.run_supplementary_ats_analysis", new=mock):
            result = asyncio.run(run_ats_pipeline(WEAK_RESUME, BACKEND_JD))

        self.assertIsNone(result.supplementary)
        self.assertEqual(result.score.overall, 15)
        self.assertFalse(result.score.passed)

    def test_reconciled_overall_uses_general_weights_for_tech_roles(self):
        supplementary = SupplementaryATSAnalysis(aliasMatches=[{"original": "python", "alias": "Py"}])
        with patch(
            "app.services.analysis.run_supplementary_ats_analysis",
            new=AsyncMock(return_value=supplementary),
        ):
            result = asyncio.run(run_ats_pipeline(WEAK_RESUME, BACKEND_JD, job_type="tech"))

        score = result.score
        self.assertEqual(score.job_type, "tech")
        self.assertIn("python", score.matched_keywords)
        self.assertEqual(
            score.overall,
            round_score(score.keyword_match_pct * 0.5 + score.formatting_score * 0.25 + score.section_score * 0.25),
        )
        self.assertEqual(score.passed, score.overall >= 75)

    def test_supplementary_disabled(self):
        mock = AsyncMock()
        settings = Settings(enable_supplementary_ats=False)
        with patch("app.services.analysis.run_supplementary_ats_analysis", new=mock), \
                patch("app.services.analysis.get_settings", return_value=settings):
            result = asyncio.run(run_ats_pipeline(WEAK_RESUME, BACKEND_JD, job_type="entry"))

        mock.assert_not_awaited()
        self.assertEqual(result.score.job_type, "entry")


class HRPipelineTests(unittest.TestCase):
    def test_every_enrichment_failing_still_scores(self):
        failing = AsyncMock(side_effect=RuntimeError("redis down"))
        with patch("app.services.analysis.fetch_reference_resumes", new=failing), \
                patch("app.services.analysis.run_semantic_analysis", new=AsyncMock(side_effect=ValueError("no key"))), \
                patch("app.services.analysis.run_hr_review", new=AsyncMock(side_effect=ValueError("no key"))):
            result = asyncio.run(run_hr_pipeline(WEAK_RESUME, BACKEND_JD))

        self.assertEqual(result.formatting.score, 53)
        self.assertEqual(result.semantic.overall_score, 0)
        self.assertIsNone(result.llm_review)
        self.assertEqual(result.score.overall, 16)

    def test_three_layers(self):
        review = HRReviewResult(overallScore=80)
        review_mock = AsyncMock(return_value=review)
        with patch("app.services.analysis.fetch_reference_resumes", new=AsyncMock(return_value=[])), \
                patch("app.services.analysis.run_semantic_analysis", new=AsyncMock(return_value=SemanticScore(overall_score=70))), \
                patch("app.services.analysis.run_hr_review", new=review_mock):
            result = asyncio.run(run_hr_pipeline(
                CLEAN_RESUME,
                BACKEND_JD,
                target_role="Backend Engineer",
                visa_status="citizen",
            ))

        self.assertEqual(result.formatting.score, 100)
        self.assertEqual(result.score.overall, 80)
        self.assertIs(result.llm_review, review)
        self.assertEqual(
            review_mock.await_args.args,
            (CLEAN_RESUME, BACKEND_JD, "Backend Engineer", None, "citizen"),
        )

    def test_disabled_layers_are_not_called(self):
        settings = Settings(enable_semantic_analysis=False, enable_llm_review=False)
        semantic = AsyncMock()
        review = AsyncMock()
        with patch("app.services.analysis.get_settings", return_value=settings), \
                patch("app.services.analysis.fetch_reference_resumes", new=AsyncMock(return_value=[])), \
                patch("app.services.analysis.run_semantic_analysis", new=semantic), \
                patch("app.services.analysis.run_hr_review", new=review):
            result = asyncio.run(run_hr_pipeline(CLEAN_RESUME, BACKEND_JD))

        semantic.assert_not_awaited()
        review.assert_not_awaited()
        self.assertEqual(result.score.overall, 30)


if __name__ == "__main__":
    unittest.main()
