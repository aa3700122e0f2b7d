import sys
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.main import app  # noqa: E402
from app.models.judgments import HRReviewResult  # noqa: E402
from app.services.semantic import SemanticScore, SemanticSectionScore  # noqa: E402
from tests.fixtures import BACKEND_JD, CLEAN_RESUME, WEAK_RESUME  # noqa: E402


class HealthEndpointTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_healthy_without_redis(self):
        with patch("app.api.routes.ping_redis", new=AsyncMock(return_value=None)):
            response = self.client.get("/api/health")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "healthy")
        self.assertIsNone(body["redisAvailable"])
        self.assertIn("geminiConfigured", body)

    def test_degraded_when_redis_unreachable(self):
        with patch("app.api.routes.ping_redis", new=AsyncMock(return_value=False)):
            response = self.client.get("/api/health")
        self.assertEqual(response.json()["status"], "degraded")

    def test_root(self):
        response = self.client.get("/")
        self.assertEqual(response.json()["api"], "/api")


class KeywordsEndpointTests(unittest.TestCase):
    def test_keywords_and_job_type(self):
        client = TestClient(app)
        response = client.post("/api/keywords", json={"jobDescription": BACKEND_JD})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["keywords"][:2], ["data pipeline", "rest api"])
        self.assertEqual(body["jobType"], "general")
        self.assertEqual(body["weights"]["keywords"], 0.5)

    def test_empty_job_description_rejected(self):
        client = TestClient(app)
        response = client.post("/api/keywords", json={"jobDescription": ""})
        self.assertEqual(response.status_code, 422)


class ATSScoreEndpointTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)
        patcher = patch(
            "app.services.analysis.run_supplementary_ats_analysis",
            new=AsyncMock(side_effect=ValueError("GEMINI key missing")),
        )
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_weak_resume(self):
        response = self.client.post(
            "/api/ats-score",
            json={"resumeText": WEAK_RESUME, "jobDescription": BACKEND_JD},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["overall"], 15)
        self.assertFalse(body["passed"])
        self.assertFalse(body["supplementaryApplied"])
        self.assertEqual(body["keywordPriorities"], [])
        self.assertEqual(body["jobType"], "general")
        self.assertEqual(body["issues"][0]["type"], "formatting")
        self.assertIn("suggestion", body["issues"][0])

    def test_page_count_and_job_type_override(self):
        response = self.client.post(
            "/api/ats-score",
            json={
                "resumeText": CLEAN_RESUME,
                "jobDescription": BACKEND_JD,
                "metadata": {"pageCount": 3},
                "jobType": "tech",
            },
        )
        body = response.json()
        self.assertEqual(body["formattingScore"], 90)
        self.assertEqual(body["jobType"], "tech")
        self.assertEqual(body["weights"]["formatting"], 0.35)

    def test_validation_errors(self):
        response = self.client.post(
            "/api/ats-score",
            json={"resumeText": "", "jobDescription": BACKEND_JD},
        )
        self.assertEqual(response.status_code, 422)

        response = self.client.post(
            "/api/ats-score",
            json={"resumeText": CLEAN_RESUME, "jobDescription": BACKEND_JD, "metadata": {"pageCount": 0}},
        )
        self.assertEqual(response.status_code, 422)


class HRScoreEndpointTests(unittest.TestCase):
    def test_three_layer_response(self):
        review = HRReviewResult.model_validate({
            "overallScore": 80,
            "firstImpression": "Clear and focused.",
            "callbackDecision": {"decision": "yes", "reasoning": "Meets every requirement."},
        })
        semantic = SemanticScore(
            overall_score=70,
            section_scores=[SemanticSectionScore(section="experience", score=70)],
        )
        client = TestClient(app)
        with patch("app.services.analysis.fetch_reference_resumes", new=AsyncMock(return_value=[])), \
                patch("app.services.analysis.run_semantic_analysis", new=AsyncMock(return_value=semantic)), \
                patch("app.services.analysis.run_hr_review", new=AsyncMock(return_value=review)):
            response = client.post(
                "/api/hr-score",
                json={
                    "resumeText": CLEAN_RESUME,
                    "jobDescription": BACKEND_JD,
                    "userContext": {"targetRole": "Backend Engineer", "visaStatus": "prefer_not_to_say"},
                },
            )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["overall"], 80)
        self.assertEqual(body["formattingScore"], 100)
        self.assertEqual(body["semanticScore"], 70)
        self.assertEqual(body["llmScore"], 80)
        self.assertTrue(body["llmReviewApplied"])
        self.assertEqual(body["referenceCount"], 0)
        self.assertEqual(body["sectionScores"], [{"section": "experience", "score": 70}])
        self.assertEqual(body["callbackDecision"]["decision"], "yes")
        self.assertEqual(body["firstImpression"], "Clear and focused.")

    def test_without_enrichments(self):
        client = TestClient(app)
        with patch("app.services.analysis.fetch_reference_resumes", new=AsyncMock(return_value=[])), \
                patch("app.services.analysis.run_semantic_analysis", new=AsyncMock(side_effect=ValueError("no key"))), \
                patch("app.services.analysis.run_hr_review", new=AsyncMock(side_effect=ValueError("no key"))):
            response = client.post(
                "/api/hr-score",
                json={"resumeText": WEAK_RESUME, "jobDescription": BACKEND_JD},
            )

        body = response.json()
        self.assertEqual(body["overall"], 16)
        self.assertFalse(body["llmReviewApplied"])
        self.assertIsNone(body["callbackDecision"])
        self.assertEqual(body["feedback"][0]["layer"], 1)
        self.assertEqual(body["feedback"][0]["type"], "formatting")
        self.assertEqual(len(body["formattingSuggestions"]), 4)


if __name__ == "__main__":
    unittest.main()
