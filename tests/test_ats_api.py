import os
import sys
import unittest
from pathlib import Path

# Keep API tests deterministic: no AI provider and no request throttling.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("ATS_AI_ENABLED", "0")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from app.api.deps import get_ai_client  # noqa: E402
from app.core.rate_limit import limiter  # noqa: E402
from app.main import app  # noqa: E402

RESUME_TEXT = (
    "Jane Doe\n"
    "Summary\n"
    "Backend engineer with 6 years of Python and Docker experience building REST API services.\n"
    "Experience\n"
    "Reduced API latency by 35% using Redis caching and PostgreSQL tuning.\n"
    "Skills\n"
    "Python, Docker, Kubernetes, PostgreSQL, Redis, Git\n"
    "Education\n"
    "B.Sc. Computer Science, State University\n"
)


class FakeAIClient:
    async def complete(self, messages, *, json_mode=False, temperature=0.4, max_tokens=1500):
        return '{"inferredProfile": "Platform Engineer", "targetKeywords": ["python", "terraform"]}'


class AtsApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        limiter.reset()
        app.dependency_overrides.pop(get_ai_client, None)

    def tearDown(self):
        app.dependency_overrides.pop(get_ai_client, None)

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_score_from_resume_text(self):
        response = self.client.post("/v1/ats/score", json={"resumeText": RESUME_TEXT})
        self.assertEqual(response.status_code, 200)
        body = response.json()

        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "ATS score calculated successfully")
        data = body["data"]
        for key in (
            "score",
            "matchedKeywords",
            "missingKeywords",
            "missingWords",
            "missingSkills",
            "recommendations",
            "analysisMode",
            "jobDescriptionUsed",
            "meta",
        ):
            self.assertIn(key, data)
        self.assertGreaterEqual(data["score"], 0)
        self.assertLessEqual(data["score"], 100)
        self.assertEqual(data["analysisMode"], "resume_only")
        self.assertFalse(data["jobDescriptionUsed"])
        self.assertFalse(data["meta"]["aiAssisted"])
        self.assertEqual(data["meta"]["inferredProfile"], "resume-derived")
        self.assertIn("python", data["matchedKeywords"])

    def test_score_from_resume_data_only(self):
        payload = {
            "resumeData": {
                "personalDetails": {"fullName": "Jane Doe", "summary": "Python developer shipping Docker services."},
                "skills": ["Python", "Docker"],
            }
        }
        response = self.client.post("/v1/ats/score", json=payload)
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertIn("python", data["matchedKeywords"])
        self.assertNotIn("python", data["missingSkills"])

    def test_null_entries_in_resume_data_are_accepted(self):
        payload = {
            "resumeData": {
                "personalDetails": {"summary": "Kafka pipelines for payments.", "email": None},
                "skills": ["Kafka", None],
                "projects": [None],
            }
        }
        response = self.client.post("/v1/ats/score", json=payload)
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertIn("kafka", data["matchedKeywords"])
        self.assertNotIn("kafka", data["missingSkills"])

    def test_missing_resume_is_bad_request(self):
        response = self.client.post("/v1/ats/score", json={})
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertIn("resumeText or resumeData", body["message"])

    def test_short_resume_text_is_bad_request(self):
        response = self.client.post("/v1/ats/score", json={"resumeText": "too short"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("at least 20 characters", response.json()["message"])

    def test_empty_resume_data_is_bad_request(self):
        response = self.client.post("/v1/ats/score", json={"resumeData": {}})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["message"],
            "No resume text found. Upload a resume first or provide resumeText.",
        )

    def test_injected_ai_client_drives_targets(self):
        app.dependency_overrides[get_ai_client] = lambda: FakeAIClient()
        response = self.client.post("/v1/ats/score", json={"resumeText": RESUME_TEXT})
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]

        self.assertTrue(data["meta"]["aiAssisted"])
        self.assertEqual(data["meta"]["inferredProfile"], "platform engineer")
        self.assertEqual(data["matchedKeywords"], ["python"])
        self.assertEqual(data["missingKeywords"], ["terraform"])

    def test_keywords_endpoint(self):
        response = self.client.post(
            "/v1/ats/keywords",
            json={"text": "React developer with React and Node.js", "maxKeywords": 3},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Keywords extracted successfully")
        keywords = body["data"]["keywords"]
        self.assertEqual(len(keywords), 3)
        self.assertEqual(keywords[0]["term"], "react")
        scores = [item["score"] for item in keywords]
        self.assertEqual(scores, sorted(scores, reverse=True))

    def test_keywords_limit_is_validated(self):
        response = self.client.post("/v1/ats/keywords", json={"text": "python", "maxKeywords": 500})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])


if __name__ == "__main__":
    unittest.main()
