"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from resume_analyzer.cache.result_cache import ResultCache
from resume_analyzer.clients.llm_client import LLMClient, LLMResponse
from resume_analyzer.models.extraction import ChunkExtraction
from resume_analyzer.models.report import AnalysisReport
from resume_analyzer.pipeline.retry_policy import RetryPolicy


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SleepRecorder:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def _llm_response(payload: dict | str) -> LLMResponse:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return LLMResponse(text=text, input_tokens=100, output_tokens=50)


@pytest.fixture
def llm_response():
    """Factory turning a dict (or raw text) into an LLMResponse."""
    return _llm_response


@pytest.fixture
def sample_resume_text() -> str:
    return """Jane Doe
jane@example.com | (555) 010-2030

Experience:
- Acme Corp (2021 - present) - Backend Engineer
  - Built Python/FastAPI services handling 1M requests/day
  - Cut p95 latency by 40% with Redis caching

- Startup Inc (2019 - 2021) - Junior Developer
  - Django REST APIs, AWS EC2/RDS

Education:
- B.Sc. Computer Science, State University (2015 - 2019)

Skills: Python, Go, PostgreSQL, Redis, Docker, Kubernetes
"""


@pytest.fixture
def extraction_json() -> dict:
    return {
        "skills": ["Python", "Redis"],
        "achievements": ["Cut p95 latency by 40%"],
        "experience": ["Backend Engineer at Acme Corp"],
        "education": ["B.Sc. Computer Science"],
    }


@pytest.fixture
def sample_extraction(extraction_json) -> ChunkExtraction:
    return ChunkExtraction(**extraction_json)


@pytest.fixture
def report_json() -> dict:
    return {
        "overallScore": 82,
        "improvements": ["Quantify Startup Inc achievements"],
        "rewrites": [
            {
                "section": "Experience",
                "original": "Django REST APIs",
                "improved": "Shipped 12 Django REST endpoints serving 50k users",
            }
        ],
        "skills": {
            "matching": ["Python", "Redis"],
            "missing": ["Terraform"],
            "suggested": ["Observability"],
        },
        "keywords": ["backend", "distributed systems"],
        "formatting": {"issues": ["Dense skills line"], "suggestions": ["Group skills"]},
        "impact": {
            "strengths": ["Latency reduction"],
            "weaknesses": ["Few leadership signals"],
            "recommendations": ["Mention mentoring"],
        },
        "competitorAnalysis": {
            "marketPosition": "Above average mid-level candidate",
            "competitiveAdvantages": ["Performance work"],
            "competitiveDisadvantages": ["No cloud certification"],
            "differentiationStrategies": ["Highlight scale"],
            "industryBenchmarks": {"averageScore": 75, "topPerformersScore": 90, "yourScore": 82},
            "industryAnalysis": {
                "trends": ["Platform engineering"],
                "inDemandSkills": ["Kubernetes"],
                "salaryRange": {"entry": "$80k", "mid": "$120k", "senior": "$170k"},
                "topCompanies": ["Example Co"],
                "growthAreas": ["AI infrastructure"],
            },
            "careerProgression": {
                "currentLevel": "Mid-level",
                "nextSteps": {
                    "shortTerm": ["Lead a project"],
                    "mediumTerm": ["Own a service"],
                    "longTerm": ["Staff engineer"],
                },
                "skillGaps": {"technical": ["Terraform"], "soft": ["Mentoring"], "industry": []},
                "certifications": {"recommended": ["CKA"], "priority": ["CKA"]},
                "careerPaths": {
                    "primary": "Senior Backend Engineer",
                    "alternatives": ["Platform Engineer"],
                    "requirements": {"Platform Engineer": ["Terraform", "Kubernetes"]},
                },
            },
        },
    }


@pytest.fixture
def sample_report(report_json) -> AnalysisReport:
    return AnalysisReport.model_validate(report_json)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> ResultCache:
    return ResultCache(clock=clock)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def retry_policy(sleep_recorder) -> RetryPolicy:
    return RetryPolicy(sleep=sleep_recorder)


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.has_credentials = True
    client.generate = AsyncMock(return_value=_llm_response({}))
    return client
