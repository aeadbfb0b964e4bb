"""Shared test configuration, sample documents and fakes."""

import asyncio

import pytest

from models.schemas.analysis_result import AnalysisResult
from scoring_config import ScoringWeights

SAMPLE_RESUME = """
John Doe
john.doe@email.com | +1-555-0123

Experience

Senior Software Engineer, Google
Jan 2020 - Present
- Built scalable microservices using Python and Go
- Led team of 5 engineers on payment platform

Software Engineer, Meta
Jun 2017 - Dec 2019
- Developed React frontend applications
- Implemented CI/CD pipelines with Jenkins

Education

Bachelor of Science in Computer Science
Stanford University, 2017

Skills

Python, Go, React, JavaScript, Docker, Kubernetes, AWS, PostgreSQL
"""

SAMPLE_JD = """
Senior Python Developer

Requirements:
- 5+ years of experience with Python
- Strong knowledge of Django or FastAPI
- Experience with PostgreSQL and Redis
- Familiarity with Docker and Kubernetes

Preferred:
- Machine learning experience
- AWS certification

Education:
- Bachelor's degree in Computer Science or related field

Responsibilities:
- Design and build scalable APIs
- Mentor junior developers
"""


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "api: exercises the FastAPI app through TestClient"
    )


class FakeGenerator:
    """Stands in for GeminiClient: returns a canned reply, or raises."""

    def __init__(self, reply: str = "", error: Exception | None = None, delay: float = 0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeSemantic:
    """Stands in for SemanticAnalyzer at the orchestrator boundary."""

    def __init__(self, result: AnalysisResult | None = None, error: Exception | None = None):
        self.result = result or AnalysisResult(
            overall_score=70,
            strengths=("Solid Python background",),
            weaknesses=("No Django experience shown",),
            summary="Reasonable fit for the role.",
        )
        self.error = error
        self.calls = 0

    async def analyze(self, job_text: str, resume_text: str) -> AnalysisResult:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def weights() -> ScoringWeights:
    return ScoringWeights()


@pytest.fixture
def sample_resume() -> str:
    return SAMPLE_RESUME


@pytest.fixture
def sample_jd() -> str:
    return SAMPLE_JD
