"""Shared dependencies for API routes.

Services are built once per process and handed to the routes through
FastAPI's ``Depends``; tests swap them with ``app.dependency_overrides``.
"""

from functools import lru_cache

from scoring_config import get_scoring_weights
from services.gemini_client import GeminiClient
from services.keyword_extractor import KeywordExtractor
from services.keyword_matcher import KeywordMatcher
from services.optimization_advisor import OptimizationAdvisor
from services.resume_analyzer import ResumeAnalyzer
from services.score_calculator import ScoreCalculator
from services.semantic_analyzer import SemanticAnalyzer


@lru_cache(maxsize=1)
def get_gemini_client() -> GeminiClient:
    return GeminiClient()


@lru_cache(maxsize=1)
def get_keyword_extractor() -> KeywordExtractor:
    return KeywordExtractor()


@lru_cache(maxsize=1)
def get_resume_analyzer() -> ResumeAnalyzer:
    weights = get_scoring_weights()
    return ResumeAnalyzer(
        matcher=KeywordMatcher(extractor=get_keyword_extractor()),
        semantic=SemanticAnalyzer(client=get_gemini_client(), weights=weights),
        calculator=ScoreCalculator(weights=weights),
    )


@lru_cache(maxsize=1)
def get_optimization_advisor() -> OptimizationAdvisor:
    return OptimizationAdvisor(client=get_gemini_client(), extractor=get_keyword_extractor())
