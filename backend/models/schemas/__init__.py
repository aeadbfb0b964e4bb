"""Inter-stage Pydantic contracts for the matching pipeline."""

from models.schemas.analysis_result import AnalysisResult
from models.schemas.job_keywords import JobKeywordSet
from models.schemas.match_result import KeywordAnalysis, MatchResult, PartialMatch
from models.schemas.optimized_resume import OptimizedResume

__all__ = [
    "AnalysisResult",
    "JobKeywordSet",
    "KeywordAnalysis",
    "MatchResult",
    "PartialMatch",
    "OptimizedResume",
]
