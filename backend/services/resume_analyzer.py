"""Orchestrator: hybrid résumé / job-description analysis.

Pipeline:
1. Plausibility pre-filter (fake-document rules)
2. Keyword matching (worker thread) and semantic analysis (event loop), concurrently
3. Score calculator merges both into a FinalResult
4. Timestamp attached here, never by the calculator
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Literal

from models.responses import AnalysisResponse, FinalResult, KeywordSummary
from models.schemas.analysis_result import AnalysisResult
from models.schemas.match_result import KeywordAnalysis
from services.document_check import DocumentScreen, Rejected
from services.errors import AnalysisServiceError
from services.keyword_matcher import KeywordMatcher
from services.score_calculator import ScoreCalculator
from services.semantic_analyzer import SemanticAnalyzer

logger = logging.getLogger(__name__)

AnalysisMode = Literal["both", "keyword", "ai"]


def _keyword_summary(keyword: KeywordAnalysis | None) -> KeywordSummary | None:
    if keyword is None:
        return None
    match = keyword.match
    return KeywordSummary(
        match_percentage=keyword.match_percentage,
        total_keywords=keyword.total_keywords,
        matched_count=keyword.matched_count,
        matched=list(keyword.matched),
        missing=list(keyword.missing),
        experience_years_found=match.experience_years_found,
        years_required=match.years_required,
        experience_requirement_met=match.experience_requirement_met,
    )


class ResumeAnalyzer:
    """Runs one analysis request end to end. Holds no per-request state."""

    def __init__(
        self,
        matcher: KeywordMatcher,
        semantic: SemanticAnalyzer,
        calculator: ScoreCalculator,
        screen: DocumentScreen | None = None,
    ) -> None:
        self.matcher = matcher
        self.semantic = semantic
        self.calculator = calculator
        self.screen = screen or DocumentScreen()

    async def analyze(
        self, resume_text: str, job_description: str, mode: AnalysisMode = "both"
    ) -> AnalysisResponse:
        """Score a résumé against a job description.

        Raises AnalysisServiceError only in "ai" mode, where there is no
        keyword result to fall back on.
        """
        if mode not in ("both", "keyword", "ai"):
            raise ValueError(f"Unknown analysis mode '{mode}'")

        check = self.screen.check(resume_text, job_description)
        if isinstance(check, Rejected):
            rejected = AnalysisResult.rejected(check.reason, check.message)
            return self._respond(self.calculator.calculate(None, rejected), None)

        keyword: KeywordAnalysis | None = None
        ai: AnalysisResult | None = None

        if mode == "keyword":
            keyword = await asyncio.to_thread(self.matcher.analyze, job_description, resume_text)
        elif mode == "ai":
            ai = await self.semantic.analyze(job_description, resume_text)
        else:
            keyword, ai = await self._run_both(resume_text, job_description)

        return self._respond(self.calculator.calculate(keyword, ai), keyword)

    async def _run_both(
        self, resume_text: str, job_description: str
    ) -> tuple[KeywordAnalysis, AnalysisResult]:
        keyword_outcome, ai_outcome = await asyncio.gather(
            asyncio.to_thread(self.matcher.analyze, job_description, resume_text),
            self.semantic.analyze(job_description, resume_text),
            return_exceptions=True,
        )

        if isinstance(keyword_outcome, BaseException):
            # Keyword path is pure; failing here is a bug, not a service outage
            if isinstance(ai_outcome, BaseException):
                logger.error("Both analysis paths failed: %s / %s", keyword_outcome, ai_outcome)
            raise keyword_outcome

        if isinstance(ai_outcome, AnalysisServiceError):
            logger.warning(
                "Semantic analysis unavailable (%s), degrading to keyword result: %s",
                ai_outcome.code,
                ai_outcome,
            )
            return keyword_outcome, AnalysisResult.neutral(str(ai_outcome))
        if isinstance(ai_outcome, BaseException):
            raise ai_outcome

        return keyword_outcome, ai_outcome

    @staticmethod
    def _respond(result: FinalResult, keyword: KeywordAnalysis | None) -> AnalysisResponse:
        logger.info(
            "Analysis complete: score=%d level=%s method=%s degraded=%s",
            result.final_score,
            result.recommendation.level,
            result.scoring_method,
            result.degraded,
        )
        return AnalysisResponse(
            result=result,
            keyword_analysis=_keyword_summary(keyword),
            analyzed_at=datetime.now(timezone.utc).isoformat(),
        )
