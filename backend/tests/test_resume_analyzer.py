"""Tests for the analysis orchestrator."""

import json

import pytest

from models.responses import AnalysisResponse
from models.schemas.analysis_result import UNAVAILABLE_FEEDBACK
from services.errors import AnalysisServiceError, AnalysisTimeoutError
from services.keyword_matcher import KeywordMatcher
from services.resume_analyzer import ResumeAnalyzer
from services.score_calculator import ScoreCalculator
from services.semantic_analyzer import SemanticAnalyzer

from conftest import SAMPLE_JD, SAMPLE_RESUME, FakeGenerator, FakeSemantic


def _analyzer(semantic, weights):
    return ResumeAnalyzer(
        matcher=KeywordMatcher(),
        semantic=semantic,
        calculator=ScoreCalculator(weights=weights),
    )


class TestResumeAnalyzer:
    @pytest.mark.asyncio
    async def test_hybrid_result(self, weights):
        semantic = FakeSemantic()
        response = await _analyzer(semantic, weights).analyze(SAMPLE_RESUME, SAMPLE_JD)
        assert isinstance(response, AnalysisResponse)
        result = response.result
        assert result.scoring_method == "hybrid"
        assert result.degraded is False
        assert result.breakdown.ai_score == 70
        expected = round(response.keyword_analysis.match_percentage * 0.3 + 70 * 0.7)
        assert result.final_score == expected
        assert response.analyzed_at
        assert semantic.calls == 1

    @pytest.mark.asyncio
    async def test_keyword_summary_attached(self, weights):
        response = await _analyzer(FakeSemantic(), weights).analyze(SAMPLE_RESUME, SAMPLE_JD)
        summary = response.keyword_analysis
        assert "python" in summary.matched
        assert "django" in summary.missing
        assert summary.years_required == 5
        assert summary.experience_requirement_met is False

    @pytest.mark.asyncio
    async def test_timeout_degrades_to_keyword_result(self, weights):
        slow = SemanticAnalyzer(
            client=FakeGenerator(reply=json.dumps({"overall_score": 90}), delay=1.0),
            weights=weights,
            timeout=0.01,
        )
        response = await _analyzer(slow, weights).analyze(SAMPLE_RESUME, SAMPLE_JD)
        result = response.result
        assert result.degraded is True
        assert result.breakdown.ai_score == 50
        assert result.aspects["career_growth"].feedback == UNAVAILABLE_FEEDBACK
        assert result.aspects["skills_match"].feedback != UNAVAILABLE_FEEDBACK
        assert result.strengths and result.weaknesses
        assert response.keyword_analysis is not None

    @pytest.mark.asyncio
    async def test_service_error_degrades_in_both_mode(self, weights):
        semantic = FakeSemantic(error=AnalysisServiceError("unreachable"))
        response = await _analyzer(semantic, weights).analyze(SAMPLE_RESUME, SAMPLE_JD)
        assert response.result.degraded is True
        assert 0 <= response.result.final_score <= 100

    @pytest.mark.asyncio
    async def test_fake_document_skips_semantic_call(self, weights):
        semantic = FakeSemantic()
        response = await _analyzer(semantic, weights).analyze("asdf " * 40, SAMPLE_JD)
        result = response.result
        assert semantic.calls == 0
        assert result.final_score == 0
        assert result.recommendation.level == "Invalid Document"
        assert result.scoring_method == "rejected"
        assert response.keyword_analysis is None

    @pytest.mark.asyncio
    async def test_keyword_mode(self, weights):
        semantic = FakeSemantic()
        response = await _analyzer(semantic, weights).analyze(SAMPLE_RESUME, SAMPLE_JD, mode="keyword")
        assert semantic.calls == 0
        assert response.result.scoring_method == "keyword_only"
        assert response.result.breakdown.ai_score == 0
        assert response.result.final_score == response.keyword_analysis.match_percentage

    @pytest.mark.asyncio
    async def test_ai_mode(self, weights):
        response = await _analyzer(FakeSemantic(), weights).analyze(SAMPLE_RESUME, SAMPLE_JD, mode="ai")
        assert response.result.scoring_method == "ai_only"
        assert response.result.final_score == 70
        assert response.result.breakdown.keyword_score == 0
        assert response.keyword_analysis is None

    @pytest.mark.asyncio
    async def test_ai_mode_surfaces_failure(self, weights):
        semantic = FakeSemantic(error=AnalysisTimeoutError("too slow"))
        with pytest.raises(AnalysisTimeoutError):
            await _analyzer(semantic, weights).analyze(SAMPLE_RESUME, SAMPLE_JD, mode="ai")

    @pytest.mark.asyncio
    async def test_unknown_mode(self, weights):
        with pytest.raises(ValueError):
            await _analyzer(FakeSemantic(), weights).analyze(SAMPLE_RESUME, SAMPLE_JD, mode="fast")
