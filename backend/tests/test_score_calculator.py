import pytest

from models.responses import AspectScore
from models.schemas.analysis_result import UNAVAILABLE_FEEDBACK, AnalysisResult
from models.schemas.match_result import KeywordAnalysis, MatchResult, PartialMatch
from scoring_config import KeywordRules, ScoringWeights
from services.score_calculator import (
    MAX_FEEDBACK_ITEMS,
    NO_STRENGTHS,
    ScoreCalculator,
    additive_keyword_score,
    fallback_summary,
    merge_unique,
    recommendation_for,
)


@pytest.fixture
def calculator(weights):
    return ScoreCalculator(weights=weights)


def _keyword(percentage=80, **kwargs):
    kwargs.setdefault("strengths", ("Strong technical skills matching: python",))
    kwargs.setdefault("weaknesses", ("Missing technical skills: django",))
    return KeywordAnalysis(match_percentage=percentage, **kwargs)


def _ai(score=60, **kwargs):
    kwargs.setdefault("summary", "Good Python background, light on Django.")
    return AnalysisResult(overall_score=score, **kwargs)


def test_weighted_final_score(calculator):
    result = calculator.calculate(_keyword(80), _ai(60))
    assert result.final_score == 66
    assert result.breakdown.keyword_score == 80
    assert result.breakdown.ai_score == 60
    assert result.scoring_method == "hybrid"
    assert result.recommendation.level == "Good Match"


def test_fake_document_short_circuits(calculator):
    message = "This document does not look like a CV."
    ai = AnalysisResult.rejected("not_a_cv", message)
    result = calculator.calculate(_keyword(95), ai)
    assert result.final_score == 0
    assert result.recommendation.level == "Invalid Document"
    assert result.summary == message
    assert result.scoring_method == "rejected"
    assert result.strengths and result.weaknesses


def test_fake_flag_from_raw_payload(calculator):
    result = calculator.calculate(_keyword(90), {"isFake": True, "summary": "Not a CV", "overallScore": 70})
    assert result.final_score == 0
    assert result.summary == "Not a CV"


def test_identical_strengths_deduplicated(calculator):
    shared = "Strong Python experience"
    result = calculator.calculate(
        _keyword(strengths=(shared, "Good keyword alignment with job description")),
        _ai(strengths=(shared, "Clear career progression")),
    )
    assert result.strengths.count(shared) == 1
    assert result.strengths == (
        shared,
        "Good keyword alignment with job description",
        "Clear career progression",
    )


def test_dedup_is_case_sensitive():
    assert merge_unique(("Python",), ("python",)) == ("Python", "python")


def test_feedback_capped(calculator):
    keyword_items = tuple(f"keyword strength {i}" for i in range(6))
    ai_items = tuple(f"ai strength {i}" for i in range(6))
    result = calculator.calculate(_keyword(strengths=keyword_items), _ai(strengths=ai_items))
    assert len(result.strengths) == MAX_FEEDBACK_ITEMS
    assert result.strengths[:6] == keyword_items
    assert result.strengths[6:] == ai_items[:2]


def test_empty_feedback_gets_placeholder(calculator):
    result = calculator.calculate(KeywordAnalysis(), AnalysisResult(overall_score=40))
    assert result.strengths == (NO_STRENGTHS,)
    assert len(result.weaknesses) == 1


@pytest.mark.parametrize(
    "score, level",
    [
        (100, "Excellent Match"),
        (80, "Excellent Match"),
        (79, "Good Match"),
        (65, "Good Match"),
        (64, "Moderate Match"),
        (45, "Moderate Match"),
        (44, "Low Match"),
        (30, "Low Match"),
        (29, "Poor Match"),
        (0, "Poor Match"),
    ],
)
def test_recommendation_tiers(weights, score, level):
    recommendation = recommendation_for(score, weights.thresholds)
    assert recommendation.level == level
    assert recommendation.message


def test_ai_aspects_win_on_collision(calculator):
    keyword = _keyword(aspects={
        "skills_match": AspectScore(score=30, feedback="keyword view"),
        "soft_skills": AspectScore(score=50, feedback="soft"),
    })
    ai = _ai(aspects={"skills_match": AspectScore(score=90, feedback="ai view")})
    result = calculator.calculate(keyword, ai)
    assert result.aspects["skills_match"].feedback == "ai view"
    assert result.aspects["soft_skills"].score == 50


def test_degraded_placeholders_do_not_hide_keyword_aspects(calculator):
    keyword = _keyword(aspects={"skills_match": AspectScore(score=30, feedback="keyword view")})
    result = calculator.calculate(keyword, AnalysisResult.neutral("timeout"))
    assert result.degraded is True
    assert result.aspects["skills_match"].feedback == "keyword view"
    assert result.aspects["career_growth"].feedback == UNAVAILABLE_FEEDBACK
    assert result.breakdown.ai_score == 50


def test_ai_score_from_aspect_weights(calculator):
    ai = AnalysisResult(aspects={
        "skills_match": AspectScore(score=80),
        "experience_quality": AspectScore(score=60),
        "education_fit": AspectScore(score=40),
        "career_growth": AspectScore(score=20),
    })
    assert calculator.ai_score(ai) == 56


def test_summary_fallback(calculator):
    result = calculator.calculate(_keyword(80), _ai(60, summary=""))
    assert result.summary == fallback_summary(66)
    assert "66%" in result.summary


def test_keyword_only(calculator):
    result = calculator.calculate(_keyword(72), None)
    assert result.final_score == 72
    assert result.breakdown.ai_score == 0
    assert result.scoring_method == "keyword_only"


def test_ai_only(calculator):
    result = calculator.calculate(None, _ai(58, strengths=("Relevant degree",)))
    assert result.final_score == 58
    assert result.breakdown.keyword_score == 0
    assert result.strengths == ("Relevant degree",)
    assert result.scoring_method == "ai_only"


@pytest.mark.parametrize(
    "keyword, ai",
    [
        ({"matchPercentage": "abc"}, {"overall_score": "junk"}),
        ({"match_percentage": None, "strengths": "not a list"}, {"aspects": "nope"}),
        ("garbage", 42),
        ({}, {}),
    ],
)
def test_malformed_inputs_never_raise(calculator, keyword, ai):
    result = calculator.calculate(keyword, ai)
    assert result.final_score == 0
    assert result.recommendation.level == "Poor Match"
    assert result.strengths and result.weaknesses


def test_camel_case_keyword_dict(calculator):
    result = calculator.calculate({"matchPercentage": 80, "strengths": ["From keywords"]}, None)
    assert result.final_score == 80
    assert result.strengths == ("From keywords",)


def test_scores_are_bounded(calculator):
    result = calculator.calculate(_keyword(150), _ai(250))
    assert result.final_score == 100
    assert result.breakdown.keyword_score == 100
    assert result.breakdown.ai_score == 100


def test_deterministic(calculator):
    keyword, ai = _keyword(77), _ai(41, strengths=("a", "b"))
    first = calculator.calculate(keyword, ai)
    second = calculator.calculate(keyword, ai)
    assert first.model_dump_json() == second.model_dump_json()


def _match(years_found):
    return MatchResult(
        exact_matches=("python", "docker", "aws"),
        partial_matches=(PartialMatch(skill="react", related_terms_found=("reactjs",)),),
        missing_skills=("redis",),
        missing_required=("redis",),
        experience_years_found=years_found,
        years_required=5,
        experience_requirement_met=years_found >= 5,
    )


@pytest.mark.parametrize("years_found, expected", [(8, 92), (5, 77), (2, 46)])
def test_additive_keyword_score(weights, years_found, expected):
    # 50 + 3*10 + 1*5 - 1*8 = 77, then the experience multiplier
    assert additive_keyword_score(_match(years_found), weights) == expected


def test_additive_method_selected_by_config():
    weights = ScoringWeights(keywords=KeywordRules(method="additive"))
    calculator = ScoreCalculator(weights=weights)
    keyword = KeywordAnalysis(match=_match(5), match_percentage=80)
    result = calculator.calculate(keyword, None)
    assert result.breakdown.keyword_score == 77
