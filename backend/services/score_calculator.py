"""Merge the keyword and semantic signals into one FinalResult.

The calculator is a pure function of its inputs and the weight table. It
never raises on a badly shaped input: anything it cannot read defaults to
a zero score, because it sits at the end of a pipeline where upstream
partial failures still have to produce a displayable result.
"""

import logging
from typing import Any

from pydantic import ValidationError

from models.responses import (
    AspectScore,
    FinalResult,
    Recommendation,
    ScoreBreakdown,
    ScoringMethod,
    clamp_score,
)
from models.schemas.analysis_result import AnalysisResult
from models.schemas.match_result import KeywordAnalysis, MatchResult
from scoring_config import ScoringWeights, Thresholds, get_scoring_weights

logger = logging.getLogger(__name__)

MAX_FEEDBACK_ITEMS = 8

INVALID_DOCUMENT = Recommendation(
    level="Invalid Document",
    message="The uploaded documents could not be analyzed. Please upload a real CV and job description.",
)

_TIER_MESSAGES = {
    "Excellent Match": "Your CV is an excellent match for this position. You have a strong chance of getting an interview.",
    "Good Match": "Your CV shows good alignment with the job requirements. Consider highlighting relevant skills more prominently.",
    "Moderate Match": "Your CV has some relevant qualifications but could be improved to better match the job requirements.",
    "Low Match": "Your CV shows limited alignment with the job requirements. Consider significant improvements or targeting a different role.",
    "Poor Match": "Your CV does not align well with this job. Consider focusing on roles that better match your experience.",
}

NO_STRENGTHS = "No specific strengths identified"
NO_WEAKNESSES = "No specific weaknesses identified"
REJECTED_WEAKNESS = "Document failed the plausibility check"

_KEYWORD_ALIASES = {
    "matchPercentage": "match_percentage",
    "totalKeywords": "total_keywords",
    "matchedCount": "matched_count",
}


def recommendation_for(score: int, thresholds: Thresholds) -> Recommendation:
    if score >= thresholds.excellent:
        level = "Excellent Match"
    elif score >= thresholds.good:
        level = "Good Match"
    elif score >= thresholds.moderate:
        level = "Moderate Match"
    elif score >= thresholds.low:
        level = "Low Match"
    else:
        level = "Poor Match"
    return Recommendation(level=level, message=_TIER_MESSAGES[level])


def fallback_summary(final_score: int) -> str:
    return (
        f"Based on comprehensive analysis, your CV shows {final_score}% "
        "alignment with the job requirements."
    )


def merge_unique(*sources: tuple[str, ...], cap: int = MAX_FEEDBACK_ITEMS) -> tuple[str, ...]:
    """Concatenate in order, drop exact duplicates, keep the first ``cap``."""
    merged = dict.fromkeys(item for source in sources for item in source)
    return tuple(merged)[:cap]


def additive_keyword_score(match: MatchResult, weights: ScoringWeights) -> int:
    """Points-based keyword score: baseline plus per-match points, minus
    per-missing-required penalty, clamped, then scaled by experience."""
    rules = weights.keywords
    raw = (
        rules.baseline
        + rules.exact_match_points * len(match.exact_matches)
        + rules.partial_match_points * len(match.partial_matches)
        + rules.missing_required_penalty * len(match.missing_required)
    )
    raw = min(rules.max_keyword_score, max(rules.min_keyword_score, raw))

    multipliers = weights.experience
    required = match.years_required
    if not required:
        factor = multipliers.meets_requirement
    elif match.experience_years_found < required:
        factor = multipliers.less_than_required
    elif match.experience_years_found >= required * multipliers.exceeds_ratio:
        factor = multipliers.exceeds_requirement
    else:
        factor = multipliers.meets_requirement
    return clamp_score(raw * factor)


def _aspects_from(raw: Any) -> dict[str, AspectScore]:
    if not isinstance(raw, dict):
        return {}
    aspects = {}
    for name, value in raw.items():
        if isinstance(value, AspectScore):
            aspects[str(name)] = value
        elif isinstance(value, dict):
            aspects[str(name)] = AspectScore(score=value.get("score"), feedback=value.get("feedback"))
        elif isinstance(value, (int, float)):
            aspects[str(name)] = AspectScore(score=value)
    return aspects


def _strings(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(str(item) for item in raw if isinstance(item, str) and item.strip())


def coerce_keyword_result(value: Any) -> KeywordAnalysis | None:
    """Accept a KeywordAnalysis, a plain dict of its fields, or None."""
    if value is None or isinstance(value, KeywordAnalysis):
        return value
    if not isinstance(value, dict):
        logger.warning("Ignoring keyword result of type %s", type(value).__name__)
        return KeywordAnalysis()

    value = {_KEYWORD_ALIASES.get(k, k): v for k, v in value.items()}
    try:
        return KeywordAnalysis.model_validate(value)
    except ValidationError:
        logger.warning("Keyword result failed validation; reading fields leniently")

    match_raw = value.get("match")
    try:
        match = MatchResult.model_validate(match_raw) if isinstance(match_raw, dict) else MatchResult()
    except ValidationError:
        match = MatchResult()
    return KeywordAnalysis(
        match=match,
        match_percentage=clamp_score(value.get("match_percentage")),
        strengths=_strings(value.get("strengths")),
        weaknesses=_strings(value.get("weaknesses")),
        aspects=_aspects_from(value.get("aspects")),
    )


def coerce_ai_result(value: Any) -> AnalysisResult | None:
    """Accept an AnalysisResult, a raw JSON-like dict, or None."""
    if value is None or isinstance(value, AnalysisResult):
        return value
    return AnalysisResult.from_payload(value)


class ScoreCalculator:
    """Weighted merge of keyword and semantic analysis."""

    def __init__(
        self,
        weights: ScoringWeights | None = None,
        max_feedback_items: int = MAX_FEEDBACK_ITEMS,
    ) -> None:
        self.weights = weights or get_scoring_weights()
        self.max_feedback_items = max_feedback_items

    def keyword_score(self, keyword: KeywordAnalysis) -> int:
        if self.weights.keywords.method == "additive":
            return additive_keyword_score(keyword.match, self.weights)
        return clamp_score(keyword.match_percentage)

    def ai_score(self, ai: AnalysisResult) -> int:
        """The analyzer's own overall score, else the aspect-weighted one."""
        if ai.overall_score is not None:
            return clamp_score(ai.overall_score)
        weighted = sum(
            weight * ai.aspects[name].score
            for name, weight in self.weights.aspects.model_dump().items()
            if name in ai.aspects
        )
        return clamp_score(weighted)

    def calculate(self, keyword_result: Any, ai_result: Any) -> FinalResult:
        """Either argument may be None to score from a single source.

        Aspects present in both results take the AI value, unless the AI
        result is the degraded stand-in; then the keyword aspects are kept.
        """
        keyword = coerce_keyword_result(keyword_result)
        ai = coerce_ai_result(ai_result)

        if ai is not None and ai.is_fake:
            return self._rejected(ai)

        split = self.weights.scoring
        keyword_score = self.keyword_score(keyword) if keyword is not None else 0
        ai_score = self.ai_score(ai) if ai is not None else 0

        method: ScoringMethod
        if keyword is not None and ai is not None:
            method = "hybrid"
            final_score = clamp_score(keyword_score * split.keyword_weight + ai_score * split.ai_weight)
        elif ai is not None:
            method = "ai_only"
            final_score = ai_score
        else:
            method = "keyword_only"
            final_score = keyword_score

        keyword = keyword or KeywordAnalysis()
        ai_part = ai or AnalysisResult()

        strengths = merge_unique(keyword.strengths, ai_part.strengths, cap=self.max_feedback_items)
        weaknesses = merge_unique(keyword.weaknesses, ai_part.weaknesses, cap=self.max_feedback_items)

        if ai_part.degraded:
            # Placeholders only fill gaps; they never hide real keyword aspects
            aspects = {**ai_part.aspects, **keyword.aspects}
        else:
            aspects = {**keyword.aspects, **ai_part.aspects}

        return FinalResult(
            final_score=final_score,
            breakdown=ScoreBreakdown(keyword_score=keyword_score, ai_score=ai_score),
            aspects=aspects,
            strengths=strengths or (NO_STRENGTHS,),
            weaknesses=weaknesses or (NO_WEAKNESSES,),
            recommendation=recommendation_for(final_score, self.weights.thresholds),
            summary=ai_part.summary or fallback_summary(final_score),
            detailed_assessment=ai_part.detailed_assessment,
            scoring_method=method,
            degraded=ai_part.degraded,
        )

    def _rejected(self, ai: AnalysisResult) -> FinalResult:
        message = ai.summary or INVALID_DOCUMENT.message
        logger.info("Short-circuiting fake document (%s)", ai.fake_reason or "flagged by analyzer")
        return FinalResult(
            final_score=0,
            breakdown=ScoreBreakdown(),
            aspects=dict(ai.aspects),
            strengths=(NO_STRENGTHS,),
            weaknesses=(REJECTED_WEAKNESS,),
            recommendation=INVALID_DOCUMENT,
            summary=message,
            detailed_assessment=ai.detailed_assessment or message,
            scoring_method="rejected",
        )
