"""Semantic analyzer output."""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

from models.responses import AspectScore, clamp_score

logger = logging.getLogger(__name__)

UNAVAILABLE_FEEDBACK = "Analysis unavailable"
INVALID_FEEDBACK = "Unable to analyze - invalid document"
NEUTRAL_SCORE = 50

_PLACEHOLDER_ASPECTS = ("skills_match", "experience_quality", "education_fit", "career_growth")

# Models answer in either casing; map camelCase keys onto ours
_KEY_ALIASES = {
    "overallScore": "overall_score",
    "isFake": "is_fake",
    "detailedAssessment": "detailed_assessment",
    "fakeReason": "fake_reason",
    "skillsMatch": "skills_match",
    "experienceQuality": "experience_quality",
    "educationFit": "education_fit",
    "careerGrowth": "career_growth",
    "technicalSkills": "technical_skills",
    "softSkills": "soft_skills",
}


def _snake(key: str) -> str:
    return _KEY_ALIASES.get(key, key)


def _string_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip())


class AnalysisResult(BaseModel):
    """Shape returned by the semantic analyzer.

    ``overall_score`` is None when the model did not send one; the score
    calculator then falls back to the aspect weights. ``is_fake`` marks a
    document that failed the plausibility check.
    """
    model_config = ConfigDict(frozen=True)

    overall_score: int | None = None
    aspects: dict[str, AspectScore] = {}
    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()
    summary: str = ""
    detailed_assessment: str = ""
    is_fake: bool = False
    fake_reason: str = ""
    degraded: bool = False

    @classmethod
    def from_payload(cls, payload: Any) -> "AnalysisResult":
        """Build from a loosely-shaped JSON object without ever raising."""
        if not isinstance(payload, dict):
            logger.warning("Semantic payload is %s, not an object", type(payload).__name__)
            return cls()

        data = {_snake(k): v for k, v in payload.items()}

        aspects: dict[str, AspectScore] = {}
        raw_aspects = data.get("aspects")
        if isinstance(raw_aspects, dict):
            for name, raw in raw_aspects.items():
                if isinstance(raw, dict):
                    feedback = raw.get("feedback", raw.get("analysis", ""))
                    aspects[_snake(str(name))] = AspectScore(score=raw.get("score"), feedback=feedback)
                elif isinstance(raw, (int, float)):
                    aspects[_snake(str(name))] = AspectScore(score=raw)

        overall = data.get("overall_score")
        return cls(
            overall_score=None if overall is None else clamp_score(overall),
            aspects=aspects,
            strengths=_string_list(data.get("strengths")),
            weaknesses=_string_list(data.get("weaknesses")),
            summary=str(data.get("summary") or ""),
            detailed_assessment=str(data.get("detailed_assessment") or ""),
            is_fake=data.get("is_fake") is True,
            fake_reason=str(data.get("fake_reason") or ""),
        )

    @classmethod
    def neutral(cls, reason: str = "") -> "AnalysisResult":
        """Baseline used when the semantic service fails but keywords succeeded."""
        return cls(
            overall_score=NEUTRAL_SCORE,
            aspects={
                name: AspectScore(score=NEUTRAL_SCORE, feedback=UNAVAILABLE_FEEDBACK)
                for name in _PLACEHOLDER_ASPECTS
            },
            summary="AI analysis is temporarily unavailable; this result is based on keyword matching.",
            detailed_assessment=reason,
            degraded=True,
        )

    @classmethod
    def rejected(cls, reason: str, message: str) -> "AnalysisResult":
        """Result for a document that failed the plausibility pre-filter."""
        return cls(
            overall_score=0,
            aspects={
                name: AspectScore(score=0, feedback=INVALID_FEEDBACK)
                for name in _PLACEHOLDER_ASPECTS
            },
            summary=message,
            detailed_assessment=message,
            is_fake=True,
            fake_reason=reason,
        )
