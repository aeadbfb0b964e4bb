from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

RecommendationLevel = Literal[
    "Excellent Match",
    "Good Match",
    "Moderate Match",
    "Low Match",
    "Poor Match",
    "Invalid Document",
]
ScoringMethod = Literal["hybrid", "keyword_only", "ai_only", "rejected"]


def clamp_score(value: object) -> int:
    """Coerce anything score-like into an int in [0, 100]; junk becomes 0."""
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if number != number:  # NaN
        return 0
    return min(100, max(0, round(number)))


class AspectScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = 0
    feedback: str = ""

    @field_validator("score", mode="before")
    @classmethod
    def _clamp(cls, value: object) -> int:
        return clamp_score(value)

    @field_validator("feedback", mode="before")
    @classmethod
    def _text(cls, value: object) -> str:
        return "" if value is None else str(value)


class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword_score: int = 0
    ai_score: int = 0


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: RecommendationLevel
    message: str


class FinalResult(BaseModel):
    """Merged output of the score calculator. Built fresh per request."""
    model_config = ConfigDict(frozen=True)

    final_score: int = 0
    breakdown: ScoreBreakdown = ScoreBreakdown()
    aspects: dict[str, AspectScore] = {}
    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()
    recommendation: Recommendation
    summary: str = ""
    detailed_assessment: str = ""
    scoring_method: ScoringMethod = "hybrid"
    degraded: bool = False


class KeywordSummary(BaseModel):
    match_percentage: int = 0
    total_keywords: int = 0
    matched_count: int = 0
    matched: list[str] = []
    missing: list[str] = []
    experience_years_found: int = 0
    years_required: int | None = None
    experience_requirement_met: bool = True


class AnalysisResponse(BaseModel):
    result: FinalResult
    keyword_analysis: KeywordSummary | None = None
    analyzed_at: str


class PolicyViolation(BaseModel):
    kind: Literal["employer", "title", "degree", "institution", "certification", "skill"]
    value: str


class ChangesSummary(BaseModel):
    added_keywords: list[str] = []
    emphasized_skills: list[str] = []
    reordered_experience: bool = False
    optimized_summary: bool = False
    total_changes: int = 0


class OptimizationResponse(BaseModel):
    level: Literal["honest", "aggressive"]
    accepted: bool
    optimized_resume: str
    changes: list[str] = []
    changes_summary: ChangesSummary = ChangesSummary()
    expected_score: int = 0
    honest_assessment: str = ""
    violations: list[PolicyViolation] = []
