"""Static weight table for the hybrid scoring pipeline.

Built-in defaults mirror the production table. An optional YAML file
(``settings.weights_file``) may override any subset of keys. The table is
validated once and cached; nothing mutates it at request time.
"""

import logging
import math
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from config import settings
from services.errors import ConfigInvariantError

logger = logging.getLogger(__name__)

_SUM_TOLERANCE = 1e-6


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ScoringSplit(_Frozen):
    """Top-level split between the keyword and semantic signals."""
    keyword_weight: float = 0.3
    ai_weight: float = 0.7


class AspectWeights(_Frozen):
    """Advisory weights; only used when the analyzer omits ``overall_score``."""
    skills_match: float = 0.35
    experience_quality: float = 0.30
    education_fit: float = 0.15
    career_growth: float = 0.20


class KeywordRules(_Frozen):
    method: Literal["percentage", "additive"] = "percentage"
    baseline: int = 50
    exact_match_points: int = 10
    partial_match_points: int = 5
    missing_required_penalty: int = -8
    min_keyword_score: int = 0
    max_keyword_score: int = 100


class ExperienceMultipliers(_Frozen):
    less_than_required: float = 0.6
    meets_requirement: float = 1.0
    exceeds_requirement: float = 1.2
    # Résumé years >= required * exceeds_ratio counts as "exceeds"
    exceeds_ratio: float = 1.5


class Thresholds(_Frozen):
    excellent: int = 80
    good: int = 65
    moderate: int = 45
    low: int = 30


class ScoringWeights(_Frozen):
    scoring: ScoringSplit = ScoringSplit()
    aspects: AspectWeights = AspectWeights()
    keywords: KeywordRules = KeywordRules()
    experience: ExperienceMultipliers = ExperienceMultipliers()
    thresholds: Thresholds = Thresholds()


def _check_sum(name: str, values: dict[str, float]) -> None:
    total = sum(values.values())
    if not math.isclose(total, 1.0, abs_tol=_SUM_TOLERANCE):
        raise ConfigInvariantError(
            f"Weights in '{name}' must sum to 1.0, got {total:.6f} ({values})"
        )
    negative = [k for k, v in values.items() if v < 0]
    if negative:
        raise ConfigInvariantError(
            f"Weights in '{name}' must be non-negative: {', '.join(negative)}"
        )


def validate_weights(weights: ScoringWeights) -> ScoringWeights:
    """Raise ConfigInvariantError unless every weight group is coherent."""
    _check_sum("scoring", weights.scoring.model_dump())
    _check_sum("aspects", weights.aspects.model_dump())

    t = weights.thresholds
    cutoffs = [t.excellent, t.good, t.moderate, t.low]
    if any(c < 0 or c > 100 for c in cutoffs):
        raise ConfigInvariantError(f"Thresholds must lie in [0, 100]: {cutoffs}")
    if cutoffs != sorted(cutoffs, reverse=True) or len(set(cutoffs)) != len(cutoffs):
        raise ConfigInvariantError(
            f"Thresholds must be strictly descending (excellent > good > moderate > low): {cutoffs}"
        )

    k = weights.keywords
    if k.min_keyword_score > k.max_keyword_score:
        raise ConfigInvariantError(
            f"keywords.min_keyword_score ({k.min_keyword_score}) exceeds "
            f"max_keyword_score ({k.max_keyword_score})"
        )
    return weights


def load_scoring_weights(path: str | Path | None = None) -> ScoringWeights:
    """Build the weight table from defaults, optionally overridden by YAML."""
    if not path:
        return validate_weights(ScoringWeights())

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigInvariantError(f"Scoring weights file not found at '{config_path}'")

    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigInvariantError(
            f"Failed to read scoring weights '{config_path}': {exc}"
        ) from exc

    try:
        parsed: Any = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigInvariantError(
            f"Invalid YAML in scoring weights '{config_path}': {exc}"
        ) from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise ConfigInvariantError(
            f"Invalid scoring weights '{config_path}': expected a top-level mapping."
        )

    try:
        weights = ScoringWeights.model_validate(parsed)
    except ValidationError as exc:
        raise ConfigInvariantError(
            f"Invalid scoring weights '{config_path}': {exc}"
        ) from exc

    logger.info("Loaded scoring weights from %s", config_path)
    return validate_weights(weights)


@lru_cache(maxsize=1)
def get_scoring_weights() -> ScoringWeights:
    """Process-wide weight table, loaded once."""
    return load_scoring_weights(settings.weights_file or None)
