"""Keywords extracted from a job description."""

from pydantic import BaseModel, ConfigDict


class JobKeywordSet(BaseModel):
    """Structured output of the keyword extractor.

    A technical skill lands in exactly one of ``required_skills`` or
    ``preferred_skills``; the split comes from the requirement classifier
    and is best-effort.
    """
    model_config = ConfigDict(frozen=True)

    required_skills: frozenset[str] = frozenset()
    preferred_skills: frozenset[str] = frozenset()
    soft_skills: frozenset[str] = frozenset()
    education_terms: frozenset[str] = frozenset()
    years_required: int | None = None

    @property
    def all_skills(self) -> list[str]:
        """Required skills first, then preferred, each alphabetically."""
        return sorted(self.required_skills) + sorted(self.preferred_skills - self.required_skills)

    @property
    def is_empty(self) -> bool:
        return not (self.required_skills or self.preferred_skills)
