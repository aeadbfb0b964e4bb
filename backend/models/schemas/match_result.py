"""Keyword matcher output: skill buckets plus derived narrative."""

from pydantic import BaseModel, ConfigDict

from models.responses import AspectScore


class PartialMatch(BaseModel):
    """A skill found only through a known variant, e.g. react ~ reactjs."""
    model_config = ConfigDict(frozen=True)

    skill: str
    related_terms_found: tuple[str, ...] = ()


class MatchResult(BaseModel):
    """Comparison of a job's skills against résumé text.

    ``exact_matches``, ``partial_matches`` and ``missing_skills`` partition
    the job's required + preferred skills.
    """
    model_config = ConfigDict(frozen=True)

    exact_matches: tuple[str, ...] = ()
    partial_matches: tuple[PartialMatch, ...] = ()
    missing_skills: tuple[str, ...] = ()
    missing_required: tuple[str, ...] = ()  # subset of missing_skills

    soft_skill_matches: tuple[str, ...] = ()
    missing_soft_skills: tuple[str, ...] = ()
    education_matches: tuple[str, ...] = ()
    missing_education: tuple[str, ...] = ()

    experience_years_found: int = 0
    years_required: int | None = None
    experience_requirement_met: bool = True

    @property
    def matched_skills(self) -> list[str]:
        return list(self.exact_matches) + [p.skill for p in self.partial_matches]

    @property
    def total_skills(self) -> int:
        return len(self.exact_matches) + len(self.partial_matches) + len(self.missing_skills)

    @property
    def match_percentage(self) -> int:
        total = self.total_skills
        if total == 0:
            return 0
        return round(len(self.matched_skills) / total * 100)


class KeywordAnalysis(BaseModel):
    """Everything the keyword path hands to the score calculator."""
    model_config = ConfigDict(frozen=True)

    match: MatchResult = MatchResult()
    match_percentage: int = 0
    total_keywords: int = 0
    matched_count: int = 0
    matched: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()
    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()
    aspects: dict[str, AspectScore] = {}
