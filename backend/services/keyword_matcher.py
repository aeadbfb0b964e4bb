"""Keyword matching between a job description and résumé text.

Every required/preferred skill from the job lands in exactly one bucket:
exact (literal, boundary-aware, case-insensitive), partial (a related
spelling found by a ``RelatedTermFinder``) or missing. On top of the
buckets the matcher derives a match percentage, narrative strengths and
weaknesses, and keyword-side aspect scores.
"""

import logging
import re
from typing import Mapping, Protocol, Sequence

from rapidfuzz import fuzz

from models.responses import AspectScore
from models.schemas.job_keywords import JobKeywordSet
from models.schemas.match_result import KeywordAnalysis, MatchResult, PartialMatch
from services.keyword_extractor import KeywordExtractor, extract_years, tokenize
from services.skill_vocabulary import SKILL_VARIANTS, term_pattern

logger = logging.getLogger(__name__)

# Keyword lists handed back for display
MAX_LISTED_KEYWORDS = 20

STRONG_COVERAGE_MATCHES = 15
GOOD_COVERAGE_MATCHES = 10
SIGNIFICANT_GAP_MISSING = 15
MULTIPLE_GAP_MISSING = 8
MISSING_REQUIRED_RED_FLAG = 5

NO_STRENGTHS_PLACEHOLDER = "Some relevant keywords found in CV"
NO_WEAKNESSES_PLACEHOLDER = "Some job requirements not explicitly mentioned in CV"

# Fallback signals for aspects when the job text states no requirement
_EXPERIENCE_VERBS = (
    "years", "experience", "worked", "developed", "managed", "led",
    "built", "created", "implemented",
)


class RelatedTermFinder(Protocol):
    """Finds spellings related to ``skill`` that occur in the résumé."""

    def find(self, skill: str, resume_text: str) -> tuple[str, ...]:
        ...


class SynonymTermFinder:
    """Fixed lookup table: canonical skill -> known variant spellings."""

    def __init__(self, variants: Mapping[str, Sequence[str]] = SKILL_VARIANTS) -> None:
        self._variants = variants

    def find(self, skill: str, resume_text: str) -> tuple[str, ...]:
        return tuple(
            variant
            for variant in self._variants.get(skill, ())
            if term_pattern(variant).search(resume_text)
        )


class FuzzyTermFinder:
    """Edit-distance matching over résumé tokens (rapidfuzz ratio).

    Catches spellings outside the synonym table, e.g. "kubernates".
    Short skills are skipped; at that length a ratio is mostly noise.
    """

    def __init__(self, threshold: float = 85.0, min_length: int = 4) -> None:
        self.threshold = threshold
        self.min_length = min_length

    def find(self, skill: str, resume_text: str) -> tuple[str, ...]:
        if len(skill) < self.min_length:
            return ()
        hits = []
        for token in dict.fromkeys(tokenize(resume_text)):
            if token == skill or len(token) < self.min_length:
                continue
            if fuzz.ratio(skill, token) >= self.threshold:
                hits.append(token)
        return tuple(hits)


class ChainedTermFinder:
    """Tries each finder in order; the first non-empty answer wins."""

    def __init__(self, *finders: RelatedTermFinder) -> None:
        self.finders = finders

    def find(self, skill: str, resume_text: str) -> tuple[str, ...]:
        for finder in self.finders:
            hits = finder.find(skill, resume_text)
            if hits:
                return hits
        return ()


class KeywordMatcher:
    """Compares job keywords against a résumé. Pure and stateless."""

    def __init__(
        self,
        extractor: KeywordExtractor | None = None,
        related_terms: RelatedTermFinder | None = None,
    ) -> None:
        self.extractor = extractor or KeywordExtractor()
        self.related_terms = related_terms or SynonymTermFinder()

    def match(self, job_text: str, resume_text: str) -> MatchResult:
        job_text = job_text or ""
        resume_text = resume_text or ""
        keywords = self.extractor.extract(job_text)
        return self.match_keywords(keywords, resume_text)

    def match_keywords(self, keywords: JobKeywordSet, resume_text: str) -> MatchResult:
        exact: list[str] = []
        partial: list[PartialMatch] = []
        missing: list[str] = []

        for skill in keywords.all_skills:
            if self._literal_present(skill, resume_text):
                exact.append(skill)
                continue
            related = self.related_terms.find(skill, resume_text)
            if related:
                partial.append(PartialMatch(skill=skill, related_terms_found=related))
            else:
                missing.append(skill)

        soft_found = self.extractor.find_soft_skills(resume_text)
        edu_found = self.extractor.find_education_terms(resume_text)
        soft_required = sorted(keywords.soft_skills)
        edu_required = sorted(keywords.education_terms)

        years_found = extract_years(resume_text) or 0
        years_required = keywords.years_required
        met = years_required is None or years_found >= years_required

        return MatchResult(
            exact_matches=tuple(exact),
            partial_matches=tuple(partial),
            missing_skills=tuple(missing),
            missing_required=tuple(s for s in missing if s in keywords.required_skills),
            soft_skill_matches=tuple(s for s in soft_required if s in soft_found),
            missing_soft_skills=tuple(s for s in soft_required if s not in soft_found),
            education_matches=tuple(e for e in edu_required if e in edu_found),
            missing_education=tuple(e for e in edu_required if e not in edu_found),
            experience_years_found=years_found,
            years_required=years_required,
            experience_requirement_met=met,
        )

    def _literal_present(self, skill: str, text: str) -> bool:
        if term_pattern(skill).search(text):
            return True
        # Phrase skills tolerate spacing/hyphen/plural spellings ("REST APIs")
        phrase = self.extractor.vocabulary.technical_phrases.get(skill)
        return bool(phrase and phrase.search(text))

    def analyze(self, job_text: str, resume_text: str) -> KeywordAnalysis:
        """Match plus everything derived from it."""
        result = self.match(job_text, resume_text)
        matched = result.matched_skills
        logger.info(
            "Keyword match: %d/%d skills (%d%%), %d partial",
            len(matched),
            result.total_skills,
            result.match_percentage,
            len(result.partial_matches),
        )
        return KeywordAnalysis(
            match=result,
            match_percentage=result.match_percentage,
            total_keywords=result.total_skills,
            matched_count=len(matched),
            matched=tuple(matched[:MAX_LISTED_KEYWORDS]),
            missing=tuple(result.missing_skills[:MAX_LISTED_KEYWORDS]),
            strengths=tuple(build_strengths(result)),
            weaknesses=tuple(build_weaknesses(result)),
            aspects=build_aspects(result, resume_text),
        )


# ---------------------------------------------------------------------------
# Narrative builders
# ---------------------------------------------------------------------------

def _mentions(statements: list[str], term: str) -> bool:
    needle = term.lower()
    return any(needle in s.lower() for s in statements)


def build_strengths(result: MatchResult) -> list[str]:
    strengths: list[str] = []

    if result.exact_matches:
        strengths.append(
            f"Strong technical skills matching: {', '.join(result.exact_matches[:5])}"
        )
    if result.soft_skill_matches:
        strengths.append(
            f"Demonstrates key soft skills: {', '.join(result.soft_skill_matches[:3])}"
        )
    if result.years_required is not None and result.experience_requirement_met:
        strengths.append(
            f"Experience level meets the {result.years_required}+ year requirement "
            f"({result.experience_years_found} years found)"
        )
    if result.education_matches:
        strengths.append(
            f"Education matches stated requirements: {', '.join(result.education_matches[:3])}"
        )

    total_matched = len(result.matched_skills) + len(result.soft_skill_matches)
    if total_matched >= STRONG_COVERAGE_MATCHES:
        strengths.append(f"Excellent keyword coverage ({total_matched}+ matches)")
    elif total_matched >= GOOD_COVERAGE_MATCHES:
        strengths.append("Good keyword alignment with job description")

    related = {p.skill: p.related_terms_found for p in result.partial_matches}
    for skill in result.matched_skills[:3]:
        if _mentions(strengths, skill):
            continue
        if skill in related:
            strengths.append(
                f"CV shows related skill for {skill}: {', '.join(related[skill])}"
            )
        else:
            strengths.append(f"CV includes required skill: {skill}")

    return strengths or [NO_STRENGTHS_PLACEHOLDER]


def build_weaknesses(result: MatchResult) -> list[str]:
    weaknesses: list[str] = []

    if result.missing_skills:
        weaknesses.append(
            f"Missing technical skills: {', '.join(result.missing_skills[:5])}"
        )
    if result.missing_soft_skills:
        weaknesses.append(
            f"Missing soft skills: {', '.join(result.missing_soft_skills[:3])}"
        )
    if not result.experience_requirement_met:
        weaknesses.append(
            f"Experience below requirement ({result.experience_years_found} years found, "
            f"{result.years_required}+ required)"
        )
    if result.missing_education:
        weaknesses.append(
            f"Education requirements not evident: {', '.join(result.missing_education[:3])}"
        )
    if len(result.missing_required) >= MISSING_REQUIRED_RED_FLAG:
        weaknesses.append(
            f"Red flag: {len(result.missing_required)} required skills are not mentioned"
        )

    total_missing = len(result.missing_skills) + len(result.missing_soft_skills)
    if total_missing >= SIGNIFICANT_GAP_MISSING:
        weaknesses.append(f"Significant keyword gaps ({total_missing}+ missing keywords)")
    elif total_missing >= MULTIPLE_GAP_MISSING:
        weaknesses.append("Multiple missing keywords from job requirements")

    for skill in result.missing_skills[:4]:
        if not _mentions(weaknesses, skill):
            weaknesses.append(f"CV missing required keyword: {skill}")

    return weaknesses or [NO_WEAKNESSES_PLACEHOLDER]


# ---------------------------------------------------------------------------
# Keyword-side aspects
# ---------------------------------------------------------------------------

def _count_present(terms: Sequence[str], text: str) -> int:
    return sum(1 for t in terms if re.search(rf"\b{re.escape(t)}\b", text))


def build_aspects(result: MatchResult, resume_text: str) -> dict[str, AspectScore]:
    resume_lower = resume_text.lower()

    skills_score = result.match_percentage if result.total_skills else 50
    if skills_score >= 70:
        skills_feedback = "Strong technical skill alignment"
    elif skills_score >= 40:
        skills_feedback = "Moderate technical match - some gaps exist"
    else:
        skills_feedback = "Significant technical skill gaps"

    if result.years_required:
        exp_score = min(100, round(result.experience_years_found / result.years_required * 100))
    else:
        exp_score = min(100, _count_present(_EXPERIENCE_VERBS, resume_lower) * 12)
    if exp_score >= 70:
        exp_feedback = "CV demonstrates substantial relevant experience"
    elif exp_score >= 40:
        exp_feedback = "Some experience shown but could be more detailed"
    else:
        exp_feedback = "Limited experience demonstrated"

    edu_total = len(result.education_matches) + len(result.missing_education)
    if edu_total:
        edu_score = round(len(result.education_matches) / edu_total * 100)
    else:
        edu_score = min(100, _count_present(
            ("degree", "bachelor", "master", "phd", "university", "college",
             "certification", "certified"),
            resume_lower,
        ) * 15)
    edu_feedback = (
        "Education requirements appear to be met"
        if edu_score >= 60
        else "Consider highlighting relevant education or certifications"
    )

    soft_total = len(result.soft_skill_matches) + len(result.missing_soft_skills)
    soft_score = round(len(result.soft_skill_matches) / soft_total * 100) if soft_total else 50
    soft_feedback = (
        "Soft skills from the posting are reflected in the CV"
        if soft_score >= 60
        else "Few of the requested soft skills are evident"
    )

    return {
        "skills_match": AspectScore(score=skills_score, feedback=skills_feedback),
        "experience_quality": AspectScore(score=exp_score, feedback=exp_feedback),
        "education_fit": AspectScore(score=edu_score, feedback=edu_feedback),
        "soft_skills": AspectScore(score=soft_score, feedback=soft_feedback),
    }
