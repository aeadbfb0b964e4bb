import pytest

from models.schemas.match_result import MatchResult, PartialMatch
from services.keyword_matcher import (
    NO_STRENGTHS_PLACEHOLDER,
    NO_WEAKNESSES_PLACEHOLDER,
    ChainedTermFinder,
    FuzzyTermFinder,
    KeywordMatcher,
    SynonymTermFinder,
    build_strengths,
    build_weaknesses,
)

from conftest import SAMPLE_JD, SAMPLE_RESUME


@pytest.fixture
def matcher():
    return KeywordMatcher()


def _bucketed(result: MatchResult) -> list[str]:
    return list(result.exact_matches) + [p.skill for p in result.partial_matches] + list(result.missing_skills)


def test_synonym_partial_match_and_experience_gap(matcher):
    result = matcher.match(
        "5+ years React, Node.js required. AWS preferred.",
        "3 years of ReactJS development",
    )
    assert "react" not in result.exact_matches
    assert [p.skill for p in result.partial_matches] == ["react"]
    assert result.partial_matches[0].related_terms_found == ("reactjs",)
    assert "node.js" in result.missing_skills
    assert "aws" in result.missing_skills
    assert result.experience_years_found == 3
    assert result.years_required == 5
    assert result.experience_requirement_met is False
    assert result.match_percentage == 33


def test_no_extractable_keywords_gives_zero_percent(matcher):
    analysis = matcher.analyze(
        "We are a friendly company with a great office.",
        "Ten years of gardening and carpentry.",
    )
    assert analysis.total_keywords == 0
    assert analysis.match_percentage == 0
    assert analysis.strengths == (NO_STRENGTHS_PLACEHOLDER,)
    assert analysis.weaknesses == (NO_WEAKNESSES_PLACEHOLDER,)


@pytest.mark.parametrize(
    "job, resume",
    [
        (SAMPLE_JD, SAMPLE_RESUME),
        (SAMPLE_JD, ""),
        ("", SAMPLE_RESUME),
        ("Python, Java and C++ required; Golang a plus", "I write java and golang"),
        ("React, Vue and Angular wanted. Node.js nice to have.", "ReactJS, VueJS, nodejs"),
    ],
)
def test_every_skill_lands_in_exactly_one_bucket(matcher, job, resume):
    keywords = matcher.extractor.extract(job)
    result = matcher.match(job, resume)
    bucketed = _bucketed(result)
    assert len(bucketed) == len(set(bucketed))
    assert set(bucketed) == keywords.required_skills | keywords.preferred_skills
    assert set(result.missing_required) <= set(result.missing_skills)


def test_exact_match_is_case_insensitive_and_boundary_aware(matcher):
    result = matcher.match("Python and Java required", "PYTHON scripts, some JavaScript")
    assert "python" in result.exact_matches
    assert "java" in result.missing_skills


def test_phrase_skill_matches_plural_spelling(matcher):
    result = matcher.match("Must have REST API design experience", "Built REST APIs in Flask")
    assert "rest api" in result.exact_matches


def test_sample_documents(matcher, sample_jd, sample_resume):
    result = matcher.match(sample_jd, sample_resume)
    assert {"python", "postgresql", "docker", "kubernetes", "aws"} <= set(result.exact_matches)
    assert {"django", "fastapi", "redis"} <= set(result.missing_skills)
    assert result.experience_requirement_met is False
    assert "bachelor" in result.education_matches
    assert "computer science" in result.education_matches


def test_experience_met_without_requirement(matcher):
    result = matcher.match("Python developer wanted", "Python developer")
    assert result.years_required is None
    assert result.experience_years_found == 0
    assert result.experience_requirement_met is True


def test_injected_synonym_table():
    matcher = KeywordMatcher(related_terms=SynonymTermFinder({"python": ("py3",)}))
    result = matcher.match("Python required", "Wrote py3 scripts")
    assert result.partial_matches == (PartialMatch(skill="python", related_terms_found=("py3",)),)


def test_fuzzy_finder_catches_misspelling():
    matcher = KeywordMatcher(related_terms=ChainedTermFinder(SynonymTermFinder(), FuzzyTermFinder()))
    result = matcher.match("Kubernetes required for this role", "Deployed services on kubernates")
    assert [p.skill for p in result.partial_matches] == ["kubernetes"]
    assert result.partial_matches[0].related_terms_found == ("kubernates",)


def test_fuzzy_finder_skips_short_skills():
    assert FuzzyTermFinder().find("aws", "awz aws-ish") == ()


def test_chained_finder_prefers_first_hit():
    finder = ChainedTermFinder(SynonymTermFinder(), FuzzyTermFinder())
    assert finder.find("react", "ReactJS and reakt") == ("reactjs",)


def test_analyze_narratives_and_aspects(matcher, sample_jd, sample_resume):
    analysis = matcher.analyze(sample_jd, sample_resume)
    assert analysis.strengths
    assert analysis.weaknesses
    assert analysis.matched_count == len(analysis.match.matched_skills)
    assert set(analysis.aspects) == {"skills_match", "experience_quality", "education_fit", "soft_skills"}
    for aspect in analysis.aspects.values():
        assert 0 <= aspect.score <= 100
        assert aspect.feedback


def test_strengths_note_high_coverage():
    skills = tuple(f"skill{i}" for i in range(15))
    strengths = build_strengths(MatchResult(exact_matches=skills))
    assert "Excellent keyword coverage (15+ matches)" in strengths


def test_strengths_call_out_partial_matches():
    result = MatchResult(partial_matches=(PartialMatch(skill="react", related_terms_found=("reactjs",)),))
    assert build_strengths(result) == ["CV shows related skill for react: reactjs"]


def test_weaknesses_red_flag_for_missing_required():
    missing = ("python", "java", "docker", "aws", "redis")
    weaknesses = build_weaknesses(MatchResult(missing_skills=missing, missing_required=missing))
    assert weaknesses[0] == "Missing technical skills: python, java, docker, aws, redis"
    assert "Red flag: 5 required skills are not mentioned" in weaknesses


def test_weaknesses_note_experience_gap():
    result = MatchResult(experience_years_found=2, years_required=5, experience_requirement_met=False)
    assert build_weaknesses(result) == ["Experience below requirement (2 years found, 5+ required)"]
