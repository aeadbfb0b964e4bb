"""Curated vocabulary for keyword extraction and matching.

Everything here is read-only data. ``SkillVocabulary`` bundles it so the
extractor and matcher can be handed a different table in tests or for
another domain.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

STOP_WORDS: frozenset[str] = frozenset({
    "a", "an", "the", "and", "or", "but", "is", "are", "was", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "shall", "can", "need", "to", "of", "in",
    "for", "on", "with", "at", "by", "from", "as", "into", "through", "during",
    "before", "after", "above", "below", "between", "under", "again", "further",
    "then", "once", "here", "there", "when", "where", "why", "how", "all", "each",
    "few", "more", "most", "other", "some", "such", "no", "nor", "not", "only",
    "own", "same", "so", "than", "too", "very", "just", "also", "now", "etc",
    "we", "you", "your", "our", "their", "its", "his", "her", "this", "that",
    "these", "those", "i", "me", "my", "myself", "he", "she", "it", "they", "them",
    "what", "which", "who", "whom", "if", "while", "about", "against", "any",
    "both", "either", "neither", "because", "until", "unless", "since", "although",
})

# Single-token technical skills, matched against the token stream.
# Tokens keep '+', '#' and inner '.', so "c++", "c#" and "node.js" survive.
TECHNICAL_TERMS: frozenset[str] = frozenset({
    # Languages
    "python", "java", "javascript", "typescript", "c++", "c#", "rust", "ruby",
    "php", "swift", "kotlin", "scala", "golang", "sql", "nosql", "matlab",
    # Frontend
    "react", "angular", "vue", "svelte", "next.js", "html", "css", "sass",
    "tailwind", "bootstrap", "webpack", "flutter",
    # Backend
    "node.js", "express", "django", "flask", "fastapi", "spring", "rails",
    ".net", "graphql", "grpc", "microservices",
    # Cloud & DevOps
    "aws", "azure", "gcp", "docker", "kubernetes", "terraform", "ansible",
    "jenkins", "linux", "nginx", "devops", "git",
    # Data
    "postgresql", "mysql", "mongodb", "redis", "elasticsearch", "kafka",
    "spark", "hadoop", "snowflake", "bigquery", "pandas", "numpy",
    "tensorflow", "pytorch", "excel", "tableau", "powerpoint",
    # Methodologies
    "agile", "scrum", "kanban",
})

# Technical skills that contain spaces or slashes; token splitting would break them.
TECHNICAL_PHRASES: Mapping[str, str] = MappingProxyType({
    "machine learning": r"machine[\s-]?learning",
    "deep learning": r"deep[\s-]?learning",
    "react native": r"react[\s-]?native",
    "rest api": r"rest(?:ful)?[\s-]?apis?",
    "ci/cd": r"ci\s?/\s?cd",
    "data analysis": r"data[\s-]?analy(?:sis|tics)",
    "data science": r"data[\s-]?science",
    "business intelligence": r"business[\s-]?intelligence",
    "power bi": r"power[\s-]?bi",
    "computer vision": r"computer[\s-]?vision",
    "natural language processing": r"natural[\s-]language[\s-]processing",
    "github actions": r"github[\s-]actions?",
    "scikit-learn": r"scikit[\s-]?learn",
})

SOFT_SKILL_PATTERNS: Mapping[str, str] = MappingProxyType({
    "leadership": r"leader(?:ship)?|led\s+(?:a\s+)?teams?",
    "communication": r"communicat(?:ion|ions|e|ing)",
    "teamwork": r"team[\s-]?work|team\s+player",
    "collaboration": r"collaborat(?:ion|ive|e|ed|ing)",
    "problem solving": r"problem[\s-]?solv(?:ing|er)",
    "analytical": r"analytical",
    "project management": r"project[\s-]?manag(?:ement|er)",
    "time management": r"time[\s-]?management",
    "critical thinking": r"critical[\s-]?thinking",
    "mentoring": r"mentor(?:ing|ed|ship)?",
    "stakeholder management": r"stakeholders?",
    "attention to detail": r"attention\s+to\s+detail|detail[\s-]oriented",
})

EDUCATION_PATTERNS: Mapping[str, str] = MappingProxyType({
    "bachelor": r"bachelor(?:'?s)?|b\.?sc\b|\bb\.s\.",
    "master": r"master(?:'?s)?\s+(?:degree|of)|m\.?sc\b|\bm\.s\.",
    "mba": r"\bmba\b",
    "phd": r"ph\.?\s?d\b|doctorate",
    "degree": r"degree",
    "diploma": r"diploma",
    "certification": r"certifi(?:cation|cations|ed|cate)",
    "computer science": r"computer\s+science",
})

# canonical skill -> spellings that count as a partial match
SKILL_VARIANTS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "react": ("reactjs", "react.js", "react native"),
    "node.js": ("nodejs", "node js", "node"),
    "next.js": ("nextjs", "next js"),
    "vue": ("vuejs", "vue.js"),
    "angular": ("angularjs", "angular.js"),
    "express": ("expressjs", "express.js"),
    "javascript": ("js", "es6", "ecmascript"),
    "typescript": ("ts",),
    "kubernetes": ("k8s", "kube"),
    "postgresql": ("postgres", "psql"),
    "mongodb": ("mongo",),
    "golang": ("go",),
    "c#": ("csharp", "c sharp"),
    "c++": ("cpp",),
    "aws": ("amazon web services", "ec2", "s3", "lambda"),
    "gcp": ("google cloud", "google cloud platform"),
    "azure": ("microsoft azure",),
    "machine learning": ("ml",),
    "natural language processing": ("nlp",),
    "ci/cd": ("cicd", "continuous integration", "continuous delivery"),
    "rest api": ("restful",),
    "scikit-learn": ("sklearn",),
    "tensorflow": ("keras",),
    "pytorch": ("torch",),
    "git": ("github", "gitlab", "bitbucket"),
})

REQUIRED_INDICATORS = r"required|requirements?|must[\s-]have|must|mandatory|essential|minimum"
PREFERRED_INDICATORS = r"preferred|nice[\s-]to[\s-]have|bonus|a\s+plus|desirable|desired|optional|ideally"

YEARS_PATTERN = r"(\d{1,2})\s*\+?\s*(?:years?|yrs?)\b"


@lru_cache(maxsize=1024)
def term_pattern(term: str) -> re.Pattern:
    """Boundary-aware, case-insensitive pattern for a literal term.

    "react" matches "React," and "react native" but not "reactjs" or
    "react.js"; "java" does not match "javascript".
    """
    return re.compile(
        rf"(?<![a-z0-9+#]){re.escape(term)}(?![a-z0-9+#]|\.[a-z0-9])",
        re.IGNORECASE,
    )


def _compile_all(patterns: Mapping[str, str]) -> Mapping[str, re.Pattern]:
    return MappingProxyType({
        name: re.compile(rf"(?<![a-z0-9])(?:{pattern})(?![a-z0-9])", re.IGNORECASE)
        for name, pattern in patterns.items()
    })


@dataclass(frozen=True)
class SkillVocabulary:
    """Read-only lookup tables shared by the extractor and the matcher."""

    technical_terms: frozenset[str] = TECHNICAL_TERMS
    technical_phrases: Mapping[str, re.Pattern] = field(
        default_factory=lambda: _compile_all(TECHNICAL_PHRASES)
    )
    soft_skills: Mapping[str, re.Pattern] = field(
        default_factory=lambda: _compile_all(SOFT_SKILL_PATTERNS)
    )
    education: Mapping[str, re.Pattern] = field(
        default_factory=lambda: _compile_all(EDUCATION_PATTERNS)
    )
    variants: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: SKILL_VARIANTS)
    stop_words: frozenset[str] = STOP_WORDS

    def variant_index(self, min_length: int = 1) -> dict[str, str]:
        """variant spelling -> canonical skill, skipping variants shorter than min_length."""
        return {
            variant: canonical
            for canonical, spellings in self.variants.items()
            for variant in spellings
            if len(variant) >= min_length
        }


DEFAULT_VOCABULARY = SkillVocabulary()
