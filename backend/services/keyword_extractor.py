"""Keyword extraction from job descriptions.

Pulls technical skills, soft skills, education terms and a years-of-
experience requirement out of free text. Single-word skills come from the
token stream; multi-word and symbol-heavy skills ("machine learning",
"ci/cd") come from regex scans over the original text, since tokenizing
would destroy them. Each technical skill is then labelled required or
preferred by a pluggable classifier.
"""

import logging
import math
import re
from typing import Mapping, Protocol

from models.schemas.job_keywords import JobKeywordSet
from services.skill_vocabulary import (
    DEFAULT_VOCABULARY,
    PREFERRED_INDICATORS,
    REQUIRED_INDICATORS,
    YEARS_PATTERN,
    SkillVocabulary,
    term_pattern,
)

logger = logging.getLogger(__name__)

_REQUIRED_RE = re.compile(rf"\b(?:{REQUIRED_INDICATORS})\b", re.IGNORECASE)
_PREFERRED_RE = re.compile(rf"\b(?:{PREFERRED_INDICATORS})\b", re.IGNORECASE)
_YEARS_RE = re.compile(rf"(?<!\d){YEARS_PATTERN}", re.IGNORECASE)

# Aliases shorter than this ("go", "ts", "ml") are too ambiguous to read as
# a job requirement; they still count as partial matches on the résumé side.
MIN_ALIAS_LENGTH = 4


def normalize(text: str) -> str:
    """Lowercase and strip punctuation, keeping '+', '#' and inner dots."""
    # Strip sentence-ending periods but keep dots in tech terms like "node.js"
    text = re.sub(r"\.(\s|$)", r" \1", text.lower())
    return re.sub(r"[^a-z0-9\s+#.]", " ", text)


def tokenize(text: str, stop_words: frozenset[str] = DEFAULT_VOCABULARY.stop_words) -> list[str]:
    """Whitespace tokens of at least 2 chars that are not stop words."""
    tokens = []
    for token in normalize(text).split():
        token = token.rstrip(".")
        if len(token) < 2 or token in stop_words:
            continue
        if not any(ch.isalnum() for ch in token):
            continue
        tokens.append(token)
    return tokens


def extract_years(text: str) -> int | None:
    """First "N years" / "N+ years" figure in the text, or None."""
    match = _YEARS_RE.search(text or "")
    return int(match.group(1)) if match else None


class RequirementClassifier(Protocol):
    """Splits found skills into (required, preferred)."""

    def split(self, text: str, mentions: Mapping[str, int]) -> tuple[set[str], set[str]]:
        ...


def _indicator_positions(text: str) -> tuple[list[int], list[int]]:
    required = [m.start() for m in _REQUIRED_RE.finditer(text)]
    preferred = [m.start() for m in _PREFERRED_RE.finditer(text)]
    return required, preferred


class ProximityRequirementClassifier:
    """A skill is required when a "required" indicator sits nearer to its
    first mention than any "preferred" indicator, or when the text has no
    preferred indicator at all. Otherwise it is preferred.
    """

    def split(self, text: str, mentions: Mapping[str, int]) -> tuple[set[str], set[str]]:
        required_at, preferred_at = _indicator_positions(text)
        required: set[str] = set()
        preferred: set[str] = set()

        for skill, position in mentions.items():
            if not preferred_at:
                required.add(skill)
                continue
            d_required = min((abs(p - position) for p in required_at), default=math.inf)
            d_preferred = min(abs(p - position) for p in preferred_at)
            if d_required < d_preferred:
                required.add(skill)
            else:
                preferred.add(skill)
        return required, preferred


class SectionRequirementClassifier:
    """Header-style postings: the last indicator *before* a mention decides.

    Suits layouts like "Requirements: ... Nice to have: ..." where a long
    list would put the next header closer than the one it belongs to.
    Mentions with no indicator in front of them count as required.
    """

    def split(self, text: str, mentions: Mapping[str, int]) -> tuple[set[str], set[str]]:
        required_at, preferred_at = _indicator_positions(text)
        required: set[str] = set()
        preferred: set[str] = set()

        for skill, position in mentions.items():
            last_required = max((p for p in required_at if p <= position), default=-1)
            last_preferred = max((p for p in preferred_at if p <= position), default=-1)
            if last_preferred > last_required:
                preferred.add(skill)
            else:
                required.add(skill)
        return required, preferred


class KeywordExtractor:
    """Turns job-description text into a ``JobKeywordSet``.

    Stateless after construction; one instance can serve every request.
    """

    def __init__(
        self,
        vocabulary: SkillVocabulary = DEFAULT_VOCABULARY,
        classifier: RequirementClassifier | None = None,
    ) -> None:
        self.vocabulary = vocabulary
        self.classifier = classifier or ProximityRequirementClassifier()
        self._aliases = vocabulary.variant_index(min_length=MIN_ALIAS_LENGTH)

    def extract(self, text: str) -> JobKeywordSet:
        if not text or not text.strip():
            return JobKeywordSet()

        mentions = self.find_skills(text)
        required, preferred = self.classifier.split(text, mentions)
        # The classifier is replaceable; keep the partition honest regardless
        preferred -= required

        keywords = JobKeywordSet(
            required_skills=frozenset(required),
            preferred_skills=frozenset(preferred),
            soft_skills=frozenset(self.find_soft_skills(text)),
            education_terms=frozenset(self.find_education_terms(text)),
            years_required=extract_years(text),
        )
        logger.debug(
            "Extracted %d required, %d preferred, %d soft skills",
            len(keywords.required_skills),
            len(keywords.preferred_skills),
            len(keywords.soft_skills),
        )
        return keywords

    def find_skills(self, text: str) -> dict[str, int]:
        """Canonical technical skill -> offset of its first mention."""
        if not text:
            return {}

        found: dict[str, int] = {}
        tokens = set(tokenize(text, self.vocabulary.stop_words))
        for term in sorted(tokens & self.vocabulary.technical_terms):
            found[term] = _first_position(term, text)

        for name, pattern in self.vocabulary.technical_phrases.items():
            match = pattern.search(text)
            if match:
                found.setdefault(name, match.start())

        for alias, canonical in self._aliases.items():
            if canonical in found:
                continue
            match = term_pattern(alias).search(text)
            if match:
                found[canonical] = match.start()

        return found

    def find_soft_skills(self, text: str) -> set[str]:
        return {name for name, pattern in self.vocabulary.soft_skills.items() if pattern.search(text)}

    def find_education_terms(self, text: str) -> set[str]:
        return {name for name, pattern in self.vocabulary.education.items() if pattern.search(text)}


def _first_position(term: str, text: str) -> int:
    match = term_pattern(term).search(text)
    if match:
        return match.start()
    return max(text.lower().find(term), 0)
