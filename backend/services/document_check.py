"""Plausibility pre-filter for (résumé, job description) pairs.

Runs before any scoring. Produces ``Valid`` or ``Rejected(reason, message)``;
a rejection is a classified outcome, not an error, and the score calculator
turns it into a zero-score "Invalid Document" result.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Union

logger = logging.getLogger(__name__)

MIN_RESUME_CHARS = 100
MIN_JOB_CHARS = 50
MIN_VOCABULARY_HITS = 2

_GIBBERISH_RE = re.compile(
    r"^[a-z]{20,}$|\b(?:asdf|qwerty|lorem ipsum|test123|abc123)\b|zzzzz|xxxxx|aaaaaa|jjjjj",
    re.IGNORECASE,
)
_REPEATED_CHAR_RE = re.compile(r"(.)\1{10,}")
# Whole words only; "the end" must not fire on "endpoint" or "end-to-end"
_STORY_RE = re.compile(
    r"\b(?:once upon a time|the end|chapter \d+|verse \d+|chorus|lyrics)(?![\w-])", re.IGNORECASE
)

RESUME_VOCABULARY = (
    "experience", "education", "skills", "work", "job", "company", "university",
    "college", "degree", "project", "team", "manage", "develop", "create", "lead",
    "responsible", "year", "month", "resume", "cv", "professional", "summary",
    "objective", "contact", "email", "phone",
)
JOB_VOCABULARY = (
    "position", "role", "responsibility", "requirement", "qualification",
    "experience", "skill", "team", "company", "work", "candidate", "apply", "job",
    "salary", "benefit", "looking", "hire", "opportunity", "description", "duties",
)


@dataclass(frozen=True)
class Valid:
    pass


@dataclass(frozen=True)
class Rejected:
    reason: str
    message: str


DocumentCheck = Union[Valid, Rejected]

# A rule returns a Rejected when it fires, otherwise None
Rule = Callable[[str, str], Union[Rejected, None]]


def _too_short_resume(resume: str, job: str) -> Rejected | None:
    if len(resume.strip()) < MIN_RESUME_CHARS:
        return Rejected(
            "cv_too_short",
            "That CV is too short to analyze. Please upload your full CV with "
            "experience, education and skills.",
        )
    return None


def _too_short_job(resume: str, job: str) -> Rejected | None:
    if len(job.strip()) < MIN_JOB_CHARS:
        return Rejected(
            "jd_too_short",
            "The job description is too short to analyze. Please paste the complete "
            "job posting.",
        )
    return None


def _gibberish(resume: str, job: str) -> Rejected | None:
    if _GIBBERISH_RE.search(resume) or _GIBBERISH_RE.search(job):
        return Rejected(
            "gibberish",
            "The text looks like placeholder or keyboard input rather than a real "
            "document. Please upload a genuine CV.",
        )
    return None


def _repeated_chars(resume: str, job: str) -> Rejected | None:
    if _REPEATED_CHAR_RE.search(resume) or _REPEATED_CHAR_RE.search(job):
        return Rejected(
            "repeated_chars",
            "The text contains long runs of repeated characters. Please upload a "
            "real document.",
        )
    return None


def _vocabulary_hits(text: str, vocabulary: tuple[str, ...]) -> int:
    lower = text.lower()
    return sum(1 for word in vocabulary if word in lower)


def _not_a_resume(resume: str, job: str) -> Rejected | None:
    if _vocabulary_hits(resume, RESUME_VOCABULARY) < MIN_VOCABULARY_HITS:
        return Rejected(
            "not_a_cv",
            "This document does not look like a CV. Please upload a CV that "
            "describes your experience, education and skills.",
        )
    return None


def _not_a_job(resume: str, job: str) -> Rejected | None:
    if _vocabulary_hits(job, JOB_VOCABULARY) < MIN_VOCABULARY_HITS:
        return Rejected(
            "not_a_jd",
            "The job description does not look like a job posting. Please paste the "
            "role, its requirements and responsibilities.",
        )
    return None


def _story_content(resume: str, job: str) -> Rejected | None:
    if _STORY_RE.search(resume) or _STORY_RE.search(job):
        return Rejected(
            "story_content",
            "The text reads like a story or song lyrics rather than a CV or job "
            "posting. Please upload a real CV.",
        )
    return None


DEFAULT_RULES: tuple[Rule, ...] = (
    _too_short_resume,
    _too_short_job,
    _gibberish,
    _repeated_chars,
    _not_a_resume,
    _not_a_job,
    _story_content,
)


class DocumentScreen:
    """Applies rules in order; the first one that fires decides."""

    def __init__(self, rules: tuple[Rule, ...] = DEFAULT_RULES) -> None:
        self.rules = rules

    def check(self, resume_text: str, job_text: str) -> DocumentCheck:
        resume_text = resume_text or ""
        job_text = job_text or ""
        for rule in self.rules:
            outcome = rule(resume_text, job_text)
            if outcome is not None:
                logger.info("Document rejected by pre-filter: %s", outcome.reason)
                return outcome
        return Valid()
