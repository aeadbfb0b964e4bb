"""Résumé rewriting under an honest or aggressive policy.

Both levels use the same mechanism and differ only in how strict the
policy is. The policy is enforced on the structured rewrite after it comes
back, not only requested in the prompt: every employer, title, degree,
institution and certification must already appear in the original text,
and the honest level also refuses skills the original never mentions.
A rewrite that breaks the policy is discarded and the original returned.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import ValidationError
from rapidfuzz import fuzz

from config import settings
from models.responses import ChangesSummary, FinalResult, OptimizationResponse, PolicyViolation
from models.schemas.optimized_resume import ChangeLog, OptimizedResume
from services.errors import AnalysisServiceError
from services.gemini_client import GeminiClient, TextGenerator
from services.keyword_extractor import KeywordExtractor
from services.prompt_builder import build_optimization_prompt
from services.semantic_analyzer import extract_json_object

logger = logging.getLogger(__name__)

OptimizationLevel = Literal["honest", "aggressive"]

# Partial-ratio score at which a rewritten entity counts as the original one
ENTITY_MATCH_THRESHOLD = 90
MIN_FUZZY_LENGTH = 5

FAILED_CHANGE = "Optimization failed - showing original CV"
FAILED_ASSESSMENT = "Unable to optimize. Please try again."
REJECTED_ASSESSMENT = (
    "The rewrite introduced claims that are not supported by the original CV, "
    "so the original is shown instead."
)
DEFAULT_EXPECTED_SCORE = 50

_RULE = "─" * 80


@dataclass(frozen=True)
class RewritePolicy:
    level: OptimizationLevel
    rules: tuple[str, ...]
    allow_new_skills: bool
    max_expected_score: int = 100


HONEST = RewritePolicy(
    level="honest",
    rules=(
        "Do not add any skill, tool or technology the CV does not already mention",
        "Do not exaggerate years of experience or seniority",
        "Only reword and reorganize information that is already there",
        "Use job description keywords only where they genuinely match the CV",
        "Keep changes conservative: better wording and structure",
    ),
    allow_new_skills=False,
)

AGGRESSIVE = RewritePolicy(
    level="aggressive",
    rules=(
        "Reframe existing experience as strongly as the facts allow",
        "Use powerful action verbs and industry terminology",
        "Connect existing experience to job requirements wherever it is related",
        "Emphasize transferable skills heavily",
        "Write a compelling professional summary",
    ),
    allow_new_skills=True,
    max_expected_score=85,
)

POLICIES: dict[str, RewritePolicy] = {p.level: p for p in (HONEST, AGGRESSIVE)}


def policy_for(level: str) -> RewritePolicy:
    try:
        return POLICIES[level]
    except KeyError:
        raise ValueError(f"Unknown optimization level '{level}'; expected one of {sorted(POLICIES)}") from None


_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def snake_keys(value: Any) -> Any:
    """Recursively convert camelCase dict keys to snake_case."""
    if isinstance(value, dict):
        return {_CAMEL_RE.sub("_", str(k)).lower(): snake_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [snake_keys(v) for v in value]
    return value


def parse_rewrite(payload: dict[str, Any]) -> OptimizedResume:
    """Validate the model's JSON into an OptimizedResume.

    Raises ValueError when the essential sections are missing.
    """
    data = snake_keys(payload)
    # Older prompt shape: "changes" as a list of notes
    if isinstance(data.get("changes"), list):
        data.setdefault("change_notes", data.pop("changes"))
    rewrite = OptimizedResume.model_validate(data)
    if not rewrite.summary and not rewrite.experience:
        raise ValueError("Rewrite has neither a summary nor experience")
    return rewrite


def _normalize(text: str) -> str:
    return " ".join(re.sub(r"[^a-z0-9+#]+", " ", text.lower()).split())


def is_evidenced(value: str, original_normalized: str) -> bool:
    needle = _normalize(value)
    if not needle:
        return True
    if re.search(rf"(?<![a-z0-9+#]){re.escape(needle)}(?![a-z0-9+#])", original_normalized):
        return True
    # Short names only count on an exact token match; "meta" is not in "metadata"
    if len(needle) < MIN_FUZZY_LENGTH:
        return False
    return fuzz.partial_ratio(needle, original_normalized) >= ENTITY_MATCH_THRESHOLD


def format_as_text(rewrite: OptimizedResume) -> str:
    """Render a structured rewrite as plain text."""
    lines: list[str] = []
    contact = rewrite.contact_info
    if contact.name:
        lines.append(contact.name)
    details = [d for d in (contact.email, contact.phone, contact.location) if d]
    if details:
        lines.append(" | ".join(details))
    if contact.linkedin:
        lines.append(f"LinkedIn: {contact.linkedin}")
    if contact.github:
        lines.append(f"GitHub: {contact.github}")
    lines.append("")

    if rewrite.summary:
        lines += ["PROFESSIONAL SUMMARY", _RULE, rewrite.summary, ""]

    if rewrite.skills.technical or rewrite.skills.soft:
        lines += ["SKILLS", _RULE]
        if rewrite.skills.technical:
            lines.append(f"Technical: {', '.join(rewrite.skills.technical)}")
        if rewrite.skills.soft:
            lines.append(f"Soft Skills: {', '.join(rewrite.skills.soft)}")
        lines.append("")

    if rewrite.experience:
        lines += ["PROFESSIONAL EXPERIENCE", _RULE]
        for exp in rewrite.experience:
            lines.append(" | ".join(p for p in (exp.title, exp.company) if p))
            when = " | ".join(p for p in (exp.duration, exp.location) if p)
            if when:
                lines.append(when)
            lines += [f"• {a}" for a in exp.achievements]
            lines.append("")

    if rewrite.education:
        lines += ["EDUCATION", _RULE]
        for edu in rewrite.education:
            lines.append(" | ".join(p for p in (edu.degree, edu.institution, edu.year) if p))
            if edu.details:
                lines.append(edu.details)
        lines.append("")

    if rewrite.projects:
        lines += ["PROJECTS", _RULE]
        for project in rewrite.projects:
            lines.append(project.name)
            if project.description:
                lines.append(project.description)
            if project.technologies:
                lines.append(f"Technologies: {', '.join(project.technologies)}")
            lines.append("")

    if rewrite.certifications:
        lines += ["CERTIFICATIONS", _RULE]
        lines += [f"• {c}" for c in rewrite.certifications]

    return "\n".join(lines).strip()


def summarize_changes(changes: ChangeLog) -> ChangesSummary:
    return ChangesSummary(
        added_keywords=changes.added_keywords,
        emphasized_skills=changes.emphasized_skills,
        reordered_experience=changes.reordered_experience,
        optimized_summary=changes.optimized_summary,
        total_changes=(
            len(changes.added_keywords)
            + len(changes.emphasized_skills)
            + int(changes.reordered_experience)
            + int(changes.optimized_summary)
        ),
    )


class OptimizationAdvisor:
    """Builds the rewrite directive, calls the model and enforces the policy."""

    def __init__(
        self,
        client: TextGenerator | None = None,
        extractor: KeywordExtractor | None = None,
        timeout: float | None = None,
    ) -> None:
        self.client = client or GeminiClient()
        self.extractor = extractor or KeywordExtractor()
        self.timeout = settings.optimization_timeout_seconds if timeout is None else timeout

    def validate(
        self, original_text: str, rewrite: OptimizedResume, policy: RewritePolicy
    ) -> list[PolicyViolation]:
        """Claims in ``rewrite`` that the original text does not support."""
        original = _normalize(original_text)
        violations: list[PolicyViolation] = []

        def check(kind: str, value: str) -> None:
            if not is_evidenced(value, original):
                violations.append(PolicyViolation(kind=kind, value=value))

        for exp in rewrite.experience:
            check("employer", exp.company)
            check("title", exp.title)
        for edu in rewrite.education:
            check("degree", edu.degree)
            check("institution", edu.institution)
        for cert in rewrite.certifications:
            check("certification", cert)

        if not policy.allow_new_skills:
            known = set(self.extractor.find_skills(original_text))
            claimed = self.extractor.find_skills(format_as_text(rewrite))
            for skill in sorted(set(claimed) - known):
                violations.append(PolicyViolation(kind="skill", value=skill))

        return violations

    async def optimize(
        self,
        job_text: str,
        resume_text: str,
        level: str = "honest",
        analysis: FinalResult | None = None,
    ) -> OptimizationResponse:
        policy = policy_for(level)
        baseline = analysis.final_score if analysis is not None else DEFAULT_EXPECTED_SCORE
        prompt = build_optimization_prompt(
            job_text, resume_text, policy.level, list(policy.rules), analysis
        )

        logger.info("Starting %s optimization", policy.level)
        try:
            raw = await asyncio.wait_for(self.client.generate(prompt), timeout=self.timeout)
            rewrite = parse_rewrite(extract_json_object(raw))
        except asyncio.TimeoutError:
            logger.warning("Optimization timed out after %.1fs", self.timeout)
            return self._failed(policy, resume_text, baseline)
        except (AnalysisServiceError, ValidationError, ValueError) as e:
            logger.warning("Optimization failed: %s", e)
            return self._failed(policy, resume_text, baseline)

        violations = self.validate(resume_text, rewrite, policy)
        if violations:
            logger.warning(
                "Rejected %s rewrite with %d policy violations: %s",
                policy.level,
                len(violations),
                ", ".join(f"{v.kind}={v.value}" for v in violations[:5]),
            )
            return OptimizationResponse(
                level=policy.level,
                accepted=False,
                optimized_resume=resume_text,
                changes=[f"Rewrite rejected: {len(violations)} claims not found in the original CV"],
                expected_score=baseline,
                honest_assessment=REJECTED_ASSESSMENT,
                violations=violations,
            )

        summary = summarize_changes(rewrite.changes)
        notes = rewrite.change_notes or [
            f"Added keyword: {k}" for k in summary.added_keywords
        ] or ["Reworded the CV for the target role"]
        return OptimizationResponse(
            level=policy.level,
            accepted=True,
            optimized_resume=format_as_text(rewrite),
            changes=notes,
            changes_summary=summary,
            expected_score=min(rewrite.expected_score, policy.max_expected_score),
            honest_assessment=rewrite.honest_assessment,
        )

    def _failed(self, policy: RewritePolicy, resume_text: str, baseline: int) -> OptimizationResponse:
        return OptimizationResponse(
            level=policy.level,
            accepted=False,
            optimized_resume=resume_text,
            changes=[FAILED_CHANGE],
            expected_score=baseline,
            honest_assessment=FAILED_ASSESSMENT,
        )
