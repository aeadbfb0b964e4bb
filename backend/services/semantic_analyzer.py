"""Client for the external semantic analysis (LLM) service.

Sends one prompt per (job, résumé) pair, bounds the call with a timeout and
parses the reply defensively: the first well-formed JSON object in the text
is used even when the model wraps it in prose or code fences. Every failure
surfaces as an ``AnalysisServiceError`` subclass; deciding whether to
degrade is the caller's job.
"""

import asyncio
import json
import logging
from typing import Any

from config import settings
from models.schemas.analysis_result import AnalysisResult
from scoring_config import ScoringWeights, get_scoring_weights
from services.errors import AnalysisTimeoutError, MalformedResponseError
from services.gemini_client import GeminiClient, TextGenerator
from services.prompt_builder import build_analysis_prompt

logger = logging.getLogger(__name__)

NO_STRENGTHS_FOUND = "Unable to identify specific strengths"
NO_WEAKNESSES_FOUND = "Unable to identify specific weaknesses"


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def _balanced_end(text: str, start: int) -> int:
    """Index just past the object that opens at ``start``, or -1."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return -1


def extract_json_object(text: str) -> dict[str, Any]:
    """First well-formed JSON object in ``text``.

    Raises MalformedResponseError if none can be parsed.
    """
    text = _strip_code_fences(text or "")
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end == -1:
            break
        try:
            parsed = json.loads(text[start:end])
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            return parsed
        start = text.find("{", start + 1)
    raise MalformedResponseError("No JSON object found in the analysis response")


class SemanticAnalyzer:
    """Asks the LLM for per-aspect scores of a (job, résumé) pair."""

    def __init__(
        self,
        client: TextGenerator | None = None,
        weights: ScoringWeights | None = None,
        timeout: float | None = None,
    ) -> None:
        self.client = client or GeminiClient()
        self.weights = weights or get_scoring_weights()
        self.timeout = settings.analysis_timeout_seconds if timeout is None else timeout

    async def analyze(self, job_text: str, resume_text: str) -> AnalysisResult:
        prompt = build_analysis_prompt(job_text, resume_text, self.weights.aspects.model_dump())

        try:
            raw = await asyncio.wait_for(self.client.generate(prompt), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.warning("Semantic analysis timed out after %.1fs", self.timeout)
            raise AnalysisTimeoutError(
                f"Semantic analysis did not finish within {self.timeout:g} seconds"
            ) from e

        payload = extract_json_object(raw)
        if "overall_score" not in payload and "overallScore" not in payload and not payload.get("aspects"):
            logger.error("Analysis response has neither a score nor aspects: %s", list(payload))
            raise MalformedResponseError("Analysis response is missing both overall_score and aspects")

        result = AnalysisResult.from_payload(payload)
        updates: dict[str, Any] = {}
        if not result.strengths:
            updates["strengths"] = (NO_STRENGTHS_FOUND,)
        if not result.weaknesses:
            updates["weaknesses"] = (NO_WEAKNESSES_FOUND,)
        if updates:
            result = result.model_copy(update=updates)

        logger.info(
            "Semantic analysis: overall=%s, %d aspects",
            result.overall_score,
            len(result.aspects),
        )
        return result
