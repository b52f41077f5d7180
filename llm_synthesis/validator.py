"""Validation layer for raw narrative service output.

Parses JSON strings and loads them into the analysis or recommendations
schema. Malformed JSON is always a hard failure.
"""

import json
import re
from typing import List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from llm_synthesis.schema import MediaAnalysisOutput, RecommendationsOutput

ModelT = TypeVar("ModelT", bound=BaseModel)


class LLMOutputValidationError(Exception):
    """Raised when LLM output fails parsing or schema validation.

    Attributes:
        stage: Which validation step failed ("json_parse" or "schema").
        errors: List of human-readable error descriptions.
        raw_response: The original string that failed validation.
    """

    def __init__(
        self,
        stage: str,
        errors: List[str],
        raw_response: str,
    ) -> None:
        self.stage = stage
        self.errors = errors
        self.raw_response = raw_response
        message = (
            f"LLM output validation failed at stage '{stage}': "
            + "; ".join(errors)
        )
        super().__init__(message)


def _strip_markdown_fences(text: str) -> str:
    """Remove optional markdown code fences wrapping JSON.

    Models sometimes wrap output in ```json ... ``` despite instructions.

    Args:
        text: Raw LLM response string.

    Returns:
        The text with leading/trailing code fences removed, if present.
    """
    stripped = text.strip()
    match = re.match(
        r"^```(?:json)?\s*\n?(.*?)\n?\s*```$",
        stripped,
        re.DOTALL,
    )
    if match:
        return match.group(1).strip()
    return stripped


def parse_llm_output(raw_response: str, model: Type[ModelT]) -> ModelT:
    """Parse and validate a raw LLM response string into ``model``.

    Steps:
        1. Strip optional markdown fences.
        2. Parse as JSON.
        3. Require a top-level object.
        4. Load into the Pydantic model.

    Args:
        raw_response: The raw string returned by the LLM adapter.
        model: Target response schema.

    Returns:
        A validated ``model`` instance.

    Raises:
        LLMOutputValidationError: If JSON parsing or schema validation fails.
    """
    cleaned = _strip_markdown_fences(raw_response)

    try:
        data = json.loads(cleaned)
    except (json.JSONDecodeError, TypeError) as exc:
        raise LLMOutputValidationError(
            stage="json_parse",
            errors=[str(exc)],
            raw_response=raw_response,
        ) from exc

    if not isinstance(data, dict):
        raise LLMOutputValidationError(
            stage="schema",
            errors=["top-level JSON must be an object"],
            raw_response=raw_response,
        )

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
            for e in exc.errors()
        ]
        raise LLMOutputValidationError(
            stage="schema",
            errors=errors,
            raw_response=raw_response,
        ) from exc


def validate_analysis_output(raw_response: str) -> MediaAnalysisOutput:
    return parse_llm_output(raw_response, MediaAnalysisOutput)


def validate_recommendations_output(raw_response: str) -> RecommendationsOutput:
    return parse_llm_output(raw_response, RecommendationsOutput)
