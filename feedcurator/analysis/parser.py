"""Parsing and validation of classifier responses.

The classifier is untrusted: its text is parsed into either a
``ClassifierOutput`` or a ``ParseError``, never an exception.
"""

import json
import re
from typing import Any, Dict, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
)

_FENCE_START = re.compile(r"^```[A-Za-z0-9_-]*\s*")
_FENCE_END = re.compile(r"\s*```$")


class ClassifierOutput(BaseModel):
    """Validated classifier JSON, before normalisation."""

    category: StrictStr
    relevance_score: Union[StrictInt, StrictFloat]
    access_status: StrictStr = Field(validation_alias=AliasChoices("access_status", "access"))
    summary: StrictStr
    raw: Dict[str, Any] = Field(default_factory=dict, description="Decoded JSON as returned")


class ParseError(BaseModel):
    """Classifier text that could not be used."""

    reason: str
    text: str


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_START.sub("", cleaned)
        cleaned = _FENCE_END.sub("", cleaned)
    return cleaned.strip()


def parse_classifier_response(text: str) -> Union[ClassifierOutput, ParseError]:
    """Parse classifier text into validated output or a parse error."""
    if not text or not text.strip():
        return ParseError(reason="Empty response", text=text or "")

    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        return ParseError(reason=f"Invalid JSON: {e.msg}", text=text)

    if not isinstance(data, dict):
        return ParseError(reason="Response is not a JSON object", text=text)

    try:
        output = ClassifierOutput.model_validate({**data, "raw": data})
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        return ParseError(reason=f"Missing or mistyped fields: {fields}", text=text)

    return output
