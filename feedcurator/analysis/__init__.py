"""Article classification with a generative model."""

from .categories import (
    DEFAULT_ACCESS_STATUS,
    DEFAULT_CATEGORY,
    VALID_CATEGORIES,
    match_category,
    normalize_access_status,
    normalize_category,
    normalize_score,
)
from .llm_provider import LLMProvider, OpenAIProvider, create_provider
from .parser import ClassifierOutput, ParseError, parse_classifier_response
from .pipeline import AnalysisResult, ClassificationPipeline
from .prompt import build_prompt

__all__ = [
    "AnalysisResult",
    "ClassificationPipeline",
    "ClassifierOutput",
    "DEFAULT_ACCESS_STATUS",
    "DEFAULT_CATEGORY",
    "LLMProvider",
    "OpenAIProvider",
    "ParseError",
    "VALID_CATEGORIES",
    "build_prompt",
    "create_provider",
    "match_category",
    "normalize_access_status",
    "normalize_category",
    "normalize_score",
    "parse_classifier_response",
]
