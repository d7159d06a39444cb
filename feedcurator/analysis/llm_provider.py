"""LLM provider interface and implementations."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from openai import OpenAI


class LLMProvider(ABC):
    """Abstract base class for classifier providers."""

    model: str

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Send a single prompt and return the raw response text.

        Args:
            prompt: Complete classification prompt

        Returns:
            Response text, expected to hold a JSON object

        Raises:
            Any error from the underlying client; callers treat it as a
            failed call and retry on a later run.
        """

    @abstractmethod
    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""


class OpenAIProvider(LLMProvider):
    """Provider for any OpenAI-compatible chat completions endpoint.

    The default configuration points the official ``openai`` client at
    Gemini's OpenAI-compatible API.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: Optional[str] = None,
        temperature: float = 0.2,
        client: Optional[Any] = None,
    ) -> None:
        """
        Initialize provider.

        Args:
            api_key: API key for the endpoint
            model: Model name to use
            base_url: Custom base URL (OpenAI-compatible endpoint)
            temperature: Sampling temperature
            client: Pre-built client (for testing)
        """
        self.client = client or OpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.temperature = temperature
        self.total_tokens = 0
        self.api_calls = 0

    def generate(self, prompt: str) -> str:
        """Classify using a single chat completion."""
        self.api_calls += 1
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
        )

        # Update usage stats
        if response.usage:
            self.total_tokens += response.usage.total_tokens

        content = response.choices[0].message.content
        return (content or "").strip()

    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        return {
            "total_tokens": self.total_tokens,
            "api_calls": self.api_calls,
            "model": self.model,
        }


def create_provider(llm_config: Dict[str, Any]) -> LLMProvider:
    """
    Build the configured provider.

    Raises:
        ValueError: If the provider is unknown or no API key is available
    """
    provider = llm_config.get("provider", "openai")
    if provider != "openai":
        raise ValueError(f"Unknown LLM provider: {provider}")

    api_key = llm_config.get("api_key")
    if not api_key:
        env_name = llm_config.get("api_key_env") or "api_key"
        raise ValueError(f"No API key configured for the classifier. Set {env_name}.")

    return OpenAIProvider(
        api_key=api_key,
        model=llm_config.get("model", "gemini-2.5-flash"),
        base_url=llm_config.get("base_url"),
        temperature=llm_config.get("temperature", 0.2),
    )
