"""
LLM configuration for the Storybook Generator.

The text model is chosen from the first provider whose API key is set,
in TEXT_PROVIDERS order. Every call carries a 120s timeout.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv
import dspy

# Load environment variables from .env file
load_dotenv()

# Timeout for LLM calls (seconds)
LLM_TIMEOUT = 120

# Story JSON for a 20-page book fits comfortably below this
LLM_MAX_TOKENS = 8192


class TextProvider(NamedTuple):
    env_var: str
    model: str  # litellm-style "<provider>/<model>" ID passed to dspy.LM

    @property
    def model_name(self) -> str:
        return self.model.split("/", 1)[-1]


TEXT_PROVIDERS = (
    TextProvider("GOOGLE_API_KEY", "gemini/gemini-2.5-pro"),
    TextProvider("ANTHROPIC_API_KEY", "anthropic/claude-sonnet-4-20250514"),
    TextProvider("OPENAI_API_KEY", "openai/gpt-4.1"),
)


def _select_provider() -> Optional[TextProvider]:
    for provider in TEXT_PROVIDERS:
        if os.getenv(provider.env_var):
            return provider
    return None


def get_inference_lm() -> dspy.LM:
    """
    Get the LM used for story text generation.

    Priority order:
    1. Gemini 2.5 Pro (GOOGLE_API_KEY)
    2. Claude Sonnet 4 (ANTHROPIC_API_KEY)
    3. GPT-4.1 (OPENAI_API_KEY)

    Raises:
        ValueError: If no provider API key is configured
    """
    provider = _select_provider()
    if provider is None:
        keys = ", ".join(p.env_var for p in TEXT_PROVIDERS)
        raise ValueError(f"No API key found. Set one of {keys} in .env")

    return dspy.LM(
        provider.model,
        api_key=os.getenv(provider.env_var),
        max_tokens=LLM_MAX_TOKENS,
        timeout=LLM_TIMEOUT,
    )


def get_inference_model_name() -> str:
    """Get the name of the inference model that will be used."""
    provider = _select_provider()
    return provider.model_name if provider else "unknown"
