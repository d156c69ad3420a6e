"""
Module for calling the text model.

Wraps a dspy.LM behind a small async interface. The LM call is blocking,
so it runs in a worker thread to keep the event loop free.
"""

import asyncio
from typing import Protocol

import dspy

from storybook.config import get_inference_lm


class TextGenerator(Protocol):
    """Anything that can turn a system/prompt pair into raw text."""

    async def generate(self, system_text: str, prompt_text: str, temperature: float) -> str:
        ...


def _first_output(outputs) -> str:
    """Pull the text out of a dspy.LM result list."""
    if not outputs:
        raise ValueError("Text model returned no outputs")

    first = outputs[0]
    if isinstance(first, dict):
        first = first.get("text") or ""
    if not isinstance(first, str):
        raise ValueError(f"Unexpected text model output type: {type(first).__name__}")
    return first


class DspyTextGenerator:
    """
    Generate story text with a dspy.LM.

    Args:
        lm: Optional explicit LM. Defaults to get_inference_lm().
    """

    def __init__(self, lm: dspy.LM = None):
        self.lm = lm if lm is not None else get_inference_lm()

    def _call(self, system_text: str, prompt_text: str, temperature: float) -> str:
        outputs = self.lm(
            messages=[
                {"role": "system", "content": system_text},
                {"role": "user", "content": prompt_text},
            ],
            temperature=temperature,
        )
        return _first_output(outputs)

    async def generate(self, system_text: str, prompt_text: str, temperature: float) -> str:
        """
        Generate raw text for a prompt.

        Raises:
            Whatever the underlying provider raises; callers treat it as fatal.
        """
        return await asyncio.to_thread(self._call, system_text, prompt_text, temperature)
