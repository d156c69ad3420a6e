"""
Configuration module for the Storybook Generator.

Re-exports all configuration for convenient access.
"""

from .llm import get_inference_lm, get_inference_model_name
from .story import (
    LENGTH_PROFILES,
    VOCABULARY_LEVELS,
    STORY_DEFAULTS,
    get_length_profile,
    get_vocabulary_instruction,
)
from .image import (
    IMAGE_CONSTANTS,
    get_image_client,
    get_image_model,
    get_image_config,
    extract_image_from_response,
)

__all__ = [
    # LLM
    "get_inference_lm",
    "get_inference_model_name",
    # Story
    "LENGTH_PROFILES",
    "VOCABULARY_LEVELS",
    "STORY_DEFAULTS",
    "get_length_profile",
    "get_vocabulary_instruction",
    # Image
    "IMAGE_CONSTANTS",
    "get_image_client",
    "get_image_model",
    "get_image_config",
    "extract_image_from_response",
]
