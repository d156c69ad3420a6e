# Storybook Generator - Core Domain

# Re-export types for convenient access
from .types import (
    LengthProfile,
    StoryRequest,
    StoryPrompt,
    StoryPage,
    GeneratedStory,
    ParseFailure,
    ParseFailureReason,
    ImageRequest,
)

__all__ = [
    "LengthProfile",
    "StoryRequest",
    "StoryPrompt",
    "StoryPage",
    "GeneratedStory",
    "ParseFailure",
    "ParseFailureReason",
    "ImageRequest",
]
