"""
Story generation constants for the Storybook Generator.

Length tiers, reading levels and the defaults used when a request leaves
an optional field blank.
"""

from types import MappingProxyType

from ..core.types import LengthProfile

LENGTH_PROFILES = MappingProxyType({
    "short": LengthProfile(page_count=6, words_per_page=50),
    "medium": LengthProfile(page_count=12, words_per_page=60),
    "long": LengthProfile(page_count=20, words_per_page=70),
})

DEFAULT_STORY_LENGTH = "short"

VOCABULARY_LEVELS = MappingProxyType({
    "beginner": "Use simple, common words that are easy to read and understand.",
    "intermediate": "Mix simple words with some slightly more challenging vocabulary to help learning.",
    "advanced": "Include rich vocabulary and descriptive language while remaining age-appropriate.",
})

DEFAULT_DIFFICULTY = "beginner"

STORY_DEFAULTS = MappingProxyType({
    "personality_traits": "kind and brave",
    "moral_lesson": "kindness and friendship",
    "character_description": "A friendly character",
    "art_style": "cartoon",
    "temperature": 0.7,
})


def get_length_profile(story_length: str) -> LengthProfile:
    """Resolve a length tier, falling back to the short profile."""
    return LENGTH_PROFILES.get(story_length, LENGTH_PROFILES[DEFAULT_STORY_LENGTH])


def get_vocabulary_instruction(difficulty: str) -> str:
    """Resolve a reading-level instruction, falling back to beginner."""
    return VOCABULARY_LEVELS.get(difficulty, VOCABULARY_LEVELS[DEFAULT_DIFFICULTY])
