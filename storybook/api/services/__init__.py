"""Services for story generation."""

from .story_archive import StoryArchive
from .story_generation import generate_story

__all__ = ["StoryArchive", "generate_story"]
