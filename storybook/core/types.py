"""
Centralized domain types for the Storybook Generator.

All dataclasses that are used across multiple modules are defined here
to make data flow explicit and avoid circular imports.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional


# =============================================================================
# Request Types
# =============================================================================


@dataclass(frozen=True)
class LengthProfile:
    """Page count and per-page word target for a story length tier."""

    page_count: int
    words_per_page: int


@dataclass
class StoryRequest:
    """Parameters describing the story to generate.

    Required fields (child_name, child_age, main_character, setting, theme,
    story_length) are validated at the API boundary before a request
    reaches the pipeline.
    """

    child_name: str
    child_age: str
    main_character: str
    setting: str
    theme: str
    story_length: str
    character_description: str = ""
    personality_traits: list[str] = field(default_factory=list)
    moral_lesson: str = ""
    difficulty: str = "beginner"
    art_style: str = ""
    uploaded_image: Optional[str] = None  # Base64 or data URL


@dataclass
class StoryPrompt:
    """Prompt pair sent to the text model, plus the targets it encodes."""

    prompt_text: str
    system_text: str
    page_count: int
    words_per_page: int


# =============================================================================
# Story Structure Types
# =============================================================================


@dataclass
class StoryPage:
    """A single page of the story.

    page_number is 1-based and dense once the story is assembled.
    image_url is None until the page has been illustrated.
    """

    page_number: int
    content: str
    image_prompt: str
    image_url: Optional[str] = None
    vocabulary: Optional[list[str]] = None

    def to_dict(self) -> dict:
        data = {
            "pageNumber": self.page_number,
            "content": self.content,
            "imagePrompt": self.image_prompt,
        }
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        if self.vocabulary is not None:
            data["vocabulary"] = list(self.vocabulary)
        return data

    def with_image(self, image_url: str) -> "StoryPage":
        """Return a copy of this page carrying the given illustration URL."""
        return replace(self, image_url=image_url)


@dataclass
class GeneratedStory:
    """Complete story with educational companion fields."""

    title: str
    pages: list[StoryPage]
    summary: str
    key_vocabulary: list[str]
    discussion_questions: list[str]
    activity_idea: str
    character_sheet: Optional[str] = None

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def is_illustrated(self) -> bool:
        """True when every page carries an image URL."""
        return all(page.image_url for page in self.pages)

    def to_dict(self) -> dict:
        """Serialize to the camelCase JSON shape returned by the API."""
        data = {
            "title": self.title,
            "pages": [page.to_dict() for page in self.pages],
            "summary": self.summary,
            "keyVocabulary": list(self.key_vocabulary),
            "discussionQuestions": list(self.discussion_questions),
            "activityIdea": self.activity_idea,
        }
        if self.character_sheet is not None:
            data["characterSheet"] = self.character_sheet
        return data


# =============================================================================
# Parsing Types
# =============================================================================


class ParseFailureReason(str, Enum):
    """Why a text model response could not be turned into a story."""

    NO_JSON_FOUND = "no_json_found"
    INVALID_JSON = "invalid_json"
    MISSING_FIELDS = "missing_fields"


@dataclass(frozen=True)
class ParseFailure:
    """Failed parse outcome. Returned, never raised."""

    reason: ParseFailureReason
    detail: str = ""


# =============================================================================
# Illustration Types
# =============================================================================


@dataclass(frozen=True)
class ImageRequest:
    """A single page illustration request."""

    prompt: str
    style: str = ""
    character_sheet: Optional[str] = None
    reference_image: Optional[str] = None  # Base64 or data URL
    page_number: Optional[int] = None
