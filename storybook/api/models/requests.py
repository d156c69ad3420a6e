"""Pydantic models for API requests."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storybook.core.types import StoryRequest


class GenerateStoryRequest(BaseModel):
    """Request body for generating a story.

    Accepts camelCase keys (as sent by the web client) or snake_case.
    Blank strings are rejected for required fields.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    child_name: str = Field(..., alias="childName", min_length=1, max_length=100)
    child_age: str = Field(..., alias="childAge", min_length=1, max_length=20, examples=["4-6"])
    main_character: str = Field(..., alias="mainCharacter", min_length=1, max_length=200)
    character_description: str = Field(default="", alias="characterDescription", max_length=1000)
    personality_traits: list[str] = Field(default_factory=list, alias="personalityTraits")
    setting: str = Field(..., min_length=1, max_length=200)
    theme: str = Field(..., min_length=1, max_length=200)
    moral_lesson: str = Field(default="", alias="moralLesson", max_length=500)
    story_length: str = Field(
        ...,
        alias="storyLength",
        min_length=1,
        description="short (6 pages), medium (12) or long (20); unknown values use short",
        examples=["short"],
    )
    difficulty: str = Field(default="beginner", examples=["beginner", "intermediate", "advanced"])
    art_style: str = Field(default="", alias="artStyle", examples=["cartoon", "watercolor"])
    uploaded_image: Optional[str] = Field(
        default=None,
        alias="uploadedImage",
        description="Optional reference image as base64 or a data URL",
    )

    def to_story_request(self) -> StoryRequest:
        """Convert to the core domain type."""
        return StoryRequest(
            child_name=self.child_name,
            child_age=self.child_age,
            main_character=self.main_character,
            setting=self.setting,
            theme=self.theme,
            story_length=self.story_length,
            character_description=self.character_description,
            personality_traits=list(self.personality_traits),
            moral_lesson=self.moral_lesson,
            difficulty=self.difficulty,
            art_style=self.art_style,
            uploaded_image=self.uploaded_image or None,
        )
