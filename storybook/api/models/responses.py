"""Pydantic models for API responses."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storybook.core.types import GeneratedStory


class StoryPageResponse(BaseModel):
    """A single illustrated page of the story."""

    model_config = ConfigDict(populate_by_name=True)

    page_number: int = Field(..., alias="pageNumber", ge=1)
    content: str
    image_prompt: str = Field(..., alias="imagePrompt")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    vocabulary: Optional[list[str]] = None


class GeneratedStoryResponse(BaseModel):
    """Full story with educational companion fields."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    character_sheet: Optional[str] = Field(default=None, alias="characterSheet")
    pages: list[StoryPageResponse]
    summary: str
    key_vocabulary: list[str] = Field(..., alias="keyVocabulary")
    discussion_questions: list[str] = Field(..., alias="discussionQuestions")
    activity_idea: str = Field(..., alias="activityIdea")

    @classmethod
    def from_story(cls, story_id: str, story: GeneratedStory) -> "GeneratedStoryResponse":
        return cls.model_validate({"id": story_id, **story.to_dict()})

    @classmethod
    def from_archive(cls, record: dict) -> "GeneratedStoryResponse":
        """Build from a record written by StoryArchive."""
        return cls.model_validate({"id": record["id"], **record["story"]})
