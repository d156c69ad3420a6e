"""FastAPI dependency injection for the story pipeline and archive."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status

from storybook.core.modules.image_generator import GeminiImageGenerator
from storybook.core.modules.text_generator import DspyTextGenerator
from storybook.core.programs.story_pipeline import StoryPipeline
from . import config
from .services.story_archive import StoryArchive


@lru_cache(maxsize=1)
def _build_pipeline() -> StoryPipeline:
    """Build the pipeline once; provider clients are reused across requests."""
    return StoryPipeline(
        text_generator=DspyTextGenerator(),
        image_generator=GeminiImageGenerator(
            images_dir=config.IMAGES_DIR,
            url_prefix=config.IMAGES_URL_PREFIX,
        ),
    )


def get_pipeline() -> StoryPipeline:
    """Get the story pipeline.

    Raises:
        HTTPException: 503 if no provider API keys are configured
    """
    try:
        return _build_pipeline()
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Story generation is not configured: {e}",
        )


def get_archive() -> StoryArchive:
    """Get a StoryArchive rooted at the configured stories directory."""
    return StoryArchive(config.STORIES_DIR)


# Type aliases for cleaner route signatures
Pipeline = Annotated[StoryPipeline, Depends(get_pipeline)]
Archive = Annotated[StoryArchive, Depends(get_archive)]
