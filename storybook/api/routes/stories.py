"""Story generation endpoints."""

import asyncio

from fastapi import APIRouter, HTTPException, status

from storybook.core.programs.story_pipeline import StoryGenerationError
from ..config import GENERATION_TIMEOUT
from ..dependencies import Archive, Pipeline
from ..models.requests import GenerateStoryRequest
from ..models.responses import GeneratedStoryResponse
from ..services.story_generation import generate_story

router = APIRouter()


@router.post(
    "/generate",
    response_model=GeneratedStoryResponse,
    response_model_exclude_none=True,
    summary="Generate a story",
    description=(
        "Generate a personalized, illustrated story. Waits for the full story; "
        "every page in the response carries an image URL (real or placeholder)."
    ),
    responses={
        502: {"description": "The text model could not generate a story"},
        504: {"description": "Story generation timed out"},
    },
)
async def create_story(request: GenerateStoryRequest, pipeline: Pipeline, archive: Archive):
    """Generate, illustrate and archive a story."""
    try:
        story_id, result = await generate_story(
            request.to_story_request(),
            pipeline=pipeline,
            archive=archive,
            timeout=GENERATION_TIMEOUT,
        )
    except StoryGenerationError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to generate story",
        )
    except asyncio.TimeoutError:
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Story generation timed out",
        )

    return GeneratedStoryResponse.from_story(story_id, result.story)


@router.get(
    "/{story_id}",
    response_model=GeneratedStoryResponse,
    response_model_exclude_none=True,
    summary="Get a story",
    description="Get a previously generated story by ID.",
)
async def get_story(story_id: str, archive: Archive):
    """Get an archived story by ID."""
    record = await archive.load(story_id)

    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Story {story_id} not found",
        )

    return GeneratedStoryResponse.from_archive(record)
