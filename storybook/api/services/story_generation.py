"""
Story generation service.

Runs the story pipeline for one request under a timeout, logs the
outcome, and hands the finished story to the archive. Archive failures
are logged and never fail the request.
"""

import asyncio
import time
import uuid
from typing import Optional

from storybook.core.programs.story_pipeline import PipelineResult, StoryPipeline
from storybook.core.types import StoryRequest
from ..logging import story_logger
from .story_archive import StoryArchive


async def generate_story(
    request: StoryRequest,
    pipeline: StoryPipeline,
    archive: Optional[StoryArchive] = None,
    timeout: Optional[float] = None,
) -> tuple[str, PipelineResult]:
    """
    Generate a story and archive it.

    Args:
        request: A validated story request
        pipeline: The story pipeline to run
        archive: Optional archive to persist the finished story
        timeout: Optional overall timeout in seconds; when it fires the
            pipeline task is cancelled, including in-flight image requests

    Returns:
        Tuple of (story_id, pipeline result)

    Raises:
        StoryGenerationError: If the text model call fails
        asyncio.TimeoutError: If the timeout fires
    """
    story_id = str(uuid.uuid4())
    start_time = time.time()

    story_logger.generation_started(story_id, request.story_length)

    try:
        run = pipeline.run(request, story_id=story_id)
        if timeout:
            result = await asyncio.wait_for(run, timeout=timeout)
        else:
            result = await run
    except Exception as e:
        story_logger.generation_failed(story_id, e)
        raise

    if result.used_fallback:
        story_logger.fallback_used(story_id, result.parse_failure.reason.value)

    if archive is not None:
        try:
            await archive.save(story_id, request, result.story)
        except Exception as e:
            story_logger.persistence_failed(story_id, e)

    story_logger.generation_completed(story_id, time.time() - start_time)
    return story_id, result
