"""
Main program for generating an illustrated story from a request.

Single pass, no loops:

    BUILT -> GENERATED -> PARSED | FALLEN_BACK -> ILLUSTRATED -> DONE

1. Build the prompt from the request
2. Call the text model (failure here is fatal)
3. Parse the response, or synthesize a fallback story if parsing fails
4. Illustrate every page concurrently (per-page failures use placeholders)
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from storybook.config import IMAGE_CONSTANTS, STORY_DEFAULTS, get_length_profile
from ..types import GeneratedStory, ParseFailure, StoryRequest
from ..modules.prompt_builder import PromptBuilder, art_style
from ..modules.response_parser import ResponseParser
from ..modules.fallback_synthesizer import FallbackSynthesizer
from ..modules.page_illustrator import PageIllustrator, ProgressCallback
from ..modules.text_generator import TextGenerator
from ..modules.image_generator import ImageGenerator

logger = logging.getLogger(__name__)


class StoryGenerationError(Exception):
    """The text model could not produce a response."""


class PipelineStage(str, Enum):
    BUILT = "built"
    GENERATED = "generated"
    PARSED = "parsed"
    FALLEN_BACK = "fallen_back"
    ILLUSTRATED = "illustrated"
    DONE = "done"


@dataclass
class PipelineResult:
    """Final story plus a record of how it was produced."""

    story: GeneratedStory
    stages: list[PipelineStage] = field(default_factory=list)
    parse_failure: Optional[ParseFailure] = None

    @property
    def used_fallback(self) -> bool:
        return self.parse_failure is not None


class StoryPipeline:
    """
    Generate a complete illustrated story.

    Args:
        text_generator: Collaborator that returns raw text for a prompt
        image_generator: Collaborator that returns one image URL per page
        temperature: Sampling temperature for the text model
        max_concurrent_images: Upper bound on image requests in flight
    """

    def __init__(
        self,
        text_generator: TextGenerator,
        image_generator: ImageGenerator,
        temperature: float = STORY_DEFAULTS["temperature"],
        max_concurrent_images: Optional[int] = None,
    ):
        self.text_generator = text_generator
        self.prompt_builder = PromptBuilder()
        self.parser = ResponseParser()
        self.fallback = FallbackSynthesizer()
        self.illustrator = PageIllustrator(
            image_generator,
            max_concurrent=max_concurrent_images or IMAGE_CONSTANTS["max_concurrent_requests"],
        )
        self.temperature = temperature

    def _log_stage(self, story_id: Optional[str], stage: PipelineStage, started: float) -> None:
        logger.info(
            f"Stage completed: {stage.value}",
            extra={
                "story_id": story_id,
                "stage": stage.value,
                "duration": round(time.monotonic() - started, 2),
            },
        )

    async def run(
        self,
        request: StoryRequest,
        story_id: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PipelineResult:
        """
        Run the pipeline for one request.

        Args:
            request: A validated story request
            story_id: Optional ID used to correlate log lines
            on_progress: Optional callback(stage, detail, completed, total)

        Returns:
            PipelineResult whose story satisfies the page count and has
            an image URL on every page

        Raises:
            StoryGenerationError: If the text model call fails
        """
        stages = []

        started = time.monotonic()
        prompt = self.prompt_builder.build(request)
        stages.append(PipelineStage.BUILT)
        self._log_stage(story_id, PipelineStage.BUILT, started)

        if on_progress:
            on_progress("story", "Writing your story...", 0, 1)

        started = time.monotonic()
        try:
            text = await self.text_generator.generate(
                prompt.system_text, prompt.prompt_text, self.temperature
            )
        except Exception as e:
            raise StoryGenerationError(f"Text generation failed: {e}") from e
        stages.append(PipelineStage.GENERATED)
        self._log_stage(story_id, PipelineStage.GENERATED, started)

        started = time.monotonic()
        parsed = self.parser.parse(text, request, prompt.page_count)
        parse_failure = None
        if isinstance(parsed, ParseFailure):
            parse_failure = parsed
            logger.warning(
                f"Could not parse story response ({parsed.reason.value}): {parsed.detail}; "
                f"using fallback story",
                extra={"story_id": story_id, "stage": PipelineStage.FALLEN_BACK.value},
            )
            story = self.fallback.synthesize(request, get_length_profile(request.story_length))
            stages.append(PipelineStage.FALLEN_BACK)
            self._log_stage(story_id, PipelineStage.FALLEN_BACK, started)
        else:
            story = parsed
            stages.append(PipelineStage.PARSED)
            self._log_stage(story_id, PipelineStage.PARSED, started)

        if on_progress:
            on_progress("story", f"Story complete: {story.title}", 1, 1)

        started = time.monotonic()
        story.pages = await self.illustrator.illustrate_story(
            story.pages,
            art_style=art_style(request),
            character_sheet=story.character_sheet,
            reference_image=request.uploaded_image,
            on_progress=on_progress,
        )
        stages.append(PipelineStage.ILLUSTRATED)
        self._log_stage(story_id, PipelineStage.ILLUSTRATED, started)

        stages.append(PipelineStage.DONE)
        return PipelineResult(story=story, stages=stages, parse_failure=parse_failure)
