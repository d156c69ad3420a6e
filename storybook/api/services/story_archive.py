"""File-based archive for generated stories.

Each story is written to <stories_dir>/<story_id>/story.json together with
the request that produced it.
"""

import asyncio
import json
import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from storybook.core.types import GeneratedStory, StoryRequest


def _is_valid_story_id(story_id: str) -> bool:
    try:
        uuid.UUID(story_id)
    except ValueError:
        return False
    return True


class StoryArchive:
    """Persist and load generated stories as JSON files."""

    def __init__(self, stories_dir: Path):
        self.stories_dir = Path(stories_dir)

    def _story_path(self, story_id: str) -> Path:
        return self.stories_dir / story_id / "story.json"

    def _write(self, story_id: str, record: dict) -> Path:
        path = self._story_path(story_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(record, indent=2))
        return path

    def _read(self, story_id: str) -> Optional[dict]:
        path = self._story_path(story_id)
        if not path.exists():
            return None
        return json.loads(path.read_text())

    async def save(self, story_id: str, request: StoryRequest, story: GeneratedStory) -> Path:
        """
        Archive a story and the request that produced it.

        The uploaded reference image is not stored.

        Returns:
            Path of the written JSON file
        """
        request_data = asdict(request)
        request_data.pop("uploaded_image", None)

        record = {
            "id": story_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "request": request_data,
            "story": story.to_dict(),
        }
        return await asyncio.to_thread(self._write, story_id, record)

    async def load(self, story_id: str) -> Optional[dict]:
        """Load an archived story record, or None if it does not exist."""
        if not _is_valid_story_id(story_id):
            return None
        return await asyncio.to_thread(self._read, story_id)
