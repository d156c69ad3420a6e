"""FastAPI application for the Storybook Generator."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storybook.config import get_inference_model_name
from . import config
from .logging import configure_logging
from .routes import images, stories

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    configure_logging(
        json_format=config.LOG_FORMAT == "json",
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    )

    config.STORIES_DIR.mkdir(parents=True, exist_ok=True)
    config.IMAGES_DIR.mkdir(parents=True, exist_ok=True)
    logger.info(f"Data directory ready at {config.DATA_DIR}")
    logger.info(f"Text model: {get_inference_model_name()}")

    yield


app = FastAPI(
    title="Storybook Generator API",
    description="""
Generate personalized, illustrated children's storybooks.

## Features
- **Personalized Stories**: The child's name, a main character, setting, theme and moral
- **Length Tiers**: short (6 pages), medium (12 pages), long (20 pages)
- **Reading Levels**: beginner, intermediate, advanced vocabulary
- **Illustrations**: One image per page; failed pages get a descriptive placeholder
- **Educational Companion**: Key vocabulary, discussion questions and an activity idea

## Workflow
1. POST `/stories/generate` with the story details
2. The response contains the complete story with an image URL on every page
3. Fetch it again later with GET `/stories/{id}`
    """,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(stories.router, prefix="/stories", tags=["Stories"])
app.include_router(images.router, prefix=config.IMAGES_URL_PREFIX, tags=["Images"])


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
