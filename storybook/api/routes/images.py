"""Generated illustration endpoints."""

from pathlib import Path

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

from .. import config

router = APIRouter()


@router.get(
    "/{filename}",
    summary="Get page illustration",
    description="Get a generated page illustration by file name.",
    responses={
        200: {"content": {"image/png": {}}},
        404: {"description": "Image not found"},
    },
)
async def get_image(filename: str):
    """Get a page illustration image."""
    # Only bare file names inside IMAGES_DIR
    if Path(filename).name != filename or not filename.endswith(".png"):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Image {filename} not found",
        )

    image_path = config.IMAGES_DIR / filename
    if not image_path.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Image {filename} not found",
        )

    return FileResponse(image_path, media_type="image/png")
