"""Unit tests for GeminiImageGenerator with a mocked API client."""

import base64
from io import BytesIO
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from PIL import Image

from storybook.core.modules.image_generator import GeminiImageGenerator, decode_reference_image
from storybook.core.modules.page_illustrator import PageIllustrator
from storybook.core.types import ImageRequest, StoryPage


# =============================================================================
# Fixtures
# =============================================================================


def png_base64() -> str:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color="red").save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode()


@pytest.fixture
def mock_image_client():
    """Mock Google genai client that returns a fake image."""
    client = MagicMock()

    fake_part = MagicMock()
    fake_part.inline_data = MagicMock()
    fake_part.inline_data.data = b"generated image bytes"

    fake_response = MagicMock()
    fake_response.candidates = [MagicMock()]
    fake_response.candidates[0].content.parts = [fake_part]

    client.aio.models.generate_content = AsyncMock(return_value=fake_response)
    return client


@pytest.fixture
def generator(mock_image_client, tmp_path):
    with patch(
        "storybook.core.modules.image_generator.get_image_client",
        return_value=mock_image_client,
    ), patch(
        "storybook.core.modules.image_generator.get_image_config",
        return_value=MagicMock(),
    ):
        yield GeminiImageGenerator(images_dir=tmp_path / "images", url_prefix="/images/")


# =============================================================================
# Tests
# =============================================================================


class TestDecodeReferenceImage:

    def test_plain_base64(self):
        image = decode_reference_image(png_base64())
        assert image.size == (4, 4)

    def test_data_url(self):
        image = decode_reference_image(f"data:image/png;base64,{png_base64()}")
        assert image.size == (4, 4)

    @pytest.mark.parametrize("data", [None, "", "not base64 at all!!", base64.b64encode(b"text").decode()])
    def test_unreadable_returns_none(self, data):
        assert decode_reference_image(data) is None


class TestGenerate:

    @pytest.mark.asyncio
    async def test_saves_image_and_returns_url(self, generator, tmp_path):
        url = await generator.generate(ImageRequest(prompt="A fox in a forest", page_number=3))

        assert url.startswith("/images/page_03_")
        assert url.endswith(".png")
        filename = url.rsplit("/", 1)[1]
        assert (tmp_path / "images" / filename).read_bytes() == b"generated image bytes"

    @pytest.mark.asyncio
    async def test_prompt_includes_scene_and_character(self, generator, mock_image_client):
        await generator.generate(ImageRequest(
            prompt="A fox in a forest",
            style="watercolor",
            character_sheet="Character Appearance: a red fox",
            page_number=1,
        ))

        kwargs = mock_image_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash-image"
        contents = kwargs["contents"]
        assert len(contents) == 1
        assert "A fox in a forest" in contents[0]
        assert "Character Appearance: a red fox" in contents[0]
        assert "STYLE: watercolor" in contents[0]

    @pytest.mark.asyncio
    async def test_reference_image_is_sent_first(self, generator, mock_image_client):
        await generator.generate(ImageRequest(
            prompt="A fox", reference_image=png_base64(), page_number=1,
        ))

        contents = mock_image_client.aio.models.generate_content.call_args.kwargs["contents"]
        assert isinstance(contents[0], Image.Image)
        assert "INSPIRATION IMAGE" in contents[1]
        assert "A fox" in contents[2]

    @pytest.mark.asyncio
    async def test_no_image_in_response_raises(self, generator, mock_image_client):
        empty = MagicMock()
        empty.candidates = []
        mock_image_client.aio.models.generate_content = AsyncMock(return_value=empty)

        with pytest.raises(ValueError, match="No candidates"):
            await generator.generate(ImageRequest(prompt="A fox", page_number=1))

    @pytest.mark.asyncio
    async def test_api_error_propagates(self, generator, mock_image_client):
        mock_image_client.aio.models.generate_content = AsyncMock(
            side_effect=RuntimeError("quota exceeded")
        )

        with pytest.raises(RuntimeError, match="quota exceeded"):
            await generator.generate(ImageRequest(prompt="A fox", page_number=1))


class TestConstruction:

    def test_missing_api_key(self, monkeypatch, tmp_path):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

        with pytest.raises(ValueError, match="GOOGLE_API_KEY"):
            GeminiImageGenerator(images_dir=tmp_path)


class TestReferenceImageHandling:

    def test_oversized_image_is_ignored(self, monkeypatch):
        # 4x4 = 16 pixels is more than twice the lowered limit
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 4)

        assert decode_reference_image(png_base64()) is None

    @pytest.mark.asyncio
    async def test_oversized_image_still_illustrates_page(self, generator, mock_image_client, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 4)

        url = await generator.generate(ImageRequest(
            prompt="A fox", reference_image=png_base64(), page_number=1,
        ))

        assert url.startswith("/images/page_01_")
        contents = mock_image_client.aio.models.generate_content.call_args.kwargs["contents"]
        assert len(contents) == 1

    @pytest.mark.asyncio
    async def test_reference_decoded_once_per_story(self, generator, mock_image_client):
        pages = [
            StoryPage(page_number=n, content="text", image_prompt=f"scene {n}")
            for n in range(1, 21)
        ]
        illustrator = PageIllustrator(generator)

        with patch(
            "storybook.core.modules.image_generator.decode_reference_image",
            wraps=decode_reference_image,
        ) as decode:
            result = await illustrator.illustrate_story(
                pages, art_style="cartoon", reference_image=png_base64()
            )

        assert decode.call_count == 1
        assert all(page.image_url.startswith("/images/") for page in result)
        for call in mock_image_client.aio.models.generate_content.call_args_list:
            assert isinstance(call.kwargs["contents"][0], Image.Image)

    @pytest.mark.asyncio
    async def test_new_upload_is_decoded_again(self, generator):
        with patch(
            "storybook.core.modules.image_generator.decode_reference_image",
            wraps=decode_reference_image,
        ) as decode:
            await generator.generate(ImageRequest(prompt="A", reference_image=png_base64(), page_number=1))
            await generator.generate(ImageRequest(prompt="B", reference_image=f"data:image/png;base64,{png_base64()}", page_number=1))

        assert decode.call_count == 2
