import pytest
from loguru import logger

from gemini_sdk import GeminiClient, setup_logging
from gemini_sdk.config import CacheConfig, GeminiConfig
from gemini_sdk.exceptions import GeminiValidationError
from gemini_sdk.models.catalog import ModelCatalog
from gemini_sdk.models.content import (
    ImageContent,
    MultiPartContent,
    TextContent,
    VideoContent,
    content_from_parts,
)
from gemini_sdk.models.request import FileData, Part

from tests.helpers import PNG_BYTES, FakeTransport, image_payload, text_payload

VIDEO_URI = "https://generativelanguage.googleapis.com/v1beta/files/clip"


@pytest.fixture
def client(config, transport) -> GeminiClient:
    return GeminiClient(config, transport=transport)


def _model_of(transport: FakeTransport) -> str:
    path = transport.calls[-1][1]
    return path.split("/models/")[1].split(":")[0]


class TestRouting:
    @pytest.mark.asyncio
    async def test_text_goes_to_text_model(self, client, transport):
        transport.post_results = [text_payload("ok")]

        await client.generate_from_content([TextContent(text="Hello")])

        assert _model_of(transport) == client.catalog.text_model

    @pytest.mark.asyncio
    async def test_images_go_to_image_model(self, transport, config):
        catalog = ModelCatalog(text_model="text-m", image_model="image-m", multimodal_model="multi-m")
        client = GeminiClient(config, transport=transport, catalog=catalog)
        transport.post_results = [text_payload("ok")]

        await client.generate_from_content(
            [TextContent(text="What?"), ImageContent(data=PNG_BYTES, mimeType="image/png")]
        )

        assert _model_of(transport) == "image-m"

    @pytest.mark.asyncio
    async def test_multipart_goes_to_image_model(self, transport, config):
        catalog = ModelCatalog(text_model="text-m", image_model="image-m")
        client = GeminiClient(config, transport=transport, catalog=catalog)
        transport.post_results = [text_payload("ok")]
        multipart = MultiPartContent(
            text="edit this", images=(ImageContent(data=PNG_BYTES, mimeType="image/png"),)
        )

        await client.generate_from_content([multipart])

        assert _model_of(transport) == "image-m"

    @pytest.mark.asyncio
    async def test_video_goes_to_multimodal_model(self, transport, config):
        catalog = ModelCatalog(image_model="image-m", multimodal_model="multi-m")
        client = GeminiClient(config, transport=transport, catalog=catalog)
        transport.post_results = [text_payload("ok")]

        await client.generate_from_content(
            [
                ImageContent(data=PNG_BYTES, mimeType="image/png"),
                VideoContent(fileUri=VIDEO_URI, mimeType="video/mp4"),
            ]
        )

        assert _model_of(transport) == "multi-m"

    def test_empty_contents_rejected(self, client, transport):
        with pytest.raises(GeminiValidationError):
            client.generate_from_content_stream([])
        assert transport.calls == []


class TestConvenienceMethods:
    @pytest.mark.asyncio
    async def test_generate_content(self, client, transport):
        transport.post_results = [text_payload("Hello back")]
        response = await client.generate_content("Hello")
        assert response.text == "Hello back"

    @pytest.mark.asyncio
    async def test_generate_content_stream(self, client, transport):
        transport.stream_results = [[text_payload("a"), text_payload("b")]]
        texts = [f.text async for f in client.generate_content_stream("Hello")]
        assert texts == ["a", "b"]

    @pytest.mark.asyncio
    async def test_analyze_image(self, client, transport):
        transport.post_results = [text_payload("A pixel")]
        response = await client.analyze_image(PNG_BYTES, "image/png", prompt="Describe")
        assert response.text == "A pixel"
        assert _model_of(transport) == client.catalog.image_model

    @pytest.mark.asyncio
    async def test_generate_image(self, client, transport):
        transport.post_results = [image_payload("Done")]

        response = await client.generate_image("A red square", aspect_ratio="1:1")

        assert response.has_images
        assert transport.calls[0][1].startswith("v1beta/")
        assert _model_of(transport) == client.catalog.image_generation_model

    @pytest.mark.asyncio
    async def test_create_multimodal_prompt(self, client, transport):
        transport.post_results = [text_payload("A clip")]

        await client.create_multimodal_prompt(
            text="Summarize", videos=[VideoContent(fileUri=VIDEO_URI, mimeType="video/mp4")]
        )

        assert _model_of(transport) == client.catalog.multimodal_model


class TestLifecycle:
    def test_cache_only_when_configured(self, transport):
        plain = GeminiClient(GeminiConfig(_env_file=None), transport=transport)
        cached = GeminiClient(GeminiConfig(_env_file=None, cache=CacheConfig()), transport=transport)
        disabled = GeminiClient(
            GeminiConfig(_env_file=None, cache=CacheConfig(enabled=False)), transport=transport
        )

        assert plain.cache is None
        assert cached.provider.cache is cached.cache is not None
        assert disabled.cache is None

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self, config, transport):
        async with GeminiClient(config, transport=transport) as client:
            assert client.transport is transport
        assert transport.closed

    @pytest.mark.asyncio
    async def test_close_detaches_log_sink(self, transport):
        config = GeminiConfig(_env_file=None, enable_logging=True, log_level="WARNING")
        client = GeminiClient(config, transport=transport)
        handler_id = client._log_handler_id
        assert handler_id is not None

        await client.close()

        assert client._log_handler_id is None
        with pytest.raises(ValueError):
            logger.remove(handler_id)


def test_setup_logging_routes_sdk_records():
    messages: list[str] = []
    handler_id = setup_logging("DEBUG", sink=messages.append)
    try:
        content_from_parts(
            [Part(fileData=FileData(mimeType="application/pdf", fileUri=VIDEO_URI))]
        )
    finally:
        logger.remove(handler_id)

    assert any("Ignoring file part with MIME type application/pdf" in m for m in messages)
