"""High-level client tying configuration, transport and handlers together."""

from collections.abc import AsyncIterator, Sequence

from loguru import logger

from gemini_sdk import __version__
from gemini_sdk.config import GeminiConfig
from gemini_sdk.exceptions import GeminiValidationError
from gemini_sdk.handlers import ImageHandler, MultiModalHandler, TextHandler
from gemini_sdk.handlers.base import BaseContentHandler
from gemini_sdk.log import setup_logging
from gemini_sdk.models.catalog import DEFAULT_CATALOG, ModelCatalog
from gemini_sdk.models.content import Content, ImageContent, MultiPartContent, VideoContent
from gemini_sdk.models.conversation import ConversationContext
from gemini_sdk.models.request import GenerationConfig
from gemini_sdk.models.response import GeminiResponse
from gemini_sdk.services.cache import ResponseCache
from gemini_sdk.services.provider import GeminiProvider
from gemini_sdk.services.transport import CurlTransport, Transport


class GeminiClient:
    """Entry point for text, image and multimodal generation.

    Example::

        async with GeminiClient(GeminiConfig(api_key="...")) as client:
            response = await client.generate_content("Write a haiku")
            print(response.text)
    """

    def __init__(
        self,
        config: GeminiConfig | None = None,
        *,
        transport: Transport | None = None,
        catalog: ModelCatalog = DEFAULT_CATALOG,
    ):
        self.config = config or GeminiConfig()
        self.catalog = catalog

        self._log_handler_id = None
        if self.config.enable_logging:
            self._log_handler_id = setup_logging(self.config.log_level)

        self.transport = transport or CurlTransport(self.config)
        self.cache = (
            ResponseCache(self.config.cache)
            if self.config.cache is not None and self.config.cache.enabled
            else None
        )
        self.provider = GeminiProvider(self.transport, self.config, self.cache)

        self.text = TextHandler(self.provider, catalog.text_model)
        self.image = ImageHandler(
            self.provider,
            catalog.image_model,
            generation_model=catalog.image_generation_model,
            generation_api_version=catalog.image_generation_api_version,
        )
        self.multimodal = MultiModalHandler(self.provider, catalog.multimodal_model)

        logger.info(f"Gemini SDK v{__version__} ready")
        logger.info(f"Base URL: {self.config.base_url} ({self.config.api_version})")
        logger.info(f"Timeout: {self.config.timeout}s, max retries: {self.config.max_retries}")
        logger.info(f"Cache: {'enabled' if self.cache else 'disabled'}")

    async def generate_content(
        self,
        prompt: str,
        *,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        return await self.text.generate_content(prompt, config=config, context=context)

    def generate_content_stream(
        self,
        prompt: str,
        *,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> AsyncIterator[GeminiResponse]:
        return self.text.generate_content_stream(prompt, config=config, context=context)

    async def generate_from_content(
        self,
        contents: Sequence[Content],
        *,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        """Generate from mixed content, routed to the handler that fits it."""
        handler = self._handler_for(contents)
        return await handler.generate_from_content(contents, config=config, context=context)

    def generate_from_content_stream(
        self,
        contents: Sequence[Content],
        *,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> AsyncIterator[GeminiResponse]:
        handler = self._handler_for(contents)
        return handler.generate_from_content_stream(contents, config=config, context=context)

    async def analyze_image(
        self,
        image_data: bytes,
        mime_type: str,
        *,
        prompt: str | None = None,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        return await self.image.analyze_image(
            image_data, mime_type, prompt=prompt, config=config, context=context
        )

    async def generate_image(
        self,
        prompt: str,
        *,
        aspect_ratio: str | None = None,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        return await self.image.generate_image(
            prompt, aspect_ratio=aspect_ratio, config=config, context=context
        )

    async def create_multimodal_prompt(
        self,
        *,
        text: str | None = None,
        images: Sequence[ImageContent] | None = None,
        videos: Sequence[VideoContent] | None = None,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        return await self.multimodal.create_prompt(
            text=text, images=images, videos=videos, config=config, context=context
        )

    def _handler_for(self, contents: Sequence[Content]) -> BaseContentHandler:
        if not contents:
            raise GeminiValidationError(
                "Contents cannot be empty",
                {"contents": "At least one content item is required"},
            )
        if any(isinstance(c, VideoContent) for c in contents):
            return self.multimodal
        if any(isinstance(c, (ImageContent, MultiPartContent)) for c in contents):
            return self.image
        return self.text

    async def close(self) -> None:
        """Release the transport and detach the log sink added by this client."""
        await self.transport.close()
        if self._log_handler_id is not None:
            logger.remove(self._log_handler_id)
            self._log_handler_id = None
        logger.info("Gemini client closed")

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
