"""Generation from text, images and videos combined."""

from collections.abc import AsyncIterator, Sequence

from gemini_sdk.exceptions import GeminiValidationError
from gemini_sdk.handlers.base import BaseContentHandler, optional_prompt
from gemini_sdk.models.content import Content, ImageContent, TextContent, VideoContent
from gemini_sdk.models.conversation import ConversationContext
from gemini_sdk.models.request import GenerationConfig
from gemini_sdk.models.response import GeminiResponse


class MultiModalHandler(BaseContentHandler):
    """Handler for mixed-media prompts."""

    async def generate_content(
        self,
        contents: Sequence[Content],
        *,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        return await self.generate_from_content(contents, config=config, context=context)

    def generate_content_stream(
        self,
        contents: Sequence[Content],
        *,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> AsyncIterator[GeminiResponse]:
        return self.generate_from_content_stream(contents, config=config, context=context)

    async def create_prompt(
        self,
        *,
        text: str | None = None,
        images: Sequence[ImageContent] | None = None,
        videos: Sequence[VideoContent] | None = None,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        """Build a prompt from optional text, images and videos, in that order."""
        contents = self._build_contents(text, images, videos)
        return await self.generate_from_content(contents, config=config, context=context)

    async def analyze_media(
        self,
        analysis_prompt: str,
        *,
        images: Sequence[ImageContent] | None = None,
        videos: Sequence[VideoContent] | None = None,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        """Analyze several media items together."""
        if not images and not videos:
            raise GeminiValidationError(
                "At least one media file must be provided for analysis",
                {"media": "Images or videos must be provided"},
            )
        return await self.create_prompt(
            text=analysis_prompt,
            images=images,
            videos=videos,
            config=config,
            context=context,
        )

    async def conversation_with_media(
        self,
        context: ConversationContext,
        *,
        text: str | None = None,
        images: Sequence[ImageContent] | None = None,
        videos: Sequence[VideoContent] | None = None,
        config: GenerationConfig | dict | None = None,
    ) -> GeminiResponse:
        return await self.create_prompt(
            text=text, images=images, videos=videos, config=config, context=context
        )

    @staticmethod
    def _build_contents(
        text: str | None,
        images: Sequence[ImageContent] | None,
        videos: Sequence[VideoContent] | None,
    ) -> list[Content]:
        contents: list[Content] = []
        prompt = optional_prompt(text, "text")
        if prompt is not None:
            contents.append(TextContent(text=prompt))

        for image in images or ():
            if not isinstance(image, ImageContent):
                raise GeminiValidationError(
                    f"Expected ImageContent, got {type(image).__name__}",
                    {"images": "Every item must be an ImageContent"},
                )
            contents.append(image)

        for video in videos or ():
            if not isinstance(video, VideoContent):
                raise GeminiValidationError(
                    f"Expected VideoContent, got {type(video).__name__}",
                    {"videos": "Every item must be a VideoContent"},
                )
            contents.append(video)

        if not contents:
            raise GeminiValidationError(
                "At least one content type must be provided",
                {"content": "Text or media must be provided"},
            )
        return contents
