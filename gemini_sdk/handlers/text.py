"""Text generation."""

from collections.abc import AsyncIterator

from gemini_sdk.handlers.base import BaseContentHandler, require_prompt
from gemini_sdk.models.content import TextContent
from gemini_sdk.models.conversation import ConversationContext
from gemini_sdk.models.request import GenerationConfig
from gemini_sdk.models.response import GeminiResponse


class TextHandler(BaseContentHandler):
    """Handler for text prompts."""

    async def generate_content(
        self,
        prompt: str,
        *,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        """Generate content from a simple text prompt."""
        prompt = require_prompt(prompt)
        return await self.generate_from_content(
            [TextContent(text=prompt)], config=config, context=context
        )

    def generate_content_stream(
        self,
        prompt: str,
        *,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> AsyncIterator[GeminiResponse]:
        prompt = require_prompt(prompt)
        return self.generate_from_content_stream(
            [TextContent(text=prompt)], config=config, context=context
        )

    async def generate_with_context(
        self,
        context: ConversationContext,
        prompt: str,
        *,
        config: GenerationConfig | dict | None = None,
    ) -> GeminiResponse:
        """Continue ``context`` with a new user prompt."""
        return await self.generate_content(prompt, config=config, context=context)

    def generate_stream_with_context(
        self,
        context: ConversationContext,
        prompt: str,
        *,
        config: GenerationConfig | dict | None = None,
    ) -> AsyncIterator[GeminiResponse]:
        return self.generate_content_stream(prompt, config=config, context=context)
