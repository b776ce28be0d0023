"""Execution pipeline for generateContent and streamGenerateContent."""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing
from typing import TypeVar

from loguru import logger

from gemini_sdk.config import GeminiConfig
from gemini_sdk.exceptions import RETRYABLE_ERRORS, GeminiError, GeminiRateLimitError
from gemini_sdk.models.content import (
    Content,
    ImageContent,
    MultiPartContent,
    TextContent,
    content_images,
    content_text,
    content_to_parts,
)
from gemini_sdk.models.conversation import ConversationContext
from gemini_sdk.models.request import (
    GenerateContentRequest,
    GenerationConfig,
    Part,
    SafetySetting,
    WireContent,
)
from gemini_sdk.models.response import GeminiResponse
from gemini_sdk.services.cache import ResponseCache
from gemini_sdk.services.errors import translate_exception
from gemini_sdk.services.transport import Transport

T = TypeVar("T")


class GeminiProvider:
    """Builds requests, runs them with retries and decodes the responses.

    Shared by the text, image and multimodal handlers. When a
    ``ConversationContext`` is passed, the user turn and the model turn are
    appended to it once the call has fully succeeded.
    """

    def __init__(
        self,
        transport: Transport,
        config: GeminiConfig,
        cache: ResponseCache | None = None,
    ):
        self.transport = transport
        self.config = config
        self.cache = cache

    def build_request_body(
        self,
        contents: list[Content],
        generation_config: GenerationConfig | None = None,
        context: ConversationContext | None = None,
        system_instruction: str | None = None,
        safety_settings: list[SafetySetting] | None = None,
    ) -> dict:
        """Build the JSON body for a generation request.

        Prior turns from ``context`` come first, in order, followed by a single
        user turn holding one part per content item.
        """
        parts = [part for content in contents for part in content_to_parts(content)]

        if context is not None and not context.is_empty:
            wire_contents = context.to_wire_contents()
            wire_contents.append(WireContent(role="user", parts=parts))
        else:
            wire_contents = [WireContent(parts=parts)]

        request = GenerateContentRequest(
            contents=wire_contents,
            generationConfig=generation_config,
            safetySettings=safety_settings,
            systemInstruction=(
                WireContent(parts=[Part(text=system_instruction)])
                if system_instruction
                else None
            ),
        )
        return request.model_dump(exclude_none=True)

    def _path(self, model: str, method: str, api_version: str | None) -> str:
        version = api_version or self.config.api_version
        return f"{version}/models/{model}:{method}"

    async def generate_content(
        self,
        model: str,
        contents: list[Content],
        *,
        generation_config: GenerationConfig | None = None,
        context: ConversationContext | None = None,
        system_instruction: str | None = None,
        safety_settings: list[SafetySetting] | None = None,
        api_version: str | None = None,
    ) -> GeminiResponse:
        """
        Generate content in a single request.

        Args:
            model: Model name to use for generation
            contents: Content items of the new user turn
            generation_config: Optional generation parameters
            context: Conversation to prepend and then extend

        Returns:
            The decoded response

        Raises:
            GeminiError: the categorized failure, after retries where allowed
        """
        body = self.build_request_body(
            contents, generation_config, context, system_instruction, safety_settings
        )
        path = self._path(model, "generateContent", api_version)

        cache_key = None
        response = None
        if self.cache is not None:
            cache_key = self.cache.fingerprint(path, body)
            response = await self.cache.get(cache_key)
            if response is not None:
                logger.debug(f"Cache hit for {path}")

        if response is None:
            payload = await self._execute_with_retry(
                lambda: self.transport.post(path, body), path
            )
            response = GeminiResponse.from_json(payload)
            if cache_key is not None:
                await self.cache.put(cache_key, response)

        if context is not None:
            context.add_user_content(contents)
            context.add_model_response(response)

        return response

    async def stream_generate_content(
        self,
        model: str,
        contents: list[Content],
        *,
        generation_config: GenerationConfig | None = None,
        context: ConversationContext | None = None,
        system_instruction: str | None = None,
        safety_settings: list[SafetySetting] | None = None,
        api_version: str | None = None,
    ) -> AsyncIterator[GeminiResponse]:
        """Yield response fragments as they arrive.

        Opening the stream is retried like a single request, but once a
        fragment has been delivered any failure is raised to the caller.
        The context receives one model turn, built from all fragments,
        only after the stream has ended.
        """
        body = self.build_request_body(
            contents, generation_config, context, system_instruction, safety_settings
        )
        path = self._path(model, "streamGenerateContent", api_version)

        texts: list[str] = []
        images: list[ImageContent] = []
        fragments = 0
        attempt = 0

        while True:
            attempt += 1
            try:
                async with aclosing(self.transport.post_stream(path, body)) as stream:
                    async for payload in stream:
                        fragment = GeminiResponse.from_json(payload)
                        if fragment.candidates:
                            primary = fragment.candidates[0].content
                            texts.append(content_text(primary) or "")
                            images.extend(content_images(primary))
                        fragments += 1
                        yield fragment
                break
            except Exception as e:
                error = translate_exception(e)
                if fragments or not self._should_retry(error, attempt):
                    logger.error(f"Stream {path} failed after {attempt} attempt(s): {error}")
                    raise error from error.original_error

                delay = self._retry_delay(error, attempt)
                logger.warning(
                    f"Stream failed to open, retrying in {delay:.2f}s "
                    f"({attempt}/{self.config.max_retries}): {error}"
                )
                await asyncio.sleep(delay)

        logger.debug(f"Stream {path} finished after {fragments} fragment(s)")

        if context is not None and fragments:
            context.add_user_content(contents)
            context.add_model_content(_merge_fragments(texts, images))

    async def _execute_with_retry(
        self, operation: Callable[[], Awaitable[T]], description: str
    ) -> T:
        """Run ``operation`` until it succeeds or a non-retryable error occurs."""
        attempt = 0
        while True:
            attempt += 1
            try:
                return await operation()
            except Exception as e:
                error = translate_exception(e)
                if not self._should_retry(error, attempt):
                    logger.error(f"{description} failed after {attempt} attempt(s): {error}")
                    raise error from error.original_error

                delay = self._retry_delay(error, attempt)
                logger.warning(
                    f"Request failed, retrying in {delay:.2f}s "
                    f"({attempt}/{self.config.max_retries}): {error}"
                )
                await asyncio.sleep(delay)

    def _should_retry(self, error: GeminiError, attempt: int) -> bool:
        if attempt >= self.config.max_attempts:
            return False
        return isinstance(error, RETRYABLE_ERRORS)

    def _retry_delay(self, error: GeminiError, attempt: int) -> float:
        if isinstance(error, GeminiRateLimitError):
            return min(error.retry_after, self.config.retry_max_delay)
        return self.config.backoff_delay(attempt)


def _merge_fragments(texts: list[str], images: list[ImageContent]) -> Content:
    text = "".join(texts)
    if images:
        return MultiPartContent(text=text, images=tuple(images))
    if text:
        return TextContent(text=text)
    return TextContent.truncated()
