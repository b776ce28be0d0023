"""Shared plumbing for the capability handlers."""

from collections.abc import AsyncIterator, Sequence
from typing import TypeVar

from pydantic import ValidationError
from typing_extensions import assert_never

from gemini_sdk.exceptions import (
    GeminiValidationError,
    UnsupportedContentError,
)
from gemini_sdk.models.content import (
    Content,
    ImageContent,
    MultiPartContent,
    TextContent,
    VideoContent,
)
from gemini_sdk.models.conversation import ConversationContext
from gemini_sdk.models.request import GenerationConfig, SafetySetting
from gemini_sdk.models.response import GeminiResponse
from gemini_sdk.services.provider import GeminiProvider

_CONTENT_CLASSES = (TextContent, ImageContent, VideoContent, MultiPartContent)

C = TypeVar("C", TextContent, ImageContent, VideoContent, MultiPartContent)


def _field_errors(error: ValidationError, default: str) -> dict[str, str]:
    return {
        ".".join(str(loc) for loc in err["loc"]) or default: err["msg"]
        for err in error.errors()
    }


def make_content(content_cls: type[C], **fields) -> C:
    """Build a content item from caller input.

    Wrong types and malformed values surface as ``GeminiValidationError``.
    """
    try:
        return content_cls(**fields)
    except ValidationError as e:
        raise GeminiValidationError(
            f"Invalid {content_cls.__name__}",
            _field_errors(e, "content"),
            original_error=e,
        ) from e


def coerce_generation_config(
    config: GenerationConfig | dict | None,
) -> GenerationConfig | None:
    """Accept a config object or a plain dict; reject anything invalid."""
    if config is None or isinstance(config, GenerationConfig):
        return config
    if isinstance(config, dict):
        try:
            return GenerationConfig.model_validate(config)
        except ValidationError as e:
            raise GeminiValidationError(
                "Invalid generation config",
                _field_errors(e, "config"),
                original_error=e,
            ) from e
    raise GeminiValidationError(
        f"Unsupported generation config type: {type(config).__name__}",
        {"config": "Expected GenerationConfig or dict"},
    )


class BaseContentHandler:
    """Validates input, then hands the request to the provider."""

    def __init__(self, provider: GeminiProvider, model: str):
        self.provider = provider
        self.model = model

    async def generate_from_content(
        self,
        contents: Sequence[Content],
        *,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
        system_instruction: str | None = None,
        safety_settings: list[SafetySetting] | None = None,
    ) -> GeminiResponse:
        """Generate content from mixed content items."""
        items, generation_config = self._prepare(contents, config)
        return await self.provider.generate_content(
            self.model,
            items,
            generation_config=generation_config,
            context=context,
            system_instruction=system_instruction,
            safety_settings=safety_settings,
        )

    def generate_from_content_stream(
        self,
        contents: Sequence[Content],
        *,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
        system_instruction: str | None = None,
        safety_settings: list[SafetySetting] | None = None,
    ) -> AsyncIterator[GeminiResponse]:
        """Stream content generated from mixed content items.

        Input is validated here, before the stream is handed back.
        """
        items, generation_config = self._prepare(contents, config)
        return self.provider.stream_generate_content(
            self.model,
            items,
            generation_config=generation_config,
            context=context,
            system_instruction=system_instruction,
            safety_settings=safety_settings,
        )

    def _prepare(
        self,
        contents: Sequence[Content],
        config: GenerationConfig | dict | None,
    ) -> tuple[list[Content], GenerationConfig | None]:
        if not contents:
            raise GeminiValidationError(
                "Contents cannot be empty",
                {"contents": "At least one content item is required"},
            )
        self._validate_contents(contents)
        return list(contents), coerce_generation_config(config)

    def _validate_contents(self, contents: Sequence[Content]) -> None:
        for content in contents:
            if not isinstance(content, _CONTENT_CLASSES):
                raise UnsupportedContentError(
                    f"Unsupported content type: {type(content).__name__}"
                )
            if isinstance(content, TextContent) and content.is_truncated:
                raise GeminiValidationError(
                    "Text content cannot be empty", {"text": "Text is required"}
                )

    def content_statistics(self, contents: Sequence[Content]) -> dict[str, int]:
        """Counts and sizes of the content items in a request."""
        stats = {
            "text_count": 0,
            "image_count": 0,
            "video_count": 0,
            "total_size": 0,
            "total_text_length": 0,
        }
        for content in contents:
            if isinstance(content, TextContent):
                stats["text_count"] += 1
                stats["total_text_length"] += len(content.text)
            elif isinstance(content, ImageContent):
                stats["image_count"] += 1
                stats["total_size"] += content.size
            elif isinstance(content, VideoContent):
                stats["video_count"] += 1
            elif isinstance(content, MultiPartContent):
                stats["text_count"] += 1
                stats["total_text_length"] += len(content.text)
                stats["image_count"] += len(content.images)
                stats["total_size"] += sum(image.size for image in content.images)
            else:
                assert_never(content)
        return stats


def require_prompt(prompt: str | None, field: str = "prompt") -> str:
    """Return the prompt, or raise if it is missing or blank."""
    if optional_prompt(prompt, field) is None:
        raise GeminiValidationError(
            "Prompt cannot be empty",
            {field: "Prompt is required and cannot be empty"},
        )
    return prompt


def optional_prompt(prompt: str | None, field: str = "prompt") -> str | None:
    """Stripped prompt, or ``None`` when it is missing or blank."""
    if prompt is None:
        return None
    if not isinstance(prompt, str):
        raise GeminiValidationError(
            f"Prompt must be a string, got {type(prompt).__name__}",
            {field: "Prompt must be a string"},
        )
    return prompt.strip() or None
