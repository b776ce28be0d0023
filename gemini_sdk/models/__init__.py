"""Data models for the SDK."""

from .catalog import DEFAULT_CATALOG, ModelCatalog
from .content import (
    IMAGE_MIME_TYPES,
    VIDEO_MIME_TYPES,
    Content,
    ImageContent,
    MultiPartContent,
    TextContent,
    VideoContent,
    content_from_json,
    content_from_parts,
    content_to_json,
    content_to_parts,
)
from .request import (
    FileData,
    GenerateContentRequest,
    GenerationConfig,
    ImageConfig,
    InlineData,
    Part,
    SafetySetting,
    WireContent,
)
from .response import (
    Candidate,
    ErrorDetail,
    ErrorResponse,
    GeminiResponse,
    PromptFeedback,
    SafetyRating,
    UsageMetadata,
)

__all__ = [
    "DEFAULT_CATALOG",
    "ModelCatalog",
    "IMAGE_MIME_TYPES",
    "VIDEO_MIME_TYPES",
    "Content",
    "ImageContent",
    "MultiPartContent",
    "TextContent",
    "VideoContent",
    "content_from_json",
    "content_from_parts",
    "content_to_json",
    "content_to_parts",
    "FileData",
    "GenerateContentRequest",
    "GenerationConfig",
    "ImageConfig",
    "InlineData",
    "Part",
    "SafetySetting",
    "WireContent",
    "Candidate",
    "ErrorDetail",
    "ErrorResponse",
    "GeminiResponse",
    "PromptFeedback",
    "SafetyRating",
    "UsageMetadata",
]
