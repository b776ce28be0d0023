"""Async client SDK for the Gemini generative-AI API."""

__version__ = "0.1.0"

from loguru import logger

from gemini_sdk.client import GeminiClient
from gemini_sdk.config import CacheConfig, GeminiConfig
from gemini_sdk.exceptions import (
    GeminiAPIError,
    GeminiAuthError,
    GeminiError,
    GeminiNetworkError,
    GeminiParseError,
    GeminiRateLimitError,
    GeminiServerError,
    GeminiTimeoutError,
    GeminiValidationError,
    UnsupportedContentError,
)
from gemini_sdk.log import setup_logging
from gemini_sdk.models import (
    DEFAULT_CATALOG,
    Candidate,
    Content,
    GeminiResponse,
    GenerationConfig,
    ImageConfig,
    ImageContent,
    ModelCatalog,
    MultiPartContent,
    PromptFeedback,
    SafetyRating,
    SafetySetting,
    TextContent,
    UsageMetadata,
    VideoContent,
    content_from_json,
    content_to_json,
)
from gemini_sdk.models.conversation import ConversationContext, ConversationMessage

# Silent unless the application opts in via setup_logging()
logger.disable("gemini_sdk")

__all__ = [
    "__version__",
    "GeminiClient",
    "CacheConfig",
    "GeminiConfig",
    "GeminiAPIError",
    "GeminiAuthError",
    "GeminiError",
    "GeminiNetworkError",
    "GeminiParseError",
    "GeminiRateLimitError",
    "GeminiServerError",
    "GeminiTimeoutError",
    "GeminiValidationError",
    "UnsupportedContentError",
    "setup_logging",
    "DEFAULT_CATALOG",
    "Candidate",
    "Content",
    "GeminiResponse",
    "GenerationConfig",
    "ImageConfig",
    "ImageContent",
    "ModelCatalog",
    "MultiPartContent",
    "PromptFeedback",
    "SafetyRating",
    "SafetySetting",
    "TextContent",
    "UsageMetadata",
    "VideoContent",
    "content_from_json",
    "content_to_json",
    "ConversationContext",
    "ConversationMessage",
]
