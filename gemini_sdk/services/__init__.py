"""Services for the SDK: transport, caching and request execution."""

from .cache import ResponseCache
from .errors import error_from_response, translate_exception
from .provider import GeminiProvider
from .transport import CurlTransport, Transport, parse_sse_line

__all__ = [
    "ResponseCache",
    "error_from_response",
    "translate_exception",
    "GeminiProvider",
    "CurlTransport",
    "Transport",
    "parse_sse_line",
]
