"""Translation of HTTP and transport failures into SDK errors."""

import asyncio
import json
import re
from collections.abc import Mapping

from curl_cffi.requests.exceptions import RequestException, Timeout
from loguru import logger
from pydantic import ValidationError

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
)
from gemini_sdk.models.response import ErrorDetail, ErrorResponse

DEFAULT_RETRY_AFTER = 60.0

_RETRY_AFTER_PATTERN = re.compile(r'"retry_after["\s]*:\s*(\d+(?:\.\d+)?)')


def error_from_response(
    status_code: int,
    body: str | None,
    headers: Mapping[str, str] | None = None,
) -> GeminiError:
    """Map an HTTP error status and body to the matching SDK error.

    The provider's structured body ``{"error": {"code", "message", "status"}}``
    is used when present; otherwise the status code alone decides.
    """
    detail = _parse_error_body(body)
    message = detail.message if detail and detail.message else f"HTTP {status_code}"
    status = detail.status if detail else None
    code = str(status_code)

    if status_code == 429 or status == "RESOURCE_EXHAUSTED":
        retry_after = _retry_after(headers, detail, body)
        return GeminiRateLimitError(message, retry_after=retry_after, code=code)

    if status_code in (401, 403) or status in ("UNAUTHENTICATED", "PERMISSION_DENIED"):
        return GeminiAuthError(message, code=code)

    if status_code == 408:
        return GeminiTimeoutError(message, status_code=status_code, code=code)

    if status_code >= 500:
        return GeminiServerError(message, status_code=status_code, code=code)

    if status_code == 404:
        return GeminiAPIError(message, status_code, code=code)

    if status_code >= 400:
        return GeminiValidationError(message, _field_violations(detail), code=code)

    return GeminiAPIError(message, status_code, code=code)


def translate_exception(error: BaseException) -> GeminiError:
    """Wrap anything raised by a transport in an SDK error."""
    if isinstance(error, GeminiError):
        return error

    if isinstance(error, (Timeout, asyncio.TimeoutError)):
        return GeminiTimeoutError(f"Request timed out: {error}", original_error=error)

    if isinstance(error, (RequestException, OSError)):
        return GeminiNetworkError(
            f"Network connection failed: {error}", original_error=error
        )

    if isinstance(error, json.JSONDecodeError):
        return GeminiParseError(f"Invalid JSON response: {error}", original_error=error)

    return GeminiError(f"Unexpected error: {error}", original_error=error)


def _parse_error_body(body: str | None) -> ErrorDetail | None:
    if not body:
        return None
    try:
        return ErrorResponse.model_validate_json(body).error
    except ValidationError:
        logger.debug(f"Unstructured error body: {body[:200]}")
        return None


def _retry_after(
    headers: Mapping[str, str] | None,
    detail: ErrorDetail | None,
    body: str | None,
) -> float:
    if headers:
        for name, value in headers.items():
            if name.lower() == "retry-after":
                try:
                    return max(float(value), 0.0)
                except ValueError:
                    break

    if detail:
        for item in detail.details:
            if str(item.get("@type", "")).endswith("RetryInfo"):
                delay = str(item.get("retryDelay", "")).rstrip("s")
                try:
                    return max(float(delay), 0.0)
                except ValueError:
                    break

    if body:
        match = _RETRY_AFTER_PATTERN.search(body)
        if match:
            return float(match.group(1))

    return DEFAULT_RETRY_AFTER


def _field_violations(detail: ErrorDetail | None) -> dict[str, str]:
    if not detail:
        return {}
    violations: dict[str, str] = {}
    for item in detail.details:
        if not str(item.get("@type", "")).endswith("BadRequest"):
            continue
        for violation in item.get("fieldViolations", []):
            field = violation.get("field")
            if field:
                violations[field] = violation.get("description", "")
    return violations
