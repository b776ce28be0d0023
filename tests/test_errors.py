import asyncio
import json

import pytest
from curl_cffi.requests.exceptions import ConnectionError as CurlConnectionError
from curl_cffi.requests.exceptions import Timeout as CurlTimeout

from gemini_sdk.exceptions import (
    RETRYABLE_ERRORS,
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
from gemini_sdk.services.errors import (
    DEFAULT_RETRY_AFTER,
    error_from_response,
    translate_exception,
)


def _error_body(code: int, message: str, status: str | None = None, details=None) -> str:
    error = {"code": code, "message": message}
    if status:
        error["status"] = status
    if details:
        error["details"] = details
    return json.dumps({"error": error})


class TestErrorFromResponse:
    @pytest.mark.parametrize("status_code", [401, 403])
    def test_auth_statuses(self, status_code):
        error = error_from_response(status_code, _error_body(status_code, "API key not valid"))

        assert isinstance(error, GeminiAuthError)
        assert error.message == "API key not valid"
        assert error.code == str(status_code)

    def test_auth_by_provider_status(self):
        body = _error_body(400, "API key expired", status="UNAUTHENTICATED")
        assert isinstance(error_from_response(400, body), GeminiAuthError)

    def test_rate_limit_default_wait(self):
        error = error_from_response(429, _error_body(429, "Quota exceeded"))

        assert isinstance(error, GeminiRateLimitError)
        assert error.retry_after == DEFAULT_RETRY_AFTER

    def test_rate_limit_from_retry_after_header(self):
        error = error_from_response(429, None, {"Retry-After": "7"})
        assert error.retry_after == 7.0

    def test_rate_limit_from_retry_info(self):
        details = [
            {"@type": "type.googleapis.com/google.rpc.RetryInfo", "retryDelay": "12s"}
        ]
        body = _error_body(429, "Quota exceeded", "RESOURCE_EXHAUSTED", details)

        assert error_from_response(429, body).retry_after == 12.0

    def test_rate_limit_from_unstructured_body(self):
        error = error_from_response(429, '{"retry_after": 3.5, "detail": "busy"}')
        assert error.retry_after == 3.5

    def test_resource_exhausted_status(self):
        body = _error_body(400, "Quota exceeded", status="RESOURCE_EXHAUSTED")
        assert isinstance(error_from_response(400, body), GeminiRateLimitError)

    def test_request_timeout(self):
        error = error_from_response(408, None)

        assert isinstance(error, GeminiTimeoutError)
        assert error.status_code == 408

    @pytest.mark.parametrize("status_code", [500, 502, 503, 504])
    def test_server_errors_are_retryable(self, status_code):
        error = error_from_response(status_code, "<html>Bad Gateway</html>")

        assert isinstance(error, GeminiServerError)
        assert isinstance(error, RETRYABLE_ERRORS)
        assert error.message == f"HTTP {status_code}"

    def test_not_found(self):
        error = error_from_response(404, _error_body(404, "models/nope is not found"))

        assert type(error) is GeminiAPIError
        assert error.status_code == 404

    def test_bad_request_field_violations(self):
        details = [
            {
                "@type": "type.googleapis.com/google.rpc.BadRequest",
                "fieldViolations": [
                    {"field": "generation_config.temperature", "description": "out of range"}
                ],
            }
        ]
        error = error_from_response(400, _error_body(400, "Invalid argument", "INVALID_ARGUMENT", details))

        assert isinstance(error, GeminiValidationError)
        assert error.field_errors == {"generation_config.temperature": "out of range"}

    def test_non_error_status_is_generic_api_error(self):
        assert isinstance(error_from_response(302, None), GeminiAPIError)


class TestTranslateException:
    def test_sdk_errors_pass_through(self):
        error = GeminiAuthError("bad key")
        assert translate_exception(error) is error

    @pytest.mark.parametrize(
        "raw", [asyncio.TimeoutError(), CurlTimeout("timed out")], ids=["asyncio", "curl"]
    )
    def test_timeouts(self, raw):
        error = translate_exception(raw)

        assert isinstance(error, GeminiTimeoutError)
        assert error.original_error is raw

    @pytest.mark.parametrize(
        "raw",
        [ConnectionRefusedError("refused"), CurlConnectionError("could not resolve host")],
        ids=["os", "curl"],
    )
    def test_connection_failures(self, raw):
        error = translate_exception(raw)

        assert isinstance(error, GeminiNetworkError)
        assert not isinstance(error, GeminiTimeoutError)

    def test_json_decode_error(self):
        raw = json.JSONDecodeError("Expecting value", "<html>", 0)
        assert isinstance(translate_exception(raw), GeminiParseError)

    def test_anything_else_is_generic(self):
        error = translate_exception(KeyError("missing"))

        assert type(error) is GeminiError
        assert "Unexpected error" in error.message


def test_error_strings():
    assert str(GeminiRateLimitError("slow", retry_after=5.0)) == (
        "GeminiRateLimitError: slow (retry after: 5.0s)"
    )
    assert str(GeminiServerError("down", status_code=503)) == "GeminiServerError: down (status: 503)"
    assert str(GeminiValidationError("bad", {"temperature": "too high"})) == (
        "GeminiValidationError: bad (fields: {'temperature': 'too high'})"
    )
