"""HTTP transport for the Gemini REST API."""

import json
from collections.abc import AsyncIterator
from typing import Protocol

from curl_cffi.requests import AsyncSession
from loguru import logger

from gemini_sdk import __version__
from gemini_sdk.config import GeminiConfig
from gemini_sdk.exceptions import GeminiParseError
from gemini_sdk.services.errors import error_from_response


class Transport(Protocol):
    """What the execution pipeline needs from an HTTP layer.

    ``path`` is relative to the API root and already carries the API version,
    e.g. ``v1/models/gemini-2.5-flash:generateContent``.
    """

    async def post(self, path: str, body: dict) -> dict: ...

    def post_stream(self, path: str, body: dict) -> AsyncIterator[dict]: ...

    async def close(self) -> None: ...


class CurlTransport:
    """Transport backed by a curl_cffi ``AsyncSession``."""

    def __init__(self, config: GeminiConfig, session: AsyncSession | None = None):
        self.config = config
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> AsyncSession:
        """Get or create the async session."""
        if self._session is None:
            self._session = AsyncSession()
        return self._session

    def build_url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": f"gemini-sdk/{__version__}",
        }
        api_key = self.config.api_key_value()
        if api_key:
            headers["x-goog-api-key"] = api_key
        return headers

    async def post(self, path: str, body: dict) -> dict:
        """POST ``body`` as JSON and return the decoded JSON reply."""
        session = self._get_session()
        response = await session.post(
            self.build_url(path),
            headers=self._headers(),
            json=body,
            timeout=self.config.timeout,
            proxy=self.config.proxy,
        )
        logger.debug(f"POST {path} -> {response.status_code}")

        if response.status_code >= 400:
            logger.error(
                f"API request failed - status: {response.status_code}, "
                f"response: {response.text[:1024]}"
            )
            raise error_from_response(response.status_code, response.text, response.headers)

        try:
            payload = response.json()
        except json.JSONDecodeError as e:
            raise GeminiParseError(
                f"Invalid JSON response: {e}", original_error=e
            ) from e
        if not isinstance(payload, dict):
            raise GeminiParseError(
                f"Expected a JSON object, got {type(payload).__name__}"
            )
        return payload

    async def post_stream(self, path: str, body: dict) -> AsyncIterator[dict]:
        """POST ``body`` and yield each server-sent event payload as it arrives.

        The response is closed when the caller stops iterating, whether the
        stream was exhausted or not.
        """
        session = self._get_session()
        headers = {**self._headers(), "Accept": "text/event-stream"}

        async with session.stream(
            "POST",
            self.build_url(path),
            params={"alt": "sse"},
            headers=headers,
            json=body,
            timeout=self.config.timeout,
            proxy=self.config.proxy,
        ) as response:
            logger.debug(f"POST {path} (stream) -> {response.status_code}")

            if response.status_code >= 400:
                content = await response.acontent()
                text = content.decode("utf-8", errors="replace")
                logger.error(
                    f"Stream request failed - status: {response.status_code}, "
                    f"response: {text[:1024]}"
                )
                raise error_from_response(response.status_code, text, response.headers)

            async for line in response.aiter_lines():
                payload = parse_sse_line(line)
                if payload is not None:
                    yield payload

    async def close(self) -> None:
        """Close the session if this transport created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None


def parse_sse_line(line: bytes | str) -> dict | None:
    """Decode one server-sent-event line.

    Returns ``None`` for blank lines, comments and non-data fields.
    """
    if isinstance(line, bytes):
        line = line.decode("utf-8")
    line = line.strip()
    if not line.startswith("data:"):
        return None

    data = line[len("data:"):].strip()
    if not data or data == "[DONE]":
        return None

    try:
        payload = json.loads(data)
    except json.JSONDecodeError as e:
        raise GeminiParseError(f"Invalid JSON in stream event: {e}", original_error=e) from e
    if not isinstance(payload, dict):
        raise GeminiParseError(
            f"Expected a JSON object in stream event, got {type(payload).__name__}"
        )
    return payload
