"""Test doubles and payload builders shared across the test suite."""

import base64

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def text_payload(text: str, finish_reason: str = "STOP") -> dict:
    """Provider response body with a single text candidate."""
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": finish_reason,
                "index": 0,
            }
        ],
        "usageMetadata": {
            "promptTokenCount": 3,
            "candidatesTokenCount": 5,
            "totalTokenCount": 8,
        },
    }


def image_payload(text: str, data: bytes = PNG_BYTES, mime_type: str = "image/png") -> dict:
    """Provider response body with a caption and one inline image."""
    return {
        "candidates": [
            {
                "content": {
                    "role": "model",
                    "parts": [
                        {"text": text},
                        {"inlineData": {"mimeType": mime_type, "data": b64(data)}},
                    ],
                },
                "finishReason": "STOP",
            }
        ]
    }


class FakeTransport:
    """Transport double that replays scripted results and records every call.

    ``post_results`` and ``stream_results`` are consumed in order; the last
    entry repeats once the others are used up. An exception entry is raised
    instead of returned. A stream script is a list whose items are yielded,
    or raised when they are exceptions.
    """

    def __init__(self):
        self.post_results: list = []
        self.stream_results: list = []
        self.calls: list[tuple[str, str, dict]] = []
        self.streams_closed = 0
        self.closed = False

    @staticmethod
    def _next(results: list):
        if not results:
            raise AssertionError("FakeTransport has no scripted result left")
        return results.pop(0) if len(results) > 1 else results[0]

    @property
    def post_calls(self) -> list[tuple[str, dict]]:
        return [(path, body) for kind, path, body in self.calls if kind == "post"]

    async def post(self, path: str, body: dict) -> dict:
        self.calls.append(("post", path, body))
        result = self._next(self.post_results)
        if isinstance(result, BaseException):
            raise result
        return result

    async def post_stream(self, path: str, body: dict):
        self.calls.append(("stream", path, body))
        script = self._next(self.stream_results)
        if isinstance(script, BaseException):
            raise script
        try:
            for item in script:
                if isinstance(item, BaseException):
                    raise item
                yield item
        finally:
            self.streams_closed += 1

    async def close(self) -> None:
        self.closed = True

