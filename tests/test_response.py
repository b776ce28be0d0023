import pytest

from gemini_sdk.exceptions import GeminiParseError, UnsupportedContentError
from gemini_sdk.models.content import ImageContent, MultiPartContent, TextContent
from gemini_sdk.models.response import GeminiResponse

from tests.helpers import JPEG_BYTES, PNG_BYTES, b64, image_payload, text_payload


class TestGeminiResponseParsing:
    """Decoding provider response bodies."""

    def test_text_response(self):
        response = GeminiResponse.from_json(text_payload("Hello"))

        assert response.text == "Hello"
        assert response.candidates[0].finishReason == "STOP"
        assert response.candidates[0].content == TextContent(text="Hello")
        assert response.usageMetadata.totalTokenCount == 8
        assert not response.has_images

    def test_missing_candidates(self):
        response = GeminiResponse.from_json(
            {"promptFeedback": {"blockReason": "SAFETY"}}
        )

        assert response.candidates == []
        assert response.text is None
        assert response.promptFeedback.blockReason == "SAFETY"

    def test_null_candidates(self):
        assert GeminiResponse.from_json({"candidates": None}).candidates == []

    def test_candidate_order_and_index_are_kept(self):
        payload = {
            "candidates": [
                {"content": {"parts": [{"text": "first"}]}, "index": 3},
                {"content": {"parts": [{"text": "second"}]}, "index": 1},
            ]
        }
        response = GeminiResponse.from_json(payload)

        assert [c.index for c in response.candidates] == [3, 1]
        assert response.text == "first"

    def test_safety_ratings(self):
        payload = text_payload("ok")
        payload["candidates"][0]["safetyRatings"] = [
            {"category": "HARM_CATEGORY_HARASSMENT", "probability": "NEGLIGIBLE"}
        ]
        rating = GeminiResponse.from_json(payload).candidates[0].safetyRatings[0]

        assert rating.category == "HARM_CATEGORY_HARASSMENT"
        assert rating.probability == "NEGLIGIBLE"

    def test_incomplete_safety_rating_is_a_parse_error(self):
        payload = text_payload("ok")
        payload["candidates"][0]["safetyRatings"] = [{"category": "HARM_CATEGORY_HARASSMENT"}]

        with pytest.raises(GeminiParseError):
            GeminiResponse.from_json(payload)

    def test_candidate_without_content_is_a_parse_error(self):
        with pytest.raises(GeminiParseError):
            GeminiResponse.from_json({"candidates": [{"finishReason": "STOP"}]})

    def test_candidate_cut_short_is_truncated_text(self):
        response = GeminiResponse.from_json(
            {"candidates": [{"content": {"role": "model"}, "finishReason": "MAX_TOKENS"}]}
        )

        assert response.candidates[0].content.is_truncated
        assert response.text == ""

    def test_unknown_content_type_propagates(self):
        with pytest.raises(UnsupportedContentError):
            GeminiResponse.from_json(
                {"candidates": [{"content": {"type": "audio", "data": "..."}}]}
            )

    @pytest.mark.parametrize("payload", [None, [], "candidates"])
    def test_non_object_is_a_parse_error(self, payload):
        with pytest.raises(GeminiParseError):
            GeminiResponse.from_json(payload)


class TestGeminiResponseImages:
    def test_generated_image_with_caption(self):
        response = GeminiResponse.from_json(image_payload("A red square"))

        assert response.text == "A red square"
        assert isinstance(response.candidates[0].content, MultiPartContent)
        assert response.has_images
        assert response.first_image.data == PNG_BYTES

    def test_image_only_candidate_has_no_text(self):
        payload = {
            "candidates": [
                {"content": {"parts": [{"inlineData": {"mimeType": "image/png", "data": b64(PNG_BYTES)}}]}}
            ]
        }
        response = GeminiResponse.from_json(payload)

        assert response.text is None
        assert response.images == [ImageContent(data=PNG_BYTES, mimeType="image/png")]

    def test_images_collected_across_candidates(self):
        payload = image_payload("first")
        payload["candidates"].extend(
            image_payload("second", data=JPEG_BYTES, mime_type="image/jpeg")["candidates"]
        )
        response = GeminiResponse.from_json(payload)

        assert [image.mimeType for image in response.images] == ["image/png", "image/jpeg"]
        assert response.first_image.mimeType == "image/png"


def test_internal_json_round_trip():
    original = GeminiResponse.from_json(image_payload("caption"))
    restored = GeminiResponse.from_json(original.to_json())

    assert restored == original
    assert restored.first_image.data == PNG_BYTES


def test_to_json_omits_unset_fields():
    payload = GeminiResponse.from_json({"candidates": [{"content": {"parts": [{"text": "A"}]}}]}).to_json()

    assert "usageMetadata" not in payload
    assert "promptFeedback" not in payload
    assert payload["candidates"][0]["content"] == {"type": "text", "text": "A"}


def test_repr():
    response = GeminiResponse.from_json(text_payload("Hi"))
    assert repr(response) == "GeminiResponse(text='Hi', candidates=1)"
