"""Response models for Gemini generateContent responses."""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_serializer,
    field_validator,
)

from gemini_sdk.exceptions import GeminiParseError
from gemini_sdk.models.content import (
    Content,
    ImageContent,
    content_from_json,
    content_images,
    content_text,
)


class SafetyRating(BaseModel):
    """Safety rating for a prompt or candidate."""

    model_config = ConfigDict(frozen=True)

    category: str = Field(..., description="Harm category")
    probability: str = Field(..., description="Probability of harm")


class PromptFeedback(BaseModel):
    """Feedback about the prompt, present when it was blocked or rated."""

    model_config = ConfigDict(frozen=True)

    blockReason: str | None = Field(default=None, description="Why the prompt was blocked")
    safetyRatings: list[SafetyRating] = Field(
        default_factory=list, description="Safety ratings for the prompt"
    )


class UsageMetadata(BaseModel):
    """Usage metadata for the response."""

    model_config = ConfigDict(frozen=True)

    promptTokenCount: int | None = Field(default=None, description="Prompt token count")
    candidatesTokenCount: int | None = Field(default=None, description="Candidates token count")
    totalTokenCount: int | None = Field(default=None, description="Total token count")


class Candidate(BaseModel):
    """Candidate response from the model."""

    model_config = ConfigDict(frozen=True)

    content: Content = Field(..., description="Content of the candidate")
    finishReason: str | None = Field(default=None, description="Reason for finishing")
    index: int = Field(default=0, description="Index in the provider's ordering")
    safetyRatings: list[SafetyRating] = Field(
        default_factory=list, description="Safety ratings for this candidate"
    )

    @field_validator("content", mode="before")
    @classmethod
    def _decode_content(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return content_from_json(value)
        return value

    @field_validator("safetyRatings", mode="before")
    @classmethod
    def _null_ratings(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_serializer("content")
    def _encode_content(self, content: Content) -> dict:
        return content.to_json()


class GeminiResponse(BaseModel):
    """A generation result: candidates plus prompt feedback and usage."""

    model_config = ConfigDict(frozen=True)

    candidates: list[Candidate] = Field(
        default_factory=list, description="Candidates from generation"
    )
    promptFeedback: PromptFeedback | None = Field(
        default=None, description="Prompt feedback"
    )
    usageMetadata: UsageMetadata | None = Field(
        default=None, description="Usage metadata"
    )

    @field_validator("candidates", mode="before")
    @classmethod
    def _null_candidates(cls, value: Any) -> Any:
        # A fully blocked prompt comes back without candidates
        return [] if value is None else value

    @classmethod
    def from_json(cls, payload: Any) -> "GeminiResponse":
        """Decode a provider (or internal) response body.

        Raises:
            GeminiParseError: body does not match the response schema
        """
        if not isinstance(payload, dict):
            raise GeminiParseError(
                f"Response must be a JSON object, got {type(payload).__name__}"
            )
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise GeminiParseError(f"Malformed response: {e}", original_error=e) from e

    def to_json(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)

    @computed_field
    @property
    def text(self) -> str | None:
        """Text of the first candidate, when it carries any."""
        if not self.candidates:
            return None
        return content_text(self.candidates[0].content)

    @property
    def first_image(self) -> ImageContent | None:
        for candidate in self.candidates:
            images = content_images(candidate.content)
            if images:
                return images[0]
        return None

    @property
    def images(self) -> list[ImageContent]:
        all_images: list[ImageContent] = []
        for candidate in self.candidates:
            all_images.extend(content_images(candidate.content))
        return all_images

    @property
    def has_images(self) -> bool:
        return any(content_images(c.content) for c in self.candidates)

    def __repr__(self) -> str:
        return f"GeminiResponse(text={self.text!r}, candidates={len(self.candidates)})"


class ErrorDetail(BaseModel):
    """Error detail in a provider error body."""

    code: int = Field(..., description="Error code")
    message: str = Field(default="", description="Error message")
    status: str | None = Field(default=None, description="Error status")
    details: list[dict[str, Any]] = Field(
        default_factory=list, description="Structured error details"
    )


class ErrorResponse(BaseModel):
    """Error response model."""

    error: ErrorDetail = Field(..., description="Error details")
