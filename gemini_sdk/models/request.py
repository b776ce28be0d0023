"""Request models for the Gemini generateContent wire format."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from gemini_sdk.exceptions import GeminiValidationError


class InlineData(BaseModel):
    """Inline data for image content."""

    mimeType: str = Field(..., description="MIME type of the data")
    data: str = Field(..., description="Base64 encoded data")


class FileData(BaseModel):
    """Reference to a file already uploaded to the provider."""

    mimeType: str = Field(..., description="MIME type of the file")
    fileUri: str = Field(..., description="URI returned by the upload endpoint")


class Part(BaseModel):
    """Part of content, can be text, inline data or a file reference."""

    text: str | None = Field(default=None, description="Text content")
    inlineData: InlineData | None = Field(default=None, description="Inline data")
    fileData: FileData | None = Field(default=None, description="File reference")


class WireContent(BaseModel):
    """One turn of a request or response: a role and its parts."""

    role: Literal["user", "model"] | None = Field(
        default=None, description="Role of the content"
    )
    parts: list[Part] = Field(default_factory=list, description="Parts of the content")


class ImageConfig(BaseModel):
    """Image configuration for generation."""

    model_config = ConfigDict(frozen=True)

    aspectRatio: str | None = Field(default=None, description="Aspect ratio (e.g., '1:1', '16:9')")
    imageSize: str | None = Field(default=None, description="Image size")


class GenerationConfig(BaseModel):
    """Generation parameters, validated as soon as the object is built."""

    model_config = ConfigDict(frozen=True)

    temperature: float | None = Field(default=None, description="Sampling temperature, 0.0 to 1.0")
    maxOutputTokens: int | None = Field(default=None, description="Maximum output tokens")
    topP: float | None = Field(default=None, description="Top P for generation, 0.0 to 1.0")
    topK: int | None = Field(default=None, description="Top K for generation")
    stopSequences: list[str] | None = Field(
        default=None, description="Sequences that stop generation"
    )
    responseMimeType: str | None = Field(default=None, description="MIME type of the response")
    responseModalities: list[str] | None = Field(
        default=None, description="Response modalities, e.g. ['TEXT', 'IMAGE']"
    )
    imageConfig: ImageConfig | None = Field(default=None, description="Image configuration")

    @model_validator(mode="after")
    def _check_ranges(self) -> "GenerationConfig":
        errors: dict[str, str] = {}
        if self.temperature is not None and not 0.0 <= self.temperature <= 1.0:
            errors["temperature"] = "Temperature must be between 0.0 and 1.0"
        if self.maxOutputTokens is not None and self.maxOutputTokens <= 0:
            errors["maxOutputTokens"] = "Max output tokens must be positive"
        if self.topP is not None and not 0.0 <= self.topP <= 1.0:
            errors["topP"] = "TopP must be between 0.0 and 1.0"
        if self.topK is not None and self.topK <= 0:
            errors["topK"] = "TopK must be positive"
        if self.stopSequences is not None and not self.stopSequences:
            errors["stopSequences"] = "Stop sequences cannot be empty if provided"
        if self.responseMimeType is not None and not self.responseMimeType:
            errors["responseMimeType"] = "Response MIME type cannot be empty if provided"

        if errors:
            raise GeminiValidationError("Invalid generation config", errors)
        return self

    def to_json(self) -> dict:
        """Wire representation, omitting unset parameters."""
        return self.model_dump(exclude_none=True)


class SafetySetting(BaseModel):
    """Safety setting for content generation."""

    category: str = Field(..., description="Safety category")
    threshold: str = Field(default="BLOCK_MEDIUM_AND_ABOVE", description="Safety threshold")


class GenerateContentRequest(BaseModel):
    """Request model for the generateContent and streamGenerateContent endpoints."""

    contents: list[WireContent] = Field(..., description="Contents to generate from")
    generationConfig: GenerationConfig | None = Field(
        default=None, description="Generation configuration"
    )
    safetySettings: list[SafetySetting] | None = Field(
        default=None, description="Safety settings"
    )
    systemInstruction: WireContent | None = Field(
        default=None, description="System instruction"
    )
