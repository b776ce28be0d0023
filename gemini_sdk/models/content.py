"""Content variants exchanged with the generation service.

``Content`` is a closed union discriminated by ``type``. Two JSON shapes are
understood when decoding:

* the provider shape, ``{"parts": [{"text": ...}, {"inlineData": ...}]}``,
  found inside response candidates;
* the internal shape, ``{"type": "text" | "image" | "video" | "multipart", ...}``,
  produced by :meth:`to_json` and used for local persistence.

Helpers that branch on the variant end with ``assert_never`` so a new variant
cannot be added without updating them.
"""

import base64
import binascii
from typing import Annotated, Any, Literal, Union

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)
from typing_extensions import assert_never

from gemini_sdk.exceptions import (
    GeminiParseError,
    GeminiValidationError,
    UnsupportedContentError,
)
from gemini_sdk.models.request import FileData, InlineData, Part


IMAGE_MIME_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
        "image/gif",
        "image/bmp",
    }
)

VIDEO_MIME_TYPES = frozenset(
    {
        "video/mp4",
        "video/mpeg",
        "video/mov",
        "video/avi",
        "video/x-flv",
        "video/mpg",
        "video/webm",
        "video/wmv",
        "video/3gpp",
    }
)

CONTENT_TYPES = ("text", "image", "video", "multipart")


class _ContentBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_json(self) -> dict:
        """Internal JSON representation, tagged with ``type``."""
        return self.model_dump(mode="json")


class TextContent(_ContentBase):
    """Plain text."""

    type: Literal["text"] = "text"
    text: str

    # Field-level so a nested truncated sentinel is not rejected
    @field_validator("text")
    @classmethod
    def _check_text(cls, value: str) -> str:
        if not value:
            raise GeminiValidationError(
                "Text content cannot be empty", {"text": "Text is required"}
            )
        return value

    @classmethod
    def truncated(cls) -> "TextContent":
        """Empty text standing in for a response the provider cut short."""
        return cls.model_construct(text="")

    @property
    def is_truncated(self) -> bool:
        return self.text == ""


class ImageContent(_ContentBase):
    """Image bytes sent inline with the request."""

    type: Literal["image"] = "image"
    data: bytes
    mimeType: str

    @field_validator("data", mode="before")
    @classmethod
    def _decode_base64(cls, value: Any) -> Any:
        # Strings only arrive from JSON, where image data is base64
        if isinstance(value, str):
            try:
                return base64.b64decode(value, validate=True)
            except binascii.Error as e:
                raise ValueError(f"Invalid base64 image data: {e}") from e
        return value

    @field_serializer("data", when_used="json")
    def _encode_base64(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")

    @model_validator(mode="after")
    def _check_image(self) -> "ImageContent":
        if not self.data:
            raise GeminiValidationError(
                "Image data cannot be empty", {"data": "Image bytes are required"}
            )
        if self.mimeType.lower() not in IMAGE_MIME_TYPES:
            raise GeminiValidationError(
                f"Invalid image MIME type: {self.mimeType}",
                {"mimeType": f"Must be one of {sorted(IMAGE_MIME_TYPES)}"},
            )
        return self

    @property
    def size(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"ImageContent(mimeType={self.mimeType!r}, size={self.size} bytes)"


class VideoContent(_ContentBase):
    """Reference to a video uploaded beforehand. Videos are never inlined."""

    type: Literal["video"] = "video"
    fileUri: str
    mimeType: str

    @model_validator(mode="after")
    def _check_video(self) -> "VideoContent":
        if not self.fileUri:
            raise GeminiValidationError(
                "File URI cannot be empty", {"fileUri": "Valid file URI is required"}
            )
        if self.mimeType.lower() not in VIDEO_MIME_TYPES:
            raise GeminiValidationError(
                f"Invalid video MIME type: {self.mimeType}",
                {"mimeType": f"Must be one of {sorted(VIDEO_MIME_TYPES)}"},
            )
        return self


class MultiPartContent(_ContentBase):
    """Caption plus one or more generated images."""

    type: Literal["multipart"] = "multipart"
    text: str
    images: tuple[ImageContent, ...]

    @model_validator(mode="after")
    def _check_images(self) -> "MultiPartContent":
        if not self.images:
            raise GeminiValidationError(
                "Images list cannot be empty for MultiPartContent",
                {"images": "At least one image is required"},
            )
        return self

    @property
    def first_image(self) -> ImageContent:
        return self.images[0]

    @property
    def image_data_list(self) -> list[bytes]:
        return [image.data for image in self.images]

    @property
    def image_mime_types(self) -> list[str]:
        return [image.mimeType for image in self.images]


Content = Annotated[
    Union[TextContent, ImageContent, VideoContent, MultiPartContent],
    Field(discriminator="type"),
]

_content_adapter: TypeAdapter[Content] = TypeAdapter(Content)
_parts_adapter: TypeAdapter[list[Part]] = TypeAdapter(list[Part])


def content_from_json(payload: Any) -> Content:
    """Decode content from either the provider or the internal JSON shape.

    Raises:
        GeminiParseError: payload is structurally invalid
        UnsupportedContentError: ``type`` names no known variant
    """
    if not isinstance(payload, dict):
        raise GeminiParseError(
            f"Content must be a JSON object, got {type(payload).__name__}"
        )

    # Provider response shape
    if payload.get("parts") is not None:
        try:
            parts = _parts_adapter.validate_python(payload["parts"])
        except ValidationError as e:
            raise GeminiParseError(
                f"Malformed content parts: {e}", original_error=e
            ) from e
        return content_from_parts(parts)

    # No parts and no type: the provider stopped before emitting anything
    if "type" not in payload:
        return TextContent.truncated()

    content_type = payload["type"]
    if content_type not in CONTENT_TYPES:
        raise UnsupportedContentError(f"Unknown content type: {content_type}")

    if content_type == "text" and payload.get("text") == "":
        return TextContent.truncated()

    try:
        return _content_adapter.validate_python(payload)
    except ValidationError as e:
        raise GeminiParseError(
            f"Malformed {content_type} content: {e}", original_error=e
        ) from e
    except GeminiValidationError as e:
        raise GeminiParseError(
            f"Invalid {content_type} content: {e.message}", original_error=e
        ) from e


def content_from_parts(parts: list[Part]) -> Content:
    """Collapse a flat list of provider parts into a single content value.

    Text parts are concatenated in order. Text together with images yields
    ``MultiPartContent``; images alone yield the first image.
    """
    texts: list[str] = []
    images: list[ImageContent] = []
    videos: list[VideoContent] = []

    for part in parts:
        if part.text is not None:
            texts.append(part.text)
        elif part.inlineData is not None:
            images.append(_image_from_inline(part.inlineData))
        elif part.fileData is not None:
            video = _video_from_file(part.fileData)
            if video is not None:
                videos.append(video)

    text = "".join(texts) if texts else None

    if text is not None and images:
        return MultiPartContent(text=text, images=tuple(images))
    if text:
        return TextContent(text=text)
    if images:
        return images[0]
    if videos:
        return videos[0]
    return TextContent.truncated()


def _image_from_inline(inline: InlineData) -> ImageContent:
    if inline.mimeType.lower() not in IMAGE_MIME_TYPES:
        raise UnsupportedContentError(
            f"Unsupported inline data MIME type: {inline.mimeType}"
        )
    try:
        return ImageContent(data=inline.data, mimeType=inline.mimeType)
    except ValidationError as e:
        raise GeminiParseError(f"Malformed inline image: {e}", original_error=e) from e
    except GeminiValidationError as e:
        raise GeminiParseError(
            f"Invalid inline image: {e.message}", original_error=e
        ) from e


def _video_from_file(file_data: FileData) -> VideoContent | None:
    if file_data.mimeType.lower() not in VIDEO_MIME_TYPES:
        logger.debug(f"Ignoring file part with MIME type {file_data.mimeType}")
        return None
    if not file_data.fileUri:
        raise GeminiParseError("File part is missing its URI")
    return VideoContent(fileUri=file_data.fileUri, mimeType=file_data.mimeType)


def content_to_json(content: Content) -> dict:
    return content.to_json()


def content_to_parts(content: Content) -> list[Part]:
    """Wire parts for one content item. MultiPart expands to text then images."""
    if isinstance(content, TextContent):
        return [Part(text=content.text)]
    if isinstance(content, ImageContent):
        return [_image_part(content)]
    if isinstance(content, VideoContent):
        return [
            Part(fileData=FileData(mimeType=content.mimeType, fileUri=content.fileUri))
        ]
    if isinstance(content, MultiPartContent):
        return [Part(text=content.text), *(_image_part(i) for i in content.images)]
    assert_never(content)


def _image_part(image: ImageContent) -> Part:
    return Part(
        inlineData=InlineData(
            mimeType=image.mimeType,
            data=base64.b64encode(image.data).decode("ascii"),
        )
    )


def content_text(content: Content) -> str | None:
    """Text carried by a content value, if any."""
    if isinstance(content, (TextContent, MultiPartContent)):
        return content.text
    if isinstance(content, (ImageContent, VideoContent)):
        return None
    assert_never(content)


def content_images(content: Content) -> list[ImageContent]:
    """Images carried by a content value, in order."""
    if isinstance(content, MultiPartContent):
        return list(content.images)
    if isinstance(content, ImageContent):
        return [content]
    if isinstance(content, (TextContent, VideoContent)):
        return []
    assert_never(content)
