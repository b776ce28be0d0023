"""Image analysis and image generation."""

from gemini_sdk.exceptions import GeminiValidationError
from gemini_sdk.handlers.base import (
    BaseContentHandler,
    coerce_generation_config,
    make_content,
    optional_prompt,
    require_prompt,
)
from gemini_sdk.models.content import Content, ImageContent, TextContent
from gemini_sdk.models.conversation import ConversationContext
from gemini_sdk.models.request import GenerationConfig, ImageConfig
from gemini_sdk.models.response import GeminiResponse
from gemini_sdk.services.provider import GeminiProvider

COMPARE_PROMPT = (
    "Compare these two images and describe the differences and similarities."
)
EXTRACT_TEXT_PROMPT = (
    "Extract and transcribe all text visible in this image. "
    "Maintain the original formatting and structure as much as possible."
)
DESCRIBE_PROMPT = (
    "Describe this image in detail, including objects, people, "
    "setting, colors, and any notable features."
)
DESCRIBE_FOCUS_PROMPT = "Describe this image in detail, paying special attention to: {focus}"

IMAGE_MODALITIES = ["TEXT", "IMAGE"]


class ImageHandler(BaseContentHandler):
    """Handler for image input and image output."""

    def __init__(
        self,
        provider: GeminiProvider,
        model: str,
        generation_model: str,
        generation_api_version: str | None = None,
    ):
        super().__init__(provider, model)
        self.generation_model = generation_model
        self.generation_api_version = generation_api_version

    async def analyze_image(
        self,
        image_data: bytes,
        mime_type: str,
        *,
        prompt: str | None = None,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        """Generate content from an image with an optional text prompt."""
        contents: list[Content] = []
        text = optional_prompt(prompt)
        if text is not None:
            contents.append(TextContent(text=text))
        contents.append(make_content(ImageContent, data=image_data, mimeType=mime_type))

        return await self.generate_from_content(contents, config=config, context=context)

    async def analyze_images(
        self,
        images: list[ImageContent],
        *,
        prompt: str | None = None,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        """Generate content from several images with an optional text prompt."""
        if not images:
            raise GeminiValidationError(
                "At least one image is required",
                {"images": "Images list cannot be empty"},
            )
        for image in images:
            if not isinstance(image, ImageContent):
                raise GeminiValidationError(
                    f"Expected ImageContent, got {type(image).__name__}",
                    {"images": "Every item must be an ImageContent"},
                )

        contents: list[Content] = []
        text = optional_prompt(prompt)
        if text is not None:
            contents.append(TextContent(text=text))
        contents.extend(images)

        return await self.generate_from_content(contents, config=config, context=context)

    async def compare_images(
        self,
        image1_data: bytes,
        image1_mime_type: str,
        image2_data: bytes,
        image2_mime_type: str,
        *,
        prompt: str | None = None,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        """Compare two images."""
        first = make_content(ImageContent, data=image1_data, mimeType=image1_mime_type)
        second = make_content(ImageContent, data=image2_data, mimeType=image2_mime_type)
        contents: list[Content] = [TextContent(text=optional_prompt(prompt) or COMPARE_PROMPT), first, second]

        return await self.generate_from_content(contents, config=config, context=context)

    async def extract_text_from_image(
        self,
        image_data: bytes,
        mime_type: str,
        *,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        """Transcribe the text visible in an image."""
        return await self.analyze_image(
            image_data, mime_type, prompt=EXTRACT_TEXT_PROMPT, config=config, context=context
        )

    async def describe_image(
        self,
        image_data: bytes,
        mime_type: str,
        *,
        focus_area: str | None = None,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        """Describe an image, optionally focusing on one aspect of it."""
        prompt = (
            DESCRIBE_FOCUS_PROMPT.format(focus=focus_area) if focus_area else DESCRIBE_PROMPT
        )
        return await self.analyze_image(
            image_data, mime_type, prompt=prompt, config=config, context=context
        )

    async def generate_image(
        self,
        prompt: str,
        *,
        aspect_ratio: str | None = None,
        config: GenerationConfig | dict | None = None,
        context: ConversationContext | None = None,
    ) -> GeminiResponse:
        """
        Generate an image from a text prompt.

        The response usually carries a caption and one or more images, exposed
        through ``response.text`` and ``response.images``.

        Args:
            prompt: Description of the image to generate
            aspect_ratio: Optional ratio such as "1:1" or "16:9"
            config: Optional generation parameters
            context: Conversation to prepend and then extend
        """
        prompt = require_prompt(prompt)
        generation_config = self._image_generation_config(
            coerce_generation_config(config), aspect_ratio
        )
        return await self.provider.generate_content(
            self.generation_model,
            [TextContent(text=prompt)],
            generation_config=generation_config,
            context=context,
            api_version=self.generation_api_version,
        )

    @staticmethod
    def _image_generation_config(
        config: GenerationConfig | None, aspect_ratio: str | None
    ) -> GenerationConfig:
        # Image output must be requested explicitly
        update: dict = {}
        if config is None or not config.responseModalities:
            update["responseModalities"] = list(IMAGE_MODALITIES)
        if aspect_ratio:
            image_config = config.imageConfig if config and config.imageConfig else ImageConfig()
            update["imageConfig"] = image_config.model_copy(update={"aspectRatio": aspect_ratio})

        if config is None:
            return GenerationConfig(**update)
        return config.model_copy(update=update)
