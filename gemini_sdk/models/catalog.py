"""Default model identifiers per capability."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ModelCatalog(BaseModel):
    """Which model serves which capability.

    Built once and handed to the client; nothing reads it as a global.
    """

    model_config = ConfigDict(frozen=True)

    text_model: str = Field(default="gemini-2.5-flash", description="Text generation")
    image_model: str = Field(default="gemini-2.5-flash", description="Image analysis")
    multimodal_model: str = Field(
        default="gemini-2.5-pro", description="Mixed text, image and video input"
    )
    image_generation_model: str = Field(
        default="gemini-2.5-flash-image-preview", description="Image output"
    )
    image_generation_api_version: Literal["v1", "v1beta"] = Field(
        default="v1beta", description="API version serving image output"
    )


DEFAULT_CATALOG = ModelCatalog()
