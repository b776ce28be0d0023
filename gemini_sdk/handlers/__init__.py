"""Capability handlers: text, image and multimodal generation."""

from .base import BaseContentHandler, coerce_generation_config
from .image import ImageHandler
from .multimodal import MultiModalHandler
from .text import TextHandler

__all__ = [
    "BaseContentHandler",
    "coerce_generation_config",
    "ImageHandler",
    "MultiModalHandler",
    "TextHandler",
]
