# storybook/__init__.py
from .config import config
from .logger import get_logger
from .errors import (
    StorybookError,
    NoTemplateAvailable,
    ImageDecodeError,
    SerializationError,
    ValidationError,
    CatalogError,
)
from .lib.catalog import StoryCatalog, StoryTemplate, AgeBracket, Variant, get_catalog
from .lib.layout import LayoutSettings, PageLayout, PagePlan, plan_pages, wrap_text
from .lib.pdf import make_pdf
from .features.create_pdf.schemas import CreatePdfRequest
from .features.create_pdf.service import create_storybook


__all__ = ["config",
           "get_logger",
           "StorybookError",
           "NoTemplateAvailable",
           "ImageDecodeError",
           "SerializationError",
           "ValidationError",
           "CatalogError",
           "StoryCatalog",
           "StoryTemplate",
           "AgeBracket",
           "Variant",
           "get_catalog",
           "LayoutSettings",
           "PageLayout",
           "PagePlan",
           "plan_pages",
           "wrap_text",
           "make_pdf",
           "CreatePdfRequest",
           "create_storybook",
           ]
