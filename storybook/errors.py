# storybook/errors.py
from typing import Optional


class StorybookError(Exception):
    """Base for every failure that ends a request with a JSON error body."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class NoTemplateAvailable(StorybookError):
    status_code = 500


class ImageDecodeError(StorybookError):
    status_code = 400


class SerializationError(StorybookError):
    status_code = 500


class ValidationError(StorybookError):
    status_code = 400


class CatalogError(StorybookError):
    status_code = 500
