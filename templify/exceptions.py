"""Custom exceptions for Templify."""

from typing import Optional


class TemplifyError(Exception):
    """Base exception for Templify errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class TemplateError(TemplifyError):
    """Exception raised when a template package or PDF is malformed."""

    pass


class TemplateUnavailableError(TemplateError):
    """Exception raised when a template cannot be fetched."""

    def __init__(self, url: str, status_code: Optional[int] = None, details: Optional[str] = None):
        message = f"Template download failed: {status_code}" if status_code else "Template download failed"
        super().__init__(message, details or url)
        self.url = url
        self.status_code = status_code


class LayoutError(TemplifyError):
    """Exception raised for invalid layout configuration."""

    pass


class RenderingError(TemplifyError):
    """Exception raised during PDF assembly."""

    pass


class MediaError(TemplifyError):
    """Exception raised when an embedded image cannot be decoded."""

    pass


class ConfigError(TemplifyError):
    """Exception raised for unknown brands, templates or malformed stored layouts."""

    pass


class ServiceError(TemplifyError):
    """Exception raised by the external AI services."""

    pass


class ClassificationError(ServiceError):
    """Exception raised when the heading classification service fails."""

    pass


class GenerationError(ServiceError):
    """Exception raised when the content generation service fails."""

    pass
