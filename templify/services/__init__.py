"""External collaborators: template bytes and the optional AI services."""

from .content_generator import OpenAIContentGenerator
from .heading_classifier import (
    LocalHeadingClassifier,
    OpenAIHeadingClassifier,
    is_heading_candidate,
    resolve_labels,
)
from .template_source import AsyncHttpTemplateSource, FileTemplateSource, HttpTemplateSource, TemplateSource

__all__ = [
    "AsyncHttpTemplateSource",
    "FileTemplateSource",
    "HttpTemplateSource",
    "LocalHeadingClassifier",
    "OpenAIContentGenerator",
    "OpenAIHeadingClassifier",
    "TemplateSource",
    "is_heading_candidate",
    "resolve_labels",
]
