"""Parser package exports."""

from .html_parser import PageExtractor, PageExtractorConfig

__all__ = [
    "PageExtractor",
    "PageExtractorConfig",
]
