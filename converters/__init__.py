"""Converters package turning WordPress post HTML into normalized Markdown."""

import logging
from typing import Any, Dict, Optional

from .html_cleaner import HtmlCleaner
from .markdown_converter import MarkdownConverter
from .markdown_formatter import MarkdownFormatter
from .typography import normalize_quotes


def transform_body(html_content: str, config: Optional[Dict[str, Any]] = None, logger=None) -> str:
    """
    Convenience function to convert one post body from HTML to Markdown.

    Example:
        >>> from converters import transform_body
        >>> transform_body('<p>Hello <em>world</em></p>')
        'Hello _world_\n'
    """
    if logger is None:
        logger = logging.getLogger('wordpress_markdown_migrator.converters')

    return MarkdownConverter(logger=logger, config=config).transform_body(html_content)


__all__ = [
    'transform_body',
    'MarkdownConverter',
    'MarkdownFormatter',
    'HtmlCleaner',
    'normalize_quotes',
]
