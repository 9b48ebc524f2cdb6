"""Markdown converter turning WordPress post HTML into normalized Markdown."""

import logging
import re
from typing import Any, Dict, Optional

from bs4 import BeautifulSoup
from markdownify import MarkdownConverter as MarkdownifyConverter

from config_loader import get_nested
from .html_cleaner import HtmlCleaner
from .markdown_formatter import MarkdownFormatter
from .typography import normalize_quotes

logger = logging.getLogger('wordpress_markdown_migrator.converters.markdownconverter')

NEWLINE_RUN_PATTERN = re.compile(r'\n+')
LINE_BREAK_MARKER = '<br />'


class MarkdownConverter(MarkdownifyConverter):
    """
    Converts a post's HTML body into Markdown.

    This class extends markdownify.MarkdownConverter to provide:
    - Newline runs preserved as explicit line breaks
    - WordPress markup cleanup (editor comments, caption shortcodes)
    - Images kept as ``![alt](src "title")`` in every context
    - Optional canonicalize mode (typography + canonical formatting)
    """

    def __init__(
        self,
        logger: logging.Logger = None,
        config: Dict[str, Any] = None,
        canonicalize: Optional[bool] = None,
        **kwargs
    ):
        """Initialize markdown converter with logger and configuration."""
        markdownify_options = {
            'heading_style': 'ATX',  # Use # for headings
            'bullets': '-',  # Use - for unordered lists
            'escape_misc': False,
        }

        markdownify_options.update(kwargs)

        super().__init__(**markdownify_options)

        self.logger = logger or logging.getLogger('wordpress_markdown_migrator.converters.markdownconverter')
        self.config = config or {}

        if canonicalize is None:
            canonicalize = get_nested(self.config, 'migration.canonicalize', True)
        self.canonicalize = bool(canonicalize)

        self.html_cleaner = HtmlCleaner(self.logger)
        self.formatter = MarkdownFormatter(self.logger)

    def transform_body(self, html_content: str) -> str:
        """
        Convert raw post HTML to Markdown.

        Args:
            html_content: The ``content:encoded`` body of a post

        Returns:
            Markdown text ending with a single newline (empty string for empty input)
        """
        if not html_content or not html_content.strip():
            return ''

        html_content = self.html_cleaner.strip_shortcodes(html_content)

        # Author line breaks are kept as visual breaks instead of paragraph guesses
        html_content = NEWLINE_RUN_PATTERN.sub(LINE_BREAK_MARKER, html_content)

        try:
            soup = BeautifulSoup(html_content, 'lxml')
            soup = self.html_cleaner.clean(soup)
            markdown = self.convert(str(soup))
        except Exception as e:
            self.logger.error(f"Markdown conversion failed, falling back to plain text: {e}")
            markdown = BeautifulSoup(html_content, 'lxml').get_text('\n')

        return self._finalize(markdown)

    def transform_title(self, title: str) -> str:
        """Apply the same normalization as the body to a post title."""
        title = (title or '').strip()
        if not self.canonicalize or not title:
            return title

        title = normalize_quotes(title)
        return self.formatter.format(title).strip()

    def _finalize(self, markdown: str) -> str:
        """Apply canonicalize mode or the minimal legacy cleanup."""
        if self.canonicalize:
            markdown = normalize_quotes(markdown)
            return self.formatter.format(markdown)

        markdown = markdown.lstrip('\n').rstrip()
        return markdown + '\n' if markdown else ''

    def convert_img(self, el, text, parent_tags=None, **kwargs):
        """Handle images, keeping them even inside headings and table cells."""
        src = el.get('src', '') or ''
        alt = el.get('alt', '') or ''
        title = el.get('title', '') or ''

        if not src:
            return alt

        alt = alt.replace('\n', ' ')
        title_part = ' "%s"' % title.replace('"', r'\"') if title else ''
        return f'![{alt}]({src}{title_part})'

    def convert_script(self, el, text, parent_tags=None, **kwargs):
        """Drop any script content the cleaner did not already remove."""
        return ''

    def convert_style(self, el, text, parent_tags=None, **kwargs):
        """Drop any style content the cleaner did not already remove."""
        return ''


__all__ = ['MarkdownConverter']
