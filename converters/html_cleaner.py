"""HTML cleaner for removing WordPress-specific markup without losing content."""

import logging
import re

from bs4 import BeautifulSoup, Comment

logger = logging.getLogger('wordpress_markdown_migrator.converters.htmlcleaner')

# [caption id="..." align="..." width="..."]<img ...> Caption text[/caption]
CAPTION_SHORTCODE_PATTERN = re.compile(r'\[caption[^\]]*\](.*?)\[/caption\]', re.DOTALL | re.IGNORECASE)

# Containers where a line break can only come from collapsed source newlines
STRUCTURAL_PARENTS = {'ul', 'ol', 'table', 'thead', 'tbody', 'tfoot', 'tr'}


class HtmlCleaner:
    """Removes WordPress editor markup so the converter only sees content."""

    def __init__(self, logger: logging.Logger = None):
        """Initialize HTML cleaner with optional logger."""
        self.logger = logger or logging.getLogger('wordpress_markdown_migrator.converters.htmlcleaner')

    def strip_shortcodes(self, html_content: str) -> str:
        """Unwrap ``[caption]`` shortcodes, keeping the wrapped HTML."""
        if '[caption' not in html_content.lower():
            return html_content
        return CAPTION_SHORTCODE_PATTERN.sub(lambda match: match.group(1), html_content)

    def clean(self, soup: BeautifulSoup) -> BeautifulSoup:
        """
        Main entry point to clean parsed post HTML.

        Args:
            soup: BeautifulSoup object with the post body

        Returns:
            Cleaned BeautifulSoup object
        """
        self.logger.debug("Cleaning post HTML")

        self._remove_comments(soup)

        for element in soup.find_all(['script', 'style', 'noscript']):
            element.decompose()

        self._remove_structural_breaks(soup)
        self._remove_empty_elements(soup)

        self.logger.debug("HTML cleaning completed")
        return soup

    def _remove_comments(self, soup: BeautifulSoup) -> None:
        """Drop HTML comments, including block editor markers like <!-- wp:paragraph -->."""
        comments = soup.find_all(string=lambda text: isinstance(text, Comment))
        for comment in comments:
            comment.extract()
        if comments:
            self.logger.debug(f"Removed {len(comments)} HTML comments")

    def _remove_structural_breaks(self, soup: BeautifulSoup) -> None:
        """Drop <br> elements sitting directly inside lists and tables."""
        for br in soup.find_all('br'):
            if br.parent is not None and br.parent.name in STRUCTURAL_PARENTS:
                br.decompose()

    def _remove_empty_elements(self, soup: BeautifulSoup) -> None:
        """Remove empty elements that serve no purpose."""
        removed_count = 0

        # br and img are void elements and carry meaning without text
        for element in soup.find_all(['div', 'span', 'p']):
            if element.find():
                continue

            has_text = bool(element.get_text(strip=True))
            has_attrs = bool(element.attrs)

            if not has_text and not has_attrs:
                element.decompose()
                removed_count += 1

        if removed_count:
            self.logger.debug(f"Removed {removed_count} empty elements")


__all__ = ['HtmlCleaner']
