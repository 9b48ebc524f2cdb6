"""Asset localizer rewriting remote Markdown images to post-local filenames."""

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple
from urllib.parse import urlparse

from models import LocalizedMarkdown

IMAGE_PATTERN = re.compile(r'!\[(.*?)\]\((.*?)\)', re.MULTILINE)
FETCHABLE_SCHEMES = ('http', 'https')


class AssetLocalizer(ABC):
    """Finds remote images in Markdown and maps them onto local filenames."""

    @abstractmethod
    def localize(self, markdown: str) -> LocalizedMarkdown:
        """
        Rewrite image references to local filenames.

        Args:
            markdown: Post body in Markdown

        Returns:
            LocalizedMarkdown with the rewritten text and a {filename: url} map
        """


class RegexAssetLocalizer(AssetLocalizer):
    """
    Regex-based localizer for ``![alt](url "title")`` images.

    For every image whose URL is fetchable and has a filename, the
    parenthesized destination is replaced with the bare filename. When two
    URLs share a filename the last one seen is the one scheduled, and both
    references point at that single file.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('wordpress_markdown_migrator.exporters.asset_localizer')

    def localize(self, markdown: str) -> LocalizedMarkdown:
        assets: Dict[str, str] = {}

        def replace_image(match: re.Match) -> str:
            destination = match.group(2)
            resolved = self.resolve_asset(destination)
            if resolved is None:
                return match.group(0)

            url, filename = resolved
            previous = assets.get(filename)
            if previous is not None and previous != url:
                self.logger.warning(f"Filename collision for '{filename}': {previous} replaced by {url}")
            assets[filename] = url

            start, end = match.span(2)
            offset = match.start(0)
            text = match.group(0)
            return text[:start - offset] + filename + text[end - offset:]

        localized = IMAGE_PATTERN.sub(replace_image, markdown or '')
        if assets:
            self.logger.debug(f"Localized {len(assets)} assets")
        return LocalizedMarkdown(markdown=localized, assets=assets)

    @staticmethod
    def resolve_asset(destination: str) -> Optional[Tuple[str, str]]:
        """
        Split an image destination into (fetch URL, local filename).

        Returns None when the destination is not a remote URL or its path
        has no final segment to name the file after.
        """
        parts = destination.strip().split(None, 1)
        if not parts:
            return None

        url = parts[0].strip('<>')
        if url.startswith('//'):
            url = 'https:' + url

        parsed = urlparse(url)
        if parsed.scheme.lower() not in FETCHABLE_SCHEMES or not parsed.netloc:
            return None

        segments = [segment for segment in parsed.path.split('/') if segment]
        if not segments or segments[-1] in ('.', '..'):
            return None

        return url, segments[-1]


__all__ = ['AssetLocalizer', 'RegexAssetLocalizer', 'IMAGE_PATTERN']
