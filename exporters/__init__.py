"""Exporters package writing converted posts to the local filesystem.

Package Structure:
- asset_localizer: Rewrites remote image URLs to post-local filenames
- post_writer: Creates ``{date}-{slug}/index.md`` with YAML front matter
- markdown_reader: Reads written ``index.md`` files back for verification

Configuration Referenced:
- export.output_directory: Base output path for post directories
"""

from .asset_localizer import AssetLocalizer, RegexAssetLocalizer
from .markdown_reader import MarkdownReader, read_front_matter, split_front_matter
from .post_writer import PostWriter, render_document, slugify

__all__ = [
    'AssetLocalizer',
    'RegexAssetLocalizer',
    'PostWriter',
    'render_document',
    'slugify',
    'MarkdownReader',
    'read_front_matter',
    'split_front_matter',
]
