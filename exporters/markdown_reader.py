"""Markdown reader for loading written ``index.md`` files back into metadata and body."""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

FRONT_MATTER_PATTERN = re.compile(r'^---\s*\n(.*?)\n?---\s*\n(.*)$', re.DOTALL)

logger = logging.getLogger('wordpress_markdown_migrator.exporters.markdown_reader')


def split_front_matter(content: str) -> Tuple[Dict[str, Any], str]:
    """
    Extract YAML front matter from markdown content.

    Args:
        content: Full file content

    Returns:
        Tuple of (front matter dict, markdown body). The dict is empty when the
        content has no front matter block or the block is not a mapping.
    """
    match = FRONT_MATTER_PATTERN.match(content)
    if not match:
        return {}, content

    try:
        front_matter = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        logger.warning(f"Failed to parse YAML front matter: {e}")
        return {}, content

    if not isinstance(front_matter, dict):
        logger.warning("Front matter is not a dictionary")
        return {}, content

    return front_matter, match.group(2).lstrip('\n')


def read_front_matter(path: Union[str, Path]) -> Tuple[Dict[str, Any], str]:
    """Read an ``index.md`` file and split it into (front matter, body)."""
    return split_front_matter(Path(path).read_text(encoding='utf-8'))


class MarkdownReader:
    """Scans an output directory and loads every post's ``index.md``."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, logger: Optional[logging.Logger] = None):
        self.config = config or {}
        self.logger = logger or logging.getLogger('wordpress_markdown_migrator.exporters.markdown_reader')

        self.stats = {
            'files_scanned': 0,
            'files_parsed': 0,
            'files_skipped': 0,
        }

    def read_output_directory(self, output_dir: Union[str, Path]) -> List[Dict[str, Any]]:
        """
        Load all posts under ``output_dir``.

        Returns:
            List of dicts with ``path``, ``front_matter`` and ``body``, sorted by path

        Raises:
            ValueError: If output_dir is not a directory
        """
        output_dir = Path(output_dir)
        if not output_dir.is_dir():
            raise ValueError(f"Output directory does not exist: {output_dir}")

        posts = []
        for file_path in sorted(output_dir.glob('*/index.md')):
            self.stats['files_scanned'] += 1
            front_matter, body = read_front_matter(file_path)
            if 'post_id' not in front_matter:
                self.logger.warning(f"No post front matter in {file_path}")
                self.stats['files_skipped'] += 1
                continue

            posts.append({'path': file_path, 'front_matter': front_matter, 'body': body})
            self.stats['files_parsed'] += 1

        self.logger.info(
            f"Read {self.stats['files_parsed']} posts from {output_dir} "
            f"({self.stats['files_skipped']} skipped)"
        )
        return posts

    def get_stats(self) -> Dict[str, Any]:
        """Return current statistics."""
        return self.stats.copy()


__all__ = ['MarkdownReader', 'read_front_matter', 'split_front_matter']
