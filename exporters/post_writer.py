"""Post writer creating one dated directory with an ``index.md`` per post."""

import logging
import re
import unicodedata
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import unquote

import yaml

from config_loader import PROGRAM_DIR, get_nested
from exceptions import WriteError
from models import FrontMatter, Post

INDEX_FILENAME = 'index.md'
MAX_SLUG_LENGTH = 100


def slugify(value: str) -> str:
    """
    Convert a title or slug into a filesystem-safe directory component.

    Unicode letters are kept, so CJK titles stay readable.

    Example:
        >>> slugify('Hello World')
        'hello-world'
    """
    if not value:
        return 'untitled'

    slug = unicodedata.normalize('NFKC', value).lower()

    # Anything that is not a word character or hyphen becomes a hyphen
    slug = re.sub(r'[^\w-]+', '-', slug)
    slug = re.sub(r'-+', '-', slug).strip('-')

    slug = slug[:MAX_SLUG_LENGTH].rstrip('-')
    return slug or 'untitled'


def render_document(front_matter: FrontMatter, markdown: str) -> str:
    """Assemble the ``index.md`` text: YAML front matter, blank line, body."""
    yaml_str = yaml.dump(
        front_matter.to_dict(),
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=1000  # Prevent line wrapping
    )

    body = markdown.strip('\n')
    body = body + '\n' if body.strip() else ''
    return f"---\n{yaml_str}---\n\n{body}"


class PostWriter:
    """
    Writes converted posts under the output directory.

    Layout: ``{output}/{YYYY-MM-DD}-{slug}/index.md`` with downloaded assets
    stored next to the ``index.md``.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        logger: Optional[logging.Logger] = None,
        output_dir: Optional[Union[str, Path]] = None
    ):
        """
        Initialize the post writer.

        Args:
            config: Configuration dictionary
            logger: Logger instance
            output_dir: Override for export.output_directory
        """
        self.config = config or {}
        self.logger = logger or logging.getLogger('wordpress_markdown_migrator.exporters.post_writer')

        output_dir = output_dir or get_nested(self.config, 'export.output_directory', str(PROGRAM_DIR / 'posts'))
        self.output_dir = Path(output_dir)

    def post_directory(self, post: Post, title: str) -> Path:
        """Return the directory a post is written to."""
        candidate = unquote(post.slug) if post.slug else title
        return self.output_dir / f"{post.published_at:%Y-%m-%d}-{slugify(candidate)}"

    def ensure_directory(self, post: Post, title: str) -> Path:
        """
        Create the post directory if needed.

        Raises:
            WriteError: If the directory cannot be created
        """
        directory = self.post_directory(post, title)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteError(f"Cannot create directory for post {post.id}: {e}", path=str(directory)) from e
        return directory

    def write(self, post: Post, markdown: str, title: str) -> Path:
        """
        Write ``index.md`` for a post, overwriting any previous version.

        Returns:
            Path of the written ``index.md``

        Raises:
            WriteError: If the directory or file cannot be written
        """
        path, _ = self.write_with_status(post, markdown, title)
        return path

    def write_with_status(self, post: Post, markdown: str, title: str) -> Tuple[Path, bool]:
        """
        Write ``index.md`` and report whether the file changed.

        Returns:
            Tuple of (path, changed); changed is False when the existing file
            already held identical content and the write was skipped
        """
        directory = self.ensure_directory(post, title)
        page_file = directory / INDEX_FILENAME
        document = render_document(FrontMatter.from_post(post, title), markdown)

        if page_file.exists():
            try:
                if page_file.read_text(encoding='utf-8') == document:
                    self.logger.debug(f"Markdown unchanged for post {post.id} '{title}', skipping write")
                    return page_file, False
            except (OSError, UnicodeDecodeError) as e:
                self.logger.debug(f"Could not read existing file {page_file}: {e}, proceeding with write")

        try:
            page_file.write_text(document, encoding='utf-8')
        except OSError as e:
            raise WriteError(f"Cannot write {page_file}: {e}", path=str(page_file)) from e

        self.logger.debug(f"Wrote {len(document)} characters to {page_file}")
        return page_file, True


__all__ = ['PostWriter', 'render_document', 'slugify', 'INDEX_FILENAME']
