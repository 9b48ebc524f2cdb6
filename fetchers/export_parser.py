"""WordPress export (WXR) parser producing typed post records."""

import html
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dateutil import parser as date_parser
from dateutil.parser import isoparse
from lxml import etree

from exceptions import ParseError
from models import Post, PostStatus

# Namespace URIs used by WordPress exports, mapped to their conventional prefixes
CONTENT_NAMESPACE = 'http://purl.org/rss/1.0/modules/content/'
WORDPRESS_NAMESPACE_PREFIX = 'http://wordpress.org/export/'

EPOCH = datetime(1970, 1, 1)


class ExportParser:
    """
    Turns a WordPress export document into an ordered list of eligible posts.

    The parser:
    1. Parses the XML into an element tree (rss -> channel -> item)
    2. Flattens each item into prefixed field names (``wp:post_id``, ``content:encoded``)
    3. Maps fields onto Post records with field-level defaults
    4. Drops items that are not posts or have an empty body
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, logger: Optional[logging.Logger] = None):
        """
        Initialize the export parser.

        Args:
            config: Configuration dictionary (unused keys are ignored)
            logger: Logger instance
        """
        self.config = config or {}
        self.logger = logger or logging.getLogger('wordpress_markdown_migrator.fetchers.export_parser')

        self.stats = {
            'items_total': 0,
            'items_eligible': 0,
            'items_skipped': 0,
        }

    def parse_file(self, path: Union[str, Path]) -> List[Post]:
        """
        Read and parse an export document from disk.

        Raises:
            ParseError: If the file cannot be read or has the wrong shape
        """
        path = Path(path)
        self.logger.info(f"Reading export document {path}")
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ParseError(f"Cannot read export document {path}: {e}") from e
        return self.parse(data)

    def parse(self, data: bytes) -> List[Post]:
        """
        Parse raw export bytes into eligible posts, in document order.

        Raises:
            ParseError: If the document is not XML or lacks rss/channel/item
        """
        items = self._find_items(data)
        self.stats['items_total'] = len(items)

        posts: List[Post] = []
        for index, item in enumerate(items):
            fields = self._collect_fields(item)
            if not self._is_eligible(fields):
                self.stats['items_skipped'] += 1
                self.logger.debug(
                    f"Skipping item {index} ({self._first(fields, 'wp:post_type') or 'no type'}): not an eligible post"
                )
                continue

            post = self._build_post(fields, index)
            if post is None:
                self.stats['items_skipped'] += 1
                continue

            posts.append(post)

        self.stats['items_eligible'] = len(posts)
        self.logger.info(
            f"Parsed {self.stats['items_total']} items: "
            f"{self.stats['items_eligible']} eligible posts, {self.stats['items_skipped']} skipped"
        )
        return posts

    def _find_items(self, data: bytes) -> List[etree._Element]:
        """Parse the document and return the channel's item elements."""
        parser = etree.XMLParser(resolve_entities=False, huge_tree=True, remove_comments=True)
        try:
            root = etree.fromstring(data, parser=parser)
        except etree.XMLSyntaxError as e:
            raise ParseError(f"Export document is not well-formed XML: {e}") from e

        if etree.QName(root).localname != 'rss':
            raise ParseError(f"Expected root element 'rss', found '{etree.QName(root).localname}'")

        channel = root.find('channel')
        if channel is None:
            raise ParseError("Export document has no 'channel' element")

        items = channel.findall('item')
        if not items:
            raise ParseError("Export channel contains no 'item' entries")

        return items

    def _collect_fields(self, item: etree._Element) -> Dict[str, List[str]]:
        """Flatten an item's children into {prefixed_name: [text, ...]}."""
        fields: Dict[str, List[str]] = {}
        for child in item:
            if not isinstance(child.tag, str):
                continue
            qname = etree.QName(child)
            prefix = self._prefix_for(qname.namespace, child.prefix)
            key = f"{prefix}:{qname.localname}" if prefix else qname.localname
            fields.setdefault(key, []).append(child.text or '')
        return fields

    @staticmethod
    def _prefix_for(namespace: Optional[str], fallback: Optional[str]) -> Optional[str]:
        """Map a namespace URI onto the prefix WordPress exports conventionally use."""
        if not namespace:
            return None
        if namespace == CONTENT_NAMESPACE:
            return 'content'
        if namespace.startswith(WORDPRESS_NAMESPACE_PREFIX):
            return 'excerpt' if namespace.rstrip('/').endswith('/excerpt') else 'wp'
        return fallback

    @staticmethod
    def _first(fields: Dict[str, List[str]], key: str, default: str = '') -> str:
        values = fields.get(key)
        if not values:
            return default
        return values[0]

    def _is_eligible(self, fields: Dict[str, List[str]]) -> bool:
        """Check the eligibility predicate: type is 'post' and body is non-empty."""
        post_type = self._first(fields, 'wp:post_type').strip()
        body = self._first(fields, 'content:encoded')
        return post_type == 'post' and bool(body.strip())

    def _build_post(self, fields: Dict[str, List[str]], index: int) -> Optional[Post]:
        """Map flattened item fields onto a Post, or None if it has no identity."""
        raw_id = self._first(fields, 'wp:post_id').strip()
        try:
            post_id = int(raw_id)
        except ValueError:
            self.logger.warning(f"Skipping item {index}: missing or invalid wp:post_id {raw_id!r}")
            return None

        title = self._first(fields, 'title')
        raw_status = self._first(fields, 'wp:status').strip()

        return Post(
            id=post_id,
            title=title,
            slug=self._first(fields, 'wp:post_name').strip(),
            published_at=self._resolve_date(fields, post_id),
            status=PostStatus.from_export(raw_status),
            body_html=self._first(fields, 'content:encoded'),
            tags=self._collect_tags(fields),
            post_type='post',
            raw_status=raw_status,
        )

    def _collect_tags(self, fields: Dict[str, List[str]]) -> List[str]:
        """Return category labels in document order, unescaped, without blanks."""
        tags = []
        for value in fields.get('category', []):
            label = html.unescape(value).strip()
            if label:
                tags.append(label)
        return tags

    def _resolve_date(self, fields: Dict[str, List[str]], post_id: int) -> datetime:
        """Pick the first parseable date among post_date, post_date_gmt and pubDate."""
        for key in ('wp:post_date', 'wp:post_date_gmt', 'pubDate'):
            parsed = parse_export_date(self._first(fields, key))
            if parsed is not None:
                return parsed

        self.logger.warning(f"Post {post_id} has no parseable date; using {EPOCH.date().isoformat()}")
        return EPOCH


def parse_export_date(value: str) -> Optional[datetime]:
    """
    Parse a WordPress date string.

    Accepts ``YYYY-MM-DD HH:MM:SS`` (wp:post_date) and RFC 822 dates (pubDate).
    WordPress writes ``0000-00-00 00:00:00`` for unscheduled drafts; that yields None.
    """
    value = (value or '').strip()
    if not value or value.startswith('0000-00-00'):
        return None

    try:
        parsed = isoparse(value)
    except ValueError:
        try:
            parsed = date_parser.parse(value)
        except (ValueError, OverflowError):
            return None
    return parsed.replace(tzinfo=None)


def parse_export(data: bytes, logger: Optional[logging.Logger] = None) -> List[Post]:
    """
    Convenience function to parse export bytes into eligible posts.

    Example:
        >>> from fetchers import parse_export
        >>> posts = parse_export(Path('blog.xml').read_bytes())
    """
    return ExportParser(logger=logger).parse(data)
