"""Shared fixtures: a small WordPress export and an in-memory HTTP session."""

import threading
from typing import Dict, List, Optional

import pytest
import requests

EXPORT_HEADER = b'''<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
    xmlns:excerpt="http://wordpress.org/export/1.2/excerpt/"
    xmlns:content="http://purl.org/rss/1.0/modules/content/"
    xmlns:wfw="http://wellformedweb.org/CommentAPI/"
    xmlns:dc="http://purl.org/dc/elements/1.1/"
    xmlns:wp="http://wordpress.org/export/1.2/">
<channel>
    <title>Example Blog</title>
    <link>https://example.com</link>
'''

EXPORT_FOOTER = b'''
</channel>
</rss>
'''


def make_item(
    post_id='42',
    title='Hello World',
    slug='',
    post_date='2020-01-02 03:04:05',
    status='publish',
    post_type='post',
    body='<p>Hi</p>',
    categories=('intro',),
) -> str:
    """Render one export <item>; pass None to omit an element."""
    parts = ['<item>']
    if title is not None:
        parts.append(f'<title>{title}</title>')
    parts.append('<pubDate>Thu, 02 Jan 2020 03:04:05 +0000</pubDate>')
    for category in categories:
        parts.append(f'<category domain="category" nicename="{category}"><![CDATA[{category}]]></category>')
    if body is not None:
        parts.append(f'<content:encoded><![CDATA[{body}]]></content:encoded>')
    parts.append('<excerpt:encoded><![CDATA[]]></excerpt:encoded>')
    if post_id is not None:
        parts.append(f'<wp:post_id>{post_id}</wp:post_id>')
    if post_date is not None:
        parts.append(f'<wp:post_date><![CDATA[{post_date}]]></wp:post_date>')
    parts.append(f'<wp:post_name><![CDATA[{slug}]]></wp:post_name>')
    parts.append(f'<wp:status><![CDATA[{status}]]></wp:status>')
    parts.append(f'<wp:post_type><![CDATA[{post_type}]]></wp:post_type>')
    parts.append('</item>')
    return '\n'.join(parts)


def make_export(*items: str) -> bytes:
    """Wrap rendered items in an rss/channel document."""
    return EXPORT_HEADER + '\n'.join(items).encode('utf-8') + EXPORT_FOOTER


def make_response(url: str, status_code: int = 200, content: bytes = b'') -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = content
    response.url = url
    response.reason = 'OK' if status_code < 400 else 'Not Found'
    return response


class StubSession:
    """Stands in for requests.Session, serving canned responses per URL."""

    def __init__(self, responses: Optional[Dict[str, object]] = None):
        # url -> bytes (200), int (status code) or Exception instance
        self.responses = responses or {}
        self.requested: List[str] = []
        self.proxies: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, url, timeout=None, **kwargs):
        with self._lock:
            self.requested.append(url)
        outcome = self.responses.get(url, 404)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, int):
            return make_response(url, outcome)
        return make_response(url, 200, outcome)

    def close(self):
        pass


@pytest.fixture
def hello_export() -> bytes:
    """The single-post export: id 42, 'Hello World', one image."""
    return make_export(make_item(body='<p>Hi</p>\n\n<img src="https://example.com/a/b.png">'))


@pytest.fixture
def stub_session() -> StubSession:
    return StubSession({'https://example.com/a/b.png': b'\x89PNG fake image'})


@pytest.fixture
def migration_config(tmp_path) -> dict:
    return {
        'export': {'output_directory': str(tmp_path / 'posts'), 'progress_bars': False},
        'migration': {'canonicalize': True, 'post_workers': 2, 'asset_workers': 2},
        'network': {'proxy': None, 'request_timeout': 5},
    }
