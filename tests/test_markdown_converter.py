"""Tests for WordPress HTML to Markdown conversion."""

from unittest import mock

import pytest
from bs4 import BeautifulSoup

from converters import HtmlCleaner, MarkdownConverter, transform_body


@pytest.fixture
def converter():
    return MarkdownConverter()


@pytest.fixture
def legacy_converter():
    return MarkdownConverter(canonicalize=False)


class TestBodyConversion:
    """Structural conversion in canonicalize mode."""

    def test_paragraph_with_emphasis(self, converter):
        assert converter.transform_body('<p>Hello <em>world</em></p>') == 'Hello _world_\n'

    def test_underscores_in_image_url_survive_canonicalize(self, converter):
        html = '<p><img src="https://example.com/uploads/__init__.png"></p>'

        assert converter.transform_body(html) == '![](https://example.com/uploads/__init__.png)\n'

    def test_empty_body(self, converter):
        assert converter.transform_body('') == ''
        assert converter.transform_body('  \n ') == ''

    def test_heading_and_list(self, converter):
        result = converter.transform_body('<h2>Section</h2><ul><li>one</li><li>two</li></ul>')

        assert '## Section' in result
        assert '- one\n- two' in result

    def test_source_newlines_between_list_items(self, converter):
        result = converter.transform_body('<ul>\n<li>one</li>\n<li>two</li>\n</ul>')

        assert '- one\n- two' in result

    def test_newlines_become_line_breaks(self, converter):
        result = converter.transform_body('<p>line one\nline two</p>')

        assert 'line one  \nline two' in result

    def test_image_with_title(self, converter):
        result = converter.transform_body('<p><img src="https://example.com/a.png" alt="A" title="T"></p>')

        assert '![A](https://example.com/a.png "T")' in result

    def test_image_without_src_keeps_alt(self, converter):
        result = converter.transform_body('<p><img alt="missing"></p>')

        assert result == 'missing\n'

    def test_block_editor_comments_removed(self, converter):
        html = '<!-- wp:paragraph -->\n<p>Text</p>\n<!-- /wp:paragraph -->'

        result = converter.transform_body(html)

        assert result == 'Text\n'
        assert 'wp:paragraph' not in result

    def test_caption_shortcode_unwrapped(self, converter):
        html = (
            '[caption id="attachment_5" align="aligncenter" width="300"]'
            '<img src="https://example.com/p.jpg" alt="Alt" /> A caption[/caption]'
        )

        result = converter.transform_body(html)

        assert '![Alt](https://example.com/p.jpg)' in result
        assert 'A caption' in result
        assert '[caption' not in result

    def test_scripts_are_dropped(self, converter):
        result = converter.transform_body('<p>Before</p><script>alert(1)</script><p>After</p>')

        assert 'alert' not in result
        assert 'Before' in result
        assert 'After' in result

    def test_quotes_normalized(self, converter):
        assert converter.transform_body('<p>他说“你好”</p>') == '他说「你好」\n'

    def test_fallback_to_plain_text(self, converter):
        with mock.patch.object(converter, 'convert', side_effect=RuntimeError('boom')):
            result = converter.transform_body('<p>Plain text</p>')

        assert result == 'Plain text\n'


class TestLegacyMode:
    """With canonicalize off the converter output is emitted as-is."""

    def test_emphasis_kept_as_asterisks(self, legacy_converter):
        assert legacy_converter.transform_body('<p>Hello <em>world</em></p>') == 'Hello *world*\n'

    def test_quotes_untouched(self, legacy_converter):
        assert '“你好”' in legacy_converter.transform_body('<p>他说“你好”</p>')

    def test_title_only_stripped(self, legacy_converter):
        assert legacy_converter.transform_title('  “Hi” there ') == '“Hi” there'

    def test_canonicalize_read_from_config(self):
        converter = MarkdownConverter(config={'migration': {'canonicalize': False}})

        assert converter.canonicalize is False


class TestTitles:

    def test_title_normalized(self, converter):
        assert converter.transform_title('  “Hi” there ') == '「Hi」 there'

    def test_plain_title(self, converter):
        assert converter.transform_title('Hello World') == 'Hello World'

    def test_empty_title(self, converter):
        assert converter.transform_title('') == ''


class TestHtmlCleaner:

    def test_empty_wrappers_removed(self):
        soup = BeautifulSoup('<div><span></span><p>kept</p><p class="spacer"></p></div>', 'lxml')

        cleaned = HtmlCleaner().clean(soup)

        assert cleaned.find('span') is None
        assert cleaned.find('p', class_='spacer') is not None
        assert cleaned.get_text() == 'kept'

    def test_strip_shortcodes_without_caption(self):
        html = '<p>[gallery ids="1,2"]</p>'

        assert HtmlCleaner().strip_shortcodes(html) == html


def test_module_level_transform_body():
    assert transform_body('<p>Hello <strong>bold</strong></p>') == 'Hello **bold**\n'
