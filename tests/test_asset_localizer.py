"""Tests for rewriting remote images to post-local filenames."""

import pytest

from exporters.asset_localizer import RegexAssetLocalizer
from models import AssetReference


@pytest.fixture
def localizer():
    return RegexAssetLocalizer()


class TestLocalize:

    def test_single_image(self, localizer):
        result = localizer.localize('Hi\n\n![](https://example.com/a/b.png)\n')

        assert result.markdown == 'Hi\n\n![](b.png)\n'
        assert result.assets == {'b.png': 'https://example.com/a/b.png'}

    def test_alt_text_and_title(self, localizer):
        result = localizer.localize('![A cat](https://cdn.example.com/2020/01/cat.jpg "Cute") after')

        assert result.markdown == '![A cat](cat.jpg) after'
        assert result.assets == {'cat.jpg': 'https://cdn.example.com/2020/01/cat.jpg'}

    def test_query_string_is_not_part_of_filename(self, localizer):
        result = localizer.localize('![](https://example.com/img/photo.jpg?w=300&h=200)')

        assert result.markdown == '![](photo.jpg)'
        assert result.assets == {'photo.jpg': 'https://example.com/img/photo.jpg?w=300&h=200'}

    def test_trailing_slash_uses_last_non_empty_segment(self, localizer):
        result = localizer.localize('![](https://example.com/images/banner/)')

        assert result.assets == {'banner': 'https://example.com/images/banner/'}

    def test_collision_last_seen_wins(self, localizer):
        markdown = '![](https://a.example/x/pic.png)\n\n![](https://b.example/y/pic.png)'

        result = localizer.localize(markdown)

        assert result.assets == {'pic.png': 'https://b.example/y/pic.png'}
        assert result.markdown == '![](pic.png)\n\n![](pic.png)'

    def test_several_images_on_one_line(self, localizer):
        result = localizer.localize('![](https://e.com/1.png) and ![](https://e.com/2.png)')

        assert result.markdown == '![](1.png) and ![](2.png)'
        assert set(result.assets) == {'1.png', '2.png'}

    def test_protocol_relative_url_fetched_over_https(self, localizer):
        result = localizer.localize('![](//cdn.example.com/a.gif)')

        assert result.markdown == '![](a.gif)'
        assert result.assets == {'a.gif': 'https://cdn.example.com/a.gif'}

    def test_references(self, localizer):
        result = localizer.localize('![](https://example.com/a/b.png)')

        assert list(result.references) == [
            AssetReference(remote_url='https://example.com/a/b.png', local_filename='b.png')
        ]


class TestUnchanged:
    """Images with nothing to fetch or no filename are left as they are."""

    @pytest.mark.parametrize('markdown', [
        '![](https://example.com/)',
        '![](https://example.com)',
        '![](relative/path.png)',
        '![](/uploads/local.png)',
        '![](data:image/png;base64,AAAA)',
        '![]()',
        '![](https://example.com/a/..)',
    ])
    def test_left_unchanged(self, localizer, markdown):
        result = localizer.localize(markdown)

        assert result.markdown == markdown
        assert result.assets == {}

    def test_plain_links_are_not_images(self, localizer):
        markdown = '[link](https://example.com/file.pdf)'

        assert localizer.localize(markdown).markdown == markdown

    def test_no_images(self, localizer):
        result = localizer.localize('Just text\n')

        assert result.markdown == 'Just text\n'
        assert result.assets == {}
