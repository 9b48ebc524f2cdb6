"""Tests for post directory naming, front matter and index.md writing."""

from datetime import datetime

import pytest

from config_loader import PROGRAM_DIR
from exceptions import WriteError
from exporters.markdown_reader import MarkdownReader, read_front_matter, split_front_matter
from exporters.post_writer import PostWriter, render_document, slugify
from models import FrontMatter, Post, PostStatus


def make_post(**overrides) -> Post:
    fields = dict(
        id=42,
        title='Hello World',
        slug='',
        published_at=datetime(2020, 1, 2, 3, 4, 5),
        status=PostStatus.PUBLISHED,
        body_html='<p>Hi</p>',
        tags=['intro'],
    )
    fields.update(overrides)
    return Post(**fields)


@pytest.fixture
def writer(tmp_path):
    return PostWriter(output_dir=tmp_path / 'posts')


class TestSlugify:

    @pytest.mark.parametrize('value, expected', [
        ('Hello World', 'hello-world'),
        ('  Hello,   World!  ', 'hello-world'),
        ('C++ & Python', 'c-python'),
        ('snake_case Title', 'snake_case-title'),
        ('already-a-slug', 'already-a-slug'),
        ('你好 世界', '你好-世界'),
        ('Ｆｕｌｌｗｉｄｔｈ', 'fullwidth'),
        ('', 'untitled'),
        ('!!!', 'untitled'),
    ])
    def test_slugify(self, value, expected):
        assert slugify(value) == expected

    def test_truncated(self):
        slug = slugify('word ' * 50)

        assert len(slug) <= 100
        assert not slug.endswith('-')


class TestPostDirectory:

    def test_title_used_without_slug(self, writer, tmp_path):
        assert writer.post_directory(make_post(), 'Hello World') == tmp_path / 'posts' / '2020-01-02-hello-world'

    def test_slug_preferred_and_percent_decoded(self, writer, tmp_path):
        post = make_post(slug='%e4%bd%a0%e5%a5%bd')

        assert writer.post_directory(post, 'Hello World') == tmp_path / 'posts' / '2020-01-02-你好'

    def test_output_directory_from_config(self, tmp_path):
        writer = PostWriter({'export': {'output_directory': str(tmp_path / 'site')}})

        assert writer.output_dir == tmp_path / 'site'

    def test_default_output_directory_is_next_to_the_program(self):
        assert PostWriter().output_dir == PROGRAM_DIR / 'posts'

    def test_ensure_directory_is_idempotent(self, writer):
        first = writer.ensure_directory(make_post(), 'Hello World')
        second = writer.ensure_directory(make_post(), 'Hello World')

        assert first == second
        assert first.is_dir()


class TestWrite:

    def test_document_layout(self, writer):
        path = writer.write(make_post(), 'Hi\n', 'Hello World')

        content = path.read_text(encoding='utf-8')
        assert path.name == 'index.md'
        assert content.startswith('---\ndraft: false\npost_id: 42\n')
        assert content.endswith('---\n\nHi\n')

    def test_front_matter_round_trip(self, writer):
        path = writer.write(make_post(status=PostStatus.DRAFT, tags=['a', 'b']), 'Body\n', 'Hello World')

        front_matter, body = read_front_matter(path)

        assert list(front_matter) == ['draft', 'post_id', 'publish_date', 'revise_date', 'tags', 'title']
        assert front_matter['draft'] is True
        assert front_matter['post_id'] == 42
        assert front_matter['tags'] == ['a', 'b']
        assert front_matter['title'] == 'Hello World'
        assert front_matter['publish_date'] == front_matter['revise_date'] == '2020-01-02T03:04:05'
        assert body == 'Body\n'

    def test_unicode_title_kept_readable(self, writer):
        path = writer.write(make_post(title='「你好」'), 'Hi\n', '「你好」')

        assert 'title: 「你好」' in path.read_text(encoding='utf-8')

    def test_identical_content_is_not_rewritten(self, writer):
        first, changed = writer.write_with_status(make_post(), 'Hi\n', 'Hello World')
        second, changed_again = writer.write_with_status(make_post(), 'Hi\n', 'Hello World')

        assert first == second
        assert changed is True
        assert changed_again is False

    def test_changed_content_overwrites(self, writer):
        writer.write(make_post(), 'Old\n', 'Hello World')
        path, changed = writer.write_with_status(make_post(), 'New\n', 'Hello World')

        assert changed is True
        assert path.read_text(encoding='utf-8').endswith('\n\nNew\n')

    def test_unwritable_output_raises_write_error(self, tmp_path):
        blocker = tmp_path / 'posts'
        blocker.write_text('a file where the output directory should be')

        with pytest.raises(WriteError) as exc_info:
            PostWriter(output_dir=blocker).write(make_post(), 'Hi\n', 'Hello World')

        assert exc_info.value.path is not None


class TestRenderDocument:

    def test_empty_body(self):
        document = render_document(FrontMatter.from_post(make_post(tags=[]), 'T'), '')

        assert document.endswith('---\n\n')
        assert 'tags: []' in document

    def test_body_gets_single_trailing_newline(self):
        document = render_document(FrontMatter.from_post(make_post(), 'T'), '\nText\n\n\n')

        assert document.endswith('---\n\nText\n')


class TestMarkdownReader:

    def test_split_without_front_matter(self):
        assert split_front_matter('# Just markdown\n') == ({}, '# Just markdown\n')

    def test_read_output_directory(self, writer):
        writer.write(make_post(), 'One\n', 'Hello World')
        writer.write(make_post(id=7, title='Second'), 'Two\n', 'Second')

        reader = MarkdownReader()
        posts = reader.read_output_directory(writer.output_dir)

        assert sorted(post['front_matter']['post_id'] for post in posts) == [7, 42]
        assert reader.get_stats()['files_parsed'] == 2

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ValueError):
            MarkdownReader().read_output_directory(tmp_path / 'nope')
