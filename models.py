"""Data models for the WordPress to Markdown migration pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List


class PostStatus(Enum):
    """Publication status of an exported post."""
    PUBLISHED = "publish"
    DRAFT = "draft"
    OTHER = "other"

    @classmethod
    def from_export(cls, value: str) -> 'PostStatus':
        """Map a raw ``wp:status`` value onto the enum."""
        value = (value or '').strip().lower()
        for status in (cls.PUBLISHED, cls.DRAFT):
            if status.value == value:
                return status
        return cls.OTHER


@dataclass(frozen=True)
class Post:
    """A single eligible post parsed from the export document."""

    id: int
    title: str
    slug: str
    published_at: datetime
    status: PostStatus
    body_html: str
    tags: List[str] = field(default_factory=list)
    post_type: str = 'post'
    raw_status: str = ''

    @property
    def is_draft(self) -> bool:
        """Check if the post is a draft."""
        return self.status is PostStatus.DRAFT


@dataclass(frozen=True)
class AssetReference:
    """Remote image discovered in a post body and the local name it maps to."""

    remote_url: str
    local_filename: str


@dataclass
class LocalizedMarkdown:
    """Markdown with remote image URLs rewritten to local filenames."""

    markdown: str
    assets: Dict[str, str] = field(default_factory=dict)  # {local_filename: remote_url}

    @property
    def references(self) -> Iterator[AssetReference]:
        """Iterate the asset mapping as references."""
        for filename, url in self.assets.items():
            yield AssetReference(remote_url=url, local_filename=filename)


@dataclass
class FrontMatter:
    """Metadata block written at the top of each ``index.md``."""

    draft: bool
    post_id: int
    publish_date: str
    revise_date: str
    tags: List[str]
    title: str

    @classmethod
    def from_post(cls, post: Post, title: str) -> 'FrontMatter':
        """Build front matter for ``post`` using an already normalized title."""
        date = post.published_at.isoformat()
        return cls(
            draft=post.is_draft,
            post_id=post.id,
            publish_date=date,
            revise_date=date,
            tags=list(post.tags),
            title=title,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize front matter in output key order."""
        return {
            'draft': self.draft,
            'post_id': self.post_id,
            'publish_date': self.publish_date,
            'revise_date': self.revise_date,
            'tags': list(self.tags),
            'title': self.title,
        }
