"""
Migration orchestrator driving every post through the pipeline.

Each post goes Transform → Localize → Ensure directory → Fetch assets → Write.
Posts run concurrently; a failing post is recorded and never stops the others.
"""

import logging
import sys
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from config_loader import get_nested
from converters import MarkdownConverter
from exporters import AssetLocalizer, PostWriter, RegexAssetLocalizer
from fetchers import AssetFetcher
from logger import ProgressTracker, log_section
from models import Post


class MigrationOrchestrator:
    """Central coordinator running transform, localize, fetch and write for every post."""

    def __init__(
        self,
        config: Dict[str, Any],
        converter: Optional[MarkdownConverter] = None,
        localizer: Optional[AssetLocalizer] = None,
        fetcher: Optional[AssetFetcher] = None,
        writer: Optional[PostWriter] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize migration orchestrator.

        Args:
            config: Configuration dictionary
            converter: Content transformer (built from config when omitted)
            localizer: Asset localizer (regex implementation when omitted)
            fetcher: Asset fetcher (built from config when omitted)
            writer: Post writer (built from config when omitted)
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger('wordpress_markdown_migrator.orchestrator')

        self.converter = converter or MarkdownConverter(config=config)
        self.localizer = localizer or RegexAssetLocalizer()
        self.fetcher = fetcher or AssetFetcher(config)
        self.writer = writer or PostWriter(config)

        self.post_workers = get_nested(config, 'migration.post_workers', 4)
        self.show_progress = get_nested(config, 'export.progress_bars', True)

    def run(self, posts: List[Post]) -> Dict[str, Any]:
        """
        Migrate all posts concurrently.

        Args:
            posts: Eligible posts from the export parser

        Returns:
            Report dictionary with post and asset counters and failures
        """
        log_section("Migrating posts")
        start_time = time.time()

        report = {
            'posts_total': len(posts),
            'posts_written': 0,
            'posts_unchanged': 0,
            'posts_failed': 0,
            'assets_total': 0,
            'assets_downloaded': 0,
            'assets_failed': 0,
            'assets_bytes': 0,
            'failures': [],
            'duration_seconds': 0.0,
        }

        if not posts:
            self.logger.warning("No posts to migrate")
            return report

        with ProgressTracker(total_items=len(posts), item_type='posts', logger=self.logger) as tracker, \
                ThreadPoolExecutor(max_workers=self.post_workers) as executor:
            future_to_post = {executor.submit(self.migrate_post, post): post for post in posts}

            completed = as_completed(future_to_post)
            if self._should_show_progress():
                completed = tqdm(completed, desc="Migrating posts", total=len(posts), unit="post")

            for future in completed:
                post = future_to_post[future]
                try:
                    result = future.result()
                except Exception as e:
                    self.logger.error(f"Failed to migrate post {post.id} '{post.title}': {e}")
                    report['posts_failed'] += 1
                    report['failures'].append({'post_id': post.id, 'title': post.title, 'error': str(e)})
                    tracker.increment(success=False)
                    continue

                if result['changed']:
                    report['posts_written'] += 1
                else:
                    report['posts_unchanged'] += 1

                assets = result['assets']
                report['assets_total'] += assets['total']
                report['assets_downloaded'] += assets['downloaded']
                report['assets_failed'] += assets['failed']
                report['assets_bytes'] += assets['bytes']
                tracker.increment(success=True)

        report['duration_seconds'] = time.time() - start_time
        self.logger.info(
            f"Migration complete: {report['posts_written']} written, {report['posts_unchanged']} unchanged, "
            f"{report['posts_failed']} failed in {report['duration_seconds']:.2f}s"
        )
        return report

    def migrate_post(self, post: Post) -> Dict[str, Any]:
        """
        Run one post through the whole pipeline.

        Returns:
            Dict with ``post_id``, ``path``, ``changed`` and the asset ``assets`` stats

        Raises:
            WriteError: If the post directory or index.md cannot be written
        """
        self.logger.debug(f"Migrating post {post.id} '{post.title}'")

        markdown = self.converter.transform_body(post.body_html)
        title = self.converter.transform_title(post.title)

        localized = self.localizer.localize(markdown)

        directory = self.writer.ensure_directory(post, title)
        asset_stats = self.fetcher.fetch_all(localized.assets, directory)

        path, changed = self.writer.write_with_status(post, localized.markdown, title)

        return {
            'post_id': post.id,
            'path': path,
            'changed': changed,
            'assets': asset_stats,
        }

    def _should_show_progress(self) -> bool:
        """Progress bars only make sense on an interactive terminal."""
        return bool(self.show_progress) and sys.stdout.isatty()


__all__ = ['MigrationOrchestrator']
