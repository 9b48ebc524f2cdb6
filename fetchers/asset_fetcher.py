"""Asset fetcher downloading remote images into a post directory."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config_loader import DEFAULT_USER_AGENT, get_nested
from exceptions import FetchError

PROXY_ENV_VARS = ('https_proxy', 'HTTPS_PROXY', 'http_proxy', 'HTTP_PROXY')
DEFAULT_TIMEOUT = 30


def resolve_proxy(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the first proxy URL set in the environment, or None."""
    if environ is None:
        environ = os.environ
    for name in PROXY_ENV_VARS:
        value = (environ.get(name) or '').strip()
        if value:
            return value
    return None


def build_session(
    proxy: Optional[str] = None,
    user_agent: Optional[str] = None,
    pool_size: int = 10
) -> requests.Session:
    """
    Build the shared HTTP session used for every asset download.

    Args:
        proxy: Proxy URL applied to both http and https requests
        user_agent: User-Agent header value
        pool_size: Connection pool size per host

    Returns:
        Configured requests.Session
    """
    session = requests.Session()
    session.headers['User-Agent'] = user_agent or DEFAULT_USER_AGENT

    if proxy:
        session.proxies = {'http': proxy, 'https': proxy}

    # One attempt per asset; urllib3 must not retry behind our back
    adapter = HTTPAdapter(
        max_retries=Retry(total=0, raise_on_status=False),
        pool_connections=pool_size,
        pool_maxsize=pool_size
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    return session


class AssetFetcher:
    """
    Downloads a post's assets concurrently.

    Each asset is one GET through the shared session. A failing asset is
    logged with its URL and counted; it never affects its siblings.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the asset fetcher.

        Args:
            config: Configuration dictionary
            session: Shared HTTP session (built from config when omitted)
            logger: Logger instance
        """
        self.config = config or {}
        self.logger = logger or logging.getLogger('wordpress_markdown_migrator.fetchers.asset_fetcher')

        self.max_workers = get_nested(self.config, 'migration.asset_workers', 4)
        self.timeout = get_nested(self.config, 'network.request_timeout', DEFAULT_TIMEOUT)

        if session is None:
            proxy = get_nested(self.config, 'network.proxy') or resolve_proxy()
            session = build_session(
                proxy=proxy,
                user_agent=get_nested(self.config, 'network.user_agent'),
                pool_size=max(self.max_workers, 10)
            )
        self.session = session

    def fetch_all(self, assets: Mapping[str, str], directory: Union[str, Path]) -> Dict[str, int]:
        """
        Download every asset into ``directory``.

        Args:
            assets: Mapping of local filename to remote URL
            directory: Post directory the files are written into

        Returns:
            Stats dict with total, downloaded, failed and bytes
        """
        stats = {'total': len(assets), 'downloaded': 0, 'failed': 0, 'bytes': 0}
        if not assets:
            return stats

        directory = Path(directory)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_asset = {
                executor.submit(self.fetch, url, directory / filename): (filename, url)
                for filename, url in assets.items()
            }

            for future, (filename, url) in future_to_asset.items():
                try:
                    size = future.result()
                except FetchError as e:
                    stats['failed'] += 1
                    self.logger.error(f"Failed to fetch asset {e.url}: {e}")
                else:
                    stats['downloaded'] += 1
                    stats['bytes'] += size

        self.logger.debug(
            f"Fetched {stats['downloaded']}/{stats['total']} assets into {directory} "
            f"({stats['failed']} failed)"
        )
        return stats

    def fetch(self, url: str, target: Path) -> int:
        """
        Download one URL to ``target``.

        Returns:
            Number of bytes written

        Raises:
            FetchError: On network errors, non-2xx responses or write failures
        """
        try:
            # Per-request proxies take precedence over the proxy environment variables
            response = self.session.get(url, timeout=self.timeout, proxies=self.session.proxies or None)
            response.raise_for_status()
            content = response.content
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            raise FetchError(url, f"cannot write {target}: {e}") from e

        self.logger.debug(f"Downloaded {url} -> {target} ({len(content)} bytes)")
        return len(content)


__all__ = ['AssetFetcher', 'build_session', 'resolve_proxy']
