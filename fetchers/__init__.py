"""Fetchers package for reading the WordPress export and downloading remote assets."""

from .asset_fetcher import AssetFetcher, build_session, resolve_proxy
from .export_parser import ExportParser, parse_export, parse_export_date

__all__ = [
    'ExportParser',
    'parse_export',
    'parse_export_date',
    'AssetFetcher',
    'build_session',
    'resolve_proxy',
]
