#!/usr/bin/env python3
"""
WordPress to Markdown Migration Tool - Main CLI Entry Point

This script reads a WordPress export (WXR) file and writes every post as
``{date}-{slug}/index.md`` with YAML front matter, next to local copies of
the images the post references.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

# Add project root to Python path for relative imports
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

# Project imports
from config_loader import ConfigLoader, get_nested
from converters import MarkdownConverter
from exceptions import ParseError
from exporters import PostWriter, RegexAssetLocalizer
from fetchers import AssetFetcher, ExportParser, build_session, resolve_proxy
from logger import log_config, log_section, setup_logging
from orchestrator import MigrationOrchestrator, MigrationReport

# Version
__version__ = "1.0.0"


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Migrate posts from a WordPress export file to Markdown directories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert an export into ./posts next to this script
  python migrate.py blog.wordpress.2024-01-01.xml

  # Choose the output directory and keep the converter's raw output
  python migrate.py blog.xml --output-dir site/content/posts --no-canonicalize

  # Download images through a proxy with more parallelism
  python migrate.py blog.xml --proxy http://proxy:3128 --asset-workers 8

  # Verbose logging
  python migrate.py blog.xml -vv
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        'export',
        type=str,
        help='Path to the WordPress export (WXR) XML file'
    )

    parser.add_argument(
        '--config',
        type=str,
        help='Path to configuration YAML file'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        help='Directory receiving one sub-directory per post (default: posts/ next to this script)'
    )

    parser.add_argument(
        '--canonicalize',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Apply typographic normalization and canonical Markdown formatting (default: on)'
    )

    parser.add_argument(
        '--post-workers',
        type=int,
        help='Number of posts migrated concurrently (default: 4)'
    )

    parser.add_argument(
        '--asset-workers',
        type=int,
        help='Number of concurrent downloads per post (default: 4)'
    )

    parser.add_argument(
        '--proxy',
        type=str,
        help='Proxy URL for asset downloads (default: https_proxy/http_proxy environment)'
    )

    parser.add_argument(
        '--timeout',
        type=float,
        help='Request timeout in seconds for asset downloads (default: 30)'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write logs to this file (rotated at 10MB)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def load_configuration(args: argparse.Namespace) -> dict:
    """
    Build the effective configuration: defaults, then config file, then CLI.

    Raises:
        ConfigError: If the resulting configuration is invalid
        FileNotFoundError: If --config points at a missing file
    """
    config = ConfigLoader.defaults()
    if args.config:
        config = ConfigLoader.merge(config, ConfigLoader.load(args.config))

    config = ConfigLoader.merge_with_args(config, args)
    ConfigLoader.validate(config)
    return config


def run_migration(config: dict, args: argparse.Namespace, logger: logging.Logger) -> int:
    """Execute the complete migration pipeline."""
    parser = ExportParser(config)
    try:
        posts = parser.parse_file(args.export)
    except ParseError as e:
        logger.error(f"Cannot parse export: {e}")
        return 1

    proxy = get_nested(config, 'network.proxy') or resolve_proxy()
    if proxy:
        logger.info("Downloading assets through a proxy")

    asset_workers = get_nested(config, 'migration.asset_workers', 4)
    session = build_session(
        proxy=proxy,
        user_agent=get_nested(config, 'network.user_agent'),
        pool_size=max(asset_workers * get_nested(config, 'migration.post_workers', 4), 10)
    )

    orchestrator = MigrationOrchestrator(
        config,
        converter=MarkdownConverter(config=config),
        localizer=RegexAssetLocalizer(),
        fetcher=AssetFetcher(config, session=session),
        writer=PostWriter(config),
    )

    try:
        report = orchestrator.run(posts)
    finally:
        session.close()

    print("\n" + MigrationReport(logger).format_console_report(report))

    if report['posts_failed'] or report['assets_failed']:
        logger.warning(
            f"Migration completed with {report['posts_failed']} failed posts "
            f"and {report['assets_failed']} failed assets"
        )
    else:
        logger.info("Migration completed successfully")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(verbosity=args.verbose)
        config = load_configuration(args)

        level = get_nested(config, 'logging.level')
        log_file = get_nested(config, 'logging.file')
        if level or log_file:
            setup_logging(verbosity=args.verbose, log_file=log_file, level=level)
    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 2
    except (ValueError, yaml.YAMLError) as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 2

    logger = logging.getLogger('wordpress_markdown_migrator.cli')

    try:
        log_section("WordPress to Markdown Migration Tool")
        logger.info(f"Version: {__version__}")
        log_config(config)

        return run_migration(config, args, logger)

    except KeyboardInterrupt:
        print("\nMigration interrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        logger.error(f"Migration failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
