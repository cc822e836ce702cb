"""CLI entry point."""

import argparse
import logging

from .config import AppConfig, load_config
from .crawler import Crawler
from .downloader import Downloader
from .errors import ConfigError, StorageError
from .logger import setup_logger
from .storage import OutputStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Unsyiah ETD crawler")
    parser.add_argument("--outdir", type=str, default=None,
                        help="Output directory")
    parser.add_argument("--embargo", type=int, default=None,
                        help="Embargo flag (0 for fulltext)")
    parser.add_argument("--page", type=int, default=None,
                        help="Page number index start")
    parser.add_argument("--maxpage", type=int, default=None,
                        help="Page number maximum")
    parser.add_argument("--min", dest="min_id", type=int, default=None,
                        help="Minimum content id (default 0)")
    parser.add_argument("--max", dest="max_id", type=int, default=None,
                        help="Maximum content id")
    parser.add_argument("--pdf", action=argparse.BooleanOptionalAction, default=None,
                        help="Fetch with full PDF document (default on)")
    parser.add_argument("--ignorecert", action="store_true", default=None,
                        help="Ignore TLS certificate errors")
    parser.add_argument("--config", type=str, default=None,
                        help="Path to YAML config file")
    parser.add_argument("--log-dir", type=str, default=None,
                        help="Directory for the rotating log file")
    parser.add_argument("--verbose", action="store_true",
                        help="Debug logging")
    return parser


def apply_args(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Let command-line flags override values from the config file."""
    overrides = {
        "output_dir": args.outdir,
        "embargo": args.embargo,
        "start_page": args.page,
        "max_page": args.maxpage,
        "min_id": args.min_id,
        "max_id": args.max_id,
        "fetch_attachments": args.pdf,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config.crawl, key, value)
    if args.ignorecert:
        config.download.ignore_cert = True
    if args.log_dir is not None:
        config.log_dir = args.log_dir
    return config


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = apply_args(load_config(args.config), args)
    except ConfigError as e:
        parser.error(str(e))

    if not config.crawl.output_dir:
        parser.error("output directory not specified (--outdir)")

    print("Unsyiah ETD crawler, codename Cosmos")
    print("")

    setup_logger(config.log_dir, logging.DEBUG if args.verbose else logging.INFO)

    store = OutputStore(config.crawl.output_dir)
    try:
        store.ensure()
    except StorageError as e:
        parser.error(str(e))

    downloader = Downloader(config.download)
    crawler = Crawler(config, downloader, store)
    crawler.install_signal_handlers()
    try:
        count = crawler.run()
    finally:
        crawler.restore_signal_handlers()
        downloader.close()

    print(f"Done, {count} documents fetched")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
