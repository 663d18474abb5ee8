#!/usr/bin/env python3
"""
ICON GRIB Downloader (DWD Open Data)
Target: https://opendata.dwd.de/weather/nwp/icon-eu/grib/
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from icongrib import __version__
from icongrib.base import HttpTransport
from icongrib.components.dispatcher import Dispatcher
from icongrib.components.listing import list_all_links
from icongrib.config import BASE_URL, DEFAULT_CONCURRENCY, DEFAULT_RETRIES, DownloaderConfig
from icongrib.errors import DownloaderError

logger = logging.getLogger("icongrib")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# -------------------------------------------------------------------------
# CLI Support
# -------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ICON-EU GRIB Downloader (DWD)")
    parser.add_argument("--run", type=str, default="", help="Model run time in format HH (e.g., 00, 06, 12, 18)")
    parser.add_argument("--latest", action="store_true", help="Download the latest available model run")
    parser.add_argument("--params", type=str, default="", help="Comma separated (e.g., t_2m,clct,pmsl). Default: all")
    parser.add_argument("--outdir", type=str, default=".", help="Directory to save downloaded files")
    parser.add_argument("--concurrent", type=int, default=DEFAULT_CONCURRENCY, help="Maximum number of concurrent downloads")
    parser.add_argument("--retries", type=int, default=DEFAULT_RETRIES, help="Maximum number of retry attempts for failed downloads")
    parser.add_argument("--base-url", type=str, default=BASE_URL, help="Root of the directory tree to crawl")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("--debug-listing", action="store_true", help="Print the links of the root listing and exit")
    parser.add_argument("--version", action="store_true", help="Show version information")
    return parser


def config_from_args(args: argparse.Namespace) -> DownloaderConfig:
    params = [p.strip() for p in args.params.split(",") if p.strip()]
    return DownloaderConfig(
        latest=args.latest,
        run=args.run or None,
        params=params,
        output_dir=Path(args.outdir),
        concurrency=args.concurrent,
        max_retries=args.retries,
        base_url=args.base_url,
        verbose=args.verbose,
    )


def log_level(config: DownloaderConfig) -> int:
    return logging.DEBUG if config.verbose else logging.INFO


def debug_listing(base_url: str, transport=None) -> List[str]:
    """Dump every link of the root listing, for checking what the server sends."""
    transport = transport or HttpTransport()
    logger.info(f"Making HTTP request to: {base_url}")
    content = transport.fetch_text(base_url)
    logger.info(f"HTML content length: {len(content)} bytes")

    links = list_all_links(content)
    for link in links:
        logger.info(f"Found link: {link}")
    logger.info(f"Found {len(links)} links")
    return links


def main(argv: Optional[List[str]] = None, transport=None) -> int:
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"ICON GRIB Downloader version {__version__}")
        return 0

    config = config_from_args(args)
    logging.basicConfig(level=log_level(config), format=LOG_FORMAT)

    try:
        if args.debug_listing:
            debug_listing(config.base_url, transport)
            return 0

        config.validate()
        logger.info("Starting ICON GRIB downloader")
        Dispatcher(config, transport=transport).run()
    except DownloaderError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        return 1

    # Per-file failures are reported in the summary but do not fail the process
    return 0


if __name__ == "__main__":
    sys.exit(main())
