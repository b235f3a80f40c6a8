#!/usr/bin/env python
"""
Build the offline HTML bundles for the verzugszinsrechner.ch tools
Usage: python build_offline.py
"""

import argparse
import logging
import logging.config
import sys
from pathlib import Path
from typing import List, Optional

from offline_packager import package_all
from vendor_assets import fetch_vendor_assets
from verzugszins_config import LOGGING_CONFIG, BuildPaths

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Build offline bundles of the calculator pages')
    parser.add_argument('--site-dir', type=Path, help='Site tree with templates, css/ and scripts/')
    parser.add_argument('--bundle-dir', type=Path, help='Directory with fonts and vendored libraries')
    parser.add_argument('--output-dir', type=Path, help='Where the zip archives are written')
    parser.add_argument('--fetch-vendor', action='store_true',
                        help='Download missing vendored libraries before building')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    return parser.parse_args(argv)


def setup_logging(verbose: bool = False) -> None:
    logging.config.dictConfig(LOGGING_CONFIG)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        for handler in logging.getLogger().handlers:
            handler.setLevel(logging.DEBUG)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        paths = BuildPaths.from_env(args.site_dir, args.bundle_dir, args.output_dir)
        if args.fetch_vendor:
            fetch_vendor_assets(paths.bundle_dir)
        package_all(paths=paths)
    except Exception as e:
        logger.exception(f"❌ Build failed: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
