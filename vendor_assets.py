"""
Download the third-party libraries the offline bundles embed
"""

import logging
from pathlib import Path
from typing import Dict, Mapping

import requests

from verzugszins_config import VENDOR_TIMEOUT_SECONDS, VENDOR_URLS

logger = logging.getLogger(__name__)


def fetch_vendor_assets(bundle_dir: Path,
                        urls: Mapping[str, str] = VENDOR_URLS,
                        overwrite: bool = False,
                        session: requests.Session = None) -> Dict[str, bool]:
    """
    Fetch flatpickr and jsPDF into the bundle directory

    Files already present are kept unless overwrite is set. A failed
    download is logged and reported as False; the bundler falls back to
    an empty payload for it.

    Returns:
        Mapping of filename to whether the file is now available
    """
    bundle_dir.mkdir(parents=True, exist_ok=True)
    http = session or requests.Session()
    status = {}

    for filename, url in urls.items():
        target = bundle_dir / filename
        if target.is_file() and not overwrite:
            logger.debug(f"  {filename} already present")
            status[filename] = True
            continue

        try:
            response = http.get(url, timeout=VENDOR_TIMEOUT_SECONDS)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"  Warning: Could not download {filename}: {e}")
            status[filename] = target.is_file()
            continue

        target.write_bytes(response.content)
        logger.info(f"  Downloaded {filename} ({len(response.content) / 1024:.0f} KB)")
        status[filename] = True

    return status
