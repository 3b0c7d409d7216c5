#!/usr/bin/env python3
"""Initialize the collection data directory.

This script:
1. Creates the data directory and any missing collection files
2. Reports how many records each collection holds (flagging unreadable files)

Usage:
    python scripts/init_data.py [--data-dir DIR] [--verbose]
"""

import argparse
import logging
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import get_settings
from scripts.helpers.logging_setup import setup_script_logging
from tempt_api.data.store import ALL_COLLECTIONS, RecordStore

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Initialize the TEMPT API data directory")
    parser.add_argument("--data-dir", type=Path, default=None, help="Override STORAGE_DATA_DIR")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def report(store: RecordStore) -> bool:
    """Log each collection's size. Returns False if any file is unreadable."""
    healthy = True
    for collection in ALL_COLLECTIONS:
        result = store.read_sync(collection)
        if result.ok:
            logger.info("%-12s %6d records  (%s)", collection.name, len(result.records), store.path_for(collection))
        else:
            healthy = False
            logger.error("%-12s UNREADABLE: %s", collection.name, result.error.reason)
    return healthy


def main() -> int:
    args = parse_args()
    setup_script_logging(args.verbose, __name__)

    settings = get_settings()
    data_dir = args.data_dir or settings.storage.data_dir
    store = RecordStore(data_dir=data_dir, fail_fast=settings.storage.fail_fast)

    logger.info("=" * 60)
    logger.info("TEMPT API - Data Initialization (%s)", data_dir)
    logger.info("=" * 60)

    for path in store.ensure_collections():
        logger.info("Created %s", path)

    return 0 if report(store) else 1


if __name__ == "__main__":
    sys.exit(main())
