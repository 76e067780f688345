#!/usr/bin/env python3
"""List object keys under a prefix of the configured bucket.

Usage:
  .venv/bin/python scripts/bucket_ls.py --prefix reports/
  .venv/bin/python scripts/bucket_ls.py --prefix reports/ --limit 20

Bucket and credentials come from the environment (S3_BUCKET, S3_ACCESS_KEY_ID, ...).
"""

from __future__ import annotations

import argparse
import asyncio

from bucketdrive.common.config import get_settings
from bucketdrive.common.logging import setup_logging
from bucketdrive.infra.storage import StorageDriver, build_storage_driver


async def list_keys(
    driver: StorageDriver, *, prefix: str = "", limit: int | None = None
) -> list[str]:
    keys: list[str] = []
    async for entry in driver.flat_list(prefix):
        keys.append(entry.path)
        if limit is not None and len(keys) >= limit:
            break
    return keys


def main() -> None:
    parser = argparse.ArgumentParser(description="List objects under a prefix")
    parser.add_argument(
        "--prefix",
        default="",
        help="Only list keys starting with this prefix (default: whole bucket)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Stop after N keys (default: no limit)",
    )
    args = parser.parse_args()
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    driver = build_storage_driver(settings)
    keys = asyncio.run(list_keys(driver, prefix=args.prefix, limit=args.limit))
    for key in keys:
        print(key)
    print(f"{len(keys)} objects")


if __name__ == "__main__":
    main()
