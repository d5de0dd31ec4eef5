#!/usr/bin/env python3
"""Round-trip a sample document through Google Drive.

Reads GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET / GOOGLE_REDIRECT_URI from
the environment. Without stored tokens, prints the consent URL; run again
with the authorization code from the redirect as the first argument:

  python scripts/drive_smoke_test.py            # prints consent URL
  python scripts/drive_smoke_test.py 4/0Ab...   # exchanges code, saves, loads

Tokens and the local fallback copy live in ~/.networth/store.json.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from networth import (
    Backend,
    Currency,
    FileLocalStore,
    PersistenceError,
    PersistenceService,
    StorageConfig,
    StoredDocument,
    Transaction,
    TransactionType,
)


async def main(auth_code: str | None) -> int:
    config = StorageConfig.from_env()
    async with PersistenceService(FileLocalStore()) as service:
        service.initialize(config)

        if auth_code:
            print("Handling authorization code...")
            await service.complete_authorization(auth_code)
            print("Authorization successful!")

        if service.resolve_active_backend() is not Backend.REMOTE:
            print("Not authorized with Google Drive. Open this URL and rerun with the code:")
            print(f"  {service.get_authorization_url()}")
            return 1

        document = StoredDocument.from_transactions([
            Transaction(
                type=TransactionType.ASSET,
                category="Cash",
                description="Test Asset",
                amount=1000,
                currency=Currency.EUR,
            ),
        ])

        try:
            print("Saving test data to Google Drive...")
            await service.save(document)
            print("Data saved successfully!")
        except PersistenceError as exc:
            print(f"Save failed (local copy kept): {exc}", file=sys.stderr)
            return 1

        print("Reading data from Google Drive...")
        loaded = await service.load()
        print(f"Loaded data: {loaded.to_json()}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None)))
