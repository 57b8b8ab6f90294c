#!/usr/bin/env python3
"""
airdrop.py: batch lifecycle example using minatokens_sdk

What this script does:
1) Builds an airdrop of one token to several recipients (one unsigned
   transaction per recipient).
2) Sends each signer payload to an external signing service over HTTP. The
   SDK never sees private keys.
3) Proves the batch as a single job, waits for one hash per recipient, then
   waits for each hash to be applied, in order.

Environment:

  MINATOKENS_API_KEY   (required)
  MINATOKENS_CHAIN     (default: devnet)
  SIGNER_URL           (required) POST {"payload": ...} → {"signedData": ...}
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Any, List

import httpx

from minatokens_sdk import (BatchIncompleteError, MinaTokensAPI,
                            MinaTokensError, SDKConfig, TransactionLifecycle)


class HttpSigner:
    """Delegates signing to a service that holds the sender's key."""

    def __init__(self, url: str) -> None:
        self._url = url

    async def sign(self, payload: Any) -> str:
        async with httpx.AsyncClient(timeout=30.0) as client:
            resp = await client.post(self._url, json={"payload": payload})
            resp.raise_for_status()
            return str(resp.json()["signedData"])


async def run(sender: str, token_address: str, recipients: List[str], amount: int) -> int:
    signer_url = os.getenv("SIGNER_URL")
    if not signer_url:
        print("error: SIGNER_URL is not set", file=sys.stderr)
        return 2

    async with MinaTokensAPI(SDKConfig.from_env()) as api:
        batch = await api.airdrop_tokens(
            sender=sender,
            token_address=token_address,
            recipients=[{"address": r, "amount": amount} for r in recipients],
        )
        try:
            result = await TransactionLifecycle(api).prove_and_confirm(batch, HttpSigner(signer_url))
        except BatchIncompleteError as e:
            print(f"airdrop stopped at {e.failed_hash}; confirmed: {e.confirmed}", file=sys.stderr)
            return 1
        except MinaTokensError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1

    for h in result.hashes:
        print(h)
    return 0


def main() -> int:
    ap = argparse.ArgumentParser(description="Airdrop a token and wait for every transfer to apply")
    ap.add_argument("--sender", required=True)
    ap.add_argument("--token", required=True, help="token contract address")
    ap.add_argument("--amount", type=int, required=True, help="amount per recipient, base units")
    ap.add_argument("recipients", nargs="+")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s: %(message)s")
    return asyncio.run(run(args.sender, args.token, args.recipients, args.amount))


if __name__ == "__main__":
    sys.exit(main())
