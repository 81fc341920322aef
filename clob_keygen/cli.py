"""
Command-line interface for minting and managing CLOB API keys.

Usage:
    clob-keygen create [--private-key KEY] [--chain-id 137] [--nonce 0]
    clob-keygen list
    clob-keygen revoke API_KEY
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from clob_keygen.client import KeygenClient
from clob_keygen.config import KeygenConfig
from clob_keygen.constants import DEFAULT_NONCE, POLYGON_MAINNET
from clob_keygen.exceptions import KeygenError
from clob_keygen.types import CredentialBundle
from clob_keygen.utils import shorten_address


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="clob-keygen",
        description="Mint, list and revoke CLOB API credentials.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--no-dotenv", action="store_true", help="Do not load a .env file"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Mint a new API key")
    create.add_argument(
        "--private-key",
        help="Wallet private key (defaults to <PREFIX>_PRIVATE_KEY)",
    )
    create.add_argument("--chain-id", type=int, default=POLYGON_MAINNET, help="Chain ID")
    create.add_argument("--nonce", default=DEFAULT_NONCE, help="Decimal nonce")

    subparsers.add_parser("list", help="List API keys for the exported credentials")

    revoke = subparsers.add_parser("revoke", help="Revoke an API key")
    revoke.add_argument("api_key", help="The API key to revoke")

    return parser


async def _create(client: KeygenClient, args: argparse.Namespace) -> int:
    prefix = client.config.header_prefix
    private_key = args.private_key or os.environ.get(f"{prefix}_PRIVATE_KEY")
    if not private_key:
        print(f"ERROR: Pass --private-key or set {prefix}_PRIVATE_KEY.", file=sys.stderr)
        return 1

    bundle = await client.create_api_key_with_private_key(
        private_key, args.chain_id, nonce=args.nonce
    )
    print(f"Minted API key for {shorten_address(bundle.address)}")
    print("Copy these into your .env and keep them secret:\n")
    print(bundle.to_env(prefix))
    return 0


async def _list(client: KeygenClient) -> int:
    keys = await client.list_api_keys()
    if not keys:
        print("No keys found for this wallet.")
        return 0
    print(f"Loaded {len(keys)} active key{'s' if len(keys) > 1 else ''}:")
    for key in keys:
        print(f"  {key}")
    return 0


async def _revoke(client: KeygenClient, api_key: str) -> int:
    revoked = await client.revoke_api_key(api_key)
    if revoked:
        print(f"Revoked {api_key}.")
    else:
        print(f"Revocation of {api_key} was accepted but not confirmed. Refresh to verify.")
    return 0


async def run(args: argparse.Namespace) -> int:
    """Run a parsed command."""
    config = KeygenConfig.from_env(dotenv=not args.no_dotenv)

    bundle = None
    if args.command in ("list", "revoke"):
        try:
            bundle = CredentialBundle.from_env(dict(os.environ), config.header_prefix)
        except ValueError:
            prefix = config.header_prefix
            print(
                f"ERROR: Set {prefix}_ADDRESS, {prefix}_API_KEY, "
                f"{prefix}_API_SECRET and {prefix}_PASSPHRASE.",
                file=sys.stderr,
            )
            return 1

    async with KeygenClient(config, bundle=bundle) as client:
        if args.command == "create":
            return await _create(client, args)
        if args.command == "list":
            return await _list(client)
        return await _revoke(client, args.api_key)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the clob-keygen command."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return asyncio.run(run(args))
    except KeygenError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
