"""
Example: Minting, listing and revoking API keys.

This example shows how to:
- Sign the wallet attestation and mint credentials
- Export the credentials as a .env block
- List the keys registered for the wallet
- Revoke a key
"""

import asyncio
import os

from dotenv import load_dotenv

from clob_keygen import AuthError, KeygenClient

# Load environment variables
load_dotenv()

# Get private key from environment
private_key = os.environ.get("FORKAST_PRIVATE_KEY")
if not private_key:
    print("Error: Set FORKAST_PRIVATE_KEY environment variable")
    print("Example: export FORKAST_PRIVATE_KEY=0x...")
    exit(1)


async def main() -> None:
    # Reads CLOB_URL / RELAYER_URL from the environment
    async with KeygenClient.from_env() as client:
        bundle = await client.create_api_key_with_private_key(
            private_key,
            chain_id=137,  # Polygon mainnet
            nonce="0",  # a new nonce derives a new key
        )
        print("=== Credentials (store these safely) ===")
        print(bundle.to_env(client.config.header_prefix))

        print("\n=== Active keys ===")
        try:
            for key in await client.list_api_keys():
                print(f"- {key}")
        except AuthError as e:
            print(f"Credentials rejected: {e.message}")
            return

        # Revoking the active key also drops it from the client
        revoked = await client.revoke_api_key(bundle.api_key)
        print(f"\nRevoked {bundle.api_key}: {revoked}")
        print(f"Client still holds credentials: {client.has_credentials}")


asyncio.run(main())
