"""
EIP-712 attestation proving control of a wallet address.
"""

import re
import time
from typing import Any, Dict, Iterable, Optional

from eth_account import Account

from clob_keygen.constants import (
    ATTESTATION_MESSAGE,
    CHAIN_NAMES,
    CLOB_AUTH_PRIMARY_TYPE,
    CLOB_DOMAIN_NAME,
    CLOB_DOMAIN_VERSION,
    DEFAULT_NONCE,
    SUPPORTED_CHAIN_IDS,
)
from clob_keygen.exceptions import AttestationError
from clob_keygen.types import AttestationRequest

_NON_DIGITS_RE = re.compile(r"\D+")


def build_attestation(
    address: str,
    chain_id: int,
    timestamp: str,
    nonce: str = DEFAULT_NONCE,
) -> Dict[str, Any]:
    """Build the EIP-712 typed data a wallet signs to prove address control.

    No chain validation is performed here; see ensure_supported_chain().

    Args:
        address: The wallet address.
        chain_id: The chain the wallet is connected to.
        timestamp: Unix seconds as a decimal string.
        nonce: Decimal nonce. Different nonces derive different keys.

    Returns:
        The full typed-data dictionary.
    """
    return {
        "types": {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "version", "type": "string"},
                {"name": "chainId", "type": "uint256"},
            ],
            CLOB_AUTH_PRIMARY_TYPE: [
                {"name": "address", "type": "address"},
                {"name": "timestamp", "type": "string"},
                {"name": "nonce", "type": "uint256"},
                {"name": "message", "type": "string"},
            ],
        },
        "primaryType": CLOB_AUTH_PRIMARY_TYPE,
        "domain": {
            "name": CLOB_DOMAIN_NAME,
            "version": CLOB_DOMAIN_VERSION,
            "chainId": chain_id,
        },
        "message": {
            "address": address,
            "timestamp": timestamp,
            "nonce": int(nonce),
            "message": ATTESTATION_MESSAGE,
        },
    }


def ensure_supported_chain(
    chain_id: Optional[int], allowed: Iterable[int] = SUPPORTED_CHAIN_IDS
) -> int:
    """Check that the wallet is connected to an allow-listed chain.

    Raises:
        AttestationError: If the chain is missing or not allowed.
    """
    allowed = frozenset(allowed)
    if chain_id is None:
        raise AttestationError("Connect a wallet before signing.")
    if chain_id not in allowed:
        names = " or ".join(
            f"{CHAIN_NAMES.get(c, 'chain')} ({c})" for c in sorted(allowed)
        )
        raise AttestationError(f"Switch to {names} to continue.")
    return chain_id


def normalize_nonce(value: Optional[str]) -> str:
    """Strip non-digit characters from a user-supplied nonce.

    An empty value falls back to the default nonce.
    """
    raw = (value or "").strip()
    if not raw:
        return DEFAULT_NONCE
    cleaned = _NON_DIGITS_RE.sub("", raw)
    if not cleaned:
        raise AttestationError("Nonce must contain digits only.")
    return cleaned


def current_timestamp() -> str:
    """Current Unix time in whole seconds, as a string."""
    return str(int(time.time()))


def sign_attestation(
    private_key: str,
    chain_id: int,
    nonce: str = DEFAULT_NONCE,
    timestamp: Optional[str] = None,
) -> AttestationRequest:
    """Sign the attestation with a local private key.

    Args:
        private_key: The wallet private key (with or without 0x prefix).
        chain_id: The chain ID used in the EIP-712 domain.
        nonce: Decimal nonce.
        timestamp: Optional fixed timestamp; sampled now if omitted.

    Returns:
        The signed attestation request.

    Raises:
        AttestationError: If the key is invalid or signing fails.
    """
    nonce = normalize_nonce(nonce)
    timestamp = timestamp or current_timestamp()

    try:
        account = Account.from_key(private_key)
    except (ValueError, TypeError) as e:
        raise AttestationError(f"Invalid wallet private key: {e}") from e

    typed_data = build_attestation(account.address, chain_id, timestamp, nonce)

    try:
        signed = Account.sign_typed_data(account.key, full_message=typed_data)
    except (ValueError, TypeError) as e:
        raise AttestationError(f"Failed to sign attestation: {e}") from e

    signature = signed.signature.hex()
    if not signature.startswith("0x"):
        signature = f"0x{signature}"

    return AttestationRequest(
        address=account.address,
        signature=signature,
        timestamp=timestamp,
        nonce=nonce,
    )


def recover_attestation_signer(request: AttestationRequest, chain_id: int) -> str:
    """Recover the address that signed an attestation.

    Useful to check a wallet signature locally before sending it upstream.
    """
    from eth_account.messages import encode_typed_data

    typed_data = build_attestation(
        request.address, chain_id, request.timestamp, request.nonce
    )
    signable = encode_typed_data(full_message=typed_data)
    return Account.recover_message(signable, signature=request.signature)
