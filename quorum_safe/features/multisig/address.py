"""Deterministic multisig account identity derivation.

The aggregated public key uses the multi-Ed25519 encoding understood by the
execution layer::

    owner_key[0] || ... || owner_key[n-1] || nonce_key || threshold

``nonce_key`` is a 32-byte pseudo key built from a fixed tag and the
creation nonce. It occupies index ``n`` and never signs, so identical owner
sets with different nonces get different addresses while owner indices are
unchanged. The address is ``SHA3-256(aggregated_key || 0x01)``.

Changing any byte of this layout changes every derived address, which would
orphan previously created accounts.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from symbolchain.CryptoTypes import PublicKey

from quorum_safe.features.multisig.keyset import KeySet
from quorum_safe.shared.validation import NonceValidator

NONCE_KEY_TAG = b"multisig-creation-nonce:"
MULTI_ED25519_SCHEME = 0x01


def nonce_key(nonce: int) -> bytes:
    result = NonceValidator.validate(nonce)
    if not result.is_valid:
        raise ValueError(result.error_message)
    return NONCE_KEY_TAG + result.normalized_value.to_bytes(8, "little")


def aggregated_public_key(key_set: KeySet, nonce: int) -> bytes:
    key_bytes = bytearray()
    for key in key_set:
        key_bytes.extend(key.bytes)
    key_bytes.extend(nonce_key(nonce))
    key_bytes.append(key_set.threshold)
    return bytes(key_bytes)


@dataclass(frozen=True)
class AccountIdentity:
    """Address and aggregated public key of one multisig account."""

    address: str
    aggregated_public_key: bytes
    threshold: int
    nonce: int
    owner_count: int

    @property
    def authentication_key(self) -> bytes:
        return bytes.fromhex(self.address[2:])

    def __str__(self) -> str:
        return self.address


def derive_identity(key_set: KeySet, nonce: int) -> AccountIdentity:
    """Derive the account identity of ``key_set`` created with ``nonce``.

    Pure and deterministic: the same owners, order, threshold and nonce
    always give the same identity.
    """
    if isinstance(nonce, bool) or not isinstance(nonce, int):
        raise ValueError("Nonce must be an integer")
    public_key = aggregated_public_key(key_set, nonce)
    auth_key = hashlib.sha3_256(public_key + bytes([MULTI_ED25519_SCHEME])).digest()
    return AccountIdentity(
        address="0x" + auth_key.hex(),
        aggregated_public_key=public_key,
        threshold=key_set.threshold,
        nonce=nonce,
        owner_count=len(key_set),
    )
