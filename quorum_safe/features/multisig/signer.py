"""Local Ed25519 signer backed by symbolchain key material."""

from __future__ import annotations

from symbolchain.CryptoTypes import PrivateKey, PublicKey, Signature
from symbolchain.facade.SymbolFacade import SymbolFacade


class LocalSigner:
    """Signs payloads with a private key held in memory."""

    def __init__(self, private_key: PrivateKey, network: str = "testnet"):
        self._account = SymbolFacade(network).create_account(private_key)

    @classmethod
    def random(cls, network: str = "testnet") -> "LocalSigner":
        return cls(PrivateKey.random(), network)

    @classmethod
    def from_hex(cls, private_key_hex: str, network: str = "testnet") -> "LocalSigner":
        return cls(PrivateKey(private_key_hex.strip()), network)

    @property
    def public_key(self) -> PublicKey:
        return self._account.public_key

    def sign(self, payload: bytes) -> Signature:
        return self._account.key_pair.sign(payload)

    def __repr__(self) -> str:
        return f"LocalSigner({self.public_key})"
