"""Records exchanged with the external pending-operation store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from symbolchain.CryptoTypes import PublicKey, Signature

from quorum_safe.shared.validation import (
    NonceValidator,
    PublicKeyValidator,
    SignatureValidator,
)


def _parse_public_key(value: Any) -> PublicKey:
    result = PublicKeyValidator.validate(value)
    if not result.is_valid:
        raise ValueError(result.error_message)
    return result.normalized_value


def _parse_signature(value: Any) -> Signature:
    result = SignatureValidator.validate(value)
    if not result.is_valid:
        raise ValueError(result.error_message)
    return result.normalized_value


def _parse_payload(value: Any) -> bytes:
    if not isinstance(value, str):
        raise ValueError("Payload must be a hex string")
    hex_part = value[2:] if value.lower().startswith("0x") else value
    return bytes.fromhex(hex_part)


@dataclass(frozen=True)
class CreationRecord:
    """Owner set and nonce stored next to a pending wallet creation."""

    public_keys: tuple[PublicKey, ...]
    threshold: int
    nonce: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "publicKeys": [key.bytes.hex() for key in self.public_keys],
            "threshold": self.threshold,
            "nonce": self.nonce,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CreationRecord":
        nonce_result = NonceValidator.validate(data.get("nonce", 0))
        if not nonce_result.is_valid:
            raise ValueError(nonce_result.error_message)
        threshold = data.get("threshold")
        if not isinstance(threshold, int) or isinstance(threshold, bool):
            raise ValueError("Threshold must be an integer")
        return cls(
            public_keys=tuple(
                _parse_public_key(key) for key in data.get("publicKeys", [])
            ),
            threshold=threshold,
            nonce=nonce_result.normalized_value,
        )


@dataclass
class PendingOperation:
    """One proposed transaction awaiting quorum.

    ``signatures`` maps each signer's public key to its signature over
    ``payload``. A signer appears at most once.
    """

    payload: bytes
    signatures: dict[PublicKey, Signature] = field(default_factory=dict)
    proposer: PublicKey | None = None
    creation: CreationRecord | None = None

    @property
    def signers(self) -> list[PublicKey]:
        return list(self.signatures)

    def has_signed(self, public_key: PublicKey) -> bool:
        return public_key in self.signatures

    def with_signature(
        self, public_key: PublicKey, signature: Signature
    ) -> "PendingOperation":
        signatures = dict(self.signatures)
        signatures[public_key] = signature
        return PendingOperation(
            payload=self.payload,
            signatures=signatures,
            proposer=self.proposer,
            creation=self.creation,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "payload": self.payload.hex(),
            "signatures": [
                {"publicKey": key.bytes.hex(), "signature": sig.bytes.hex()}
                for key, sig in self.signatures.items()
            ],
        }
        if self.proposer is not None:
            data["proposer"] = self.proposer.bytes.hex()
        if self.creation is not None:
            data["creation"] = self.creation.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PendingOperation":
        signatures: dict[PublicKey, Signature] = {}
        for entry in data.get("signatures", []):
            signatures[_parse_public_key(entry["publicKey"])] = _parse_signature(
                entry["signature"]
            )

        proposer = data.get("proposer")
        creation = data.get("creation")
        return cls(
            payload=_parse_payload(data["payload"]),
            signatures=signatures,
            proposer=_parse_public_key(proposer) if proposer else None,
            creation=CreationRecord.from_dict(creation) if creation else None,
        )


@dataclass(frozen=True)
class TransactionHandle:
    hash: str
    message: str = ""

    def __str__(self) -> str:
        return self.hash


@dataclass(frozen=True)
class TransactionStatus:
    group: str
    code: str = ""

    @property
    def is_confirmed(self) -> bool:
        return self.group == "confirmed"

    @property
    def is_failed(self) -> bool:
        return self.group == "failed"
