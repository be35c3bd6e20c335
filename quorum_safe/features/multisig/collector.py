"""Signature collection and multi-signature assembly for one operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from symbolchain.CryptoTypes import PublicKey, Signature

from quorum_safe.features.multisig.keyset import KeySet
from quorum_safe.shared.errors import QuorumNotMet, UnknownSigner

BITMAP_NUM_OF_BYTES = 4


@dataclass(frozen=True)
class SignatureBundle:
    """Index-ordered multi-signature ready for the execution layer.

    Encoded as the included signatures in ascending owner index followed by
    a 4-byte big-endian bitmap where owner index ``i`` sets bit ``31 - i``.
    """

    aggregated_public_key: bytes
    indices: tuple[int, ...]
    signatures: tuple[Signature, ...]

    def __post_init__(self):
        if len(self.indices) != len(self.signatures):
            raise ValueError("Each signature needs exactly one signer index")
        for previous, current in zip(self.indices, self.indices[1:]):
            if current <= previous:
                raise ValueError("Signer indices must be strictly increasing")
        for index in self.indices:
            if not 0 <= index < BITMAP_NUM_OF_BYTES * 8:
                raise ValueError("bitmap value exceeds maximum value")

    @property
    def bitmap(self) -> int:
        bitmap = 0
        for index in self.indices:
            bitmap |= 1 << (31 - index)
        return bitmap

    def to_bytes(self) -> bytes:
        signature_bytes = bytearray()
        for signature in self.signatures:
            signature_bytes.extend(signature.bytes)
        signature_bytes.extend(self.bitmap.to_bytes(BITMAP_NUM_OF_BYTES, "big"))
        return bytes(signature_bytes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "publicKey": self.aggregated_public_key.hex(),
            "signature": self.to_bytes().hex(),
            "bitmap": self.bitmap,
            "indices": list(self.indices),
        }

    @classmethod
    def from_bytes(cls, aggregated_public_key: bytes, data: bytes) -> "SignatureBundle":
        count = (len(data) - BITMAP_NUM_OF_BYTES) // Signature.SIZE
        if count < 0 or count * Signature.SIZE + BITMAP_NUM_OF_BYTES != len(data):
            raise ValueError("Multi-signature length is invalid")

        bitmap = int.from_bytes(data[-BITMAP_NUM_OF_BYTES:], "big")
        indices = [
            position
            for position in range(BITMAP_NUM_OF_BYTES * 8)
            if bitmap & (1 << (31 - position))
        ]
        if len(indices) != count:
            raise ValueError("Bitmap does not match the number of signatures")

        signatures = tuple(
            Signature(data[i * Signature.SIZE : (i + 1) * Signature.SIZE])
            for i in range(count)
        )
        return cls(aggregated_public_key, tuple(indices), signatures)


class SignatureCollector:
    """Tracks which owners of a KeySet signed one pending payload.

    Signatures are keyed by owner index, so re-adding the same signer
    overwrites instead of counting twice, and the assembled bundle does not
    depend on arrival order.
    """

    def __init__(
        self,
        key_set: KeySet,
        signatures: Mapping[PublicKey, Signature] | None = None,
    ):
        self.key_set = key_set
        self._signatures: dict[int, Signature] = {}
        for public_key, signature in (signatures or {}).items():
            self.add(public_key, signature)

    def add(self, public_key: PublicKey, signature: Signature) -> int:
        index = self.key_set.index_of(public_key)
        if index is None:
            raise UnknownSigner(public_key)
        self._signatures[index] = signature
        return index

    def has_signed(self, public_key: PublicKey) -> bool:
        index = self.key_set.index_of(public_key)
        return index is not None and index in self._signatures

    def signed_count(self, assume_extra: PublicKey | None = None) -> int:
        count = len(self._signatures)
        if assume_extra is not None:
            index = self.key_set.index_of(assume_extra)
            if index is None:
                raise UnknownSigner(assume_extra)
            if index not in self._signatures:
                count += 1
        return count

    def quorum_reached(self, assume_extra: PublicKey | None = None) -> bool:
        """Return True once enough distinct owners signed.

        ``assume_extra`` counts one more owner that is about to sign but is
        not visible in the fetched state yet.
        """
        return self.signed_count(assume_extra) >= self.key_set.threshold

    def signers(self) -> list[PublicKey]:
        return [self.key_set[index] for index in sorted(self._signatures)]

    def assemble(self, aggregated_public_key: bytes) -> SignatureBundle:
        collected = self.signed_count()
        if collected < self.key_set.threshold:
            raise QuorumNotMet(collected, self.key_set.threshold)

        indices = tuple(sorted(self._signatures))
        return SignatureBundle(
            aggregated_public_key=aggregated_public_key,
            indices=indices,
            signatures=tuple(self._signatures[index] for index in indices),
        )
