"""Ordered owner key set with a signing threshold."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from symbolchain.CryptoTypes import PublicKey

from quorum_safe.shared.errors import (
    DuplicateKey,
    InvalidPublicKey,
    InvalidThreshold,
    TooManyKeys,
)
from quorum_safe.shared.validation import PublicKeyValidator

# One bitmap slot of the 32-bit signer bitmap is reserved for the nonce key.
MAX_OWNERS = 31


class KeySet:
    """Owner public keys in a fixed order plus the threshold.

    The index of a key is its position in the list given at construction
    and never changes. Instances are immutable.
    """

    __slots__ = ("_keys", "_threshold", "_index")

    def __init__(self, public_keys: Iterable[PublicKey], threshold: int):
        keys = tuple(public_keys)

        for key in keys:
            if not isinstance(key, PublicKey):
                raise InvalidPublicKey(f"Expected PublicKey, got {type(key).__name__}")

        if len(keys) > MAX_OWNERS:
            raise TooManyKeys(len(keys), MAX_OWNERS)

        if isinstance(threshold, bool) or not isinstance(threshold, int):
            raise InvalidThreshold(threshold, len(keys))
        if threshold <= 0 or threshold > len(keys):
            raise InvalidThreshold(threshold, len(keys))

        index: dict[PublicKey, int] = {}
        for position, key in enumerate(keys):
            if key in index:
                raise DuplicateKey(key, index[key], position)
            index[key] = position

        self._keys = keys
        self._threshold = threshold
        self._index = index

    @classmethod
    def from_hex(cls, public_keys: Iterable[str], threshold: int) -> "KeySet":
        parsed = []
        for value in public_keys:
            result = PublicKeyValidator.validate(value)
            if not result.is_valid:
                raise InvalidPublicKey(f"{result.error_message}: {value!r}")
            parsed.append(result.normalized_value)
        return cls(parsed, threshold)

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def public_keys(self) -> tuple[PublicKey, ...]:
        return self._keys

    def size(self) -> int:
        return len(self._keys)

    def index_of(self, public_key: PublicKey) -> int | None:
        """Return the owner index of ``public_key`` or None if not an owner."""
        return self._index.get(public_key)

    def __contains__(self, public_key: object) -> bool:
        return public_key in self._index

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[PublicKey]:
        return iter(self._keys)

    def __getitem__(self, index: int) -> PublicKey:
        return self._keys[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeySet):
            return NotImplemented
        return self._keys == other._keys and self._threshold == other._threshold

    def __hash__(self) -> int:
        return hash((self._keys, self._threshold))

    def __repr__(self) -> str:
        return f"KeySet({self._threshold}-of-{len(self._keys)})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "publicKeys": [key.bytes.hex() for key in self._keys],
            "threshold": self._threshold,
        }
