"""Error taxonomy for multisig creation and signature collection.

Three families are kept apart so callers can react to each one:

- KeySetError: the owner set itself is malformed. Raised at construction
  time and never recovered.
- ProtocolError: the request does not fit the current operation (wrong
  signer, not enough signatures yet, ...). The caller can fix and retry.
- ExternalUnavailable: the gateway could not be reached. Always retryable
  and never a statement about the operation itself.

AlreadySubmitted sits outside all three: it reports that another owner
already finished the operation.
"""

from __future__ import annotations

from typing import Any


class MultisigError(Exception):
    """Base class for every error raised by quorum_safe."""

    retryable = False
    benign = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class KeySetError(MultisigError):
    pass


class InvalidThreshold(KeySetError):
    def __init__(self, threshold: int, key_count: int):
        super().__init__(
            f"Invalid threshold {threshold}: must be between 1 and {key_count}"
        )
        self.threshold = threshold
        self.key_count = key_count


class DuplicateKey(KeySetError):
    def __init__(self, public_key: Any, first_index: int, second_index: int):
        super().__init__(
            f"Duplicate public key {public_key} at indices "
            f"{first_index} and {second_index}"
        )
        self.public_key = public_key
        self.first_index = first_index
        self.second_index = second_index


class InvalidPublicKey(KeySetError):
    pass


class TooManyKeys(KeySetError):
    def __init__(self, key_count: int, max_keys: int):
        super().__init__(f"Too many owner keys: {key_count} (maximum {max_keys})")
        self.key_count = key_count
        self.max_keys = max_keys


class ProtocolError(MultisigError):
    pass


class UnknownSigner(ProtocolError):
    def __init__(self, public_key: Any):
        super().__init__(f"Public key {public_key} is not an owner of this multisig")
        self.public_key = public_key


class QuorumNotMet(ProtocolError):
    def __init__(self, collected: int, required: int):
        super().__init__(
            f"Quorum not met: {collected} of {required} required signatures collected"
        )
        self.collected = collected
        self.required = required


class AlreadyInProgress(ProtocolError):
    def __init__(self, address: str):
        super().__init__(f"An operation is already pending for {address}")
        self.address = address


class OperationNotFound(ProtocolError):
    def __init__(self, address: str):
        super().__init__(f"No pending operation found for {address}")
        self.address = address


class PayloadMismatch(ProtocolError):
    def __init__(self, address: str):
        super().__init__(
            f"Payload does not match the operation pending for {address}"
        )
        self.address = address


class IdentityMismatch(ProtocolError):
    def __init__(self, expected: str, derived: str):
        super().__init__(
            f"Creation record derives {derived}, expected {expected}"
        )
        self.expected = expected
        self.derived = derived


class OperationRejected(ProtocolError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AlreadySubmitted(MultisigError):
    benign = True

    def __init__(self, address: str, handle: Any = None):
        super().__init__(f"Operation for {address} was already submitted")
        self.address = address
        self.handle = handle


class ExternalUnavailable(MultisigError):
    retryable = True

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


__all__ = [
    "MultisigError",
    "KeySetError",
    "InvalidThreshold",
    "DuplicateKey",
    "InvalidPublicKey",
    "TooManyKeys",
    "ProtocolError",
    "UnknownSigner",
    "QuorumNotMet",
    "AlreadyInProgress",
    "OperationNotFound",
    "PayloadMismatch",
    "IdentityMismatch",
    "OperationRejected",
    "AlreadySubmitted",
    "ExternalUnavailable",
]
