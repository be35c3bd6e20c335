"""Protocol definitions for the collaborators the core depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from symbolchain.CryptoTypes import PublicKey, Signature

if TYPE_CHECKING:
    from quorum_safe.features.gateway.models import (
        CreationRecord,
        PendingOperation,
        TransactionHandle,
        TransactionStatus,
    )
    from quorum_safe.features.multisig.collector import SignatureBundle


class SignerProtocol(Protocol):
    """An owner able to sign a payload with its own private key."""

    @property
    def public_key(self) -> PublicKey: ...

    def sign(self, payload: bytes) -> Signature: ...


class ResourceGateway(Protocol):
    """Access to the externally persisted pending-operation state.

    Implementations raise ExternalUnavailable for transport failures and a
    ProtocolError subclass for refusals.
    """

    def read_pending_operation(self, address: str) -> PendingOperation | None: ...

    def register_operation(
        self,
        address: str,
        payload: bytes,
        signer: PublicKey,
        signature: Signature,
        creation: CreationRecord | None = None,
    ) -> None: ...

    def append_signature(
        self, address: str, signer: PublicKey, signature: Signature
    ) -> None: ...

    def submit_final(
        self, address: str, payload: bytes, bundle: SignatureBundle
    ) -> TransactionHandle: ...

    def find_submission(
        self, address: str, payload: bytes
    ) -> TransactionHandle | None:
        """Return the handle of an accepted submission of ``payload``, if any."""
        ...

    def read_creation_nonce(self, initiator: PublicKey) -> int: ...

    def transaction_status(self, handle: TransactionHandle) -> TransactionStatus | None: ...
