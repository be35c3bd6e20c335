"""In-process pending-operation store.

Mirrors the behaviour of the remote store: one pending operation per
account address, signatures merged by signer key, and a finished payload
accepted only once. Used for local simulations and tests.
"""

from __future__ import annotations

import hashlib
import threading
from typing import TYPE_CHECKING

from symbolchain.CryptoTypes import PublicKey, Signature

from quorum_safe.features.gateway.models import (
    CreationRecord,
    PendingOperation,
    TransactionHandle,
    TransactionStatus,
)
from quorum_safe.shared.errors import (
    AlreadyInProgress,
    AlreadySubmitted,
    ExternalUnavailable,
    OperationNotFound,
    OperationRejected,
)
from quorum_safe.shared.logging import get_logger

if TYPE_CHECKING:
    from quorum_safe.features.multisig.collector import SignatureBundle

logger = get_logger(__name__)


class InMemoryGateway:
    def __init__(self):
        self._lock = threading.Lock()
        self._pending: dict[str, PendingOperation] = {}
        self._nonces: dict[PublicKey, int] = {}
        self._submitted: dict[tuple[str, bytes], TransactionHandle] = {}
        self._transactions: dict[str, SignatureBundle] = {}
        self._available = True

    def set_available(self, available: bool) -> None:
        self._available = available

    def _check_available(self, context: str) -> None:
        if not self._available:
            raise ExternalUnavailable(f"{context}: store unavailable")

    def read_pending_operation(self, address: str) -> PendingOperation | None:
        self._check_available("Read pending operation")
        with self._lock:
            operation = self._pending.get(address)
            if operation is None:
                return None
            return PendingOperation(
                payload=operation.payload,
                signatures=dict(operation.signatures),
                proposer=operation.proposer,
                creation=operation.creation,
            )

    def register_operation(
        self,
        address: str,
        payload: bytes,
        signer: PublicKey,
        signature: Signature,
        creation: CreationRecord | None = None,
    ) -> None:
        self._check_available("Register operation")
        with self._lock:
            if address in self._pending:
                raise AlreadyInProgress(address)
            self._pending[address] = PendingOperation(
                payload=payload,
                signatures={signer: signature},
                proposer=signer,
                creation=creation,
            )
            if creation is not None:
                self._nonces[signer] = max(
                    self._nonces.get(signer, 0), creation.nonce + 1
                )
        logger.debug("Stored pending operation for %s", address)

    def append_signature(
        self, address: str, signer: PublicKey, signature: Signature
    ) -> None:
        self._check_available("Append signature")
        with self._lock:
            operation = self._pending.get(address)
            if operation is None:
                raise OperationNotFound(address)
            self._pending[address] = operation.with_signature(signer, signature)

    def submit_final(
        self, address: str, payload: bytes, bundle: SignatureBundle
    ) -> TransactionHandle:
        self._check_available("Submit transaction")
        with self._lock:
            previous = self._submitted.get((address, payload))
            if previous is not None:
                raise AlreadySubmitted(address, previous)

            operation = self._pending.get(address)
            if operation is None or operation.payload != payload:
                raise OperationRejected(
                    f"No pending operation with this payload for {address}", 404
                )

            digest = hashlib.sha3_256(payload + bundle.to_bytes()).hexdigest()
            handle = TransactionHandle(hash=digest.upper(), message="accepted")
            del self._pending[address]
            self._submitted[(address, payload)] = handle
            self._transactions[handle.hash] = bundle
        return handle

    def find_submission(
        self, address: str, payload: bytes
    ) -> TransactionHandle | None:
        self._check_available("Look up submission")
        with self._lock:
            return self._submitted.get((address, payload))

    def read_creation_nonce(self, initiator: PublicKey) -> int:
        self._check_available("Read creation nonce")
        with self._lock:
            return self._nonces.get(initiator, 0)

    def transaction_status(self, handle: TransactionHandle) -> TransactionStatus | None:
        self._check_available("Check transaction status")
        with self._lock:
            if handle.hash in self._transactions:
                return TransactionStatus(group="confirmed", code="Success")
        return None

    def submitted_bundle(self, handle: TransactionHandle) -> SignatureBundle | None:
        with self._lock:
            return self._transactions.get(handle.hash)
