"""Lifecycle of one pending multisig operation.

The authoritative state lives in the external store behind a
ResourceGateway. The coordinator reads it on demand, never caches it as
ground truth, and only reports a transition once the gateway acknowledged
it. Several owners may drive the same operation from separate processes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from symbolchain.CryptoTypes import PublicKey, Signature

from quorum_safe.features.gateway.models import (
    CreationRecord,
    PendingOperation,
    TransactionHandle,
)
from quorum_safe.features.multisig.address import AccountIdentity
from quorum_safe.features.multisig.collector import SignatureCollector
from quorum_safe.features.multisig.keyset import KeySet
from quorum_safe.shared.errors import (
    AlreadyInProgress,
    AlreadySubmitted,
    OperationNotFound,
    PayloadMismatch,
    UnknownSigner,
)
from quorum_safe.shared.logging import get_logger, log_error
from quorum_safe.shared.protocols import ResourceGateway, SignerProtocol

logger = get_logger(__name__)


class OperationState(Enum):
    NO_OPERATION = "no_operation"
    PROPOSED_BY_INITIATOR = "proposed_by_initiator"
    COLLECTING = "collecting"
    QUORUM_REACHED = "quorum_reached"
    SUBMITTED = "submitted"


@dataclass(frozen=True)
class OperationSnapshot:
    """Observed state of the operation at one point in time."""

    state: OperationState
    collected: int
    required: int
    signers: list[PublicKey] = field(default_factory=list)

    @property
    def quorum_reached(self) -> bool:
        return self.collected >= self.required


class PendingOperationCoordinator:
    def __init__(
        self,
        key_set: KeySet,
        identity: AccountIdentity,
        gateway: ResourceGateway,
        creation: CreationRecord | None = None,
    ):
        self.key_set = key_set
        self.identity = identity
        self.gateway = gateway
        self.creation = creation
        self._submitted: dict[bytes, TransactionHandle] = {}
        self._logger = logger.with_context(address=identity.address)

    @property
    def address(self) -> str:
        return self.identity.address

    def fetch(self) -> PendingOperation | None:
        return self.gateway.read_pending_operation(self.address)

    def collector_for(self, operation: PendingOperation | None) -> SignatureCollector:
        collector = SignatureCollector(self.key_set)
        if operation is None:
            return collector
        for public_key, signature in operation.signatures.items():
            try:
                collector.add(public_key, signature)
            except UnknownSigner:
                self._logger.warning(
                    "Ignoring signature from non-owner %s in stored operation",
                    public_key,
                )
        return collector

    def classify(
        self,
        operation: PendingOperation | None,
        assume_extra: PublicKey | None = None,
    ) -> OperationSnapshot:
        required = self.key_set.threshold
        if operation is None:
            if assume_extra is not None:
                # Registered but not yet visible in the store.
                state = (
                    OperationState.QUORUM_REACHED
                    if required <= 1
                    else OperationState.PROPOSED_BY_INITIATOR
                )
                return OperationSnapshot(state, 1, required, [assume_extra])
            if self._submitted:
                return OperationSnapshot(OperationState.SUBMITTED, 0, required)
            return OperationSnapshot(OperationState.NO_OPERATION, 0, required)

        collector = self.collector_for(operation)
        collected = collector.signed_count(assume_extra)
        signers = collector.signers()
        if assume_extra is not None and not collector.has_signed(assume_extra):
            signers.append(assume_extra)
            signers.sort(key=self.key_set.index_of)

        if collected >= required:
            state = OperationState.QUORUM_REACHED
        elif collected <= 1 and (
            operation.proposer is None or signers == [operation.proposer]
        ):
            state = OperationState.PROPOSED_BY_INITIATOR
        else:
            state = OperationState.COLLECTING
        return OperationSnapshot(state, collected, required, signers)

    def snapshot(self, assume_extra: PublicKey | None = None) -> OperationSnapshot:
        return self.classify(self.fetch(), assume_extra)

    def state(self) -> OperationState:
        return self.snapshot().state

    def quorum_reached(self, assume_extra: PublicKey | None = None) -> bool:
        operation = self.fetch()
        if operation is None:
            return False
        return self.collector_for(operation).quorum_reached(assume_extra)

    def register(
        self, payload: bytes, proposer: PublicKey, signature: Signature
    ) -> OperationSnapshot:
        """Register a new operation carrying the proposer's signature."""
        if proposer not in self.key_set:
            raise UnknownSigner(proposer)
        if self.fetch() is not None:
            raise AlreadyInProgress(self.address)

        self.gateway.register_operation(
            self.address, payload, proposer, signature, self.creation
        )
        self._logger.info("Registered pending operation proposed by %s", proposer)
        return self.snapshot(assume_extra=proposer)

    def initiate(self, proposer: SignerProtocol, payload: bytes) -> OperationSnapshot:
        return self.register(payload, proposer.public_key, proposer.sign(payload))

    def submit_signature(
        self, signer: PublicKey, signature: Signature
    ) -> OperationSnapshot:
        """Append ``signer``'s signature to the pending operation.

        Submitting again for the same signer overwrites its entry.
        """
        if signer not in self.key_set:
            raise UnknownSigner(signer)
        if self.fetch() is None:
            raise OperationNotFound(self.address)

        self.gateway.append_signature(self.address, signer, signature)
        snapshot = self.snapshot(assume_extra=signer)
        self._logger.info(
            "Signature from %s accepted (%d/%d)",
            signer,
            snapshot.collected,
            snapshot.required,
        )
        return snapshot

    def sign(self, signer: SignerProtocol) -> OperationSnapshot:
        """Sign the stored payload locally and submit the signature."""
        if signer.public_key not in self.key_set:
            raise UnknownSigner(signer.public_key)
        operation = self.fetch()
        if operation is None:
            raise OperationNotFound(self.address)
        return self.submit_signature(signer.public_key, signer.sign(operation.payload))

    def _already_submitted(self, handle: TransactionHandle) -> None:
        error = AlreadySubmitted(self.address, handle)
        log_error(self._logger, error)
        raise error

    def _check_submitted(self, payload: bytes) -> None:
        """Raise AlreadySubmitted if this or another owner submitted ``payload``."""
        handle = self._submitted.get(payload)
        if handle is None:
            handle = self.gateway.find_submission(self.address, payload)
        if handle is not None:
            self._already_submitted(handle)

    def finalize(
        self,
        payload: bytes | None = None,
        caller: SignerProtocol | None = None,
    ) -> TransactionHandle:
        """Assemble the multi-signature and submit the finished operation.

        ``caller`` may add its own signature if it is not stored yet.
        Raises QuorumNotMet when the observed signatures are not enough and
        AlreadySubmitted when the operation was finished already.
        """
        if caller is not None and caller.public_key not in self.key_set:
            raise UnknownSigner(caller.public_key)

        operation = self.fetch()
        if operation is None:
            if payload is None and self._submitted:
                last_handle = list(self._submitted.values())[-1]
                self._already_submitted(last_handle)
            if payload is not None:
                self._check_submitted(payload)
            raise OperationNotFound(self.address)

        if payload is not None and payload != operation.payload:
            self._check_submitted(payload)
            raise PayloadMismatch(self.address)

        collector = self.collector_for(operation)
        if caller is not None and not collector.has_signed(caller.public_key):
            collector.add(caller.public_key, caller.sign(operation.payload))

        bundle = collector.assemble(self.identity.aggregated_public_key)

        try:
            handle = self.gateway.submit_final(self.address, operation.payload, bundle)
        except AlreadySubmitted as e:
            log_error(self._logger, e)
            raise

        self._submitted[operation.payload] = handle
        self._logger.info(
            "Submitted operation %s with signers at indices %s",
            handle.hash,
            list(bundle.indices),
        )
        return handle
