"""Multisig account service.

Entry point for callers (a CLI or another orchestrator): creating owner key
sets, deriving account identities, and driving signature collection for a
pending operation through the gateway until it can be submitted.
"""

from __future__ import annotations

import time
from typing import Callable, Iterable

from symbolchain.CryptoTypes import PublicKey, Signature

from quorum_safe.features.gateway.models import (
    CreationRecord,
    TransactionHandle,
    TransactionStatus,
)
from quorum_safe.features.gateway.rest import RestResourceGateway
from quorum_safe.features.multisig.address import AccountIdentity, derive_identity
from quorum_safe.features.multisig.coordinator import (
    OperationSnapshot,
    PendingOperationCoordinator,
)
from quorum_safe.features.multisig.keyset import KeySet
from quorum_safe.shared.config import GatewayConfig
from quorum_safe.shared.errors import (
    ExternalUnavailable,
    IdentityMismatch,
    OperationNotFound,
    OperationRejected,
)
from quorum_safe.shared.logging import get_logger
from quorum_safe.shared.protocols import ResourceGateway, SignerProtocol
from quorum_safe.shared.validation import AddressValidator

logger = get_logger(__name__)


class MultisigService:
    """Service for creating multisig accounts and collecting their signatures."""

    def __init__(
        self,
        gateway: ResourceGateway | None = None,
        config: GatewayConfig | None = None,
    ):
        self.config = config or GatewayConfig.from_environment()
        self.gateway = gateway or RestResourceGateway(self.config)
        self._coordinators: dict[str, PendingOperationCoordinator] = {}

    @staticmethod
    def create_key_set(
        public_keys: Iterable[PublicKey | str], threshold: int
    ) -> KeySet:
        keys = list(public_keys)
        if all(isinstance(key, PublicKey) for key in keys):
            return KeySet(keys, threshold)
        return KeySet.from_hex([str(key) for key in keys], threshold)

    @staticmethod
    def derive_identity(key_set: KeySet, nonce: int) -> AccountIdentity:
        return derive_identity(key_set, nonce)

    def coordinator(
        self, key_set: KeySet, identity: AccountIdentity
    ) -> PendingOperationCoordinator:
        """Return the coordinator for ``identity``, checking it belongs to ``key_set``."""
        existing = self._coordinators.get(identity.address)
        if existing is not None and existing.key_set == key_set:
            return existing

        derived = derive_identity(key_set, identity.nonce)
        if derived.address != identity.address:
            raise IdentityMismatch(identity.address, derived.address)

        coordinator = PendingOperationCoordinator(
            key_set,
            identity,
            self.gateway,
            creation=CreationRecord(
                public_keys=key_set.public_keys,
                threshold=key_set.threshold,
                nonce=identity.nonce,
            ),
        )
        self._coordinators[identity.address] = coordinator
        return coordinator

    def begin_operation(
        self,
        key_set: KeySet,
        identity: AccountIdentity,
        payload: bytes,
        proposer_key: PublicKey,
        signature: Signature,
    ) -> OperationSnapshot:
        return self.coordinator(key_set, identity).register(
            payload, proposer_key, signature
        )

    def propose(
        self,
        key_set: KeySet,
        identity: AccountIdentity,
        proposer: SignerProtocol,
        payload: bytes,
    ) -> OperationSnapshot:
        """Sign ``payload`` locally with ``proposer`` and register it."""
        return self.coordinator(key_set, identity).initiate(proposer, payload)

    def contribute_signature(
        self,
        key_set: KeySet,
        identity: AccountIdentity,
        signer_key: PublicKey,
        signature: Signature,
    ) -> OperationSnapshot:
        return self.coordinator(key_set, identity).submit_signature(
            signer_key, signature
        )

    def sign_pending(
        self,
        key_set: KeySet,
        identity: AccountIdentity,
        signer: SignerProtocol,
    ) -> OperationSnapshot:
        return self.coordinator(key_set, identity).sign(signer)

    def check_quorum(
        self,
        key_set: KeySet,
        identity: AccountIdentity,
        assume_extra: PublicKey | None = None,
    ) -> bool:
        return self.coordinator(key_set, identity).quorum_reached(assume_extra)

    def operation_state(
        self, key_set: KeySet, identity: AccountIdentity
    ) -> OperationSnapshot:
        return self.coordinator(key_set, identity).snapshot()

    def collected_signers(
        self, key_set: KeySet, identity: AccountIdentity
    ) -> list[PublicKey]:
        coordinator = self.coordinator(key_set, identity)
        operation = coordinator.fetch()
        if operation is None:
            return []
        return coordinator.collector_for(operation).signers()

    def finalize_operation(
        self,
        key_set: KeySet,
        identity: AccountIdentity,
        payload: bytes,
        caller: SignerProtocol | None = None,
    ) -> TransactionHandle:
        return self.coordinator(key_set, identity).finalize(payload, caller)

    def next_nonce(self, initiator: PublicKey) -> int:
        return self.gateway.read_creation_nonce(initiator)

    def load_key_set(self, address: str) -> tuple[KeySet, AccountIdentity]:
        """Rebuild the owner set of a pending creation from its stored record."""
        result = AddressValidator.validate(address)
        if not result.is_valid:
            raise ValueError(result.error_message)
        normalized = result.normalized_value

        operation = self.gateway.read_pending_operation(normalized)
        if operation is None or operation.creation is None:
            raise OperationNotFound(normalized)

        creation = operation.creation
        key_set = KeySet(creation.public_keys, creation.threshold)
        identity = derive_identity(key_set, creation.nonce)
        if identity.address != normalized:
            raise IdentityMismatch(normalized, identity.address)
        return key_set, identity

    def wait_for_confirmation(
        self,
        handle: TransactionHandle,
        timeout_seconds: int | None = None,
        poll_interval: int | None = None,
        on_status_update: Callable[[str, str], None] | None = None,
    ) -> TransactionStatus:
        """Wait for a submitted transaction to be confirmed.

        Args:
            handle: Handle returned by finalize_operation
            timeout_seconds: Maximum wait time
            poll_interval: Polling interval
            on_status_update: Optional callback for status updates

        Returns:
            Final transaction status

        Raises:
            OperationRejected: If the execution layer reports a failure
            TimeoutError: If transaction not confirmed within timeout
        """
        if timeout_seconds is None:
            timeout_seconds = self.config.confirmation_timeout
        if poll_interval is None:
            poll_interval = self.config.poll_interval

        deadline = time.time() + timeout_seconds

        while time.time() < deadline:
            try:
                status = self.gateway.transaction_status(handle)
            except ExternalUnavailable as e:
                logger.debug("Status check unavailable, will retry: %s", e)
                status = None

            if status is not None:
                if status.is_confirmed:
                    if on_status_update:
                        on_status_update("confirmed", status.code)
                    return status

                if status.is_failed:
                    if on_status_update:
                        on_status_update("failed", status.code)
                    raise OperationRejected(f"Transaction failed: {status.code}")

                if on_status_update:
                    on_status_update(status.group, status.code or f"Status: {status.group}")

            time.sleep(poll_interval)

        raise TimeoutError(
            f"Transaction not confirmed within {timeout_seconds} seconds"
        )
