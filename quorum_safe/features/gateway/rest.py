"""HTTP adapter for the remote pending-operation store."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Any, cast

from symbolchain.CryptoTypes import PublicKey, Signature

from quorum_safe.features.gateway.models import (
    CreationRecord,
    PendingOperation,
    TransactionHandle,
    TransactionStatus,
)
from quorum_safe.shared.config import GatewayConfig
from quorum_safe.shared.errors import (
    AlreadyInProgress,
    AlreadySubmitted,
    ExternalUnavailable,
    MultisigError,
    OperationNotFound,
    OperationRejected,
)
from quorum_safe.shared.logging import get_logger
from quorum_safe.shared.network import NetworkClient, NetworkError

if TYPE_CHECKING:
    from quorum_safe.features.multisig.collector import SignatureBundle

logger = get_logger(__name__)

HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409


def translate_network_error(
    error: NetworkError,
    on_conflict: MultisigError | None = None,
    on_not_found: MultisigError | None = None,
) -> MultisigError:
    """Map a transport failure onto the multisig error taxonomy.

    Only timeouts, connection failures and retryable status codes count as
    the gateway being unavailable. Anything else, including a body that
    cannot be decoded, is a rejection of the request.
    """
    if error.is_transient:
        return ExternalUnavailable(error.message, original_error=error)
    if error.status_code == HTTP_CONFLICT and on_conflict is not None:
        return on_conflict
    if error.status_code == HTTP_NOT_FOUND and on_not_found is not None:
        return on_not_found
    return OperationRejected(error.message, error.status_code)


def _parse_handle(result: Any) -> TransactionHandle | None:
    if not isinstance(result, dict):
        return None
    tx_hash = result.get("hash")
    if not isinstance(tx_hash, str) or not tx_hash:
        return None
    return TransactionHandle(hash=tx_hash, message=str(result.get("message", "")))


class RestResourceGateway:
    def __init__(
        self,
        config: GatewayConfig | None = None,
        client: NetworkClient | None = None,
    ):
        self.config = config or GatewayConfig.from_environment()
        self._client = client or NetworkClient(
            node_url=self.config.node_url,
            timeout_config=self.config.timeout,
            retry_config=self.config.retry,
        )

    @property
    def node_url(self) -> str:
        return self._client.node_url

    def read_pending_operation(self, address: str) -> PendingOperation | None:
        try:
            result = self._client.get_optional(
                f"/multisig/{address}/pending",
                context="Fetch pending operation",
            )
        except NetworkError as e:
            raise translate_network_error(e) from e

        if result is None:
            return None
        try:
            return PendingOperation.from_dict(result.get("data", result))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise OperationRejected(
                f"Malformed pending operation for {address}: {e}"
            ) from e

    def register_operation(
        self,
        address: str,
        payload: bytes,
        signer: PublicKey,
        signature: Signature,
        creation: CreationRecord | None = None,
    ) -> None:
        body: dict[str, Any] = {
            "payload": payload.hex(),
            "publicKey": signer.bytes.hex(),
            "signature": signature.bytes.hex(),
        }
        if creation is not None:
            body["creation"] = creation.to_dict()

        try:
            self._client.post(
                f"/multisig/{address}/pending",
                context="Register operation",
                json=body,
            )
        except NetworkError as e:
            raise translate_network_error(
                e, on_conflict=AlreadyInProgress(address)
            ) from e
        logger.info("Registered pending operation for %s", address)

    def append_signature(
        self, address: str, signer: PublicKey, signature: Signature
    ) -> None:
        try:
            self._client.put(
                f"/multisig/{address}/pending/signatures",
                context="Append signature",
                json={
                    "publicKey": signer.bytes.hex(),
                    "signature": signature.bytes.hex(),
                },
            )
        except NetworkError as e:
            raise translate_network_error(
                e, on_not_found=OperationNotFound(address)
            ) from e

    def submit_final(
        self, address: str, payload: bytes, bundle: SignatureBundle
    ) -> TransactionHandle:
        try:
            result = self._client.put(
                "/transactions",
                context="Submit transaction",
                json={
                    "address": address,
                    "payload": payload.hex(),
                    "publicKey": bundle.aggregated_public_key.hex(),
                    "signature": bundle.to_bytes().hex(),
                },
            )
        except NetworkError as e:
            raise translate_network_error(
                e, on_conflict=AlreadySubmitted(address)
            ) from e

        handle = _parse_handle(result)
        if handle is None:
            raise OperationRejected(f"Malformed submission response: {result!r}")
        logger.info("Transaction submitted: %s", handle.hash)
        return handle

    def find_submission(
        self, address: str, payload: bytes
    ) -> TransactionHandle | None:
        digest = hashlib.sha3_256(payload).hexdigest()
        try:
            result = self._client.get_optional(
                f"/multisig/{address}/submissions/{digest}",
                context="Look up submission",
            )
        except NetworkError as e:
            raise translate_network_error(e) from e

        if result is None:
            return None
        handle = _parse_handle(result)
        if handle is None:
            raise OperationRejected(f"Malformed submission record: {result!r}")
        return handle

    def read_creation_nonce(self, initiator: PublicKey) -> int:
        try:
            result = self._client.get_optional(
                f"/multisig/nonces/{initiator.bytes.hex()}",
                context="Fetch creation nonce",
            )
        except NetworkError as e:
            raise translate_network_error(e) from e

        if result is None:
            return 0
        try:
            return int(result.get("nonce", 0))
        except (AttributeError, TypeError, ValueError) as e:
            raise OperationRejected(f"Malformed nonce response: {result!r}") from e

    def transaction_status(self, handle: TransactionHandle) -> TransactionStatus | None:
        try:
            response = self._client.post(
                "/transactionStatus",
                context="Check transaction status",
                json={"hashes": [handle.hash.strip().upper()]},
            )
        except NetworkError as e:
            raise translate_network_error(e) from e

        statuses = cast(
            list[dict[str, Any]],
            response if isinstance(response, list) else [],
        )
        if not statuses:
            return None
        status = statuses[0]
        if not isinstance(status, dict):
            raise OperationRejected(f"Malformed transaction status: {status!r}")
        return TransactionStatus(
            group=str(status.get("group", "")), code=str(status.get("code", ""))
        )
