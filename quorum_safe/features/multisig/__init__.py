"""Multisig account creation and signature collection."""

from quorum_safe.features.multisig.keyset import MAX_OWNERS, KeySet
from quorum_safe.features.multisig.address import (
    AccountIdentity,
    aggregated_public_key,
    derive_identity,
)
from quorum_safe.features.multisig.collector import SignatureBundle, SignatureCollector
from quorum_safe.features.multisig.signer import LocalSigner
from quorum_safe.features.multisig.coordinator import (
    OperationSnapshot,
    OperationState,
    PendingOperationCoordinator,
)
from quorum_safe.features.multisig.service import MultisigService

__all__ = [
    "MAX_OWNERS",
    "KeySet",
    "AccountIdentity",
    "aggregated_public_key",
    "derive_identity",
    "SignatureBundle",
    "SignatureCollector",
    "LocalSigner",
    "OperationSnapshot",
    "OperationState",
    "PendingOperationCoordinator",
    "MultisigService",
]
