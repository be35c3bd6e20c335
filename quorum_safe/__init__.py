"""quorum_safe - threshold multisig account creation and signature collection.

This package is organized into feature-based modules:
- features.multisig: key sets, identities, signature collection
- features.gateway: access to the external pending-operation store
- shared: Shared utilities (errors, logging, network, validation, config)
"""

from quorum_safe.features.gateway import (
    InMemoryGateway,
    PendingOperation,
    RestResourceGateway,
    TransactionHandle,
)
from quorum_safe.features.multisig import (
    AccountIdentity,
    KeySet,
    LocalSigner,
    MultisigService,
    OperationState,
    PendingOperationCoordinator,
    SignatureBundle,
    SignatureCollector,
    derive_identity,
)
from quorum_safe.shared import (
    AlreadyInProgress,
    AlreadySubmitted,
    DuplicateKey,
    ExternalUnavailable,
    GatewayConfig,
    InvalidThreshold,
    MultisigError,
    QuorumNotMet,
    UnknownSigner,
)

__version__ = "0.1.0"
__all__ = [
    "AccountIdentity",
    "KeySet",
    "LocalSigner",
    "MultisigService",
    "OperationState",
    "PendingOperationCoordinator",
    "SignatureBundle",
    "SignatureCollector",
    "derive_identity",
    "InMemoryGateway",
    "PendingOperation",
    "RestResourceGateway",
    "TransactionHandle",
    "GatewayConfig",
    "MultisigError",
    "InvalidThreshold",
    "DuplicateKey",
    "UnknownSigner",
    "QuorumNotMet",
    "AlreadyInProgress",
    "AlreadySubmitted",
    "ExternalUnavailable",
]
