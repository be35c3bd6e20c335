"""Shared utilities for quorum_safe."""

from quorum_safe.shared.config import GatewayConfig
from quorum_safe.shared.errors import (
    AlreadyInProgress,
    AlreadySubmitted,
    DuplicateKey,
    ExternalUnavailable,
    IdentityMismatch,
    InvalidPublicKey,
    InvalidThreshold,
    KeySetError,
    MultisigError,
    OperationNotFound,
    OperationRejected,
    PayloadMismatch,
    ProtocolError,
    QuorumNotMet,
    TooManyKeys,
    UnknownSigner,
)
from quorum_safe.shared.logging import (
    ContextAdapter,
    LoggingConfig,
    LogLevel,
    format_error_for_user,
    get_logger,
    get_user_friendly_error,
    sanitize_dict,
    sanitize_message,
    setup_logging,
)
from quorum_safe.shared.network import (
    NetworkClient,
    NetworkError,
    NetworkErrorType,
    RetryConfig,
    TimeoutConfig,
)
from quorum_safe.shared.validation import (
    AddressValidator,
    NonceValidator,
    PublicKeyValidator,
    SignatureValidator,
    ValidationResult,
)

__all__ = [
    "GatewayConfig",
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
    "NetworkClient",
    "NetworkError",
    "NetworkErrorType",
    "RetryConfig",
    "TimeoutConfig",
    "AddressValidator",
    "NonceValidator",
    "PublicKeyValidator",
    "SignatureValidator",
    "ValidationResult",
    "ContextAdapter",
    "LoggingConfig",
    "LogLevel",
    "format_error_for_user",
    "get_logger",
    "get_user_friendly_error",
    "sanitize_dict",
    "sanitize_message",
    "setup_logging",
]
