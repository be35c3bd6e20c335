"""Adapters for the external pending-operation store."""

from quorum_safe.features.gateway.models import (
    CreationRecord,
    PendingOperation,
    TransactionHandle,
    TransactionStatus,
)
from quorum_safe.features.gateway.memory import InMemoryGateway
from quorum_safe.features.gateway.rest import RestResourceGateway

__all__ = [
    "CreationRecord",
    "PendingOperation",
    "TransactionHandle",
    "TransactionStatus",
    "InMemoryGateway",
    "RestResourceGateway",
]
