"""Feature modules for quorum_safe.

- multisig: key sets, identity derivation, signature collection
- gateway: access to the external pending-operation store
"""

from quorum_safe.features import gateway
from quorum_safe.features import multisig

__all__ = ["gateway", "multisig"]
