import pytest
from symbolchain.CryptoTypes import PrivateKey

from quorum_safe.features.gateway.memory import InMemoryGateway
from quorum_safe.features.multisig.address import derive_identity
from quorum_safe.features.multisig.keyset import KeySet
from quorum_safe.features.multisig.service import MultisigService
from quorum_safe.features.multisig.signer import LocalSigner
from quorum_safe.shared.config import GatewayConfig


@pytest.fixture
def owners():
    """Fixture providing three owner signers A, B, C"""
    return [LocalSigner(PrivateKey.random()) for _ in range(3)]


@pytest.fixture
def outsider():
    """Fixture providing a signer that is not an owner"""
    return LocalSigner(PrivateKey.random())


@pytest.fixture
def key_set(owners):
    """Fixture providing a 2-of-3 key set over the owners"""
    return KeySet([owner.public_key for owner in owners], threshold=2)


@pytest.fixture
def identity(key_set):
    """Fixture providing the identity derived with nonce 7"""
    return derive_identity(key_set, 7)


@pytest.fixture
def payload():
    """Fixture providing an opaque signing payload"""
    return b"\x01register-wallet\x00" + bytes(range(32))


@pytest.fixture
def gateway():
    """Fixture providing an in-memory pending-operation store"""
    return InMemoryGateway()


@pytest.fixture
def gateway_config():
    return GatewayConfig(node_url="http://gateway.test:3000")


@pytest.fixture
def service(gateway, gateway_config):
    """Fixture providing a service bound to the in-memory store"""
    return MultisigService(gateway=gateway, config=gateway_config)


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Run tests without picking up gateway or logging settings from the shell."""
    for name in (
        "QUORUM_SAFE_NODE_URL",
        "QUORUM_SAFE_CONNECT_TIMEOUT",
        "QUORUM_SAFE_READ_TIMEOUT",
        "QUORUM_SAFE_MAX_RETRIES",
        "QUORUM_SAFE_RETRY_BASE_DELAY",
        "QUORUM_SAFE_CONFIRMATION_TIMEOUT",
        "QUORUM_SAFE_POLL_INTERVAL",
        "QUORUM_SAFE_LOG_DIR",
        "QUORUM_SAFE_LOG_LEVEL",
        "QUORUM_SAFE_LOG_FORMAT",
        "QUORUM_SAFE_LOG_STDOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
