"""Gateway configuration loaded from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from quorum_safe.shared.network import RetryConfig, TimeoutConfig

logger = logging.getLogger(__name__)

N = TypeVar("N", int, float)

DEFAULT_NODE_URL = "http://localhost:3000"


def _env_number(name: str, default: N, parse: Callable[[str], N]) -> N:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = parse(raw.strip())
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default
    if value < 0:
        logger.warning("Ignoring negative %s=%r, using %s", name, raw, default)
        return default
    return value


@dataclass
class GatewayConfig:
    node_url: str = DEFAULT_NODE_URL
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    confirmation_timeout: int = 120
    poll_interval: int = 5

    @classmethod
    def from_environment(cls) -> "GatewayConfig":
        defaults = cls()
        timeout = TimeoutConfig(
            connect_timeout=_env_number(
                "QUORUM_SAFE_CONNECT_TIMEOUT", defaults.timeout.connect_timeout, float
            ),
            read_timeout=_env_number(
                "QUORUM_SAFE_READ_TIMEOUT", defaults.timeout.read_timeout, float
            ),
        )
        retry = RetryConfig(
            max_retries=_env_number(
                "QUORUM_SAFE_MAX_RETRIES", defaults.retry.max_retries, int
            ),
            base_delay=_env_number(
                "QUORUM_SAFE_RETRY_BASE_DELAY", defaults.retry.base_delay, float
            ),
        )
        return cls(
            node_url=os.getenv("QUORUM_SAFE_NODE_URL", DEFAULT_NODE_URL).rstrip("/"),
            timeout=timeout,
            retry=retry,
            confirmation_timeout=_env_number(
                "QUORUM_SAFE_CONFIRMATION_TIMEOUT", defaults.confirmation_timeout, int
            ),
            poll_interval=_env_number(
                "QUORUM_SAFE_POLL_INTERVAL", defaults.poll_interval, int
            ),
        )
