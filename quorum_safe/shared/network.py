"""HTTP client for the gateway node with timeout handling and retry logic."""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

import requests
from requests.exceptions import ConnectionError, HTTPError, RequestException, Timeout

logger = logging.getLogger(__name__)

DEFAULT_RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class NetworkErrorType(Enum):
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    HTTP_ERROR = "http_error"
    INVALID_RESPONSE = "invalid_response"
    UNKNOWN = "unknown"


@dataclass
class NetworkError(Exception):
    error_type: NetworkErrorType
    message: str
    original_error: Exception | None = None
    status_code: int | None = None
    response_text: str | None = None
    retryable_status_codes: frozenset[int] = DEFAULT_RETRYABLE_STATUS_CODES

    def __str__(self) -> str:
        return self.message

    @property
    def is_transient(self) -> bool:
        """True when the failure says nothing about the request itself."""
        if self.error_type in (
            NetworkErrorType.TIMEOUT,
            NetworkErrorType.CONNECTION_ERROR,
        ):
            return True
        if self.error_type == NetworkErrorType.HTTP_ERROR:
            return self.status_code in self.retryable_status_codes
        return False


@dataclass
class TimeoutConfig:
    connect_timeout: float = 5.0
    read_timeout: float = 15.0

    @property
    def request_timeout(self) -> tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)


@dataclass
class RetryConfig:
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    retryable_status_codes: set[int] = field(
        default_factory=lambda: set(DEFAULT_RETRYABLE_STATUS_CODES)
    )

    def calculate_delay(self, attempt: int) -> float:
        delay = self.base_delay * (self.exponential_base**attempt)
        return min(delay, self.max_delay)


DEFAULT_TIMEOUT_CONFIG = TimeoutConfig()
DEFAULT_RETRY_CONFIG = RetryConfig()


def classify_error(error: Exception) -> NetworkErrorType:
    if isinstance(error, Timeout):
        return NetworkErrorType.TIMEOUT
    elif isinstance(error, ConnectionError):
        return NetworkErrorType.CONNECTION_ERROR
    elif isinstance(error, HTTPError):
        return NetworkErrorType.HTTP_ERROR
    return NetworkErrorType.UNKNOWN


def create_network_error(
    error: Exception,
    node_url: str,
    context: str = "",
    retry_config: RetryConfig | None = None,
) -> NetworkError:
    error_type = classify_error(error)
    prefix = f"{context}: " if context else ""
    retryable = frozenset(
        (retry_config or DEFAULT_RETRY_CONFIG).retryable_status_codes
    )

    status_code = None
    response_text = None
    if error_type == NetworkErrorType.TIMEOUT:
        message = f"{prefix}Gateway did not answer in time: {node_url}"
    elif error_type == NetworkErrorType.CONNECTION_ERROR:
        message = f"{prefix}Cannot reach gateway at {node_url}"
    elif error_type == NetworkErrorType.HTTP_ERROR:
        response = getattr(error, "response", None)
        status_code = getattr(response, "status_code", None)
        response_text = getattr(response, "text", None)
        message = f"{prefix}HTTP error {status_code}: {response_text or 'no details'}"
    else:
        message = f"{prefix}Request failed: {error}"

    return NetworkError(
        error_type=error_type,
        message=message,
        original_error=error,
        status_code=status_code,
        response_text=response_text,
        retryable_status_codes=retryable,
    )


def should_retry(error: Exception, retry_config: RetryConfig) -> bool:
    if isinstance(error, (Timeout, ConnectionError)):
        return True
    if isinstance(error, HTTPError):
        status_code = getattr(error.response, "status_code", None)
        return status_code in retry_config.retryable_status_codes
    return False


def _decode_json(response: requests.Response, context: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        prefix = f"{context}: " if context else ""
        raise NetworkError(
            error_type=NetworkErrorType.INVALID_RESPONSE,
            message=f"{prefix}Gateway returned a body that is not JSON",
            original_error=e,
            status_code=response.status_code,
        ) from e


def _decode_body(response: requests.Response, context: str) -> Any:
    if not response.content:
        return {}
    return _decode_json(response, context)


class NetworkClient:
    """Sends JSON requests to the gateway.

    Timeouts, connection failures and retryable status codes are retried
    with exponential backoff. Every failure leaves the client as a
    NetworkError.
    """

    def __init__(
        self,
        node_url: str,
        timeout_config: TimeoutConfig | None = None,
        retry_config: RetryConfig | None = None,
        on_retry: Callable[[int, Exception, float], None] | None = None,
    ):
        self.node_url = node_url.rstrip("/")
        self.timeout_config = timeout_config or DEFAULT_TIMEOUT_CONFIG
        self.retry_config = retry_config or DEFAULT_RETRY_CONFIG
        self.on_retry = on_retry

    def _send(
        self,
        method: str,
        endpoint: str,
        context: str,
        allow_not_found: bool = False,
        **kwargs,
    ) -> requests.Response:
        url = f"{self.node_url}{endpoint}"
        kwargs.setdefault("timeout", self.timeout_config.request_timeout)
        max_attempts = self.retry_config.max_retries + 1
        attempt = 0

        while True:
            try:
                response = getattr(requests, method)(url, **kwargs)
                if not (allow_not_found and response.status_code == 404):
                    response.raise_for_status()
                return response
            except RequestException as e:
                attempt += 1
                if attempt >= max_attempts or not should_retry(e, self.retry_config):
                    raise create_network_error(
                        e, self.node_url, context, self.retry_config
                    ) from e

                delay = self.retry_config.calculate_delay(attempt - 1)
                logger.warning(
                    "%s failed (attempt %d/%d), retrying in %.1fs: %s",
                    context or f"{method.upper()} {endpoint}",
                    attempt,
                    max_attempts,
                    delay,
                    e,
                )
                if self.on_retry:
                    self.on_retry(attempt, e, delay)
                time.sleep(delay)

    def get_optional(self, endpoint: str, context: str = "", **kwargs) -> Any | None:
        """GET ``endpoint`` and decode it, or None when the gateway answers 404."""
        response = self._send("get", endpoint, context, allow_not_found=True, **kwargs)
        if response.status_code == 404:
            return None
        return _decode_json(response, context)

    def put(self, endpoint: str, context: str = "", **kwargs) -> Any:
        return _decode_body(self._send("put", endpoint, context, **kwargs), context)

    def post(self, endpoint: str, context: str = "", **kwargs) -> Any:
        return _decode_body(self._send("post", endpoint, context, **kwargs), context)
