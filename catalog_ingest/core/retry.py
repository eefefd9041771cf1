"""
Exponential backoff with jitter for operations against AWS and the product store.
"""
import logging
import random
import time
from typing import Callable, Optional, TypeVar
from botocore.exceptions import ClientError, ConnectionClosedError, EndpointConnectionError, ReadTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_MESSAGE_MARKERS = (
    "econnrefused",
    "econnreset",
    "connection reset",
    "connection refused",
    "etimedout",
    "timed out",
    "timeout",
    "socket hang up",
    "network",
    "deadlock",
    "too many connections",
    "connection terminated",
    "could not connect",
    "503",
    "502",
    "429",
)

TRANSIENT_AWS_ERROR_CODES = {
    "ThrottlingException",
    "Throttling",
    "ProvisionedThroughputExceededException",
    "RequestLimitExceeded",
    "TransactionConflictException",
    "ServiceUnavailable",
    "InternalServerError",
    "InternalError",
    "SlowDown",
}


def is_transient_error(error: BaseException) -> bool:
    """
    Decide whether a failure is worth retrying.

    The cause chain is inspected so repository exceptions that wrap a
    botocore error are classified by the underlying error.

    Args:
        error: The raised exception

    Returns:
        True if the error looks transient, False otherwise
    """
    current = error
    seen = set()
    while current is not None and id(current) not in seen:
        seen.add(id(current))

        if isinstance(current, (EndpointConnectionError, ConnectionClosedError, ReadTimeoutError,
                                ConnectionError, TimeoutError)):
            return True

        if isinstance(current, ClientError):
            code = current.response.get("Error", {}).get("Code", "")
            status = current.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if code in TRANSIENT_AWS_ERROR_CODES or status in (429, 502, 503):
                return True

        message = str(current).lower()
        if any(marker in message for marker in TRANSIENT_MESSAGE_MARKERS):
            return True

        current = current.__cause__ or current.__context__

    return False


def compute_delay(attempt: int, base_delay: float, max_delay: float, backoff_factor: float) -> float:
    """Delay before the retry following `attempt` (0-based), capped at max_delay."""
    delay = base_delay * (backoff_factor ** attempt)
    jitter = delay * 0.2 * random.random()
    return min(delay + jitter, max_delay)


def with_retry(
    operation: Callable[[], T],
    max_retries: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 15.0,
    backoff_factor: float = 2.0,
    should_retry: Optional[Callable[[BaseException, int], bool]] = None,
    on_retry: Optional[Callable[[BaseException, int, float], None]] = None
) -> T:
    """
    Run an operation, retrying transient failures with exponential backoff.

    Args:
        operation: Zero-argument callable to attempt
        max_retries: Retries after the first attempt (max_retries + 1 attempts total)
        base_delay: Delay in seconds before the first retry
        max_delay: Upper bound for any single delay in seconds
        backoff_factor: Multiplier applied per attempt
        should_retry: Classifier (error, attempt) -> bool; defaults to is_transient_error
        on_retry: Callback (error, attempt_number, delay) invoked before sleeping

    Returns:
        The operation's result

    Raises:
        The operation's exception when it is not transient or retries are exhausted
    """
    classifier = should_retry or (lambda err, attempt: is_transient_error(err))

    attempt = 0
    while True:
        try:
            return operation()
        except Exception as e:
            if attempt >= max_retries or not classifier(e, attempt):
                raise

            delay = compute_delay(attempt, base_delay, max_delay, backoff_factor)
            if on_retry:
                on_retry(e, attempt + 1, delay)
            else:
                logger.warning("Retry %d/%d in %.2fs after: %s", attempt + 1, max_retries, delay, e)
            time.sleep(delay)
            attempt += 1
