from __future__ import annotations

import asyncio
import errno as errno_codes
import json
import logging
from typing import Any, Awaitable, Callable, TypeVar

from resumefit.core.config import settings
from resumefit.core.errors import AIErrorType, AIInvocationError, EngineError

logger = logging.getLogger(__name__)

T = TypeVar("T")
SleepFn = Callable[[float], Awaitable[Any]]

MAX_RETRIES = settings.ai_max_retries
NETWORK_RETRY_COUNT = settings.ai_network_retry_count
BACKOFF_BASE_MS = settings.ai_backoff_base_ms
NETWORK_RETRY_DELAY_MS = BACKOFF_BASE_MS

_NETWORK_CODES = {"ECONNREFUSED", "ENOTFOUND", "ETIMEDOUT", "ECONNRESET", "EAI_AGAIN", "EHOSTUNREACH", "ENETUNREACH"}
_TIMEOUT_CODES = {"ETIMEDOUT", "ESOCKETTIMEDOUT"}
_RATE_LIMIT_CODES = {"rate_limit_exceeded", "rate_limit", "too_many_requests"}
_CONFIG_MARKERS = ("api key", "apikey", "api_key", "authentication", "unauthorized")
_NETWORK_MARKERS = ("network", "connection", "dns")
_TIMEOUT_MARKERS = ("timeout", "timed out")


def _status(error: BaseException) -> int | None:
    for attr in ("status_code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(error, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def _code(error: BaseException) -> str:
    code = getattr(error, "code", None)
    if isinstance(code, str):
        return code
    err_no = getattr(error, "errno", None)
    if isinstance(err_no, int):
        return errno_codes.errorcode.get(err_no, "")
    return ""


def _type_attr(error: BaseException) -> str:
    value = getattr(error, "type", None)
    return value if isinstance(value, str) else ""


def _names(error: BaseException) -> set[str]:
    names = {klass.__name__ for klass in type(error).__mro__}
    explicit = getattr(error, "name", None)
    if isinstance(explicit, str):
        names.add(explicit)
    return names


def _message(error: BaseException) -> str:
    message = getattr(error, "message", None)
    if not isinstance(message, str) or not message:
        message = str(error)
    return message.lower()


def _cause(error: BaseException) -> BaseException | None:
    cause = error.__cause__ or getattr(error, "cause", None)
    return cause if isinstance(cause, BaseException) else None


def is_rate_limit_error(error: BaseException) -> bool:
    if _status(error) == 429:
        return True
    if _code(error) in _RATE_LIMIT_CODES or _type_attr(error) in _RATE_LIMIT_CODES:
        return True
    return "RateLimitError" in _names(error)


def is_timeout_error(error: BaseException) -> bool:
    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return True
    if _code(error) in _TIMEOUT_CODES:
        return True
    names = _names(error)
    if "TimeoutError" in names or "APITimeoutError" in names:
        return True
    message = _message(error)
    return any(marker in message for marker in _TIMEOUT_MARKERS)


def is_network_error(error: BaseException) -> bool:
    if isinstance(error, ConnectionError):
        return True
    if _code(error) in _NETWORK_CODES:
        return True
    if "APIConnectionError" in _names(error):
        return True
    cause = _cause(error)
    if cause is not None and (isinstance(cause, ConnectionError) or _code(cause) in _NETWORK_CODES):
        return True
    message = _message(error)
    return any(marker in message for marker in _NETWORK_MARKERS)


def is_config_error(error: BaseException) -> bool:
    if _status(error) in {401, 403}:
        return True
    names = _names(error)
    if "AuthenticationError" in names or "PermissionDeniedError" in names:
        return True
    message = _message(error)
    return any(marker in message for marker in _CONFIG_MARKERS)


def classify_error(error: BaseException) -> AIErrorType:
    if is_rate_limit_error(error):
        return "rate_limit"
    if is_timeout_error(error):
        return "timeout"
    if is_network_error(error):
        return "network"
    if is_config_error(error):
        return "config"
    if isinstance(error, json.JSONDecodeError) or _type_attr(error) == "malformed":
        return "malformed"
    return "unknown"


def calculate_backoff_delay(attempt: int, base_ms: int = BACKOFF_BASE_MS) -> int:
    """Delay in milliseconds before retry ``attempt`` (0-indexed): 1s, 2s, 4s, ..."""
    return (2 ** attempt) * base_ms


def should_retry(
    error_type: AIErrorType,
    attempt: int,
    *,
    max_retries: int = MAX_RETRIES,
    network_retry_count: int = NETWORK_RETRY_COUNT,
) -> bool:
    if error_type == "rate_limit":
        return attempt < max_retries
    if error_type == "network":
        return attempt < network_retry_count
    return False


def retry_delay_ms(error_type: AIErrorType, attempt: int) -> int:
    if error_type == "rate_limit":
        return calculate_backoff_delay(attempt)
    if error_type == "network":
        return NETWORK_RETRY_DELAY_MS
    return 0


def create_ai_error(error_type: AIErrorType, original_error: BaseException | None = None) -> AIInvocationError:
    return AIInvocationError(error_type, original_error)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    operation_name: str = "ai_call",
    *,
    max_retries: int | None = None,
    network_retry_count: int | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> T:
    """Run ``operation`` and retry classified failures.

    ``sleep`` must be cancellable; a caller-side ``asyncio.wait_for`` aborts an
    in-progress backoff. Engine errors raised by ``operation`` (already
    classified, e.g. output parse failures) propagate unchanged.
    """
    retries = MAX_RETRIES if max_retries is None else max_retries
    network_retries = NETWORK_RETRY_COUNT if network_retry_count is None else network_retry_count
    attempt = 0

    while True:
        try:
            result = await operation()
        except EngineError:
            raise
        except Exception as exc:
            error_type = classify_error(exc)
            retry = should_retry(
                error_type,
                attempt,
                max_retries=retries,
                network_retry_count=network_retries,
            )
            logger.warning(
                "ai_call_failed op=%s attempt=%s type=%s retryable=%s error=%s",
                operation_name,
                attempt + 1,
                error_type,
                retry,
                type(exc).__name__,
            )
            if not retry:
                raise create_ai_error(error_type, exc) from exc

            delay_ms = retry_delay_ms(error_type, attempt)
            logger.info("ai_call_retry op=%s delay_ms=%s", operation_name, delay_ms)
            await sleep(delay_ms / 1000)
            attempt += 1
            continue

        if attempt > 0:
            logger.info("ai_call_recovered op=%s retries=%s", operation_name, attempt)
        return result
