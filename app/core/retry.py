# app/core/retry.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    delay: float = 1.0  # секунды между попытками, фиксированная пауза без джиттера

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.delay < 0:
            raise ValueError("delay must be >= 0")


def error_status_code(exc: BaseException) -> Optional[int]:
    """HTTP-код ошибки: либо exc.status_code, либо exc.response.status_code (httpx)."""
    code = getattr(exc, "status_code", None)
    if code is None:
        response = getattr(exc, "response", None)
        code = getattr(response, "status_code", None)
    return code if isinstance(code, int) else None


def is_permanent(exc: BaseException) -> bool:
    code = error_status_code(exc)
    return code is not None and 400 <= code < 500


def is_transient(exc: BaseException) -> bool:
    return not is_permanent(exc)


def _log_failed_attempt(label: str, policy: RetryPolicy):
    def _before_sleep(state: RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome else None
        logger.warning(
            "Attempt %s/%s failed for %s: %s. Retrying in %ss",
            state.attempt_number, policy.max_attempts, label, exc, policy.delay,
        )
    return _before_sleep


async def attempt(policy: RetryPolicy, operation: Callable[[], Awaitable[T]],
                  *, label: str = "operation") -> T:
    """
    Выполнить operation с ретраями по policy.

    Ошибки с кодом 4xx пробрасываются сразу, остальные считаются временными:
    повтор через policy.delay, пока не кончатся попытки, затем пробрасывается
    последняя ошибка.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_fixed(policy.delay),
        retry=retry_if_exception(is_transient),
        before_sleep=_log_failed_attempt(label, policy),
        reraise=True,
    )
    try:
        # operation может быть обычной lambda, возвращающей корутину, поэтому await делаем сами
        async for try_ in retrying:
            with try_:
                return await operation()
    except Exception as exc:
        if is_permanent(exc):
            logger.warning("%s failed with permanent error, not retrying: %s", label, exc)
        else:
            logger.error("%s failed after %s attempts: %s", label, policy.max_attempts, exc)
        raise
