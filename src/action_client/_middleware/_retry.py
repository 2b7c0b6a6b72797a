import random
import time
from datetime import datetime
from email.utils import parsedate_to_datetime
from logging import Logger, getLogger
from typing import Mapping, Optional

from httpx import ConnectError, ConnectTimeout, TimeoutException
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from .._utils._request_spec import RequestSpec
from .._utils._response import RawResponse
from ._chain import Middleware, NextHandler

DEFAULT_RETRY_AFTER = 1.0


def is_retryable_exception(exception: BaseException) -> bool:
    return isinstance(exception, (ConnectTimeout, TimeoutException, ConnectError))


def is_retryable_status_code(response: RawResponse) -> bool:
    return response.status >= 500 and response.status < 600


def parse_retry_after(headers: Mapping[str, str]) -> float:
    """Seconds a 429 response asks the client to wait.

    ``Retry-After`` may hold a number of seconds or an HTTP date. Negative
    values and dates in the past give ``0.0``; a missing or unreadable header
    gives ``DEFAULT_RETRY_AFTER``.
    """
    value = headers.get("Retry-After")
    if not value:
        return DEFAULT_RETRY_AFTER

    try:
        seconds = float(value)
    except ValueError:
        try:
            when = parsedate_to_datetime(value)
        except (ValueError, TypeError):
            return DEFAULT_RETRY_AFTER
        seconds = (when - datetime.now(when.tzinfo)).total_seconds()

    # time.sleep rejects negative values
    return max(seconds, 0.0)


def _last_outcome(retry_state: RetryCallState) -> RawResponse:
    # Hand back the final 5xx response, or re-raise the final exception.
    if retry_state.outcome is None:
        raise RuntimeError("retry finished without an attempt outcome")
    return retry_state.outcome.result()


class RetryMiddleware(Middleware[RawResponse]):
    """Retry transient failures of everything downstream of this stage.

    Timeouts, connection errors and 5xx responses are retried with exponential
    backoff. A 429 response is retried after the delay its ``Retry-After``
    header asks for, plus up to 10% jitter. Once attempts run out, the last
    response is returned or the last exception is raised.

    Args:
        max_attempts: Total attempts for timeouts, connection errors and 5xx.
        max_rate_limit_retries: Extra attempts allowed for 429 responses.
        multiplier: Backoff multiplier, in seconds.
        wait_min: Lower bound of the backoff, in seconds.
        wait_max: Upper bound of the backoff, in seconds.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        *,
        max_rate_limit_retries: int = 3,
        multiplier: float = 1,
        wait_min: float = 1,
        wait_max: float = 10,
        logger: Optional[Logger] = None,
    ) -> None:
        self.max_attempts = max_attempts
        self.max_rate_limit_retries = max_rate_limit_retries
        self.multiplier = multiplier
        self.wait_min = wait_min
        self.wait_max = wait_max
        self._logger = logger or getLogger(__name__)

    def handle(
        self, request: RequestSpec, next: NextHandler[RawResponse]
    ) -> RawResponse:
        retrying = Retrying(
            retry=(
                retry_if_exception(is_retryable_exception)
                | retry_if_result(is_retryable_status_code)
            ),
            wait=wait_exponential(
                multiplier=self.multiplier, min=self.wait_min, max=self.wait_max
            ),
            stop=stop_after_attempt(self.max_attempts),
            retry_error_callback=_last_outcome,
        )
        return retrying(self._send, request, next)

    def _send(
        self, request: RequestSpec, next: NextHandler[RawResponse]
    ) -> RawResponse:
        for attempt in range(self.max_rate_limit_retries + 1):
            response = next(request)

            if response.status == 429 and attempt < self.max_rate_limit_retries:
                delay = parse_retry_after(response.headers)
                delay += random.uniform(0, delay / 10)
                self._logger.warning(
                    f"Rate limited (429). Retrying after {delay:.2f}s "
                    f"(attempt {attempt + 1}/{self.max_rate_limit_retries})"
                )
                time.sleep(delay)
                continue

            break

        return response
