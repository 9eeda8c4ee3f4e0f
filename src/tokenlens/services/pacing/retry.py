"""Rate limit retry policy shared by the Pacer and the Multi-Format Fetcher.

One object decides what counts as a rate-limit signal and how long to back
off, so the two layers cannot drift apart.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from tokenlens.constants.ave import (
    CANDIDATE_RATE_LIMIT_PAUSE_SECONDS,
    RATE_LIMIT_BACKOFF_SECONDS,
    RATE_LIMIT_MAX_ATTEMPTS,
)
from tokenlens.core.exceptions import RateLimitError


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff settings for upstream rate limiting.

    Attributes:
        rate_limit_backoff: Seconds to sleep before the Pacer's single retry.
        candidate_pause: Seconds the Fetcher pauses after a 429 before it
            moves on to the next candidate.
        max_attempts: Total attempts for a paced operation (1 + retries).
    """

    rate_limit_backoff: float = RATE_LIMIT_BACKOFF_SECONDS
    candidate_pause: float = CANDIDATE_RATE_LIMIT_PAUSE_SECONDS
    max_attempts: int = RATE_LIMIT_MAX_ATTEMPTS

    def is_rate_limited(self, error: BaseException) -> bool:
        """Check whether an error is a rate-limit signal.

        Matches RateLimitError, anything carrying status_code 429, and
        messages mentioning "rate limit". A "429" inside the message text
        (a token address in a request path, say) does not count. Errors wrapping
        a last error (UpstreamExhaustedError) are classified by that error.
        """
        if isinstance(error, RateLimitError):
            return True
        if getattr(error, "status_code", None) == 429:
            return True

        message = str(error).lower()
        if "rate limit" in message:
            return True

        last_error = getattr(error, "last_error", None)
        if isinstance(last_error, BaseException) and last_error is not error:
            return self.is_rate_limited(last_error)
        return False

    def retrying(
        self,
        before: Callable[[RetryCallState], Any] | None = None,
    ) -> AsyncRetrying:
        """Build the tenacity controller for a paced operation.

        Args:
            before: Hook called before every attempt (receives the retry state).

        Returns:
            AsyncRetrying that retries rate-limit errors only and re-raises the
            final error unchanged.
        """
        kwargs: dict[str, Any] = {}
        if before is not None:
            kwargs["before"] = before

        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.rate_limit_backoff),
            retry=retry_if_exception(self.is_rate_limited),
            reraise=True,
            **kwargs,
        )
