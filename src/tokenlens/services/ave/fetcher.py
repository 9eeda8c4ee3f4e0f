"""Multi-format fetcher: try candidate requests until one parses."""

import asyncio
import time
from collections.abc import Sequence
from typing import Any

import structlog

from tokenlens.constants.ave import AVE_SERVICE_NAME
from tokenlens.core.exceptions import (
    ExternalServiceError,
    RateLimitError,
    ShapeMismatchError,
    UpstreamExhaustedError,
)
from tokenlens.services.ave.candidates import CandidateRequest
from tokenlens.services.ave.client import AveClient
from tokenlens.services.pacing.retry import RetryPolicy

logger = structlog.get_logger(__name__)


def _is_empty(payload: Any) -> bool:
    if payload is None:
        return True
    if isinstance(payload, list | dict | str):
        return len(payload) == 0
    return False


class MultiFormatFetcher:
    """Fetches one logical operation by trying candidates in priority order.

    Candidates run strictly one after another. A candidate is skipped on a
    timeout, connection failure, non-2xx status, undecodable body or a body
    the parser does not recognize. A 429 pauses before the next candidate.
    The first non-empty parsed payload wins.
    """

    def __init__(
        self,
        client: AveClient,
        retry_policy: RetryPolicy | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            client: Ave API client used for every candidate.
            retry_policy: Supplies the pause after a 429.
            timeout: Per-attempt timeout; None uses the client's default.
        """
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout = timeout

    async def fetch_first_match(
        self,
        operation: str,
        candidates: Sequence[CandidateRequest],
        timeout: float | None = None,
    ) -> Any:
        """Return the first non-empty parsed payload among candidates.

        Args:
            operation: Logical operation name used in logs and errors.
            candidates: Ordered candidate requests.
            timeout: Per-attempt timeout override in seconds.

        Returns:
            The parsed payload of the first matching candidate.

        Raises:
            UpstreamExhaustedError: If no candidate produced a payload. Its
                last_error is the last failure observed, or a
                ShapeMismatchError when every response decoded but none
                matched.
        """
        attempt_timeout = timeout if timeout is not None else self.timeout
        last_error: Exception | None = None
        attempts = 0
        start_time = time.perf_counter()

        for candidate in candidates:
            attempts += 1
            try:
                body = await self.client.get_json(
                    candidate.path,
                    params=candidate.params or None,
                    timeout=attempt_timeout,
                )
            except RateLimitError as e:
                last_error = e
                logger.warning(
                    "candidate_rate_limited",
                    operation=operation,
                    candidate=candidate.description,
                    pause_seconds=self.retry_policy.candidate_pause,
                )
                await asyncio.sleep(self.retry_policy.candidate_pause)
                continue
            except ExternalServiceError as e:
                last_error = e
                logger.info(
                    "candidate_failed",
                    operation=operation,
                    candidate=candidate.description,
                    error=str(e),
                )
                continue

            payload = candidate.parser(body)
            if _is_empty(payload):
                logger.debug(
                    "candidate_no_match",
                    operation=operation,
                    candidate=candidate.description,
                )
                continue

            logger.debug(
                "candidate_matched",
                operation=operation,
                candidate=candidate.description,
                attempts=attempts,
                fetch_time_ms=round((time.perf_counter() - start_time) * 1000, 1),
            )
            return payload

        if last_error is None:
            last_error = ShapeMismatchError(
                service=AVE_SERVICE_NAME,
                message=f"{operation}: no candidate returned a recognized shape",
            )

        logger.warning(
            "candidates_exhausted",
            operation=operation,
            attempts=attempts,
            last_error=str(last_error),
        )
        raise UpstreamExhaustedError(
            service=AVE_SERVICE_NAME,
            operation=operation,
            attempts=attempts,
            last_error=last_error,
        )
