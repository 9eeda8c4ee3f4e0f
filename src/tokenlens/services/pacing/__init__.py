"""Upstream request pacing and rate limit retry policy."""

from tokenlens.services.pacing.pacer import Pacer, PacingCounter, RequestCategory
from tokenlens.services.pacing.retry import RetryPolicy

__all__ = ["Pacer", "PacingCounter", "RequestCategory", "RetryPolicy"]
