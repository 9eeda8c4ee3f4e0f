"""Normalized record models."""

from tokenlens.models.token import (
    HolderEntry,
    KlinePoint,
    RiskReport,
    SearchToken,
    TokenDetails,
    TransactionEntry,
)

__all__ = [
    "HolderEntry",
    "KlinePoint",
    "RiskReport",
    "SearchToken",
    "TokenDetails",
    "TransactionEntry",
]
