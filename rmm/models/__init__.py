"""Pydantic models for the quoting service."""

from rmm.models.quote import (
    ErrorResponse,
    LimitsRequest,
    LimitsResponse,
    PoolModel,
    QuoteRequest,
    QuoteResponse,
)
from rmm.models.types import TokenDecimals, Uint256

__all__ = [
    # Types
    "TokenDecimals",
    "Uint256",
    # Requests
    "PoolModel",
    "QuoteRequest",
    "LimitsRequest",
    # Responses
    "QuoteResponse",
    "LimitsResponse",
    "ErrorResponse",
]
