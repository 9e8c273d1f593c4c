"""API endpoints for the RMM quoting service."""

import asyncio
import os
from collections.abc import Callable
from typing import TypeVar

import structlog
from fastapi import APIRouter, Depends, HTTPException

from rmm.math.fixed_point import FixedPointValue
from rmm.models.quote import LimitsRequest, LimitsResponse, QuoteRequest, QuoteResponse
from rmm.swaps.limits import MaxSwapCalculator
from rmm.swaps.quoter import SwapQuoter, get_default_quoter
from rmm.swaps.types import SwapKind, SwapQuote

logger = structlog.get_logger()

router = APIRouter()

# Upper bound on a single quote computation, in seconds
QUOTE_TIMEOUT = float(os.environ.get("RMM_QUOTE_TIMEOUT", "5.0"))

T = TypeVar("T")


def get_quoter() -> SwapQuoter:
    """Dependency provider for the quoter instance.

    Override this in tests to inject another curve or configuration:
        app.dependency_overrides[get_quoter] = lambda: SwapQuoter(EXACT_CURVE)

    Returns:
        The quoter to use for incoming requests.
    """
    return get_default_quoter()


async def _run_with_timeout(func: Callable[..., T], *args: object) -> T:
    """Run a synchronous computation in the default executor under QUOTE_TIMEOUT.

    Raises:
        HTTPException: 504 if the computation does not finish in time
    """
    loop = asyncio.get_event_loop()
    try:
        return await asyncio.wait_for(
            loop.run_in_executor(None, func, *args),
            timeout=QUOTE_TIMEOUT,
        )
    except TimeoutError:
        logger.warning("quote_timeout", timeout_seconds=QUOTE_TIMEOUT)
        raise HTTPException(status_code=504, detail="Quote computation timed out") from None


async def _quote(request: QuoteRequest, quoter: SwapQuoter, exact_in: bool) -> QuoteResponse:
    kind = SwapKind.resolve(request.direction, exact_in)
    logger.info(
        "received_quote",
        kind=kind.label,
        amount=request.amount,
        curve=quoter.curve.name,
    )

    # Core errors propagate to the RmmError handler in main
    pool = request.pool.to_pool_state()
    amount = FixedPointValue.from_raw(int(request.amount), pool.reserve(kind.known_side).decimals)
    quote: SwapQuote = await _run_with_timeout(quoter.quote, kind, pool, amount)

    logger.info(
        "returning_quote",
        kind=kind.label,
        amount_in=str(quote.amount_in),
        amount_out=str(quote.amount_out),
        implied_price=quote.implied_price,
    )
    return QuoteResponse.from_quote(quote)


@router.post("/quote/exact-in")
async def quote_exact_in(
    request: QuoteRequest,
    quoter: SwapQuoter = Depends(get_quoter),
) -> QuoteResponse:
    """Quote the output for an exact amount paid in.

    Error Handling:
        - Invalid request schema: 422 Validation Error (Pydantic)
        - Quote rejected by the core: 422 with error code and detail
        - Computation exceeds RMM_QUOTE_TIMEOUT: 504
    """
    return await _quote(request, quoter, exact_in=True)


@router.post("/quote/exact-out")
async def quote_exact_out(
    request: QuoteRequest,
    quoter: SwapQuoter = Depends(get_quoter),
) -> QuoteResponse:
    """Quote the fee-inclusive input for an exact amount taken out.

    Error handling is the same as for /quote/exact-in.
    """
    return await _quote(request, quoter, exact_in=False)


@router.post("/limits")
async def limits(request: LimitsRequest) -> LimitsResponse:
    """Largest input and output the pool accepts in a direction."""
    calculator = MaxSwapCalculator.for_pool(request.pool.to_pool_state())
    max_in = calculator.max_delta_in(request.direction)
    max_out = calculator.max_delta_out(request.direction)
    return LimitsResponse(
        direction=request.direction,
        max_delta_in=str(max_in.raw),
        max_delta_out=str(max_out.raw),
        decimals_in=max_in.decimals,
        decimals_out=max_out.decimals,
    )
