"""Concurrency primitives shared by the generation and OCR services.

1. **race_first_success** -- start every provider call at once and return
   the first one that succeeds, bounded by a wall-clock deadline.  Losing
   calls are cancelled as soon as the race is decided.

2. **build_ocr_gate** -- the admission semaphore that caps how many
   Tesseract jobs run at the same time.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

import structlog

from poczytajmy.utils.errors import (
    DeadlineExceededError,
    NoProviderError,
    UpstreamFailureError,
)
from poczytajmy.utils.logging import get_logger

_T = TypeVar("_T")

_logger: structlog.BoundLogger = get_logger(__name__)


async def race_first_success(
    operations: list[Callable[[], Awaitable[_T]]],
    deadline: float,
    logger: structlog.BoundLogger | None = None,
) -> _T:
    """Run *operations* concurrently and return the first successful result.

    Parameters
    ----------
    operations:
        Zero-argument async callables.  Each one is started immediately.
    deadline:
        Seconds to wait for a winner before giving up.
    logger:
        Optional structured logger for per-participant failures.

    Returns
    -------
    _T
        The result of the first operation to complete without raising.
        When several complete in the same scheduler tick, list order wins.

    Raises
    ------
    NoProviderError
        If *operations* is empty.
    DeadlineExceededError
        If nothing succeeded within *deadline*, regardless of how many
        operations are still in flight.
    UpstreamFailureError
        If every operation failed before the deadline.  A lone operation's
        own exception is re-raised unchanged instead.
    """
    if logger is None:
        logger = _logger

    if not operations:
        raise NoProviderError("No provider configured")

    loop = asyncio.get_running_loop()
    expires_at = loop.time() + deadline
    tasks = [asyncio.ensure_future(op()) for op in operations]
    pending: set[asyncio.Future[_T]] = set(tasks)
    errors: list[BaseException] = []

    try:
        while pending:
            remaining = expires_at - loop.time()
            if remaining <= 0:
                break
            done, pending = await asyncio.wait(
                pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
            )

            winners: list[_T] = []
            for task in sorted(done, key=tasks.index):
                exc = task.exception()
                if exc is None:
                    winners.append(task.result())
                else:
                    errors.append(exc)
                    logger.warning(
                        "race_participant_failed",
                        participant=tasks.index(task),
                        error=str(exc),
                    )
            if winners:
                return winners[0]

        if pending:
            logger.warning(
                "race_deadline_exceeded",
                deadline_s=deadline,
                in_flight=len(pending),
                failed=len(errors),
            )
            raise DeadlineExceededError()

        if len(errors) == 1:
            raise errors[0]
        raise UpstreamFailureError(
            "All providers failed: " + "; ".join(str(e) for e in errors)
        )
    finally:
        # Losers get a cancellation signal; their results are never read.
        for task in pending:
            task.cancel()


def build_ocr_gate(max_concurrency: int) -> asyncio.Semaphore:
    """Return the semaphore bounding concurrent OCR jobs (minimum 1)."""
    return asyncio.Semaphore(max(1, max_concurrency))
