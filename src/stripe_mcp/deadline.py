"""Deadline guard for remote Stripe calls."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from stripe_mcp.errors import ToolTimeoutError

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 30.0


async def run_with_deadline(
    operation: Awaitable[T],
    timeout: float,
    tool_name: str,
) -> T:
    """Await ``operation`` for at most ``timeout`` seconds.

    On expiry the operation is cancelled and :class:`ToolTimeoutError` is
    raised. A Stripe response that lands after that point is dropped; the
    handlers keep no shared state, so there is nothing for it to update.
    """
    try:
        return await asyncio.wait_for(operation, timeout=timeout)
    except TimeoutError as e:
        raise ToolTimeoutError(tool_name, timeout) from e
