"""
Error types and failure classification for tool calls.

Every failure a tool call can hit is mapped, in priority order, to one of
the :class:`ErrorKind` values and a human-readable message:

1. validation    - arguments failed their tool's schema
2. rate_limited  - Stripe asked us to slow down
3. provider      - any other Stripe API error
4. timeout       - the call deadline elapsed
5. unknown_tool  - no tool with that name
6. unexpected    - anything else (including malformed Stripe responses)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import stripe


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    RATE_LIMITED = "rate_limited"
    PROVIDER = "provider"
    TIMEOUT = "timeout"
    UNKNOWN_TOOL = "unknown_tool"
    UNEXPECTED = "unexpected"


class ValidationError(ValueError):
    """Tool arguments were rejected before any remote call.

    ``fields`` maps each offending field to the reason it was rejected.
    """

    def __init__(self, tool_name: str, fields: Mapping[str, str]):
        self.tool_name = tool_name
        self.fields = dict(fields)
        details = "; ".join(f"{name}: {reason}" for name, reason in self.fields.items())
        super().__init__(f"Invalid arguments for {tool_name}: {details}")


class UnknownToolError(LookupError):
    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")


class ToolTimeoutError(TimeoutError):
    """The deadline for a tool call elapsed before Stripe answered."""

    def __init__(self, tool_name: str, timeout: float):
        self.tool_name = tool_name
        self.timeout = timeout
        super().__init__(f"Request timed out: {tool_name} did not complete within {timeout:g} seconds")


class InvalidResponseError(RuntimeError):
    """Stripe returned a payload that does not have the expected shape."""


class StartupError(RuntimeError):
    """The server cannot start: missing credential or failed connectivity probe."""


@dataclass(frozen=True)
class ToolFailure:
    kind: ErrorKind
    message: str


def _header(headers: Mapping[str, Any] | None, name: str) -> Any:
    if not headers:
        return None
    wanted = name.lower()
    for key, value in headers.items():
        if str(key).lower() == wanted:
            return value
    return None


def _is_rate_limit(exc: stripe.StripeError) -> bool:
    return (
        isinstance(exc, stripe.RateLimitError)
        or exc.http_status == 429
        or exc.code == "rate_limit"
    )


def _provider_message(exc: stripe.StripeError) -> str:
    message = exc.user_message or str(exc) or type(exc).__name__
    return f"Stripe API error: {message} (code: {exc.code or 'unknown'})"


def classify_exception(exc: BaseException) -> ToolFailure:
    """Map an exception raised during a tool call to a :class:`ToolFailure`."""
    if isinstance(exc, ValidationError):
        return ToolFailure(ErrorKind.VALIDATION, str(exc))
    if isinstance(exc, stripe.StripeError):
        if _is_rate_limit(exc):
            retry_after = _header(exc.headers, "Retry-After")
            if retry_after is None:
                return ToolFailure(
                    ErrorKind.RATE_LIMITED,
                    "Rate limit exceeded. Stripe did not say when to retry.",
                )
            return ToolFailure(
                ErrorKind.RATE_LIMITED,
                f"Rate limit exceeded. Retry after {retry_after} seconds.",
            )
        return ToolFailure(ErrorKind.PROVIDER, _provider_message(exc))
    if isinstance(exc, TimeoutError):
        return ToolFailure(ErrorKind.TIMEOUT, str(exc) or "Request timed out")
    if isinstance(exc, UnknownToolError):
        return ToolFailure(ErrorKind.UNKNOWN_TOOL, str(exc))
    return ToolFailure(ErrorKind.UNEXPECTED, f"Unexpected error: {exc}")
