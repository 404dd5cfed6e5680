"""
Tool dispatch: catalog lookup, argument validation, deadline-bounded Stripe
call, and shaping of the outcome into a :class:`ToolCallResult`.

Nothing raised while handling a call escapes :meth:`ToolDispatcher.dispatch`;
every failure is classified and returned as an error result.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from stripe_mcp.arguments import (
    InvoiceHistoryArgs,
    ListCustomersArgs,
    ListTransactionsArgs,
    PaymentMethodsArgs,
    SubscriptionMetricsArgs,
    ToolArguments,
    validate_arguments,
)
from stripe_mcp.catalog import get_tool
from stripe_mcp.client import StripeAccountClient
from stripe_mcp.deadline import DEFAULT_TIMEOUT_SECONDS, run_with_deadline
from stripe_mcp.errors import ErrorKind, classify_exception
from stripe_mcp.metrics import compute_subscription_metrics
from stripe_mcp.results import ToolCallResult

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolContext:
    """Shared state for tool calls, built once at startup."""

    client: StripeAccountClient
    timeout: float = DEFAULT_TIMEOUT_SECONDS


class ToolDispatcher:
    """Routes tool calls to their handlers."""

    def __init__(self, context: ToolContext):
        self.context = context
        self.handlers: dict[str, Handler] = {
            "stripe_list_transactions": self._handle_list_transactions,
            "stripe_get_balance": self._handle_get_balance,
            "stripe_list_customers": self._handle_list_customers,
            "stripe_payment_methods": self._handle_payment_methods,
            "stripe_invoice_history": self._handle_invoice_history,
            "stripe_subscription_metrics": self._handle_subscription_metrics,
        }

    async def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolCallResult:
        if get_tool(name) is None or name not in self.handlers:
            logger.warning("Unknown tool requested: %s", name)
            return ToolCallResult.failure(ErrorKind.UNKNOWN_TOOL, f"Unknown tool: {name}")

        logger.info("Processing %s with args: %s", name, arguments or {})
        try:
            args = validate_arguments(name, arguments)
            payload = await run_with_deadline(
                self.handlers[name](args), self.context.timeout, name
            )
            text = json.dumps(payload, default=str)
        except Exception as e:
            failure = classify_exception(e)
            logger.warning("%s failed (%s): %s", name, failure.kind.value, failure.message)
            return ToolCallResult.failure(failure.kind, failure.message)
        return ToolCallResult.success(text)

    async def _handle_list_transactions(self, args: ListTransactionsArgs) -> dict[str, Any]:
        return await self.context.client.list_charges(
            args.limit, args.starting_after, args.ending_before
        )

    async def _handle_get_balance(self, args: ToolArguments) -> dict[str, Any]:
        return await self.context.client.get_balance()

    async def _handle_list_customers(self, args: ListCustomersArgs) -> dict[str, Any]:
        return await self.context.client.list_customers(
            args.limit, args.starting_after, args.ending_before, args.email
        )

    async def _handle_payment_methods(self, args: PaymentMethodsArgs) -> dict[str, Any]:
        return await self.context.client.list_payment_methods(args.customer)

    async def _handle_invoice_history(self, args: InvoiceHistoryArgs) -> dict[str, Any]:
        return await self.context.client.list_invoices(
            args.customer, args.limit, args.starting_after, args.ending_before
        )

    async def _handle_subscription_metrics(self, args: SubscriptionMetricsArgs) -> dict[str, Any]:
        page = await self.context.client.list_active_subscriptions(args.created_filter())
        if page["has_more"]:
            logger.warning(
                "Subscription metrics cover only the first %d active subscriptions",
                len(page["data"]),
            )
        return compute_subscription_metrics(page["data"]).to_dict()
