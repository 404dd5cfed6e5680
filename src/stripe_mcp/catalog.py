"""Static catalog of the Stripe tools this server exposes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from stripe_mcp.arguments import (
    GetBalanceArgs,
    InvoiceHistoryArgs,
    ListCustomersArgs,
    ListTransactionsArgs,
    PaymentMethodsArgs,
    SubscriptionMetricsArgs,
    ToolArguments,
)


@dataclass(frozen=True)
class ToolDefinition:
    """A tool the agent can call.

    Attributes:
        name: Unique tool name, matched exactly on dispatch.
        description: Human-readable purpose shown to the agent.
        arguments: Pydantic model validating the tool's arguments.
    """

    name: str
    description: str
    arguments: type[ToolArguments]

    @property
    def input_schema(self) -> dict[str, Any]:
        return self.arguments.model_json_schema()


TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="stripe_list_transactions",
        description="List recent transactions with pagination support.",
        arguments=ListTransactionsArgs,
    ),
    ToolDefinition(
        name="stripe_get_balance",
        description="Get current account balance and pending payouts.",
        arguments=GetBalanceArgs,
    ),
    ToolDefinition(
        name="stripe_list_customers",
        description="List customers with pagination support.",
        arguments=ListCustomersArgs,
    ),
    ToolDefinition(
        name="stripe_payment_methods",
        description="List saved payment methods for a customer.",
        arguments=PaymentMethodsArgs,
    ),
    ToolDefinition(
        name="stripe_invoice_history",
        description="Get invoice history with status and payment details.",
        arguments=InvoiceHistoryArgs,
    ),
    ToolDefinition(
        name="stripe_subscription_metrics",
        description=(
            "Get subscription metrics (active subscriptions, MRR, average subscription "
            "value) for active subscriptions created in an optional date range."
        ),
        arguments=SubscriptionMetricsArgs,
    ),
)

_BY_NAME: dict[str, ToolDefinition] = {tool.name: tool for tool in TOOLS}

TOOL_NAMES: tuple[str, ...] = tuple(_BY_NAME)


def get_tool(name: str) -> ToolDefinition | None:
    return _BY_NAME.get(name)
