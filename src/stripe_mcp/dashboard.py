"""The ``stripe://dashboard`` resource: a plain-text account summary."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from stripe_mcp.deadline import run_with_deadline
from stripe_mcp.dispatcher import ToolContext

logger = logging.getLogger(__name__)

DASHBOARD_URI = "stripe://dashboard"
DASHBOARD_NAME = "Stripe Dashboard Summary"
DASHBOARD_DESCRIPTION = "Current balance and recent transaction summary"
RECENT_TRANSACTIONS = 5


def _format_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=UTC).date().isoformat()


async def _render(context: ToolContext) -> str:
    balance = await context.client.get_balance()
    charges = await context.client.list_charges(limit=RECENT_TRANSACTIONS)

    available = balance["available"]
    amount = available[0]["amount"] if available else 0
    currency = available[0]["currency"] if available else ""

    lines = [f"Current Balance: {amount} {currency}", "", "Recent Transactions:"]
    for charge in charges["data"][:RECENT_TRANSACTIONS]:
        lines.append(
            f"- {charge['amount']} {charge['currency']} on {_format_date(charge['created'])}"
        )
    return "\n".join(lines) + "\n"


async def read_dashboard(context: ToolContext) -> str:
    """Build the dashboard summary. A failure is reported in the text, never raised."""
    try:
        text = await run_with_deadline(_render(context), context.timeout, DASHBOARD_URI)
    except Exception as e:
        logger.warning("Dashboard read failed: %s", e)
        return f"Error fetching dashboard data: {e}"
    return text
