"""
Read-only Stripe client for account data.

Wraps ``stripe.StripeClient`` and reshapes each response into plain dicts.
Every amount leaves this module in major currency units.

API Reference: https://stripe.com/docs/api
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import stripe

from stripe_mcp.errors import InvalidResponseError
from stripe_mcp.metrics import to_major_units

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2023-10-16"
SUBSCRIPTION_PAGE_SIZE = 100


def _cursor_params(
    limit: int | None = None,
    starting_after: str | None = None,
    ending_before: str | None = None,
) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if limit is not None:
        params["limit"] = limit
    if starting_after:
        params["starting_after"] = starting_after
    if ending_before:
        params["ending_before"] = ending_before
    return params


def _page(result: Any, formatter: Callable[[Any], dict[str, Any]], operation: str) -> dict[str, Any]:
    data = getattr(result, "data", None)
    if not isinstance(data, list):
        raise InvalidResponseError(f"Invalid response from Stripe API ({operation})")
    return {
        "has_more": bool(getattr(result, "has_more", False)),
        "data": [formatter(item) for item in data],
    }


class StripeAccountClient:
    """One credential-bound Stripe session, shared by all tool calls.

    Network retries are disabled: a failed call is reported, never repeated.
    """

    def __init__(self, api_key: str, api_version: str | None = DEFAULT_API_VERSION):
        self._client = stripe.StripeClient(
            api_key,
            stripe_version=api_version,
            max_network_retries=0,
        )

    def _stripe(self) -> stripe.StripeClient:
        return self._client

    def probe(self) -> None:
        """Retrieve the balance once to prove the key works. Raises on failure."""
        self._stripe().balance.retrieve()

    # --- Charges ---

    async def list_charges(
        self,
        limit: int | None = None,
        starting_after: str | None = None,
        ending_before: str | None = None,
    ) -> dict[str, Any]:
        params = _cursor_params(limit, starting_after, ending_before)
        result = await self._stripe().charges.list_async(params)
        return _page(result, self._format_charge, "list transactions")

    def _format_charge(self, c: Any) -> dict[str, Any]:
        return {
            "id": c.id,
            "amount": to_major_units(c.amount),
            "amount_captured": to_major_units(getattr(c, "amount_captured", None)),
            "amount_refunded": to_major_units(getattr(c, "amount_refunded", None)),
            "currency": c.currency,
            "status": c.status,
            "paid": getattr(c, "paid", None),
            "refunded": getattr(c, "refunded", None),
            "customer": getattr(c, "customer", None),
            "description": getattr(c, "description", None),
            "payment_intent": getattr(c, "payment_intent", None),
            "created": c.created,
        }

    # --- Balance ---

    async def get_balance(self) -> dict[str, Any]:
        bal = await self._stripe().balance.retrieve_async()
        return {
            "available": [
                {"amount": to_major_units(b.amount), "currency": b.currency} for b in bal.available
            ],
            "pending": [
                {"amount": to_major_units(b.amount), "currency": b.currency} for b in bal.pending
            ],
        }

    # --- Customers ---

    async def list_customers(
        self,
        limit: int | None = None,
        starting_after: str | None = None,
        ending_before: str | None = None,
        email: str | None = None,
    ) -> dict[str, Any]:
        params = _cursor_params(limit, starting_after, ending_before)
        if email:
            params["email"] = email
        result = await self._stripe().customers.list_async(params)
        return _page(result, self._format_customer, "list customers")

    def _format_customer(self, c: Any) -> dict[str, Any]:
        return {
            "id": c.id,
            "email": c.email,
            "name": c.name,
            "phone": getattr(c, "phone", None),
            "description": getattr(c, "description", None),
            "created": c.created,
            "currency": getattr(c, "currency", None),
            "balance": to_major_units(getattr(c, "balance", None)),
            "delinquent": getattr(c, "delinquent", None),
        }

    # --- Payment Methods ---

    async def list_payment_methods(self, customer_id: str, type_filter: str = "card") -> dict[str, Any]:
        params = {"customer": customer_id, "type": type_filter}
        result = await self._stripe().payment_methods.list_async(params)
        return _page(result, self._format_payment_method, "payment methods")

    def _format_payment_method(self, pm: Any) -> dict[str, Any]:
        card = None
        raw_card = getattr(pm, "card", None)
        if raw_card:
            card = {
                "brand": raw_card.brand,
                "last4": raw_card.last4,
                "exp_month": raw_card.exp_month,
                "exp_year": raw_card.exp_year,
                "country": getattr(raw_card, "country", None),
            }
        return {
            "id": pm.id,
            "type": pm.type,
            "customer": getattr(pm, "customer", None),
            "card": card,
            "created": pm.created,
        }

    # --- Invoices ---

    async def list_invoices(
        self,
        customer_id: str,
        limit: int | None = None,
        starting_after: str | None = None,
        ending_before: str | None = None,
    ) -> dict[str, Any]:
        params = {"customer": customer_id, **_cursor_params(limit, starting_after, ending_before)}
        result = await self._stripe().invoices.list_async(params)
        return _page(result, self._format_invoice, "invoice history")

    def _format_invoice(self, inv: Any) -> dict[str, Any]:
        return {
            "id": inv.id,
            "number": getattr(inv, "number", None),
            "customer": inv.customer,
            "status": inv.status,
            "amount_due": to_major_units(inv.amount_due),
            "amount_paid": to_major_units(inv.amount_paid),
            "amount_remaining": to_major_units(getattr(inv, "amount_remaining", None)),
            "total": to_major_units(getattr(inv, "total", None)),
            "currency": inv.currency,
            "hosted_invoice_url": getattr(inv, "hosted_invoice_url", None),
            "invoice_pdf": getattr(inv, "invoice_pdf", None),
            "due_date": getattr(inv, "due_date", None),
            "period_start": getattr(inv, "period_start", None),
            "period_end": getattr(inv, "period_end", None),
            "created": inv.created,
        }

    # --- Subscriptions ---

    async def list_active_subscriptions(self, created: dict[str, int] | None = None) -> dict[str, Any]:
        """Fetch one page of active subscriptions with their prices expanded."""
        params: dict[str, Any] = {
            "status": "active",
            "limit": SUBSCRIPTION_PAGE_SIZE,
            "expand": ["data.items.data.price"],
        }
        if created:
            params["created"] = created
        result = await self._stripe().subscriptions.list_async(params)
        return _page(result, self._format_subscription, "subscription metrics")

    def _format_subscription(self, s: Any) -> dict[str, Any]:
        # item access: "items" clashes with dict.items on StripeObject
        line_items = getattr(s["items"], "data", None) or []
        return {
            "id": s.id,
            "customer": getattr(s, "customer", None),
            "items": [self._format_line_item(item) for item in line_items],
        }

    def _format_line_item(self, item: Any) -> dict[str, Any]:
        price = getattr(item, "price", None)
        return {
            "price": getattr(price, "id", None),
            "unit_amount": getattr(price, "unit_amount", None),
            "quantity": getattr(item, "quantity", None),
        }
