"""Tests for tool dispatch: routing, deadlines and error results."""

from __future__ import annotations

import asyncio
import json

import pytest
import stripe

from stripe_mcp.catalog import TOOL_NAMES
from stripe_mcp.dispatcher import ToolContext, ToolDispatcher
from stripe_mcp.errors import ErrorKind, InvalidResponseError

MINIMAL_ARGUMENTS = {
    "stripe_list_transactions": {},
    "stripe_get_balance": {},
    "stripe_list_customers": {},
    "stripe_payment_methods": {"customer": "cus_test123"},
    "stripe_invoice_history": {"customer": "cus_test123"},
    "stripe_subscription_metrics": {},
}


class TestRouting:
    def test_minimal_arguments_cover_catalog(self):
        assert set(MINIMAL_ARGUMENTS) == set(TOOL_NAMES)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", TOOL_NAMES)
    async def test_every_tool_succeeds_with_minimal_arguments(self, dispatcher, name):
        result = await dispatcher.dispatch(name, MINIMAL_ARGUMENTS[name])
        assert result.is_error is False
        assert len(result.content) == 1
        assert result.content[0].type == "text"
        json.loads(result.text)

    @pytest.mark.asyncio
    async def test_unknown_tool(self, dispatcher, stripe_client):
        result = await dispatcher.dispatch("stripe_delete_everything", {})
        assert result.is_error is True
        assert result.error_kind is ErrorKind.UNKNOWN_TOOL
        assert "stripe_delete_everything" in result.text
        assert stripe_client.mock_calls == []

    @pytest.mark.asyncio
    async def test_name_lookup_is_exact(self, dispatcher):
        result = await dispatcher.dispatch("STRIPE_GET_BALANCE", {})
        assert result.error_kind is ErrorKind.UNKNOWN_TOOL

    @pytest.mark.asyncio
    async def test_cursor_arguments_forwarded(self, dispatcher, stripe_client):
        await dispatcher.dispatch(
            "stripe_invoice_history",
            {"customer": "cus_1", "limit": 10, "starting_after": "in_abc", "ending_before": "in_xyz"},
        )
        stripe_client.list_invoices.assert_awaited_once_with("cus_1", 10, "in_abc", "in_xyz")

    @pytest.mark.asyncio
    async def test_list_customers_forwards_email(self, dispatcher, stripe_client):
        await dispatcher.dispatch("stripe_list_customers", {"email": "a@example.com"})
        stripe_client.list_customers.assert_awaited_once_with(None, None, None, "a@example.com")

    @pytest.mark.asyncio
    async def test_page_serialized_whole(self, dispatcher, stripe_client):
        page = {"has_more": True, "data": [{"id": "ch_1", "amount": 20.0, "currency": "usd"}]}
        stripe_client.list_charges.return_value = page
        result = await dispatcher.dispatch("stripe_list_transactions", {"limit": 1})
        assert json.loads(result.text) == page

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_client(self, dispatcher, stripe_client):
        results = await asyncio.gather(
            dispatcher.dispatch("stripe_get_balance", {}),
            dispatcher.dispatch("stripe_list_customers", {"limit": 2}),
            dispatcher.dispatch("stripe_list_transactions", {}),
        )
        assert [r.is_error for r in results] == [False, False, False]
        assert dispatcher.context.client is stripe_client


class TestValidationBeforeDispatch:
    @pytest.mark.asyncio
    async def test_customer_limit_over_cap_never_reaches_stripe(self, dispatcher, stripe_client):
        result = await dispatcher.dispatch("stripe_list_customers", {"limit": 150})
        assert result.is_error is True
        assert result.error_kind is ErrorKind.VALIDATION
        assert "limit" in result.text
        stripe_client.list_customers.assert_not_called()

    @pytest.mark.asyncio
    async def test_metrics_with_reversed_range_never_reaches_stripe(self, dispatcher, stripe_client):
        result = await dispatcher.dispatch(
            "stripe_subscription_metrics",
            {"from_date": "2024-06-01T00:00:00Z", "to_date": "2024-01-01T00:00:00Z"},
        )
        assert result.error_kind is ErrorKind.VALIDATION
        assert "from_date" in result.text
        stripe_client.list_active_subscriptions.assert_not_called()

    @pytest.mark.asyncio
    async def test_balance_rejects_arguments(self, dispatcher, stripe_client):
        result = await dispatcher.dispatch("stripe_get_balance", {"limit": 1})
        assert result.error_kind is ErrorKind.VALIDATION
        stripe_client.get_balance.assert_not_called()


class TestSubscriptionMetrics:
    @pytest.mark.asyncio
    async def test_zero_subscriptions(self, dispatcher):
        result = await dispatcher.dispatch("stripe_subscription_metrics", {})
        assert json.loads(result.text) == {
            "active_subscriptions": 0,
            "mrr": 0,
            "average_subscription_value": 0,
        }

    @pytest.mark.asyncio
    async def test_mrr_from_page(self, dispatcher, stripe_client):
        stripe_client.list_active_subscriptions.return_value = {
            "has_more": False,
            "data": [
                {"id": "sub_1", "items": [{"unit_amount": 2000, "quantity": 1}]},
                {"id": "sub_2", "items": [{"unit_amount": 500, "quantity": 2}]},
            ],
        }
        result = await dispatcher.dispatch(
            "stripe_subscription_metrics",
            {"from_date": "2024-01-01T00:00:00Z", "to_date": "2024-02-01T00:00:00Z"},
        )
        assert result.is_error is False
        assert json.loads(result.text) == {
            "active_subscriptions": 2,
            "mrr": 30.0,
            "average_subscription_value": 15.0,
        }
        stripe_client.list_active_subscriptions.assert_awaited_once_with(
            {"gte": 1704067200, "lte": 1706745600}
        )

    @pytest.mark.asyncio
    async def test_only_first_page_aggregated(self, dispatcher, stripe_client, caplog):
        stripe_client.list_active_subscriptions.return_value = {
            "has_more": True,
            "data": [{"id": "sub_1", "items": [{"unit_amount": 1000, "quantity": 1}]}],
        }
        with caplog.at_level("WARNING", logger="stripe_mcp.dispatcher"):
            result = await dispatcher.dispatch("stripe_subscription_metrics", {})
        assert json.loads(result.text)["active_subscriptions"] == 1
        assert stripe_client.list_active_subscriptions.await_count == 1
        assert "first 1 active subscriptions" in caplog.text


class TestFailures:
    @pytest.mark.asyncio
    async def test_timeout(self, stripe_client):
        async def _slow():
            await asyncio.sleep(5)

        stripe_client.get_balance.side_effect = _slow
        dispatcher = ToolDispatcher(ToolContext(client=stripe_client, timeout=0.05))

        result = await asyncio.wait_for(dispatcher.dispatch("stripe_get_balance", {}), timeout=2)

        assert result.is_error is True
        assert result.error_kind is ErrorKind.TIMEOUT
        assert "timed out" in result.text

    @pytest.mark.asyncio
    async def test_rate_limit(self, dispatcher, stripe_client):
        stripe_client.list_charges.side_effect = stripe.RateLimitError(
            "Too many requests", http_status=429, headers={"Retry-After": "12"}
        )
        result = await dispatcher.dispatch("stripe_list_transactions", {})
        assert result.error_kind is ErrorKind.RATE_LIMITED
        assert "12" in result.text

    @pytest.mark.asyncio
    async def test_provider_error(self, dispatcher, stripe_client):
        stripe_client.list_payment_methods.side_effect = stripe.InvalidRequestError(
            "No such customer: 'cus_gone'", param="customer", code="resource_missing"
        )
        result = await dispatcher.dispatch("stripe_payment_methods", {"customer": "cus_gone"})
        assert result.error_kind is ErrorKind.PROVIDER
        assert "No such customer" in result.text
        assert "resource_missing" in result.text

    @pytest.mark.asyncio
    async def test_malformed_response(self, dispatcher, stripe_client):
        stripe_client.list_invoices.side_effect = InvalidResponseError(
            "Invalid response from Stripe API (invoice history)"
        )
        result = await dispatcher.dispatch("stripe_invoice_history", {"customer": "cus_1"})
        assert result.error_kind is ErrorKind.UNEXPECTED
        assert "invoice history" in result.text

    @pytest.mark.asyncio
    async def test_unexpected_error(self, dispatcher, stripe_client):
        stripe_client.get_balance.side_effect = RuntimeError("socket closed")
        result = await dispatcher.dispatch("stripe_get_balance", {})
        assert result.to_dict()["isError"] is True
        assert "socket closed" in result.text

    @pytest.mark.asyncio
    async def test_no_automatic_retry(self, dispatcher, stripe_client):
        stripe_client.get_balance.side_effect = stripe.APIConnectionError("connection reset")
        await dispatcher.dispatch("stripe_get_balance", {})
        assert stripe_client.get_balance.await_count == 1
