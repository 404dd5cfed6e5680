"""Shared fixtures for Stripe MCP tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastmcp import FastMCP

from stripe_mcp.client import StripeAccountClient
from stripe_mcp.credentials import CredentialStoreAdapter
from stripe_mcp.dispatcher import ToolContext, ToolDispatcher


def empty_page() -> dict:
    return {"has_more": False, "data": []}


@pytest.fixture
def mcp() -> FastMCP:
    """Create a fresh FastMCP instance for testing."""
    return FastMCP("test-server")


@pytest.fixture
def mock_credentials() -> CredentialStoreAdapter:
    """Create a CredentialStoreAdapter with a mock Stripe key."""
    return CredentialStoreAdapter.for_testing({"stripe": "sk_test_key123"})


@pytest.fixture
def stripe_client() -> MagicMock:
    """A StripeAccountClient double whose async methods return empty results."""
    client = MagicMock(spec=StripeAccountClient)
    client.list_charges.return_value = empty_page()
    client.get_balance.return_value = {"available": [], "pending": []}
    client.list_customers.return_value = empty_page()
    client.list_payment_methods.return_value = empty_page()
    client.list_invoices.return_value = empty_page()
    client.list_active_subscriptions.return_value = empty_page()
    return client


@pytest.fixture
def context(stripe_client: MagicMock) -> ToolContext:
    return ToolContext(client=stripe_client, timeout=1.0)


@pytest.fixture
def dispatcher(context: ToolContext) -> ToolDispatcher:
    return ToolDispatcher(context)
