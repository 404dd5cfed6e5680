"""
Stripe MCP - Stripe account data as Model Context Protocol tools.

Usage:
    from stripe_mcp.dispatcher import ToolContext, ToolDispatcher

    dispatcher = ToolDispatcher(ToolContext(client=client))
    result = await dispatcher.dispatch("stripe_get_balance", {})
"""

__version__ = "0.1.0"
