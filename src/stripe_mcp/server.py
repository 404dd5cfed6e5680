#!/usr/bin/env python3
"""
Stripe MCP Server

FastMCP server exposing Stripe account data (balance, transactions,
customers, payment methods, invoices, subscription metrics) as tools, plus
the ``stripe://dashboard`` summary resource.

Usage:
    # Run with STDIO transport (for agent integration)
    stripe-mcp --stdio

    # Run with HTTP transport
    stripe-mcp --http --port 4010

    # Only verify STRIPE_SECRET_KEY and exit
    stripe-mcp --check-credentials
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

import stripe
from fastmcp import FastMCP

from stripe_mcp import __version__
from stripe_mcp.client import StripeAccountClient
from stripe_mcp.config import LOG_LEVELS, ServerConfig
from stripe_mcp.credentials import check_credential_health
from stripe_mcp.dispatcher import ToolContext, ToolDispatcher
from stripe_mcp.errors import StartupError
from stripe_mcp.tools import register_resources, register_tools

SERVER_NAME = "stripe"

logger = logging.getLogger("stripe_mcp")


def setup_logger() -> None:
    """Configure the package logger. stdout carries the stdio protocol, so log to stderr."""
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter("[stripe-mcp] %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)


def connect(config: ServerConfig) -> StripeAccountClient:
    """Build the shared Stripe client and prove the key works."""
    client = StripeAccountClient(config.api_key, config.api_version)
    try:
        client.probe()
    except stripe.StripeError as e:
        raise StartupError(f"Failed to initialize Stripe client: {e}") from e
    logger.info("Connected to Stripe (API version %s)", config.api_version)
    return client


def create_server(config: ServerConfig, client: StripeAccountClient | None = None) -> FastMCP:
    """Create the FastMCP server with every tool and resource registered."""
    if client is None:
        client = connect(config)
    context = ToolContext(client=client, timeout=config.timeout)

    mcp = FastMCP(SERVER_NAME)
    tools = register_tools(mcp, ToolDispatcher(context))
    register_resources(mcp, context)
    logger.info("Registered %d tools: %s", len(tools), ", ".join(tools))
    return mcp


def check_credentials(config: ServerConfig) -> bool:
    result = check_credential_health("stripe", config.api_key)
    if result.valid:
        logger.info("%s", result.message)
    else:
        logger.error("%s", result.message)
    return result.valid


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Stripe MCP Server")
    transport = parser.add_mutually_exclusive_group()
    transport.add_argument(
        "--stdio",
        action="store_true",
        help="Use STDIO transport (default)",
    )
    transport.add_argument(
        "--http",
        action="store_true",
        help="Use HTTP transport instead of STDIO",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("STRIPE_MCP_PORT", "4010")),
        help="HTTP server port (default: 4010)",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="HTTP server host (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        default=None,
        help="Log level (default: STRIPE_MCP_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--check-credentials",
        action="store_true",
        help="Verify STRIPE_SECRET_KEY against the Stripe API and exit",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the Stripe MCP server."""
    args = build_parser().parse_args(argv)
    setup_logger()
    logger.info("Stripe MCP Server v%s starting...", __version__)

    try:
        config = ServerConfig.from_env()
        logger.setLevel(args.log_level or config.log_level)
        if args.check_credentials:
            sys.exit(0 if check_credentials(config) else 1)
        mcp = create_server(config)
    except StartupError as e:
        logger.error("%s", e)
        sys.exit(1)

    if args.http:
        logger.info("Starting Stripe MCP server on %s:%d", args.host, args.port)
        mcp.run(transport="http", host=args.host, port=args.port)
    else:
        logger.info("Stripe MCP Server running on stdio")
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
