"""
FastMCP registration of the Stripe tools and the dashboard resource.

Usage:
    from fastmcp import FastMCP
    from stripe_mcp.tools import register_tools, register_resources

    mcp = FastMCP("stripe")
    register_tools(mcp, ToolDispatcher(context))
    register_resources(mcp, context)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from stripe_mcp.catalog import TOOLS, ToolDefinition
from stripe_mcp.dashboard import (
    DASHBOARD_DESCRIPTION,
    DASHBOARD_NAME,
    DASHBOARD_URI,
    read_dashboard,
)

if TYPE_CHECKING:
    from stripe_mcp.dispatcher import ToolContext, ToolDispatcher


class CatalogTool(Tool):
    """A catalog tool served by the dispatcher.

    Agents see the catalog model's JSON schema. Arguments are passed to the
    dispatcher as received, so every rejection carries the dispatcher's
    ``Invalid arguments for ...`` message.
    """

    dispatcher: Any = Field(exclude=True)

    @classmethod
    def from_definition(cls, definition: ToolDefinition, dispatcher: ToolDispatcher) -> CatalogTool:
        return cls(
            name=definition.name,
            description=definition.description,
            parameters=definition.input_schema,
            dispatcher=dispatcher,
        )

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        result = await self.dispatcher.dispatch(self.name, arguments)
        if result.is_error:
            # FastMCP reports ToolError as an isError result with this text
            raise ToolError(result.text)
        return ToolResult(content=result.text)


def register_tools(mcp: FastMCP, dispatcher: ToolDispatcher) -> list[str]:
    """Register every catalog tool, in catalog order. Returns their names."""
    for definition in TOOLS:
        mcp.add_tool(CatalogTool.from_definition(definition, dispatcher))
    return [definition.name for definition in TOOLS]


def register_resources(mcp: FastMCP, context: ToolContext) -> None:
    """Register the read-only dashboard resource."""

    @mcp.resource(
        DASHBOARD_URI,
        name=DASHBOARD_NAME,
        description=DASHBOARD_DESCRIPTION,
        mime_type="text/plain",
    )
    async def stripe_dashboard() -> str:
        return await read_dashboard(context)
