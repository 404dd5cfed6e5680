"""Tool call results: the single output shape every tool returns."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from stripe_mcp.errors import ErrorKind


@dataclass(frozen=True)
class ContentItem:
    """One piece of tool output. Only text content is produced."""

    text: str
    type: Literal["text"] = "text"

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ToolCallResult:
    """Outcome of one tool invocation.

    ``error_kind`` is set only when ``is_error`` is true and records which
    failure class produced the message.
    """

    content: list[ContentItem] = field(default_factory=list)
    is_error: bool = False
    error_kind: ErrorKind | None = None

    @classmethod
    def success(cls, text: str) -> ToolCallResult:
        return cls(content=[ContentItem(text=text)])

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> ToolCallResult:
        return cls(content=[ContentItem(text=message)], is_error=True, error_kind=kind)

    @property
    def text(self) -> str:
        """Concatenated text of all content items."""
        return "".join(item.text for item in self.content)

    def to_dict(self) -> dict[str, Any]:
        """Render in MCP ``CallToolResult`` wire form."""
        return {
            "content": [item.to_dict() for item in self.content],
            "isError": self.is_error,
        }
