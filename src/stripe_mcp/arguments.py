"""
Argument models for the Stripe tools.

One pydantic model per tool. ``validate_arguments`` picks the model by tool
name and turns pydantic's errors into a :class:`stripe_mcp.errors.ValidationError`
listing every offending field.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Annotated, Any

import pydantic
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationInfo,
    field_validator,
)

from stripe_mcp.errors import UnknownToolError, ValidationError

MAX_PAGE_LIMIT = 100


class ToolArguments(BaseModel):
    """Base for all argument models: unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    def to_params(self) -> dict[str, Any]:
        """Stripe request parameters, with unset options left out."""
        return self.model_dump(exclude_none=True)


class CursorArguments(ToolArguments):
    starting_after: str | None = Field(
        default=None, description="Cursor for pagination: return items after this ID."
    )
    ending_before: str | None = Field(
        default=None, description="Cursor for pagination: return items before this ID."
    )


class ListTransactionsArgs(CursorArguments):
    limit: StrictInt | None = Field(
        default=None, ge=1, description="Number of transactions to retrieve."
    )


class GetBalanceArgs(ToolArguments):
    pass


class ListCustomersArgs(CursorArguments):
    limit: StrictInt | None = Field(
        default=None,
        ge=1,
        le=MAX_PAGE_LIMIT,
        description="Number of customers to retrieve (max 100).",
    )
    email: str | None = Field(default=None, description="Filter customers by email.")


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must be a non-empty string")
    return value


CustomerId = Annotated[str, AfterValidator(_require_text)]


class PaymentMethodsArgs(ToolArguments):
    customer: CustomerId = Field(description="Customer ID.")


class InvoiceHistoryArgs(CursorArguments):
    customer: CustomerId = Field(description="Customer ID.")
    limit: StrictInt | None = Field(
        default=None,
        ge=1,
        le=MAX_PAGE_LIMIT,
        description="Number of invoices to retrieve (max 100).",
    )


def parse_datetime(value: str) -> datetime:
    """Parse an ISO 8601 date-time. Values without an offset are taken as UTC."""
    moment = datetime.fromisoformat(value.strip())
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment


def parse_timestamp(value: str) -> int:
    """Whole seconds since the epoch, as Stripe's ``created`` filter expects."""
    return int(parse_datetime(value).timestamp())


class SubscriptionMetricsArgs(ToolArguments):
    from_date: str | None = Field(
        default=None,
        description="Start date for metrics (ISO 8601 format).",
        json_schema_extra={"format": "date-time"},
    )
    to_date: str | None = Field(
        default=None,
        description="End date for metrics (ISO 8601 format).",
        json_schema_extra={"format": "date-time"},
    )

    @field_validator("from_date", "to_date")
    @classmethod
    def check_iso(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            parse_datetime(value)
        except ValueError:
            raise ValueError("must be an ISO 8601 date-time") from None
        return value

    # fields validate in declaration order, so a valid from_date is in info.data
    @field_validator("to_date")
    @classmethod
    def check_order(cls, value: str | None, info: ValidationInfo) -> str | None:
        start = info.data.get("from_date")
        if value is not None and start is not None:
            if parse_datetime(start) >= parse_datetime(value):
                raise ValueError("from_date must be before to_date")
        return value

    @property
    def from_timestamp(self) -> int | None:
        return parse_timestamp(self.from_date) if self.from_date else None

    @property
    def to_timestamp(self) -> int | None:
        return parse_timestamp(self.to_date) if self.to_date else None

    def created_filter(self) -> dict[str, int]:
        """Stripe ``created`` range filter for the requested window."""
        created: dict[str, int] = {}
        if self.from_timestamp is not None:
            created["gte"] = self.from_timestamp
        if self.to_timestamp is not None:
            created["lte"] = self.to_timestamp
        return created


ARGUMENT_MODELS: dict[str, type[ToolArguments]] = {
    "stripe_list_transactions": ListTransactionsArgs,
    "stripe_get_balance": GetBalanceArgs,
    "stripe_list_customers": ListCustomersArgs,
    "stripe_payment_methods": PaymentMethodsArgs,
    "stripe_invoice_history": InvoiceHistoryArgs,
    "stripe_subscription_metrics": SubscriptionMetricsArgs,
}


def _field_errors(error: pydantic.ValidationError) -> dict[str, str]:
    fields: dict[str, str] = {}
    for item in error.errors():
        name = ".".join(str(part) for part in item["loc"]) or "arguments"
        message = item["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        fields[name] = message
    return fields


def validate_arguments(tool_name: str, raw: Mapping[str, Any] | None) -> ToolArguments:
    """Validate raw tool arguments.

    Raises:
        UnknownToolError: no argument model exists for ``tool_name``.
        ValidationError: the arguments do not satisfy the tool's model.
    """
    model = ARGUMENT_MODELS.get(tool_name)
    if model is None:
        raise UnknownToolError(tool_name)
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ValidationError(tool_name, {"arguments": "must be an object"})
    try:
        return model.model_validate(dict(raw))
    except pydantic.ValidationError as e:
        raise ValidationError(tool_name, _field_errors(e)) from e
