"""
Credential specs and lookup for the Stripe MCP server.

Usage:
    from stripe_mcp.credentials import CredentialStoreAdapter

    credentials = CredentialStoreAdapter.default()
    api_key = credentials.get("stripe")
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from .base import CredentialSpec
from .health_check import HealthCheckResult, check_credential_health
from .stripe import STRIPE_CREDENTIALS

CREDENTIAL_SPECS: dict[str, CredentialSpec] = {
    **STRIPE_CREDENTIALS,
}


class CredentialStoreAdapter:
    """Resolves credential values by name.

    Values come from an explicit mapping when one is given (tests), otherwise
    from each spec's environment variable.
    """

    def __init__(
        self,
        specs: Mapping[str, CredentialSpec] | None = None,
        values: Mapping[str, str] | None = None,
    ):
        self._specs = dict(specs if specs is not None else CREDENTIAL_SPECS)
        self._values = dict(values) if values is not None else None

    @classmethod
    def default(cls) -> CredentialStoreAdapter:
        return cls()

    @classmethod
    def for_testing(cls, values: Mapping[str, str]) -> CredentialStoreAdapter:
        return cls(values=values)

    def get(self, name: str) -> str | None:
        if self._values is not None:
            return self._values.get(name) or None
        spec = self._specs.get(name)
        if spec is None:
            return None
        return os.environ.get(spec.env_var) or None

    def spec(self, name: str) -> CredentialSpec | None:
        return self._specs.get(name)

    def missing_required(self) -> list[str]:
        """Environment variable names of required credentials with no value."""
        return [
            spec.env_var
            for name, spec in self._specs.items()
            if spec.required and not self.get(name)
        ]


__all__ = [
    "CREDENTIAL_SPECS",
    "CredentialSpec",
    "CredentialStoreAdapter",
    "HealthCheckResult",
    "STRIPE_CREDENTIALS",
    "check_credential_health",
]
