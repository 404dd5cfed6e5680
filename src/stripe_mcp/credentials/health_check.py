"""
Credential health checks.

Validates a credential before the server is put to work by making one
minimal API call with it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx


@dataclass
class HealthCheckResult:
    """Result of a credential health check."""

    valid: bool
    """Whether the credential is valid."""

    message: str
    """Human-readable status message."""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details (e.g., error codes, rate limit info)."""


class CredentialHealthChecker(Protocol):
    """Protocol for credential health checkers."""

    def check(self, credential_value: str) -> HealthCheckResult:
        """
        Check if the credential is valid.

        Args:
            credential_value: The credential value to validate

        Returns:
            HealthCheckResult with validation status
        """
        ...


class StripeHealthChecker:
    """Health checker for Stripe secret keys."""

    ENDPOINT = "https://api.stripe.com/v1/balance"
    TIMEOUT = 10.0

    def check(self, api_key: str) -> HealthCheckResult:
        """
        Validate a Stripe secret key by retrieving the account balance.

        The balance endpoint is the cheapest read every full-access or
        balance-readable restricted key can make.
        """
        try:
            with httpx.Client(timeout=self.TIMEOUT) as client:
                response = client.get(
                    self.ENDPOINT,
                    headers={"Authorization": f"Bearer {api_key}"},
                )

                if response.status_code == 200:
                    data = response.json()
                    return HealthCheckResult(
                        valid=True,
                        message="Stripe API key valid",
                        details={"livemode": data.get("livemode")},
                    )
                elif response.status_code == 401:
                    return HealthCheckResult(
                        valid=False,
                        message="Stripe API key is invalid or revoked",
                        details={"status_code": 401},
                    )
                elif response.status_code == 403:
                    return HealthCheckResult(
                        valid=False,
                        message="Stripe API key lacks permission to read the balance",
                        details={"status_code": 403, "required": "balance read"},
                    )
                elif response.status_code == 429:
                    # Rate limited but key is valid
                    return HealthCheckResult(
                        valid=True,
                        message="Stripe API key valid (rate limited)",
                        details={
                            "status_code": 429,
                            "rate_limited": True,
                            "retry_after": response.headers.get("Retry-After"),
                        },
                    )
                else:
                    return HealthCheckResult(
                        valid=False,
                        message=f"Stripe API returned status {response.status_code}",
                        details={"status_code": response.status_code},
                    )
        except httpx.TimeoutException:
            return HealthCheckResult(
                valid=False,
                message="Stripe API request timed out",
                details={"error": "timeout"},
            )
        except httpx.RequestError as e:
            return HealthCheckResult(
                valid=False,
                message=f"Failed to connect to Stripe: {e}",
                details={"error": str(e)},
            )


# Registry of health checkers
HEALTH_CHECKERS: dict[str, CredentialHealthChecker] = {
    "stripe": StripeHealthChecker(),
}


def check_credential_health(credential_name: str, credential_value: str) -> HealthCheckResult:
    """
    Check if a credential is valid.

    Args:
        credential_name: Name of the credential (e.g., 'stripe')
        credential_value: The credential value to validate

    Returns:
        HealthCheckResult with validation status

    Example:
        >>> result = check_credential_health("stripe", "sk_test_xxx")
        >>> if result.valid:
        ...     print("Credential is valid!")
    """
    checker = HEALTH_CHECKERS.get(credential_name)
    if checker is None:
        return HealthCheckResult(
            valid=True,
            message=f"No health checker for '{credential_name}', assuming valid",
            details={"no_checker": True},
        )
    return checker.check(credential_value)
