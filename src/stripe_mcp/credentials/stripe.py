"""
Stripe tool credentials.
Contains the secret key used for every Stripe API request.
"""

from .base import CredentialSpec

STRIPE_CREDENTIALS = {
    "stripe": CredentialSpec(
        env_var="STRIPE_SECRET_KEY",
        tools=[
            "stripe_list_transactions",
            "stripe_get_balance",
            "stripe_list_customers",
            "stripe_payment_methods",
            "stripe_invoice_history",
            "stripe_subscription_metrics",
        ],
        required=True,
        help_url="https://stripe.com/docs/keys",
        description="Stripe Secret API Key for authenticating all API requests",
        health_check_endpoint="https://api.stripe.com/v1/balance",
        health_check_method="GET",
    ),
}
