"""
Sentry SDK configuration.

Sentry is optional: nothing is initialized unless SENTRY_DSN is set.
Citizen data (emails, phone numbers, tokens) is scrubbed before any event
leaves the process.
"""

import os
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.loguru import LoguruIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.types import Event, Hint

HEALTH_PATHS = {"/health", "/api/health"}
SENSITIVE_HEADERS = ("Authorization", "authorization", "Cookie", "cookie")


def _before_send(event: Event, hint: Hint) -> Event | None:
    """
    Strip personal data from an error event.

    Only the user ID is kept for traceability.
    """
    user = event.get("user")
    if user:
        user.pop("email", None)
        user.pop("username", None)
        user.pop("phone", None)
        if "ip_address" in user:
            user["ip_address"] = "{{auto}}"

    request = event.get("request")
    if request and isinstance(request, dict):
        request.pop("cookies", None)
        request.pop("data", None)
        headers = request.get("headers")
        if isinstance(headers, dict):
            for name in SENSITIVE_HEADERS:
                if name in headers:
                    headers[name] = "[Filtered]"

    return event


def _before_send_transaction(event: Event, hint: Hint) -> Event | None:
    """Drop health-check transactions."""
    transaction_name = event.get("transaction", "")
    if transaction_name in HEALTH_PATHS or transaction_name in {
        f"GET {path}" for path in HEALTH_PATHS
    }:
        return None
    return event


def _traces_sampler(sampling_context: dict[str, Any]) -> float:
    """
    Pick a trace sample rate for a request.

    Auth and admin surfaces are sampled more heavily than citizen traffic.
    """
    if sampling_context.get("parent_sampled") is True:
        return 1.0

    path = sampling_context.get("asgi_scope", {}).get("path", "")

    if path in HEALTH_PATHS:
        return 0.0

    if path.startswith(("/api/auth", "/api/users", "/api/settings")):
        return 0.5

    return 0.2


def init_sentry() -> None:
    """Initialize Sentry if SENTRY_DSN is configured. Call before creating the app."""
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=os.getenv("ENVIRONMENT", "development"),
        release=os.getenv("SENTRY_RELEASE", "unknown"),
        send_default_pii=False,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            LoguruIntegration(),
        ],
        traces_sampler=_traces_sampler,
        sample_rate=1.0,
        before_send=_before_send,
        before_send_transaction=_before_send_transaction,
        attach_stacktrace=True,
        max_breadcrumbs=50,
        ignore_errors=[KeyboardInterrupt, SystemExit],
    )
