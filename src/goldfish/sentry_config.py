"""Sentry error monitoring for simulation runs."""

import os
from typing import Optional

import sentry_sdk
from dotenv import load_dotenv

_initialized = False


def init_sentry() -> bool:
    """Initialize Sentry error monitoring.

    Reads ``SENTRY_DSN`` and ``ENVIRONMENT`` (after loading a ``.env`` file).

    Returns:
        True if Sentry was initialized, False if DSN not configured.
    """
    global _initialized
    load_dotenv()

    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=os.getenv("ENVIRONMENT", "development"),
        send_default_pii=False,
        traces_sample_rate=0.0,
        attach_stacktrace=True,
    )
    _initialized = True
    return True


def is_enabled() -> bool:
    return _initialized


def capture_exception(exception: Optional[BaseException] = None):
    """Capture an exception and send to Sentry.

    Args:
        exception: The exception to capture. If None, captures the current exception.
    """
    sentry_sdk.capture_exception(exception)


def capture_trial_failure(
    exception: BaseException,
    deck_name: str = "",
    trial_index: Optional[int] = None,
    transcript: str = "",
):
    """Report a failed trial with its deck, index and transcript attached."""
    with sentry_sdk.new_scope() as scope:
        if deck_name:
            scope.set_tag("deck", deck_name)
        if trial_index is not None:
            scope.set_tag("trial_index", trial_index)
        if transcript:
            scope.set_extra("transcript", transcript)
        sentry_sdk.capture_exception(exception)


def capture_message(message: str, level: str = "info"):
    """Send a message to Sentry.

    Args:
        message: The message to send.
        level: Log level (debug, info, warning, error, fatal).
    """
    sentry_sdk.capture_message(message, level=level)
