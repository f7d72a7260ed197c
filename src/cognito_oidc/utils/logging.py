"""Attempt-scoped logging for the authentication flow.

Every log line of one authentication attempt carries the attempt's
correlation ID, and auth operations are logged as ``key=value`` pairs with
credentials and tokens removed.

Usage:
    from cognito_oidc.utils.logging import get_logger, log_auth_operation

    logger = get_logger(__name__)
    log_auth_operation(logger, "initiate_auth", challenge_name="PASSWORD_VERIFIER")
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

# Set per attempt; ContextVar keeps concurrent attempts apart
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

LOG_FORMAT = "[%(correlation_id)s] %(asctime)s %(levelname)s %(name)s: %(message)s"

# Keys that must never reach a log record
SENSITIVE_FIELDS = frozenset(
    {
        "username",
        "password",
        "id_token",
        "access_token",
        "refresh_token",
        "token",
        "logins",
        "client_secret",
        "secret_hash",
    }
)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Start an attempt scope, generating a UUID when no ID is given."""
    cid = correlation_id or str(uuid.uuid4())
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Stamps records with the active attempt's correlation ID ("-" outside one)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def get_logger(name: str) -> logging.Logger:
    """Logger whose records always carry ``correlation_id``."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())
    return logger


def configure_logging(level: int = logging.INFO) -> None:
    """Route root logging to stderr in LOG_FORMAT.

    For command line entry points only; the library itself never touches handlers.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    # Records from third-party loggers (botocore) bypass get_logger's filter
    handler.addFilter(CorrelationIdFilter())
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)


def redact(context: dict[str, Any]) -> dict[str, Any]:
    """Drop sensitive keys from a log context."""
    return {key: value for key, value in context.items() if key.lower() not in SENSITIVE_FIELDS}


def log_auth_operation(
    logger: logging.Logger,
    operation: str,
    *,
    stage: str | None = None,
    challenge_name: str | None = None,
    result: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log one step of an authentication attempt.

    The message reads ``Auth operation: <operation> | key=value | ...``; the
    same context is attached to the record as ``auth_context``. Sensitive keys
    in ``extra`` are dropped first. Logged at ERROR when ``error`` is set.

    Args:
        logger: Logger instance
        operation: Operation name (e.g., "initiate_auth", "get_open_id_token")
        stage: Attempt stage the operation belongs to
        challenge_name: Challenge kind returned by the provider, if any
        result: Outcome (success, failed)
        error: Error code if the operation failed
        **extra: Additional non-secret context
    """
    fields = {"stage": stage, "challenge_name": challenge_name, "result": result, "error": error}
    context = {key: value for key, value in fields.items() if value}
    context.update(redact(extra))

    message = " | ".join([f"Auth operation: {operation}"] + [f"{k}={v}" for k, v in context.items()])
    level = logging.ERROR if error else logging.INFO
    logger.log(level, message, extra={"auth_context": {"operation": operation, **context}})
