"""
Structured logging for solana-lib, built on structlog.

Every module logs through get_logger(__name__) with a snake_case event name
and keyword fields::

    logger.info("transfer_submitted", network="testnet", signature=sig)

Records leave the process as one JSON object per line on stderr (stdout
belongs to the CLI's results), or a console rendering with LOG_FORMAT=console.

Key material and RPC credentials are scrubbed by redact_sensitive before
rendering: fields named like a secret are replaced with "***", and Helius
style ``api-key=`` query parameters are masked in any string field, so an
RPC URL or an httpx error message quoting one can be logged as is.

This module imports nothing from solana_lib; config and rpc import it.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

REDACTED = "***"

# Substrings of field names whose values are never rendered.
SENSITIVE_FIELDS = ("private_key", "secret", "seed", "keypair", "password", "api_key")

_API_KEY_PARAM = re.compile(r"(api-key=)[^&\s'\"]+", re.IGNORECASE)


def mask_rpc_url(url: str) -> str:
    """Mask the api-key query parameter of an RPC URL (or of any text quoting one)."""
    return _API_KEY_PARAM.sub(r"\1" + REDACTED, url)


def _is_sensitive(field: str) -> bool:
    name = field.lower()
    return any(marker in name for marker in SENSITIVE_FIELDS)


def redact_sensitive(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Blank secret-named fields and mask api keys embedded in string values."""
    for field, value in list(event_dict.items()):
        if value is None:
            continue
        if _is_sensitive(field):
            event_dict[field] = REDACTED
        elif isinstance(value, str) and "api-key=" in value.lower():
            event_dict[field] = mask_rpc_url(value)
    return event_dict


def _rename_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's 'event' becomes event_type; message mirrors it for log shippers."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    event_dict.setdefault("message", str(event_dict.get("event_type", "")))
    return event_dict


def processors() -> list[Any]:
    """Processor chain shared by every renderer; redaction runs before anything is formatted."""
    return [
        structlog.contextvars.merge_contextvars,
        redact_sensitive,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        _rename_event,
    ]


def configure_structlog() -> None:
    chain = processors()
    if LOG_FORMAT == "json":
        chain.append(structlog.processors.JSONRenderer())
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=chain,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name).bind(logger=name)


def bind_network(network: Any) -> structlog.BoundLogger:
    """Logger with the network identifier bound; Network members log as their value."""
    return get_logger("solana_lib").bind(network=getattr(network, "value", network))
