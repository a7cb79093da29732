"""
Structured logging for solana-lib.

JSON logs with timestamp, level, event_type and call context (network, signature).
Secrets and RPC api keys are redacted before rendering.
"""

from solana_lib.logging.logger import bind_network, get_logger, mask_rpc_url, redact_sensitive

__all__ = ["bind_network", "get_logger", "mask_rpc_url", "redact_sensitive"]
