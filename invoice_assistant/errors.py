"""Error types raised between the relay, its client and the orchestrator."""

from __future__ import annotations

# Body of the relay's 500 reply when no credential is configured; clients match on it.
MISSING_KEY_MESSAGE = "API key not configured on server."


class RelayError(Exception):
    """Base class for failures reaching the model through the relay."""


class ConfigError(RelayError):
    """The relay has no provider credential configured."""


class ProviderError(RelayError):
    """The model provider failed or the conversation could not complete."""


class SessionBusyError(RuntimeError):
    """Input was sent while a request is in flight or the session is disabled."""
