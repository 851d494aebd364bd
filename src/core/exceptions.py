"""
Error kinds raised across the sync pipeline.
"""


class CaseBridgeError(Exception):
    """Base class for pipeline errors."""


class AuthError(CaseBridgeError):
    """Could not obtain a bearer credential from the case API."""


class FetchError(CaseBridgeError):
    """A case API query failed (transport, timeout or unexpected payload)."""


class ReconcileError(CaseBridgeError):
    """Calendar lookup or upsert failed for one day."""


class NotifyError(CaseBridgeError):
    """Telegram delivery failed."""


class NotifyConfigMissingError(NotifyError):
    """No bot token or chat id configured for the requested channel."""


class SyncInProgressError(CaseBridgeError):
    """Another sync run currently holds the run lock."""
