"""Custom exception hierarchy for modemsync."""

from __future__ import annotations


class ModemSyncError(Exception):
    """Base exception for all modemsync errors."""


class ModemConfigError(ModemSyncError):
    """Invalid or missing configuration."""


class ModemTransportError(ModemSyncError):
    """HTTP-level failure (network, non-2xx, timeout, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class ModemApiError(ModemSyncError):
    """Envelope ``status`` was not ``"ok"`` (application-level error).

    ``str(exc)`` is the server ``message`` verbatim so it can be shown
    to the user as-is.
    """

    def __init__(
        self,
        message: str,
        *,
        status: str = "",
        endpoint: str = "",
    ) -> None:
        self.status = status
        self.endpoint = endpoint
        super().__init__(message)


class ActionInProgressError(ModemSyncError):
    """A mutation for the same resource is still pending.

    The dispatcher never queues; the caller must wait for the first
    action to finish and resubmit.
    """

    def __init__(self, resource_key: str) -> None:
        self.resource_key = resource_key
        super().__init__(f"An action for {resource_key!r} is already pending")


class LockConfigError(ModemSyncError):
    """Cell-lock configuration failed a precondition.

    Raised when more than one lock entry is enabled for the same RAT, or
    when a lock request lacks a numeric channel/PCI.
    """
