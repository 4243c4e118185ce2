"""Base exceptions for HookGate."""


class HookGateException(Exception):
    """Base exception for all HookGate errors."""
    pass


class ConfigurationError(HookGateException):
    """Raised when there's a configuration error."""
    pass


class AuthenticationError(HookGateException):
    """Raised when a webhook signature is missing, invalid or expired."""

    def __init__(self, reason: str):
        super().__init__(f"Webhook authentication failed: {reason}")
        self.reason = reason
