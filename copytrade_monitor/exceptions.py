"""
Custom exception classes for the wallet monitor.

Provides typed exceptions for better error handling and debugging.
"""

class MonitorException(Exception):
    """Base exception for all monitor-related errors."""

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self):
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ConfigurationException(MonitorException):
    """Raised when configuration is invalid."""
    pass


class NetworkException(MonitorException):
    """Raised when network/RPC operations fail."""
    pass


class StateException(MonitorException):
    """Raised on an illegal monitor lifecycle transition."""
    pass
