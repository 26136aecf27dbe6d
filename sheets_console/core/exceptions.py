from __future__ import annotations

from typing import Optional


class ConsoleError(Exception):
    """Base exception for all sheets_console errors"""
    pass

class ConfigError(ConsoleError):
    """Invalid or inconsistent global.json or environment override"""
    pass

class ApiError(ConsoleError):
    """
    A remote API call failed: connection error, timeout or a non-2xx status.
    `status` is None when no response was received.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        self.message = message
        self.status = status
        super().__init__(message if status is None else f"{status}: {message}")

class IncorrectPasswordError(ConsoleError):
    """The server rejected the candidate password for a dataset"""
    pass

class StaleResponseError(ConsoleError):
    """A response arrived for a dataset that is no longer selected"""
    pass

class AuthError(ConsoleError):
    """Identity provider failure, carrying the provider's error code"""

    def __init__(self, code: str, message: str = ""):
        self.code = code
        super().__init__(message or code)
