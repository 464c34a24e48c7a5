"""
errors.py – Exception types raised by the dashboard client and forms.
"""

from typing import Optional


class TurboDashboardError(Exception):
    """Base class for all dashboard errors."""


class ValidationError(TurboDashboardError):
    """A form failed local validation; no request was sent."""


class ApiError(TurboDashboardError):
    """The backend answered with an error status, or could not be reached.

    ``status_code`` is None for transport failures. ``message`` is the
    backend's own message, empty when the response carried none.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}

    def __str__(self) -> str:
        return self.message or f"HTTP {self.status_code}"
