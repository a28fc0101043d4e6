from __future__ import annotations

from typing import Any


class AppError(RuntimeError):
    """Operational error that maps straight onto an HTTP status."""

    def __init__(self, message: str, status_code: int = 500, details: list[Any] | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code if isinstance(status_code, int) else 500
        self.details = details


def error_payload(message: str, details: list[Any] | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "message": message}
    if details:
        payload["details"] = details
    return payload

