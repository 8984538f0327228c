# src/taskboard/api/errors.py

from __future__ import annotations


class GatewayError(Exception):
    """Base class for every failure surfaced by the task gateway."""


class NetworkError(GatewayError):
    """Backend unreachable: connection refused, DNS failure, timeout."""


class HttpError(GatewayError):
    """Backend answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str | None = None, *, method: str = "", url: str = "") -> None:
        self.status_code = int(status_code)
        self.body = body or None
        self.method = method
        self.url = url
        where = f" {method} {url}" if method or url else ""
        super().__init__(f"HTTP {self.status_code}{where}")

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class ValidationError(GatewayError, ValueError):
    """Malformed task or stats shape (local input or backend response)."""


def friendly_error_message(err: BaseException) -> str:
    """Turn a gateway error into one line suitable for the console."""
    if isinstance(err, NetworkError):
        return f"Backend is unreachable ({err}). Check TASKBOARD_API_URL or try again later."
    if isinstance(err, HttpError):
        if err.is_not_found:
            return "Not found (HTTP 404)."
        if err.status_code == 400:
            detail = f": {err.body}" if err.body else "."
            return f"Backend rejected the request (HTTP 400){detail}"
        if err.status_code >= 500:
            return f"Backend error (HTTP {err.status_code}). Try again later."
        return f"Request failed (HTTP {err.status_code})."
    if isinstance(err, ValidationError):
        return f"Invalid task data: {err}"
    return str(err).strip() or err.__class__.__name__
