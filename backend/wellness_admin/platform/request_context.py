"""Per-request values that every log record picks up without passing them around."""

from contextvars import ContextVar
from typing import Dict, Optional

_request_id: ContextVar[Optional[str]] = ContextVar("wellness_request_id", default=None)
_admin_email: ContextVar[Optional[str]] = ContextVar("wellness_admin_email", default=None)


def bind_request(request_id: str, admin_email: Optional[str] = None) -> None:
    _request_id.set(request_id)
    _admin_email.set((admin_email or "").strip() or None)


def log_fields() -> Dict[str, str]:
    """Bound values for the current request, omitting the unset ones."""
    fields = {"request_id": _request_id.get(), "admin_email": _admin_email.get()}
    return {key: value for key, value in fields.items() if value}
