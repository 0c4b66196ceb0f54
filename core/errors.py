from __future__ import annotations

from typing import Optional


class ValidationError(ValueError):
    """Caller-correctable input problem (bad record, bad filter value, unknown field)."""

    def __init__(self, message: str, *, field: Optional[str] = None, record_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.field = field
        self.record_id = record_id

    def to_dict(self) -> dict:
        return {"error": str(self), "type": type(self).__name__, "field": self.field, "record_id": self.record_id}
