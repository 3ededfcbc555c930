from __future__ import annotations

from pydantic import BaseModel


class ConnectionValidationResult(BaseModel):
    valid: bool
    reason: str | None = None
