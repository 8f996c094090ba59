"""
Result type for best-effort side effects (avatar upload, activity append).

Adapters return a degraded result instead of raising; the caller decides
how to log it and always carries on with the primary operation.
"""

from typing import Optional

from pydantic import BaseModel


class SideEffectResult(BaseModel):
    """Outcome of a non-critical collaborator call."""

    ok: bool
    value: Optional[str] = None
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return not self.ok

    @classmethod
    def success(cls, value: Optional[str] = None) -> "SideEffectResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "SideEffectResult":
        return cls(ok=False, error=error)
