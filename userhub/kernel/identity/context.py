"""
Typed request context produced by the access gate.
"""

from typing import Optional

from pydantic import BaseModel


class RequestContext(BaseModel):
    """Authenticated identity threaded from the gate into service calls."""

    user_id: str
    email: str
    request_id: Optional[str] = None
