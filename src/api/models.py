# src/api/models.py - v2
"""API-level models returned by the facade."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class StatusReport(BaseModel):
    """Advisory backend status; "offline" never blocks a query."""

    status: Literal["ready", "offline"]
    provider: str
    model: str
    base_url: str
