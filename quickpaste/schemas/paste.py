"""Pydantic schemas for pastes and the paste HTTP API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Paste(BaseModel):
    """A stored paste. Created once and never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="5-character paste identifier.")
    content: str = Field(..., description="Sanitized paste text.")
    language: str = Field(..., description="Normalized syntax-highlighting language.")
    expires_at: datetime | None = Field(
        default=None,
        description="UTC expiry timestamp, null for pastes that never expire.",
    )
    created_at: datetime = Field(..., description="UTC creation timestamp.")

    def is_expired(self, now: datetime) -> bool:
        """True when the paste has an expiry that is already in the past."""
        return self.expires_at is not None and self.expires_at < now


class CreatePasteResponse(BaseModel):
    """Response returned after a paste is stored."""

    id: str = Field(..., description="Identifier used to fetch the paste.")
