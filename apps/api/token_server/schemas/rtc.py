"""Data contracts for RTC endpoints."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RtcTokenRequest(BaseModel):
    """Documented shape of the issuance body; validation happens in the issuer."""

    model_config = ConfigDict(populate_by_name=True)

    channel_name: str = Field(..., alias="channelName", description="Channel to join")
    uid: int | None = Field(default=None, ge=0, description="Fixed client id; 0 or absent lets the platform assign one")
    role: str | None = Field(default=None, description='Either "publisher" or "subscriber"')


class RtcTokenResponse(BaseModel):
    token: str = Field(..., description="Signed RTC access token")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human readable reason")
    details: str | None = Field(default=None, description="Signer message on internal failures")


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    app_id: str = Field(..., alias="appId")
