"""Bearer credential model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BearerToken(BaseModel):
    """Access token plus the expiry instant asserted by the auth server."""

    token: str = Field(min_length=1, repr=False)
    expires_at: datetime

    model_config = ConfigDict(frozen=True)

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


__all__ = ["BearerToken"]
