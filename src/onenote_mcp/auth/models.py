"""Credential record and device-code prompt models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CredentialRecord(BaseModel):
    """A bearer credential as persisted in the cache file.

    Stored with camelCase keys. Fields this model doesn't know about are
    kept, so a record written by another tool survives a load/save cycle.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    access_token: str = Field(alias="accessToken")
    expires_on: datetime = Field(alias="expiresOn")
    token_type: str = Field(default="Bearer", alias="tokenType")
    scopes: list[str] = Field(default_factory=list)
    account: str | None = None

    @field_validator("expires_on")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("account", mode="before")
    @classmethod
    def account_username(cls, v: Any) -> Any:
        # Some caches store the whole account object.
        if isinstance(v, dict):
            return v.get("username")
        return v

    def is_valid(self, now: datetime | None = None) -> bool:
        """True iff the credential expires strictly after `now`."""
        now = now or datetime.now(timezone.utc)
        return self.expires_on > now

    @classmethod
    def from_token_response(
        cls, response: dict[str, Any], now: datetime | None = None
    ) -> CredentialRecord:
        """Build a record from an MSAL token result.

        Args:
            response: Result of `acquire_token_by_device_flow`, which must
                contain `access_token`.
            now: Time the token was issued. Defaults to the current time.
        """
        now = now or datetime.now(timezone.utc)
        scope = response.get("scope") or []
        scopes = scope.split() if isinstance(scope, str) else list(scope)
        claims = response.get("id_token_claims") or {}

        return cls(
            access_token=response["access_token"],
            expires_on=now + timedelta(seconds=int(response.get("expires_in", 0))),
            token_type=response.get("token_type", "Bearer"),
            scopes=scopes,
            account=claims.get("preferred_username"),
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


@dataclass(frozen=True)
class DeviceCodePrompt:
    """What the user needs to complete a device-code sign-in."""

    verification_uri: str
    user_code: str
    message: str | None = None
