"""Access tokens for Microsoft Graph via the OAuth device-code flow.

The device-code protocol itself is MSAL's job. This module decides when a
new flow is needed, tells the user where to sign in, and keeps the resulting
credential in memory and on disk.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable

import msal

from onenote_mcp.auth.cache import CredentialCache
from onenote_mcp.auth.errors import (
    AuthenticationError,
    ConfigurationError,
    DeviceFlowError,
    TokenAcquisitionError,
)
from onenote_mcp.auth.models import CredentialRecord, DeviceCodePrompt
from onenote_mcp.config import Settings

logger = logging.getLogger(__name__)

PromptNotifier = Callable[[DeviceCodePrompt], None]


def log_device_code_prompt(prompt: DeviceCodePrompt) -> None:
    """Default notifier: tell the user where to sign in, via stderr."""
    logger.warning(f"Please navigate to: {prompt.verification_uri}")
    logger.warning(f"Enter code: {prompt.user_code}")


class TokenProvider:
    """Hands out a valid bearer token, signing in again when needed.

    One instance per process. It owns the in-memory credential, which is
    loaded from the cache on construction and replaced after every
    successful sign-in.
    """

    def __init__(
        self,
        settings: Settings,
        cache: CredentialCache,
        app: msal.PublicClientApplication | None = None,
        notify: PromptNotifier | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the provider.

        Args:
            settings: Client ID, authority, scopes and device-code deadline
            cache: Where the credential is persisted
            app: MSAL application. Built from settings on first use if omitted
            notify: Called once per flow with the verification URI and code
            clock: Source of the current time, for expiry checks
        """
        self.settings = settings
        self._cache = cache
        self._app = app
        self._notify = notify or log_device_code_prompt
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._record = cache.load()

    @property
    def record(self) -> CredentialRecord | None:
        return self._record

    async def get_access_token(self) -> str:
        """Return a token that hasn't expired.

        Uses the held credential when it's still valid. Otherwise runs a
        device-code sign-in, which blocks until the user finishes or the
        deadline passes.

        Raises:
            AuthenticationError: If no token could be obtained
        """
        if self._record is not None and self._record.is_valid(self._clock()):
            logger.debug("Using cached token")
            return self._record.access_token

        logger.info("Acquiring new token via Device Code flow")
        response = await asyncio.to_thread(self._acquire_by_device_flow)

        record = CredentialRecord.from_token_response(response, now=self._clock())
        self._record = record
        try:
            self._cache.save(record)
        except OSError as e:
            # The token is still good for this process.
            logger.error(f"Failed to cache token: {e}")

        logger.info("Authentication successful")
        return record.access_token

    def _get_app(self) -> msal.PublicClientApplication:
        if self._app is None:
            if not self.settings.client_id:
                raise ConfigurationError(
                    "AZURE_CLIENT_ID is not set; cannot authenticate"
                )
            try:
                self._app = msal.PublicClientApplication(
                    self.settings.client_id, authority=self.settings.authority
                )
            except Exception as e:
                raise ConfigurationError(
                    f"Failed to create identity client: {e}"
                ) from e
        return self._app

    def _acquire_by_device_flow(self) -> dict[str, Any]:
        """Run one device-code flow to completion. Blocking.

        Raises:
            AuthenticationError: If the flow can't start or doesn't succeed
        """
        app = self._get_app()
        scopes = list(self.settings.scopes)

        try:
            flow = app.initiate_device_flow(scopes=scopes)
        except Exception as e:
            logger.error(f"Authentication failed: {e}")
            raise DeviceFlowError(f"Failed to start device code flow: {e}") from e

        if "user_code" not in flow:
            reason = flow.get("error_description") or flow.get("error") or "unknown"
            logger.error(f"Authentication failed: {reason}")
            raise DeviceFlowError(f"Failed to start device code flow: {reason}")

        # MSAL polls until flow["expires_at"]; pulling it in enforces our deadline.
        deadline = time.time() + self.settings.device_code_timeout
        flow["expires_at"] = min(flow.get("expires_at", deadline), deadline)

        self._notify(
            DeviceCodePrompt(
                verification_uri=flow.get("verification_uri", ""),
                user_code=flow["user_code"],
                message=flow.get("message"),
            )
        )

        try:
            result = app.acquire_token_by_device_flow(flow)
        except Exception as e:
            logger.error(f"Authentication failed: {e}")
            raise TokenAcquisitionError(f"Device code sign-in failed: {e}") from e

        if not result or "access_token" not in result:
            result = result or {}
            reason = result.get("error_description") or result.get("error") or "unknown"
            logger.error(f"Authentication failed: {reason}")
            raise TokenAcquisitionError(f"Device code sign-in failed: {reason}")

        return result


__all__ = [
    "AuthenticationError",
    "PromptNotifier",
    "TokenProvider",
    "log_device_code_prompt",
]
