"""Exception hierarchy for device-code authentication failures."""

from __future__ import annotations


class AuthenticationError(Exception):
    """Base exception for failures to obtain an access token."""

    pass


class ConfigurationError(AuthenticationError):
    """Raised when the identity client can't be built, e.g. no client ID."""

    pass


class DeviceFlowError(AuthenticationError):
    """Raised when the identity provider refuses to start a device-code flow."""

    pass


class TokenAcquisitionError(AuthenticationError):
    """Raised when a started device-code flow doesn't yield a token.

    Covers the user declining, the code expiring, the deadline passing and
    network failures while polling.
    """

    pass
