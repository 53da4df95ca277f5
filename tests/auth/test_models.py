from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from onenote_mcp.auth.models import CredentialRecord

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestCredentialRecord:
    def test_valid_strictly_before_expiry(self):
        # Arrange
        record = CredentialRecord(access_token="t", expires_on=NOW + timedelta(seconds=1))

        # Act & Assert
        assert record.is_valid(NOW) is True
        assert record.is_valid(NOW + timedelta(seconds=1)) is False
        assert record.is_valid(NOW + timedelta(hours=1)) is False

    def test_naive_expiry_is_read_as_utc(self):
        # Act
        record = CredentialRecord.model_validate(
            {"accessToken": "t", "expiresOn": "2025-01-01T13:00:00"}
        )

        # Assert
        assert record.expires_on == NOW + timedelta(hours=1)
        assert record.is_valid(NOW)

    def test_reads_camel_case_cache_format(self):
        # Act
        record = CredentialRecord.model_validate(
            {
                "accessToken": "abc",
                "expiresOn": "2025-01-01T12:00:00+00:00",
                "tokenType": "Bearer",
                "scopes": ["Notes.Read"],
                "account": {"username": "me@example.com", "homeAccountId": "x"},
            }
        )

        # Assert
        assert record.access_token == "abc"
        assert record.scopes == ["Notes.Read"]
        assert record.account == "me@example.com"

    def test_requires_access_token_and_expiry(self):
        with pytest.raises(ValidationError):
            CredentialRecord.model_validate({"expiresOn": "2025-01-01T12:00:00Z"})
        with pytest.raises(ValidationError):
            CredentialRecord.model_validate({"accessToken": "abc"})

    def test_to_json_keeps_unknown_fields(self):
        # Arrange
        record = CredentialRecord.model_validate_json(
            '{"accessToken": "abc", "expiresOn": "2025-01-01T12:00:00Z",'
            ' "extExpiresOn": "2025-01-01T13:00:00Z"}'
        )

        # Act
        reloaded = CredentialRecord.model_validate_json(record.to_json())

        # Assert
        assert '"accessToken"' in record.to_json()
        assert reloaded.model_extra["extExpiresOn"] == "2025-01-01T13:00:00Z"


class TestFromTokenResponse:
    def test_builds_record_from_msal_result(self):
        # Arrange
        response = {
            "access_token": "new-token",
            "token_type": "Bearer",
            "expires_in": 3599,
            "scope": "Notes.Read Notes.Create User.Read",
            "id_token_claims": {"preferred_username": "me@example.com"},
        }

        # Act
        record = CredentialRecord.from_token_response(response, now=NOW)

        # Assert
        assert record.access_token == "new-token"
        assert record.expires_on == NOW + timedelta(seconds=3599)
        assert record.scopes == ["Notes.Read", "Notes.Create", "User.Read"]
        assert record.account == "me@example.com"

    def test_missing_optional_fields(self):
        # Act
        record = CredentialRecord.from_token_response({"access_token": "t"}, now=NOW)

        # Assert
        assert record.token_type == "Bearer"
        assert record.scopes == []
        assert record.account is None
        assert record.is_valid(NOW) is False
