"""Pytest configuration and fixtures for the Cognito SRP federation client tests.

This module provides reusable fixtures for testing:
- Fake cognito-idp and cognito-identity boto3 clients (MagicMock)
- A fake SRP engine so orchestration tests do not depend on random SRP values
- Client configuration matching the documented scenarios
"""

import os
from datetime import datetime, timezone
from typing import Any, Generator
from unittest.mock import MagicMock

import pytest

# === Environment Setup ===

os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

# Only set fake credentials for moto if no real credentials are present
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")


@pytest.fixture(autouse=True)
def reset_cognito_client_singleton() -> Generator[None, None, None]:
    """Reset the shared client before and after each test."""
    from cognito_oidc.services.auth_service import _reset_cognito_client

    _reset_cognito_client()
    yield
    _reset_cognito_client()


@pytest.fixture(autouse=True)
def reset_correlation_id() -> Generator[None, None, None]:
    from cognito_oidc.utils.logging import clear_correlation_id

    clear_correlation_id()
    yield
    clear_correlation_id()


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    if not os.environ.get("AWS_PROFILE"):
        os.environ["AWS_ACCESS_KEY_ID"] = "testing"
        os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
        os.environ["AWS_SECURITY_TOKEN"] = "testing"
        os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


# === Configuration Fixtures ===


@pytest.fixture
def cognito_config_values() -> dict[str, str]:
    """Identifiers used by the documented scenarios."""
    return {
        "user_pool_id": "pool1",
        "client_id": "client1",
        "region": "us-east-1",
        "identity_pool_id": "idpool1",
    }


@pytest.fixture
def client_config(cognito_config_values: dict[str, str]) -> Any:
    from cognito_oidc.models.config import ClientConfig

    return ClientConfig(**cognito_config_values)


@pytest.fixture
def cognito_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Complete COGNITO_* environment for env-configured entry points."""
    monkeypatch.setenv("COGNITO_USER_POOL_ID", "us-east-1_ABC123")
    monkeypatch.setenv("COGNITO_CLIENT_ID", "client1")
    monkeypatch.setenv("COGNITO_IDENTITY_POOL_ID", "us-east-1:0000")
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    monkeypatch.delenv("COGNITO_CLIENT_SECRET", raising=False)


@pytest.fixture
def fixed_clock() -> datetime:
    """Fixed time returned by the injected clock."""
    return datetime(2026, 3, 3, 9, 5, 1, tzinfo=timezone.utc)


# === Collaborator Fixtures ===


@pytest.fixture
def mock_srp_session() -> MagicMock:
    session = MagicMock()
    session.client_public_value = "abc123"
    session.auth_parameters = {"USERNAME": "alice", "SRP_A": "abc123"}
    session.compute_challenge_response.return_value = {
        "TIMESTAMP": "Tue Mar 3 09:05:01 UTC 2026",
        "USERNAME": "alice-srp-id",
        "PASSWORD_CLAIM_SECRET_BLOCK": "c2VjcmV0LWJsb2Nr",
        "PASSWORD_CLAIM_SIGNATURE": "c2lnbmF0dXJl",
    }
    return session


@pytest.fixture
def mock_srp_engine(mock_srp_session: MagicMock) -> MagicMock:
    engine = MagicMock()
    engine.create_session.return_value = mock_srp_session
    return engine


@pytest.fixture
def password_verifier_response() -> dict[str, Any]:
    """InitiateAuth response asking for PASSWORD_VERIFIER."""
    return {
        "ChallengeName": "PASSWORD_VERIFIER",
        "ChallengeParameters": {
            "USER_ID_FOR_SRP": "alice-srp-id",
            "SALT": "a1b2c3",
            "SRP_B": "ff00ff",
            "SECRET_BLOCK": "c2VjcmV0LWJsb2Nr",
            "USERNAME": "alice-srp-id",
        },
    }


@pytest.fixture
def mock_cognito_idp(password_verifier_response: dict[str, Any]) -> MagicMock:
    """Mock cognito-idp client for the USER_SRP_AUTH flow."""
    mock_client = MagicMock()
    mock_client.initiate_auth.return_value = password_verifier_response
    mock_client.respond_to_auth_challenge.return_value = {
        "ChallengeParameters": {},
        "AuthenticationResult": {
            "IdToken": "PTOK",
            "AccessToken": "mock-access-token",
            "RefreshToken": "mock-refresh-token",
            "ExpiresIn": 3600,
            "TokenType": "Bearer",
        },
    }
    return mock_client


@pytest.fixture
def mock_cognito_identity() -> MagicMock:
    """Mock cognito-identity client for GetId / GetOpenIdToken."""
    mock_client = MagicMock()
    mock_client.get_id.return_value = {"IdentityId": "id-1"}
    mock_client.get_open_id_token.return_value = {"IdentityId": "id-1", "Token": "FEDTOK"}
    return mock_client
