"""Authentication models for the Cognito SRP flow and identity federation.

This module defines models for:
- Credentials: username and password for a single attempt (in-memory only)
- ChallengeName: Cognito challenge kinds; only PASSWORD_VERIFIER is answered
- ChallengeResponse: parsed InitiateAuth / RespondToAuthChallenge response
- AuthenticationResult: user pool tokens from a completed challenge
- FederatedIdentity: identity id resolved by the identity pool
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

# AuthFlow used for every attempt
SRP_AUTH_FLOW = "USER_SRP_AUTH"


class ChallengeName(str, Enum):
    """Cognito challenge kinds that InitiateAuth may return."""

    PASSWORD_VERIFIER = "PASSWORD_VERIFIER"
    SMS_MFA = "SMS_MFA"
    SOFTWARE_TOKEN_MFA = "SOFTWARE_TOKEN_MFA"
    SELECT_MFA_TYPE = "SELECT_MFA_TYPE"
    MFA_SETUP = "MFA_SETUP"
    DEVICE_SRP_AUTH = "DEVICE_SRP_AUTH"
    DEVICE_PASSWORD_VERIFIER = "DEVICE_PASSWORD_VERIFIER"
    ADMIN_NO_SRP_AUTH = "ADMIN_NO_SRP_AUTH"
    NEW_PASSWORD_REQUIRED = "NEW_PASSWORD_REQUIRED"
    CUSTOM_CHALLENGE = "CUSTOM_CHALLENGE"
    EMAIL_OTP = "EMAIL_OTP"


class Credentials(BaseModel):
    """Username and password for one authentication attempt.

    This is an in-memory model - never persisted or logged.
    """

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., repr=False, description="Cognito username")
    password: SecretStr = Field(..., description="Plaintext password, kept in process")


class AuthenticationResult(BaseModel):
    """User pool tokens returned once the challenge is answered.

    Token values are excluded from repr so they never end up in logs
    through an accidental %r.
    """

    model_config = ConfigDict(frozen=True)

    id_token: str = Field(..., repr=False, description="Cognito ID token (JWT)")
    access_token: Optional[str] = Field(default=None, repr=False, description="Cognito access token (JWT)")
    refresh_token: Optional[str] = Field(default=None, repr=False, description="Cognito refresh token")
    expires_in: Optional[int] = Field(default=None, description="Token expiry in seconds")
    token_type: Optional[str] = Field(default=None, description="Token type (Bearer)")

    @classmethod
    def from_response(cls, result: dict[str, Any]) -> "AuthenticationResult":
        """Build from the AuthenticationResult block of a Cognito response."""
        return cls(
            id_token=result["IdToken"],
            access_token=result.get("AccessToken"),
            refresh_token=result.get("RefreshToken"),
            expires_in=result.get("ExpiresIn"),
            token_type=result.get("TokenType"),
        )


class ChallengeResponse(BaseModel):
    """Parsed InitiateAuth or RespondToAuthChallenge response."""

    model_config = ConfigDict(frozen=True)

    challenge_name: Optional[str] = Field(default=None, description="Challenge kind, if any")
    challenge_parameters: dict[str, str] = Field(default_factory=dict)
    session: Optional[str] = Field(default=None, repr=False, description="Opaque Cognito session")
    authentication_result: Optional[AuthenticationResult] = None

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> "ChallengeResponse":
        """Build from a raw boto3 cognito-idp response.

        AuthenticationResult is only parsed when it carries an IdToken; the
        caller decides whether a missing token is a protocol violation.
        """
        result = response.get("AuthenticationResult") or {}
        return cls(
            challenge_name=response.get("ChallengeName") or None,
            challenge_parameters=dict(response.get("ChallengeParameters") or {}),
            session=response.get("Session"),
            authentication_result=(
                AuthenticationResult.from_response(result) if result.get("IdToken") else None
            ),
        )

    @property
    def is_password_verifier(self) -> bool:
        return self.challenge_name == ChallengeName.PASSWORD_VERIFIER.value


class FederatedIdentity(BaseModel):
    """Identity id resolved by the identity pool for one login map."""

    model_config = ConfigDict(frozen=True)

    identity_id: str = Field(..., description="Cognito Identity ID (e.g. 'us-east-1:uuid')")
