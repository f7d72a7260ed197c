"""Pydantic models for Cognito authentication and federation."""

from .auth import (
    SRP_AUTH_FLOW,
    AuthenticationResult,
    ChallengeName,
    ChallengeResponse,
    Credentials,
    FederatedIdentity,
)
from .config import ClientConfig
from .errors import (
    AuthenticationRejectedError,
    AuthFailure,
    CognitoAuthError,
    ConfigurationError,
    CryptoSessionError,
    ErrorCode,
    FederationError,
    ProtocolViolationError,
    Stage,
    TransportError,
    UnsupportedChallengeError,
)

__all__ = [
    "SRP_AUTH_FLOW",
    "AuthFailure",
    "AuthenticationRejectedError",
    "AuthenticationResult",
    "ChallengeName",
    "ChallengeResponse",
    "ClientConfig",
    "CognitoAuthError",
    "ConfigurationError",
    "Credentials",
    "CryptoSessionError",
    "ErrorCode",
    "FederatedIdentity",
    "FederationError",
    "ProtocolViolationError",
    "Stage",
    "TransportError",
    "UnsupportedChallengeError",
]
