"""Cognito SRP authentication with OpenID token federation.

Usage:
    from cognito_oidc import ClientConfig, CognitoClient

    client = CognitoClient(ClientConfig(
        user_pool_id="us-east-1_ABC123",
        client_id="client-id",
        region="us-east-1",
        identity_pool_id="us-east-1:pool-uuid",
    ))
    token = client.authenticate("user-name", "password")
"""

import logging

from cognito_oidc.models import (
    AuthenticationRejectedError,
    AuthenticationResult,
    ClientConfig,
    CognitoAuthError,
    ConfigurationError,
    CryptoSessionError,
    ErrorCode,
    FederationError,
    ProtocolViolationError,
    TransportError,
    UnsupportedChallengeError,
)
from cognito_oidc.services import (
    CognitoClient,
    UserPoolAuthenticator,
    build_login_map,
    new_cognito_client,
)

__all__ = [
    "AuthenticationRejectedError",
    "AuthenticationResult",
    "ClientConfig",
    "CognitoAuthError",
    "CognitoClient",
    "ConfigurationError",
    "CryptoSessionError",
    "ErrorCode",
    "FederationError",
    "ProtocolViolationError",
    "TransportError",
    "UnsupportedChallengeError",
    "UserPoolAuthenticator",
    "build_login_map",
    "new_cognito_client",
]

# Library logging stays silent unless the application configures handlers
logging.getLogger(__name__).addHandler(logging.NullHandler())
