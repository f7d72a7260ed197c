"""Services for SRP authentication and identity federation."""

from .auth_service import (
    CognitoClient,
    UserPoolAuthenticator,
    get_cognito_client,
    new_cognito_client,
    validate_config,
)
from .federation import (
    CognitoIdentityFederation,
    TokenFederationPipeline,
    build_login_map,
    provider_name,
)
from .identity_provider import CognitoIdentityProvider
from .srp_engine import PycognitoSRPEngine, format_timestamp

__all__ = [
    "CognitoClient",
    "CognitoIdentityFederation",
    "CognitoIdentityProvider",
    "PycognitoSRPEngine",
    "TokenFederationPipeline",
    "UserPoolAuthenticator",
    "build_login_map",
    "format_timestamp",
    "get_cognito_client",
    "new_cognito_client",
    "provider_name",
    "validate_config",
]
