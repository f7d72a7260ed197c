"""Identity federation: user pool ID token -> Cognito Identity OpenID token.

Two calls against the identity pool, both keyed by the same login map:
1. GetId: resolve the identity id for the login map
2. GetOpenIdToken: exchange the identity id for a portable OpenID Connect token

The login map key must be exactly ``cognito-idp.<region>.amazonaws.com/<userPoolId>``;
any other form makes the identity pool treat the login as an unknown provider.
"""

from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cognito_oidc.models.auth import FederatedIdentity
from cognito_oidc.models.errors import FederationError, ProtocolViolationError, Stage
from cognito_oidc.utils.logging import get_logger, log_auth_operation

logger = get_logger(__name__)

PROVIDER_NAME_TEMPLATE = "cognito-idp.{region}.amazonaws.com/{user_pool_id}"


def provider_name(region: str, user_pool_id: str) -> str:
    """Identity pool provider name for a user pool."""
    return PROVIDER_NAME_TEMPLATE.format(region=region, user_pool_id=user_pool_id)


def build_login_map(region: str, user_pool_id: str, id_token: str) -> dict[str, str]:
    """Build the Logins map for GetId and GetOpenIdToken.

    Args:
        region: AWS region of the user pool
        user_pool_id: Cognito User Pool ID
        id_token: ID token issued by that user pool

    Returns:
        Single-entry map from provider name to ID token
    """
    return {provider_name(region, user_pool_id): id_token}


class FederationService(Protocol):
    """Capability set {ResolveIdentity, ExchangeToken}."""

    def get_id(self, identity_pool_id: str, logins: dict[str, str]) -> dict[str, Any]: ...

    def get_open_id_token(self, identity_id: str, logins: dict[str, str]) -> dict[str, Any]: ...


class CognitoIdentityFederation:
    """FederationService backed by a boto3 cognito-identity client."""

    def __init__(self, region: str, client: Any = None) -> None:
        self._client = client if client is not None else boto3.client("cognito-identity", region_name=region)

    def get_id(self, identity_pool_id: str, logins: dict[str, str]) -> dict[str, Any]:
        try:
            return self._client.get_id(IdentityPoolId=identity_pool_id, Logins=logins)
        except (ClientError, BotoCoreError) as e:
            raise _federation_failure(e, Stage.RESOLVE_IDENTITY) from e

    def get_open_id_token(self, identity_id: str, logins: dict[str, str]) -> dict[str, Any]:
        try:
            return self._client.get_open_id_token(IdentityId=identity_id, Logins=logins)
        except (ClientError, BotoCoreError) as e:
            raise _federation_failure(e, Stage.EXCHANGE_TOKEN) from e


def _federation_failure(error: Exception, stage: Stage) -> FederationError:
    if isinstance(error, ClientError):
        error_code = error.response.get("Error", {}).get("Code", "Unknown")
    else:
        error_code = type(error).__name__
    log_auth_operation(logger, stage.value, stage=stage.value, result="error", error=error_code)
    return FederationError(error_code, stage=stage, details={"service_error": error_code})


class TokenFederationPipeline:
    """Resolve an identity and exchange it for a portable OpenID token.

    Holds no per-call state: every federate() call builds its own login map
    and performs both calls again.
    """

    def __init__(self, federation: FederationService) -> None:
        self._federation = federation

    def resolve_identity(self, identity_pool_id: str, logins: dict[str, str]) -> FederatedIdentity:
        """Call GetId for the login map.

        Raises:
            FederationError: If the call fails
            ProtocolViolationError: If the response has no IdentityId
        """
        response = self._federation.get_id(identity_pool_id, logins)
        identity_id = response.get("IdentityId")
        if not identity_id:
            raise ProtocolViolationError("IdentityId", stage=Stage.RESOLVE_IDENTITY)
        log_auth_operation(logger, "get_id", stage=Stage.RESOLVE_IDENTITY.value, result="success")
        return FederatedIdentity(identity_id=identity_id)

    def exchange_token(self, identity: FederatedIdentity, logins: dict[str, str]) -> str:
        """Call GetOpenIdToken for a resolved identity.

        Raises:
            FederationError: If the call fails
            ProtocolViolationError: If the response has no Token
        """
        response = self._federation.get_open_id_token(identity.identity_id, logins)
        token = response.get("Token")
        if not token:
            raise ProtocolViolationError("Token", stage=Stage.EXCHANGE_TOKEN)
        log_auth_operation(logger, "get_open_id_token", stage=Stage.EXCHANGE_TOKEN.value, result="success")
        return token

    def federate(
        self,
        region: str,
        user_pool_id: str,
        identity_pool_id: str,
        id_token: str,
    ) -> str:
        """Exchange a user pool ID token for an OpenID token.

        Args:
            region: AWS region of both pools
            user_pool_id: Cognito User Pool ID that issued id_token
            identity_pool_id: Cognito Identity Pool ID trusting that user pool
            id_token: ID token from the completed challenge

        Returns:
            The OpenID token string, unmodified
        """
        logins = build_login_map(region, user_pool_id, id_token)
        identity = self.resolve_identity(identity_pool_id, logins)
        return self.exchange_token(identity, logins)
