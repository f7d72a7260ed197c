"""Cognito user pool (cognito-idp) calls used by the SRP flow.

Only the two calls of the challenge-response round-trip are exposed, so the
orchestrator can be exercised against a fake provider.
"""

from typing import Any, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cognito_oidc.models.auth import SRP_AUTH_FLOW
from cognito_oidc.models.errors import AuthenticationRejectedError, Stage, TransportError
from cognito_oidc.utils.logging import get_logger, log_auth_operation

logger = get_logger(__name__)


class IdentityProvider(Protocol):
    """Capability set {InitiateAuth, RespondToAuthChallenge}."""

    def initiate_auth(self, client_id: str, auth_parameters: dict[str, str]) -> dict[str, Any]: ...

    def respond_to_auth_challenge(
        self,
        client_id: str,
        challenge_name: str,
        challenge_responses: dict[str, str],
        session: Optional[str] = None,
    ) -> dict[str, Any]: ...


class CognitoIdentityProvider:
    """IdentityProvider backed by a boto3 cognito-idp client.

    Errors are translated per call:
    - ClientError (provider answered with an error) -> AuthenticationRejectedError
    - BotoCoreError (request not sent / response not read) -> TransportError
    No call is retried here; a new attempt needs a new SRP session.
    """

    def __init__(self, region: str, client: Any = None) -> None:
        """Initialize with a region or an existing cognito-idp client.

        Args:
            region: AWS region of the user pool
            client: Optional pre-built boto3 cognito-idp client
        """
        self._client = client if client is not None else boto3.client("cognito-idp", region_name=region)

    def initiate_auth(self, client_id: str, auth_parameters: dict[str, str]) -> dict[str, Any]:
        """Start USER_SRP_AUTH with the SRP_A auth parameters."""
        try:
            return self._client.initiate_auth(
                AuthFlow=SRP_AUTH_FLOW,
                ClientId=client_id,
                AuthParameters=auth_parameters,
            )
        except ClientError as e:
            raise _rejected(e, Stage.INITIATE_AUTH) from e
        except BotoCoreError as e:
            raise _transport_failure(e, Stage.INITIATE_AUTH) from e

    def respond_to_auth_challenge(
        self,
        client_id: str,
        challenge_name: str,
        challenge_responses: dict[str, str],
        session: Optional[str] = None,
    ) -> dict[str, Any]:
        """Answer a challenge; Session is forwarded when InitiateAuth returned one."""
        kwargs: dict[str, Any] = {
            "ClientId": client_id,
            "ChallengeName": challenge_name,
            "ChallengeResponses": challenge_responses,
        }
        if session:
            kwargs["Session"] = session

        try:
            return self._client.respond_to_auth_challenge(**kwargs)
        except ClientError as e:
            raise _rejected(e, Stage.RESPOND_TO_CHALLENGE) from e
        except BotoCoreError as e:
            raise _transport_failure(e, Stage.RESPOND_TO_CHALLENGE) from e


def _rejected(error: ClientError, stage: Stage) -> AuthenticationRejectedError:
    error_code = error.response.get("Error", {}).get("Code", "Unknown")
    log_auth_operation(logger, stage.value, stage=stage.value, result="rejected", error=error_code)
    return AuthenticationRejectedError(error_code, stage=stage)


def _transport_failure(error: BotoCoreError, stage: Stage) -> TransportError:
    # botocore messages carry endpoints and codes, never request parameters
    log_auth_operation(logger, stage.value, stage=stage.value, result="error", error=type(error).__name__)
    return TransportError(str(error), stage=stage)
