"""Unit tests for the token federation pipeline.

Tests cover:
- Login map key is bit-exact
- GetId then GetOpenIdToken, both with the same login map
- Failures at either call surface as FederationError naming the stage
- Responses missing IdentityId / Token are protocol violations
"""

from typing import Any
from unittest.mock import MagicMock, call, patch

import pytest
from botocore.exceptions import ClientError, ReadTimeoutError

from cognito_oidc.models.auth import FederatedIdentity
from cognito_oidc.models.errors import FederationError, ProtocolViolationError, Stage
from cognito_oidc.services.federation import (
    CognitoIdentityFederation,
    TokenFederationPipeline,
    build_login_map,
    provider_name,
)


@pytest.fixture
def pipeline(mock_cognito_identity: MagicMock) -> TokenFederationPipeline:
    return TokenFederationPipeline(CognitoIdentityFederation("us-east-1", client=mock_cognito_identity))


class TestLoginMap:
    def test_key_is_bit_exact(self) -> None:
        logins = build_login_map("us-east-1", "us-east-1_ABC123", "PTOK")

        assert logins == {"cognito-idp.us-east-1.amazonaws.com/us-east-1_ABC123": "PTOK"}

    def test_provider_name_uses_region(self) -> None:
        assert provider_name("eu-west-1", "eu-west-1_XyZ") == "cognito-idp.eu-west-1.amazonaws.com/eu-west-1_XyZ"


class TestCognitoIdentityFederation:
    def test_builds_regional_client(self) -> None:
        with patch("boto3.client") as mock_boto_client:
            CognitoIdentityFederation("eu-west-1")

        mock_boto_client.assert_called_once_with("cognito-identity", region_name="eu-west-1")

    def test_injected_client_untouched_at_construction(self) -> None:
        cognito_identity = MagicMock()

        CognitoIdentityFederation("us-east-1", client=cognito_identity)

        assert cognito_identity.mock_calls == []


class TestFederate:
    def test_resolves_then_exchanges(
        self,
        pipeline: TokenFederationPipeline,
        mock_cognito_identity: MagicMock,
    ) -> None:
        token = pipeline.federate("us-east-1", "pool1", "idpool1", "PTOK")

        logins = {"cognito-idp.us-east-1.amazonaws.com/pool1": "PTOK"}
        assert token == "FEDTOK"
        assert mock_cognito_identity.method_calls == [
            call.get_id(IdentityPoolId="idpool1", Logins=logins),
            call.get_open_id_token(IdentityId="id-1", Logins=logins),
        ]

    def test_resolve_identity_returns_model(self, pipeline: TokenFederationPipeline) -> None:
        identity = pipeline.resolve_identity("idpool1", {"provider": "PTOK"})

        assert identity == FederatedIdentity(identity_id="id-1")

    def test_no_caching_between_calls(
        self,
        pipeline: TokenFederationPipeline,
        mock_cognito_identity: MagicMock,
    ) -> None:
        pipeline.federate("us-east-1", "pool1", "idpool1", "PTOK")
        pipeline.federate("us-east-1", "pool1", "idpool1", "PTOK")

        assert mock_cognito_identity.get_id.call_count == 2
        assert mock_cognito_identity.get_open_id_token.call_count == 2


class TestFederateFailures:
    def test_get_id_client_error(
        self,
        pipeline: TokenFederationPipeline,
        mock_cognito_identity: MagicMock,
    ) -> None:
        mock_cognito_identity.get_id.side_effect = ClientError(
            {"Error": {"Code": "NotAuthorizedException", "Message": "Invalid login token."}},
            "GetId",
        )

        with pytest.raises(FederationError) as exc_info:
            pipeline.federate("us-east-1", "pool1", "idpool1", "PTOK")

        assert exc_info.value.stage == Stage.RESOLVE_IDENTITY
        assert exc_info.value.details == {"service_error": "NotAuthorizedException"}
        assert isinstance(exc_info.value.__cause__, ClientError)
        mock_cognito_identity.get_open_id_token.assert_not_called()

    def test_get_open_id_token_timeout(
        self,
        pipeline: TokenFederationPipeline,
        mock_cognito_identity: MagicMock,
    ) -> None:
        mock_cognito_identity.get_open_id_token.side_effect = ReadTimeoutError(
            endpoint_url="https://cognito-identity.us-east-1.amazonaws.com/"
        )

        with pytest.raises(FederationError) as exc_info:
            pipeline.federate("us-east-1", "pool1", "idpool1", "PTOK")

        assert exc_info.value.stage == Stage.EXCHANGE_TOKEN
        assert exc_info.value.details == {"service_error": "ReadTimeoutError"}

    def test_error_never_contains_token(
        self,
        pipeline: TokenFederationPipeline,
        mock_cognito_identity: MagicMock,
    ) -> None:
        mock_cognito_identity.get_id.side_effect = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "IdentityPool 'idpool1' not found."}},
            "GetId",
        )

        with pytest.raises(FederationError) as exc_info:
            pipeline.federate("us-east-1", "pool1", "idpool1", "PTOK-secret-jwt")

        assert "PTOK-secret-jwt" not in str(exc_info.value)

    @pytest.mark.parametrize("response", [{}, {"IdentityId": ""}])
    def test_missing_identity_id(
        self,
        response: dict[str, Any],
        pipeline: TokenFederationPipeline,
        mock_cognito_identity: MagicMock,
    ) -> None:
        mock_cognito_identity.get_id.return_value = response

        with pytest.raises(ProtocolViolationError) as exc_info:
            pipeline.federate("us-east-1", "pool1", "idpool1", "PTOK")

        assert exc_info.value.missing_field == "IdentityId"
        mock_cognito_identity.get_open_id_token.assert_not_called()

    def test_missing_token(
        self,
        pipeline: TokenFederationPipeline,
        mock_cognito_identity: MagicMock,
    ) -> None:
        mock_cognito_identity.get_open_id_token.return_value = {"IdentityId": "id-1"}

        with pytest.raises(ProtocolViolationError) as exc_info:
            pipeline.federate("us-east-1", "pool1", "idpool1", "PTOK")

        assert exc_info.value.missing_field == "Token"
        assert exc_info.value.stage == Stage.EXCHANGE_TOKEN
