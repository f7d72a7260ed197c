"""Authentication service for the Cognito USER_SRP_AUTH flow with federation.

Implements password authentication without sending the password, followed by
identity federation. Each attempt runs this chain in order:
- Create an SRP session (ephemeral value + auth parameters)
- InitiateAuth with USER_SRP_AUTH
- Answer PASSWORD_VERIFIER with a freshly timestamped signature
- GetId + GetOpenIdToken with the resulting ID token

Nothing is retried and nothing is cached: a failure at any step ends the
attempt with a typed CognitoAuthError, and every attempt starts from a new
SRP session.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

import boto3

from cognito_oidc.models.auth import AuthenticationResult, ChallengeResponse, Credentials
from cognito_oidc.models.config import ClientConfig
from cognito_oidc.models.errors import (
    CognitoAuthError,
    ConfigurationError,
    CryptoSessionError,
    ProtocolViolationError,
    Stage,
    UnsupportedChallengeError,
)
from cognito_oidc.services.federation import CognitoIdentityFederation, TokenFederationPipeline
from cognito_oidc.services.identity_provider import CognitoIdentityProvider, IdentityProvider
from cognito_oidc.services.srp_engine import PycognitoSRPEngine, SRPEngine, SRPSession
from cognito_oidc.utils.logging import (
    clear_correlation_id,
    get_correlation_id,
    get_logger,
    log_auth_operation,
    set_correlation_id,
)

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def validate_config(config: ClientConfig, *, require_identity_pool: bool = True) -> None:
    """Fail loudly when a mandatory identifier is empty.

    Args:
        config: Client configuration to check
        require_identity_pool: Whether identity_pool_id is mandatory (federation)

    Raises:
        ConfigurationError: Listing every empty mandatory field
    """
    missing = config.missing_fields(require_identity_pool=require_identity_pool)
    if missing:
        raise ConfigurationError(missing)


class UserPoolAuthenticator:
    """Runs the SRP challenge-response round-trip against a user pool.

    This is the provider-token-only capability: identity_pool_id is optional
    here. The instance holds only immutable configuration and collaborators,
    so it can be shared by concurrent attempts.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        identity_provider: Optional[IdentityProvider] = None,
        srp_engine: Optional[SRPEngine] = None,
        clock: Optional[Clock] = None,
        require_identity_pool: bool = False,
    ) -> None:
        """Validate configuration, then build collaborators.

        Args:
            config: Client configuration
            identity_provider: cognito-idp capability (defaults to boto3)
            srp_engine: SRP capability (defaults to pycognito)
            clock: Source of the challenge-response timestamp
            require_identity_pool: Also require identity_pool_id

        Raises:
            ConfigurationError: If a mandatory identifier is empty
        """
        # Before any boto3 client exists, so a bad config never reaches the network
        validate_config(config, require_identity_pool=require_identity_pool)

        self._config = config
        # One cognito-idp client for both default collaborators
        idp_client = None
        if identity_provider is None or srp_engine is None:
            idp_client = boto3.client("cognito-idp", region_name=config.region)
        if identity_provider is None:
            identity_provider = CognitoIdentityProvider(config.region, client=idp_client)
        if srp_engine is None:
            srp_engine = PycognitoSRPEngine(config.region, client=idp_client)
        self._identity_provider = identity_provider
        self._srp_engine = srp_engine
        self._clock = clock if clock is not None else utc_now

    @property
    def config(self) -> ClientConfig:
        return self._config

    def authenticate_user(self, username: str, password: str) -> AuthenticationResult:
        """Authenticate with SRP and return the user pool tokens.

        Args:
            username: Cognito username
            password: Plaintext password (used locally, never sent)

        Returns:
            AuthenticationResult with the ID token

        Raises:
            CryptoSessionError: SRP session could not be created or answer the challenge
            TransportError: A cognito-idp call failed (AuthenticationRejectedError if rejected)
            UnsupportedChallengeError: The provider asked for anything but PASSWORD_VERIFIER
            ProtocolViolationError: The completed challenge carried no ID token
        """
        session = self._create_session(username, password)

        initiate_response = ChallengeResponse.from_response(
            self._identity_provider.initiate_auth(self._config.client_id, session.auth_parameters)
        )
        log_auth_operation(
            logger,
            "initiate_auth",
            stage=Stage.INITIATE_AUTH.value,
            challenge_name=initiate_response.challenge_name or "<none>",
        )

        if not initiate_response.is_password_verifier:
            raise UnsupportedChallengeError(initiate_response.challenge_name, stage=Stage.INITIATE_AUTH)

        return self._respond_to_password_verifier(session, initiate_response)

    def _create_session(self, username: str, password: str) -> SRPSession:
        try:
            credentials = Credentials(username=username, password=password)
            return self._srp_engine.create_session(
                credentials.username,
                credentials.password.get_secret_value(),
                self._config.user_pool_id,
                self._config.client_id,
                self._config.get_client_secret(),
            )
        except CryptoSessionError:
            raise
        except (ValueError, TypeError) as e:
            raise CryptoSessionError(type(e).__name__, stage=Stage.SRP_SESSION) from e

    def _respond_to_password_verifier(
        self,
        session: SRPSession,
        challenge: ChallengeResponse,
    ) -> AuthenticationResult:
        # Captured now, not at session creation: the signature is time-bound
        timestamp = self._clock()
        challenge_responses = session.compute_challenge_response(challenge.challenge_parameters, timestamp)

        response = ChallengeResponse.from_response(
            self._identity_provider.respond_to_auth_challenge(
                self._config.client_id,
                challenge.challenge_name,
                challenge_responses,
                challenge.session,
            )
        )

        if response.authentication_result is not None:
            log_auth_operation(
                logger,
                "respond_to_auth_challenge",
                stage=Stage.RESPOND_TO_CHALLENGE.value,
                result="success",
            )
            return response.authentication_result

        # A follow-up challenge (MFA, new password, ...) is outside this flow
        if response.challenge_name:
            raise UnsupportedChallengeError(response.challenge_name, stage=Stage.RESPOND_TO_CHALLENGE)
        raise ProtocolViolationError("AuthenticationResult.IdToken", stage=Stage.RESPOND_TO_CHALLENGE)


class CognitoClient:
    """Authenticates users and returns a federated OpenID token.

    Usage:
        client = CognitoClient(ClientConfig(
            user_pool_id="us-east-1_ABC123",
            client_id="client-id",
            region="us-east-1",
            identity_pool_id="us-east-1:pool-uuid",
        ))
        token = client.authenticate("user-name", "password")
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        identity_provider: Optional[IdentityProvider] = None,
        federation: Optional[TokenFederationPipeline] = None,
        srp_engine: Optional[SRPEngine] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        validate_config(config, require_identity_pool=True)

        self._config = config
        self._authenticator = UserPoolAuthenticator(
            config,
            identity_provider=identity_provider,
            srp_engine=srp_engine,
            clock=clock,
            require_identity_pool=True,
        )
        if federation is None:
            federation = TokenFederationPipeline(CognitoIdentityFederation(config.region))
        self._federation = federation

    @property
    def config(self) -> ClientConfig:
        return self._config

    def authenticate_user(self, username: str, password: str) -> AuthenticationResult:
        """User pool tokens only, without federation."""
        return self._authenticator.authenticate_user(username, password)

    def authenticate(self, username: str, password: str) -> str:
        """Authenticate with SRP and federate into an OpenID token.

        Args:
            username: Cognito username
            password: Plaintext password (used locally, never sent)

        Returns:
            The OpenID token returned by GetOpenIdToken, unmodified

        Raises:
            CognitoAuthError: Subclass naming the failed stage
        """
        owns_correlation_id = get_correlation_id() is None
        if owns_correlation_id:
            set_correlation_id()

        try:
            auth_result = self._authenticator.authenticate_user(username, password)
            token = self._federation.federate(
                self._config.region,
                self._config.user_pool_id,
                self._config.identity_pool_id,
                auth_result.id_token,
            )
        except CognitoAuthError as e:
            log_auth_operation(
                logger,
                "authenticate",
                stage=e.stage.value if e.stage else None,
                result="failed",
                error=e.code.value,
            )
            raise
        finally:
            if owns_correlation_id:
                clear_correlation_id()

        log_auth_operation(logger, "authenticate", result="success")
        return token


def new_cognito_client(config: ClientConfig) -> CognitoClient:
    """Factory for a CognitoClient with the default boto3 and pycognito collaborators."""
    return CognitoClient(config)


# Shared client built from the environment (avoids boto3 re-instantiation per call)
_cognito_client_instance: "CognitoClient | None" = None


def get_cognito_client() -> CognitoClient:
    """Get shared CognitoClient configured from environment variables."""
    global _cognito_client_instance
    if _cognito_client_instance is None:
        _cognito_client_instance = CognitoClient(ClientConfig.from_env())
    return _cognito_client_instance


def _reset_cognito_client() -> None:
    """Reset singleton for testing."""
    global _cognito_client_instance
    _cognito_client_instance = None
