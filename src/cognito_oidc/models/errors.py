"""Standard error codes for the Cognito SRP and federation client.

Every failure surfaced by the client maps to exactly one ErrorCode, so callers
can tell "session creation failed" from "provider rejected auth" from
"unsupported challenge" from "federation failed" without parsing messages.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Error codes for every stage of an authentication attempt."""

    # Construction errors
    CONFIGURATION_INVALID = "ERR_CFG_001"

    # Authentication errors (ERR_AUTH_001-ERR_AUTH_005)
    CRYPTO_SESSION_FAILED = "ERR_AUTH_001"
    TRANSPORT_FAILED = "ERR_AUTH_002"
    AUTH_REJECTED = "ERR_AUTH_003"
    UNSUPPORTED_CHALLENGE = "ERR_AUTH_004"
    PROTOCOL_VIOLATION = "ERR_AUTH_005"

    # Federation errors
    FEDERATION_FAILED = "ERR_FED_001"


class Stage(str, Enum):
    """Stage of the attempt in which a failure occurred."""

    CONFIGURATION = "configuration"
    SRP_SESSION = "srp_session"
    INITIATE_AUTH = "initiate_auth"
    RESPOND_TO_CHALLENGE = "respond_to_challenge"
    RESOLVE_IDENTITY = "resolve_identity"
    EXCHANGE_TOKEN = "exchange_token"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.CONFIGURATION_INVALID: "Client configuration is missing mandatory identifiers",
    ErrorCode.CRYPTO_SESSION_FAILED: "SRP session could not be created",
    ErrorCode.TRANSPORT_FAILED: "Remote call to the identity service failed",
    ErrorCode.AUTH_REJECTED: "Identity provider rejected the authentication request",
    ErrorCode.UNSUPPORTED_CHALLENGE: "Identity provider returned an unsupported challenge",
    ErrorCode.PROTOCOL_VIOLATION: "Identity service response is missing a required field",
    ErrorCode.FEDERATION_FAILED: "Identity federation failed",
}

# Recovery suggestions for callers
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.CONFIGURATION_INVALID: "Provide user pool id, client id, region and identity pool id",
    ErrorCode.CRYPTO_SESSION_FAILED: "Check the username, password and user pool id format",
    ErrorCode.TRANSPORT_FAILED: "Check network connectivity and retry with a new attempt",
    ErrorCode.AUTH_REJECTED: "Check the credentials and the app client configuration",
    ErrorCode.UNSUPPORTED_CHALLENGE: "Disable the extra challenge for this user or app client",
    ErrorCode.PROTOCOL_VIOLATION: "Retry with a new attempt; report if it persists",
    ErrorCode.FEDERATION_FAILED: "Check that the identity pool trusts this user pool and region",
}


class AuthFailure(BaseModel):
    """Serializable description of a failed attempt.

    Contains no credentials or tokens, so it is safe to print or return
    from an API.
    """

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    stage: Optional[Stage] = None
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None


class CognitoAuthError(Exception):
    """Base exception raised by the client.

    Subclasses fix the ErrorCode; ``stage`` records which remote call or
    local step failed and ``details`` carries safe, non-secret context.
    """

    code: ErrorCode = ErrorCode.TRANSPORT_FAILED

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        stage: Optional[Stage] = None,
        details: Optional[dict[str, str]] = None,
    ):
        self.message = ERROR_MESSAGES[self.code]
        self.recovery = ERROR_RECOVERY[self.code]
        self.stage = stage
        self.details = details
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)

    def to_failure(self) -> AuthFailure:
        """Convert this exception to an AuthFailure for responses."""
        return AuthFailure(
            error_code=self.code,
            stage=self.stage,
            message=str(self),
            recovery=self.recovery,
            details=self.details,
        )


class ConfigurationError(CognitoAuthError):
    """A mandatory identifier is missing or empty."""

    code = ErrorCode.CONFIGURATION_INVALID

    def __init__(self, missing_fields: list[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(
            ", ".join(self.missing_fields),
            stage=Stage.CONFIGURATION,
            details={"missing_fields": ",".join(self.missing_fields)},
        )


class CryptoSessionError(CognitoAuthError):
    """The SRP session could not be created or could not answer the challenge."""

    code = ErrorCode.CRYPTO_SESSION_FAILED


class TransportError(CognitoAuthError):
    """A remote call could not be sent or its response could not be received."""

    code = ErrorCode.TRANSPORT_FAILED


class AuthenticationRejectedError(TransportError):
    """The identity provider answered with an error response.

    Kept under TransportError since the attempt failed at a remote call,
    with ``error_code`` holding the provider's code (e.g. NotAuthorizedException).
    """

    code = ErrorCode.AUTH_REJECTED

    def __init__(
        self,
        error_code: str,
        *,
        stage: Optional[Stage] = None,
    ):
        self.error_code = error_code
        super().__init__(error_code, stage=stage, details={"provider_error": error_code})


class UnsupportedChallengeError(CognitoAuthError):
    """The provider asked for a challenge other than PASSWORD_VERIFIER."""

    code = ErrorCode.UNSUPPORTED_CHALLENGE

    def __init__(
        self,
        challenge_name: Optional[str],
        *,
        stage: Optional[Stage] = None,
    ):
        self.challenge_name = challenge_name or ""
        super().__init__(
            self.challenge_name or "<none>",
            stage=stage,
            details={"challenge_name": self.challenge_name},
        )


class ProtocolViolationError(CognitoAuthError):
    """A successful response lacks a field the protocol requires."""

    code = ErrorCode.PROTOCOL_VIOLATION

    def __init__(
        self,
        missing_field: str,
        *,
        stage: Optional[Stage] = None,
    ):
        self.missing_field = missing_field
        super().__init__(
            f"missing {missing_field}",
            stage=stage,
            details={"missing_field": missing_field},
        )


class FederationError(CognitoAuthError):
    """GetId or GetOpenIdToken failed."""

    code = ErrorCode.FEDERATION_FAILED
