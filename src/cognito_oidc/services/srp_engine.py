"""SRP engine for the Cognito USER_SRP_AUTH flow.

Wraps pycognito's AWSSRP, which owns the SRP math (ephemeral key pair,
password authentication key). This module only shapes its inputs and outputs:

1. create_session: generate the ephemeral value and the InitiateAuth parameters
2. SRPSession.compute_challenge_response: sign the PASSWORD_VERIFIER challenge
   with a caller-supplied timestamp

The timestamp is an argument rather than read internally: Cognito rejects
signatures whose TIMESTAMP drifts, so the orchestrator captures it right
before responding.
"""

import base64
import hashlib
import hmac
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Protocol

import boto3
from pycognito.aws_srp import AWSSRP, hex_to_long

from cognito_oidc.models.errors import CryptoSessionError, Stage

# Challenge parameters Cognito sends with PASSWORD_VERIFIER
REQUIRED_CHALLENGE_PARAMETERS = ("USER_ID_FOR_SRP", "SALT", "SRP_B", "SECRET_BLOCK")


def format_timestamp(timestamp: datetime) -> str:
    """Format a time the way Cognito expects in TIMESTAMP.

    e.g. "Tue Mar 3 09:05:01 UTC 2026". Naive datetimes are taken as UTC.
    """
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc).replace(tzinfo=None)
    return AWSSRP.get_cognito_formatted_timestamp(timestamp)


class SRPSession(Protocol):
    """Per-attempt SRP state."""

    @property
    def client_public_value(self) -> str: ...

    @property
    def auth_parameters(self) -> dict[str, str]: ...

    def compute_challenge_response(
        self, challenge_parameters: Mapping[str, str], timestamp: datetime
    ) -> dict[str, str]: ...


class SRPEngine(Protocol):
    """Capability that creates SRP sessions."""

    def create_session(
        self,
        username: str,
        password: str,
        pool_id: str,
        client_id: str,
        client_secret: Optional[str] = None,
    ) -> SRPSession: ...


class PycognitoSRPSession:
    """SRPSession backed by a pycognito AWSSRP instance."""

    def __init__(self, aws_srp: AWSSRP) -> None:
        self._srp = aws_srp
        self._auth_parameters = dict(aws_srp.get_auth_params())

    @property
    def client_public_value(self) -> str:
        return self._auth_parameters["SRP_A"]

    @property
    def auth_parameters(self) -> dict[str, str]:
        return dict(self._auth_parameters)

    def compute_challenge_response(
        self, challenge_parameters: Mapping[str, str], timestamp: datetime
    ) -> dict[str, str]:
        """Answer a PASSWORD_VERIFIER challenge.

        Args:
            challenge_parameters: ChallengeParameters from InitiateAuth
            timestamp: Time of signing, captured by the caller just before responding

        Returns:
            ChallengeResponses for RespondToAuthChallenge

        Raises:
            CryptoSessionError: If parameters are missing or the SRP math fails
        """
        missing = [name for name in REQUIRED_CHALLENGE_PARAMETERS if not challenge_parameters.get(name)]
        if missing:
            raise CryptoSessionError(
                f"challenge parameters missing {', '.join(missing)}",
                stage=Stage.RESPOND_TO_CHALLENGE,
            )

        user_id_for_srp = challenge_parameters["USER_ID_FOR_SRP"]
        # Cognito may answer with its internal username (alias or email sign-in)
        internal_username = challenge_parameters.get("USERNAME", self._srp.username)
        secret_block_b64 = challenge_parameters["SECRET_BLOCK"]
        timestamp_str = format_timestamp(timestamp)

        try:
            hkdf = self._srp.get_password_authentication_key(
                user_id_for_srp,
                self._srp.password,
                hex_to_long(challenge_parameters["SRP_B"]),
                challenge_parameters["SALT"],
            )
            secret_block_bytes = base64.standard_b64decode(secret_block_b64)
        except (ValueError, TypeError) as e:
            raise CryptoSessionError(
                type(e).__name__, stage=Stage.RESPOND_TO_CHALLENGE
            ) from e

        pool_suffix = self._srp.pool_id.split("_", 1)[1]
        msg = (
            bytearray(pool_suffix, "utf-8")
            + bytearray(user_id_for_srp, "utf-8")
            + bytearray(secret_block_bytes)
            + bytearray(timestamp_str, "utf-8")
        )
        signature = hmac.new(hkdf, msg, digestmod=hashlib.sha256).digest()

        response = {
            "TIMESTAMP": timestamp_str,
            "USERNAME": internal_username,
            "PASSWORD_CLAIM_SECRET_BLOCK": secret_block_b64,
            "PASSWORD_CLAIM_SIGNATURE": base64.standard_b64encode(signature).decode("utf-8"),
        }
        if self._srp.client_secret is not None:
            response["SECRET_HASH"] = AWSSRP.get_secret_hash(
                internal_username, self._srp.client_id, self._srp.client_secret
            )
        return response


class PycognitoSRPEngine:
    """SRPEngine backed by pycognito.

    One cognito-idp client is built up front and handed to every AWSSRP, so
    sessions created on concurrent threads never construct boto3 clients.
    pycognito requires the client but this engine never calls it.

    Args:
        region: AWS region of the user pool
        client: Optional pre-built cognito-idp client
    """

    def __init__(self, region: str, client: Optional[Any] = None) -> None:
        self._client = client if client is not None else boto3.client("cognito-idp", region_name=region)

    def create_session(
        self,
        username: str,
        password: str,
        pool_id: str,
        client_id: str,
        client_secret: Optional[str] = None,
    ) -> PycognitoSRPSession:
        """Create a fresh SRP session with a new random ephemeral value.

        Raises:
            CryptoSessionError: If the inputs cannot seed an SRP session
        """
        if not username or not password:
            raise CryptoSessionError("username and password are required", stage=Stage.SRP_SESSION)
        # The signature uses the part of the pool id after the region prefix
        if "_" not in pool_id or not pool_id.split("_", 1)[1]:
            raise CryptoSessionError(
                "user pool id must look like '<region>_<id>'", stage=Stage.SRP_SESSION
            )

        try:
            aws_srp = AWSSRP(
                username=username,
                password=password,
                pool_id=pool_id,
                client_id=client_id,
                client=self._client,
                client_secret=client_secret,
            )
            return PycognitoSRPSession(aws_srp)
        except (ValueError, TypeError) as e:
            raise CryptoSessionError(type(e).__name__, stage=Stage.SRP_SESSION) from e
