"""Client configuration for the Cognito user pool and identity pool."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

# Fields every authenticator needs
USER_POOL_FIELDS = ("user_pool_id", "client_id", "region")

# Additionally needed to federate into an OpenID token
FEDERATION_FIELDS = USER_POOL_FIELDS + ("identity_pool_id",)


class ClientConfig(BaseModel):
    """Immutable identifiers for one Cognito app client.

    identity_pool_id is only needed when the federated OpenID token is
    requested. client_secret is only needed for app clients created with a
    generated secret.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    user_pool_id: str = Field(default="", description="Cognito User Pool ID (e.g. 'us-east-1_ABC123')")
    client_id: str = Field(default="", description="Cognito App Client ID")
    region: str = Field(default="", description="AWS region of both pools")
    identity_pool_id: Optional[str] = Field(default=None, description="Cognito Identity Pool ID")
    client_secret: Optional[SecretStr] = Field(
        default=None, repr=False, description="App client secret, if the client has one"
    )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """Build a config from environment variables.

        Reads COGNITO_USER_POOL_ID, COGNITO_CLIENT_ID, COGNITO_IDENTITY_POOL_ID,
        COGNITO_CLIENT_SECRET and AWS_REGION (falling back to AWS_DEFAULT_REGION).
        Missing values are left empty; validation happens when a client is built.
        """
        env = os.environ if environ is None else environ
        client_secret = env.get("COGNITO_CLIENT_SECRET") or None
        return cls(
            user_pool_id=env.get("COGNITO_USER_POOL_ID", ""),
            client_id=env.get("COGNITO_CLIENT_ID", ""),
            region=env.get("AWS_REGION") or env.get("AWS_DEFAULT_REGION", ""),
            identity_pool_id=env.get("COGNITO_IDENTITY_POOL_ID") or None,
            client_secret=SecretStr(client_secret) if client_secret else None,
        )

    def missing_fields(self, *, require_identity_pool: bool = True) -> list[str]:
        """Names of mandatory fields that are empty, in declaration order."""
        required = FEDERATION_FIELDS if require_identity_pool else USER_POOL_FIELDS
        return [name for name in required if not getattr(self, name)]

    def get_client_secret(self) -> Optional[str]:
        """Plain client secret, or None when the app client has no secret."""
        if self.client_secret is None:
            return None
        return self.client_secret.get_secret_value() or None
