"""Unit tests for ClientConfig."""

import pytest
from pydantic import ValidationError

from cognito_oidc.models.config import ClientConfig


class TestClientConfig:
    def test_is_immutable(self, client_config: ClientConfig) -> None:
        with pytest.raises(ValidationError):
            client_config.region = "eu-west-1"

    def test_strips_whitespace(self) -> None:
        config = ClientConfig(user_pool_id=" pool1 ", client_id="client1\n", region="us-east-1")

        assert config.user_pool_id == "pool1"
        assert config.client_id == "client1"

    def test_missing_fields_for_federation(self) -> None:
        config = ClientConfig(user_pool_id="pool1", client_id="", region="us-east-1")

        assert config.missing_fields(require_identity_pool=True) == ["client_id", "identity_pool_id"]

    def test_missing_fields_without_identity_pool(self) -> None:
        config = ClientConfig(user_pool_id="pool1", client_id="client1", region="us-east-1")

        assert config.missing_fields(require_identity_pool=False) == []

    def test_client_secret_hidden_from_repr(self, cognito_config_values: dict[str, str]) -> None:
        config = ClientConfig(**cognito_config_values, client_secret="s3cr3t")

        assert "s3cr3t" not in repr(config)
        assert config.get_client_secret() == "s3cr3t"

    def test_no_client_secret(self, client_config: ClientConfig) -> None:
        assert client_config.get_client_secret() is None


class TestFromEnv:
    def test_reads_all_variables(self) -> None:
        config = ClientConfig.from_env(
            {
                "COGNITO_USER_POOL_ID": "us-east-1_ABC123",
                "COGNITO_CLIENT_ID": "client1",
                "COGNITO_IDENTITY_POOL_ID": "us-east-1:0000",
                "COGNITO_CLIENT_SECRET": "s3cr3t",
                "AWS_REGION": "us-east-1",
            }
        )

        assert config.user_pool_id == "us-east-1_ABC123"
        assert config.client_id == "client1"
        assert config.identity_pool_id == "us-east-1:0000"
        assert config.region == "us-east-1"
        assert config.get_client_secret() == "s3cr3t"

    def test_region_falls_back_to_default_region(self) -> None:
        config = ClientConfig.from_env({"AWS_DEFAULT_REGION": "eu-west-1"})

        assert config.region == "eu-west-1"

    def test_missing_variables_left_empty(self) -> None:
        config = ClientConfig.from_env({})

        assert config.missing_fields() == ["user_pool_id", "client_id", "region", "identity_pool_id"]
        assert config.client_secret is None

    def test_reads_os_environ_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COGNITO_USER_POOL_ID", "pool-from-env")
        monkeypatch.delenv("AWS_REGION", raising=False)
        monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-south-1")

        config = ClientConfig.from_env()

        assert config.user_pool_id == "pool-from-env"
        assert config.region == "ap-south-1"
