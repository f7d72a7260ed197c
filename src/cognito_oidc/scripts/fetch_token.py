#!/usr/bin/env python3
"""Fetch a federated OpenID token for a Cognito user.

Authenticates with USER_SRP_AUTH and exchanges the ID token through the
identity pool. Identifiers come from flags or environment variables; the
password is read from a prompt (or stdin with --password-stdin), never from
the command line.

Usage:
    fetch-openid-token --username alice
    fetch-openid-token --username alice --user-pool-only
    echo "$PASSWORD" | fetch-openid-token --username alice --password-stdin

Environment:
    COGNITO_USER_POOL_ID, COGNITO_CLIENT_ID, COGNITO_IDENTITY_POOL_ID,
    COGNITO_CLIENT_SECRET, AWS_REGION / AWS_DEFAULT_REGION

Output:
    JSON to stdout: {"token": "..."} (or the user pool tokens with --user-pool-only)
    JSON to stderr on failure: {"success": false, "error_code": "...", ...}
"""

import argparse
import getpass
import json
import logging
import sys
from typing import Optional, Sequence

from cognito_oidc.models.config import ClientConfig
from cognito_oidc.models.errors import CognitoAuthError
from cognito_oidc.services.auth_service import CognitoClient, UserPoolAuthenticator
from cognito_oidc.utils.logging import configure_logging


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch a federated OpenID token from Cognito")
    parser.add_argument("--username", required=True, help="Cognito username")
    parser.add_argument("--user-pool-id", help="Overrides COGNITO_USER_POOL_ID")
    parser.add_argument("--client-id", help="Overrides COGNITO_CLIENT_ID")
    parser.add_argument("--identity-pool-id", help="Overrides COGNITO_IDENTITY_POOL_ID")
    parser.add_argument("--region", help="Overrides AWS_REGION")
    parser.add_argument(
        "--password-stdin",
        action="store_true",
        help="Read the password from the first line of stdin",
    )
    parser.add_argument(
        "--user-pool-only",
        action="store_true",
        help="Stop after the SRP challenge and print the user pool tokens",
    )
    parser.add_argument("--verbose", action="store_true", help="Log each stage to stderr")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ClientConfig:
    """Environment config with command line overrides applied."""
    config = ClientConfig.from_env()
    overrides = {
        "user_pool_id": args.user_pool_id,
        "client_id": args.client_id,
        "identity_pool_id": args.identity_pool_id,
        "region": args.region,
    }
    # Re-validated so flag values are stripped like environment values
    return ClientConfig.model_validate(
        {**config.model_dump(), **{key: value for key, value in overrides.items() if value}}
    )


def read_password(args: argparse.Namespace) -> str:
    if args.password_stdin:
        return sys.stdin.readline().rstrip("\n")
    return getpass.getpass("Password: ")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        configure_logging(logging.INFO)

    try:
        config = build_config(args)
        password = read_password(args)
        if args.user_pool_only:
            result = UserPoolAuthenticator(config).authenticate_user(args.username, password)
            output = {
                "id_token": result.id_token,
                "access_token": result.access_token,
                "refresh_token": result.refresh_token,
                "expires_in": result.expires_in,
            }
        else:
            output = {"token": CognitoClient(config).authenticate(args.username, password)}
    except CognitoAuthError as e:
        print(e.to_failure().model_dump_json(), file=sys.stderr)
        return 1

    print(json.dumps(output))
    return 0


if __name__ == "__main__":
    sys.exit(main())
