"""Secret-reference resolution for the GitHub token.

The token can be passed literally or as a reference into a cloud secret
manager, so CI jobs never have to export the PAT itself.
"""

from __future__ import annotations

import json
import logging
import os

from scripts.ghdisco.errors import SecretResolutionError

logger = logging.getLogger("ghdisco.secrets")

_AWS_PREFIX = "aws-secret://"
_GCP_PREFIX = "gcp-secret://"


def resolve_secret(value: str) -> str:
    """Resolve a secret reference to its plaintext value.

    Supported formats:
      - "aws-secret://secret-name"         -> AWS Secrets Manager
      - "aws-secret://secret-name#key"     -> AWS Secrets Manager (JSON key)
      - "gcp-secret://projects/P/secrets/N/versions/V" -> GCP Secret Manager
      - "gcp-secret://name"                -> GCP Secret Manager, latest version
      - anything else                      -> returned as-is
    """
    if value.startswith(_AWS_PREFIX):
        logger.debug("Resolving token from AWS Secrets Manager")
        return _resolve_aws_secret(value[len(_AWS_PREFIX):])
    if value.startswith(_GCP_PREFIX):
        logger.debug("Resolving token from GCP Secret Manager")
        return _resolve_gcp_secret(value[len(_GCP_PREFIX):])
    return value


def _resolve_aws_secret(ref: str) -> str:
    try:
        import boto3
    except ImportError as exc:
        raise SecretResolutionError(
            "aws-secret:// references need boto3 (pip install 'gh-disco[aws]')"
        ) from exc

    secret_name, _, json_key = ref.partition("#")
    if not secret_name:
        raise SecretResolutionError("empty AWS secret name")

    region = os.environ.get("AWS_REGION", "us-east-1")
    client = boto3.client("secretsmanager", region_name=region)
    try:
        secret_string = client.get_secret_value(SecretId=secret_name)["SecretString"]
    except Exception as exc:
        raise SecretResolutionError(f"cannot read AWS secret {secret_name!r}: {exc}") from exc

    if not json_key:
        return secret_string
    try:
        return str(json.loads(secret_string)[json_key])
    except (ValueError, KeyError, TypeError) as exc:
        raise SecretResolutionError(
            f"AWS secret {secret_name!r} has no JSON key {json_key!r}"
        ) from exc


def _resolve_gcp_secret(ref: str) -> str:
    try:
        from google.cloud import secretmanager
    except ImportError as exc:
        raise SecretResolutionError(
            "gcp-secret:// references need google-cloud-secret-manager "
            "(pip install 'gh-disco[gcp]')"
        ) from exc

    if ref.startswith("projects/"):
        name = ref
    else:
        project = os.environ.get("GCP_PROJECT_ID", "")
        if not project:
            raise SecretResolutionError(
                f"cannot resolve gcp-secret://{ref} without GCP_PROJECT_ID"
            )
        name = f"projects/{project}/secrets/{ref}/versions/latest"

    client = secretmanager.SecretManagerServiceClient()
    try:
        response = client.access_secret_version(request={"name": name})
    except Exception as exc:
        raise SecretResolutionError(f"cannot read GCP secret {name!r}: {exc}") from exc
    return response.payload.data.decode("UTF-8")
