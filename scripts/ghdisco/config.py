"""Configuration from command-line flags with environment-variable fallback.

Supports:
  - Flags (highest precedence)
  - Environment variables, optionally from a local .env file
  - Secret references for the auth token (aws-secret://, gcp-secret://)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from scripts.ghdisco.errors import ValidationError

DEFAULT_API_URL = "https://api.github.com/graphql"
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_AUTH_TOKEN = "GHDISCO_AUTH_TOKEN"
ENV_ORG = "GHDISCO_ORG"
ENV_SAML_PROVIDER = "GHDISCO_SAML_PROVIDER"
ENV_API_URL = "GHDISCO_API_URL"
ENV_LOG_LEVEL = "GHDISCO_LOG_LEVEL"


@dataclass(frozen=True)
class GitHubConfig:
    token: str
    api_url: str = DEFAULT_API_URL
    timeout_s: float = DEFAULT_TIMEOUT_S


@dataclass(frozen=True)
class AuditConfig:
    org: str
    saml_provider: str
    github: GitHubConfig
    list_exceptions: bool = False
    limit: int = 0
    log_level: str = DEFAULT_LOG_LEVEL


def _pick(flag_value: Optional[str], env_name: str, default: str = "") -> str:
    if flag_value:
        return flag_value
    return os.environ.get(env_name, default)


def load_env_file() -> None:
    """Load .env from the working directory (or a parent); never overrides."""
    load_dotenv(find_dotenv(usecwd=True))


def resolve_log_level(flag_value: Optional[str] = None) -> str:
    """Log level from --log-level, then GHDISCO_LOG_LEVEL, then WARNING."""
    load_env_file()
    return _pick(flag_value, ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()


def load_config(
    org: Optional[str] = None,
    saml_provider: Optional[str] = None,
    auth_token: Optional[str] = None,
    api_url: Optional[str] = None,
    list_exceptions: bool = False,
    limit: int = 0,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    log_level: Optional[str] = None,
) -> AuditConfig:
    """Merge flags with the environment and validate the result.

    Every problem is collected and raised as a single ValidationError, before
    anything touches the network. The token is returned unresolved; secret
    references are expanded by the caller.
    """
    load_env_file()

    token = _pick(auth_token, ENV_AUTH_TOKEN)
    org = _pick(org, ENV_ORG)
    saml_provider = _pick(saml_provider, ENV_SAML_PROVIDER)
    api_url = _pick(api_url, ENV_API_URL, DEFAULT_API_URL)
    log_level = resolve_log_level(log_level)

    problems: list[str] = []
    if log_level not in LOG_LEVELS:
        problems.append(
            f"--log-level must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
        )
    if not token:
        problems.append(f"missing --auth-token (or {ENV_AUTH_TOKEN})")
    if not org:
        problems.append(f"missing --org (or {ENV_ORG})")
    if not saml_provider:
        problems.append(f"missing --saml-provider (or {ENV_SAML_PROVIDER})")
    if limit < 0:
        problems.append("--limit must be equal or greater than 0")
    if timeout_s <= 0:
        problems.append("--timeout must be greater than 0")
    if not api_url.startswith(("https://", "http://")):
        problems.append(f"--api-url must be an http(s) URL, got {api_url!r}")
    if problems:
        raise ValidationError(problems)

    return AuditConfig(
        org=org,
        saml_provider=saml_provider,
        github=GitHubConfig(token=token, api_url=api_url, timeout_s=timeout_s),
        list_exceptions=list_exceptions,
        limit=limit,
        log_level=log_level,
    )
