"""CLI entry point: sso."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import signal
import sys
from typing import Optional

from scripts.ghdisco import __version__
from scripts.ghdisco.config import DEFAULT_TIMEOUT_S, load_config, resolve_log_level
from scripts.ghdisco.errors import FetchCancelledError, GhDiscoError
from scripts.ghdisco.logging_config import configure_logging
from scripts.ghdisco.providers.github_sso import GitHubSSOProvider
from scripts.ghdisco.report import render_all, render_exceptions
from scripts.ghdisco.secrets import resolve_secret

logger = logging.getLogger("ghdisco.cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130

SSO_EPILOG = """\
Find SSO exceptions in the org:
  gh-disco sso --org my-org \\
    --saml-provider "https://accounts.google.com/o/saml2/idp?idpid=example" \\
    --exceptions
"""


def cmd_sso(args: argparse.Namespace) -> int:
    """Fetch SAML identities and member roles, then print one report."""
    config = load_config(
        org=args.org,
        saml_provider=args.saml_provider,
        auth_token=args.auth_token,
        api_url=args.api_url,
        list_exceptions=args.exceptions,
        limit=args.limit,
        timeout_s=args.timeout,
        log_level=args.log_level,
    )
    github = dataclasses.replace(config.github, token=resolve_secret(config.github.token))

    # Both mappings must be complete before anything is printed.
    with GitHubSSOProvider(github) as gh:
        saml_users = gh.list_saml_users(config.org, config.saml_provider)
        user_roles = gh.list_user_roles(config.org)

    if config.list_exceptions:
        render_exceptions(user_roles, saml_users, config.limit, sys.stdout)
    else:
        render_all(user_roles, saml_users, config.limit, sys.stdout)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common_group = common.add_argument_group("common flags")
    common_group.add_argument(
        "--auth-token",
        help="GitHub PAT or secret reference (env: GHDISCO_AUTH_TOKEN)",
    )
    common_group.add_argument(
        "--log-level",
        help="Log verbosity: DEBUG, INFO, WARNING, ERROR, CRITICAL (env: GHDISCO_LOG_LEVEL)",
    )
    common_group.add_argument(
        "--api-url",
        help="GraphQL endpoint, for GitHub Enterprise Server (env: GHDISCO_API_URL)",
    )
    common_group.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_S,
        help=f"Per-request timeout in seconds (default: {DEFAULT_TIMEOUT_S:g})",
    )

    parser = argparse.ArgumentParser(
        prog="gh-disco",
        description="Discover facts about a GitHub organization",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sso_parser = subparsers.add_parser(
        "sso",
        parents=[common],
        help="Query GitHub SSO status",
        epilog=SSO_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sso_group = sso_parser.add_argument_group("sso flags")
    sso_group.add_argument(
        "--org",
        help="GitHub organization name (env: GHDISCO_ORG)",
    )
    sso_group.add_argument(
        "--saml-provider",
        help="The SAML provider URL (env: GHDISCO_SAML_PROVIDER)",
    )
    sso_group.add_argument(
        "--exceptions",
        action="store_true",
        help="List only members with a role but no SSO identity",
    )
    sso_group.add_argument(
        "--limit", "-n",
        type=int,
        default=0,
        help="Limit the number of results. 0 returns all findings (default: 0)",
    )
    sso_parser.set_defaults(func=cmd_sso)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run one command and return its exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(resolve_log_level(args.log_level))

    try:
        return args.func(args)
    except (FetchCancelledError, KeyboardInterrupt):
        logger.debug("Interrupted", exc_info=True)
        print("error: interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED
    except GhDiscoError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


def _interrupt(signum, frame) -> None:
    raise KeyboardInterrupt(signal.Signals(signum).name)


def run() -> None:
    """Console-script entry point."""
    # SIGTERM aborts the in-flight request the same way Ctrl-C does.
    signal.signal(signal.SIGTERM, _interrupt)
    sys.exit(main())


if __name__ == "__main__":
    run()
