"""GitHub SSO provider: SAML external identities and organization roles."""

from __future__ import annotations

import logging

from scripts.ghdisco.base_provider import BaseProvider
from scripts.ghdisco.schema import (
    parse_members_with_role_page,
    parse_saml_identities_page,
)

logger = logging.getLogger("ghdisco.github")

QUERY_SAML_USERS = """
query($org: String!, $ssoUrl: URI, $first: Int!, $cursor: String) {
  organization(login: $org) {
    samlIdentityProvider(ssoUrl: $ssoUrl) {
      externalIdentities(first: $first, after: $cursor) {
        pageInfo {
          hasNextPage
          endCursor
        }
        edges {
          node {
            guid
            samlIdentity {
              nameId
            }
            user {
              login
            }
          }
        }
      }
    }
  }
}
"""

QUERY_USER_ROLES = """
query($org: String!, $first: Int!, $cursor: String) {
  organization(login: $org) {
    membersWithRole(first: $first, after: $cursor) {
      pageInfo {
        hasNextPage
        endCursor
      }
      edges {
        node {
          login
        }
        role
      }
    }
  }
}
"""


class GitHubSSOProvider(BaseProvider):
    PROVIDER_NAME = "github"

    def list_saml_users(self, org: str, saml_provider: str) -> dict[str, str]:
        """Map every linked member login to its SAML nameId.

        Identities with no linked account, or an empty login, are skipped.
        """
        result: dict[str, str] = {}
        skipped = 0
        pages = self._iter_pages(
            "saml_users",
            QUERY_SAML_USERS,
            {"org": org, "ssoUrl": saml_provider},
            parse_saml_identities_page,
        )
        for page in pages:
            for edge in page.edges:
                if not edge.login:
                    skipped += 1
                    continue
                result[edge.login] = edge.name_id

        if skipped:
            logger.debug("Skipped %d unlinked SAML identities", skipped, extra={"org": org})
        logger.info("Listed SAML users", extra={"org": org, "records": len(result)})
        return result

    def list_user_roles(self, org: str) -> dict[str, str]:
        """Map every organization member login to its role (MEMBER, ADMIN)."""
        result: dict[str, str] = {}
        pages = self._iter_pages(
            "user_roles",
            QUERY_USER_ROLES,
            {"org": org},
            parse_members_with_role_page,
        )
        for page in pages:
            for edge in page.edges:
                if not edge.login:
                    logger.debug("Skipping member edge with empty login", extra={"org": org})
                    continue
                result[edge.login] = edge.role

        logger.info("Listed user roles", extra={"org": org, "records": len(result)})
        return result
