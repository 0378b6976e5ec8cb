"""SSO coverage reconciliation between organization roles and SAML identities."""

from __future__ import annotations

from typing import Mapping


def compute_exceptions(
    user_roles: Mapping[str, str], saml_users: Mapping[str, str]
) -> dict[str, str]:
    """Return the members of ``user_roles`` that have no SAML identity.

    Values are the roles from ``user_roles``. Logins that appear only in
    ``saml_users`` are ignored. Neither input is modified.
    """
    return {login: role for login, role in user_roles.items() if login not in saml_users}
