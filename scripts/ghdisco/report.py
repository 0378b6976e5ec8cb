"""Fixed-width table reports for the sso command."""

from __future__ import annotations

from typing import Mapping, Sequence, TextIO

from scripts.ghdisco.reconcile import compute_exceptions

EXCEPTIONS_HEADER = ("Login without SSO", "Role")
ALL_HEADER = ("Login", "Role", "SSO Identity")


def _limited_keys(mapping: Mapping[str, str], limit: int) -> list[str]:
    """Sorted keys, truncated to ``limit`` when 0 < limit <= len(keys)."""
    keys = sorted(mapping)
    if 0 < limit <= len(keys):
        keys = keys[:limit]
    return keys


def write_table(out: TextIO, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    """Write a left-aligned table sized to its widest cell per column."""
    widths = [len(h) for h in header]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    pads = ["{:<%d}" % w for w in widths[:-1]] + ["{}"]
    fmt = "  ".join(pads)
    out.write(fmt.format(*header) + "\n")
    out.write("  ".join("-" * w for w in widths) + "\n")
    for row in rows:
        out.write(fmt.format(*row) + "\n")


def render_exceptions(
    user_roles: Mapping[str, str],
    saml_users: Mapping[str, str],
    limit: int,
    out: TextIO,
) -> None:
    """Print members that hold a role but have no SSO identity."""
    exceptions = compute_exceptions(user_roles, saml_users)
    rows = [(login, exceptions[login]) for login in _limited_keys(exceptions, limit)]
    write_table(out, EXCEPTIONS_HEADER, rows)


def render_all(
    user_roles: Mapping[str, str],
    saml_users: Mapping[str, str],
    limit: int,
    out: TextIO,
) -> None:
    """Print every SAML-linked member with its role and SSO identity."""
    rows = [
        (login, user_roles.get(login, ""), saml_users[login])
        for login in _limited_keys(saml_users, limit)
    ]
    write_table(out, ALL_HEADER, rows)
