"""Typed views over the two GraphQL connection payloads.

Each page is decoded eagerly: a required field that is missing or has the
wrong type raises MalformedResponseError with the raw body attached, so no
``None`` ever leaks into the mappings built from these objects.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from scripts.ghdisco.errors import MalformedResponseError

E = TypeVar("E")

_MISSING = object()


def _require(obj: dict, key: str, kind: type, raw: str, path: str) -> Any:
    value = obj.get(key, _MISSING)
    where = f"{path}.{key}" if path else key
    if value is _MISSING or value is None:
        raise MalformedResponseError(f"{where} doesn't exist in response", raw, where)
    if not isinstance(value, kind):
        raise MalformedResponseError(
            f"{where} has type {type(value).__name__}, expected {kind.__name__}",
            raw,
            where,
        )
    return value


def _decode(body: str) -> dict:
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise MalformedResponseError(f"response is not valid JSON ({exc})", body) from exc
    if not isinstance(payload, dict):
        raise MalformedResponseError("response is not a JSON object", body)

    # GraphQL reports query errors (unknown org, missing scope) with HTTP 200.
    if payload.get("data") is None and payload.get("errors"):
        messages = "; ".join(
            str(e.get("message", e)) if isinstance(e, dict) else str(e)
            for e in payload["errors"]
        )
        raise MalformedResponseError(f"GraphQL errors: {messages}", body, "errors")
    return _require(payload, "data", dict, body, "")


@dataclass(frozen=True)
class PageInfo:
    has_next_page: bool
    end_cursor: Optional[str] = None

    @classmethod
    def from_dict(cls, obj: Optional[dict], raw: str, path: str) -> "PageInfo":
        # An absent flag means "no further pages".
        if obj is None:
            return cls(has_next_page=False)
        if not isinstance(obj, dict):
            raise MalformedResponseError(f"{path} is not an object", raw, path)
        has_next = obj.get("hasNextPage", False)
        if has_next is None:
            has_next = False
        if not isinstance(has_next, bool):
            raise MalformedResponseError(
                f"{path}.hasNextPage is not a boolean", raw, f"{path}.hasNextPage"
            )
        cursor = obj.get("endCursor")
        if cursor is not None and not isinstance(cursor, str):
            raise MalformedResponseError(
                f"{path}.endCursor is not a string", raw, f"{path}.endCursor"
            )
        return cls(has_next_page=has_next, end_cursor=cursor)


@dataclass(frozen=True)
class SAMLIdentityEdge:
    """One external identity. ``login`` is None when no account is linked."""

    login: Optional[str]
    name_id: str

    @classmethod
    def from_dict(cls, edge: Any, raw: str, path: str) -> "SAMLIdentityEdge":
        if not isinstance(edge, dict):
            raise MalformedResponseError(f"error edge type at {path}", raw, path)
        node = _require(edge, "node", dict, raw, path)
        node_path = f"{path}.node"
        saml = _require(node, "samlIdentity", dict, raw, node_path)
        name_id = _require(saml, "nameId", str, raw, f"{node_path}.samlIdentity")

        if "user" not in node:
            raise MalformedResponseError(
                f"{node_path}.user doesn't exist in response", raw, f"{node_path}.user"
            )
        user = node["user"]
        if user is None:
            return cls(login=None, name_id=name_id)
        if not isinstance(user, dict):
            raise MalformedResponseError(
                f"{node_path}.user is not an object", raw, f"{node_path}.user"
            )
        login = _require(user, "login", str, raw, f"{node_path}.user")
        return cls(login=login, name_id=name_id)


@dataclass(frozen=True)
class MemberRoleEdge:
    login: str
    role: str

    @classmethod
    def from_dict(cls, edge: Any, raw: str, path: str) -> "MemberRoleEdge":
        if not isinstance(edge, dict):
            raise MalformedResponseError(f"error edge type at {path}", raw, path)
        node = _require(edge, "node", dict, raw, path)
        login = _require(node, "login", str, raw, f"{path}.node")
        role = _require(edge, "role", str, raw, path)
        return cls(login=login, role=role)


@dataclass(frozen=True)
class Page(Generic[E]):
    edges: tuple[E, ...]
    page_info: PageInfo


def _edges(connection: dict, edge_cls, raw: str, path: str) -> tuple:
    items = _require(connection, "edges", list, raw, path)
    return tuple(
        edge_cls.from_dict(item, raw, f"{path}.edges[{i}]")
        for i, item in enumerate(items)
    )


def parse_saml_identities_page(body: str) -> Page[SAMLIdentityEdge]:
    """Decode one page of organization.samlIdentityProvider.externalIdentities."""
    data = _decode(body)
    org = _require(data, "organization", dict, body, "data")
    idp = _require(org, "samlIdentityProvider", dict, body, "data.organization")
    idp_path = "data.organization.samlIdentityProvider"
    path = f"{idp_path}.externalIdentities"
    conn = _require(idp, "externalIdentities", dict, body, idp_path)
    return Page(
        edges=_edges(conn, SAMLIdentityEdge, body, path),
        page_info=PageInfo.from_dict(conn.get("pageInfo"), body, f"{path}.pageInfo"),
    )


def parse_members_with_role_page(body: str) -> Page[MemberRoleEdge]:
    """Decode one page of organization.membersWithRole."""
    data = _decode(body)
    org = _require(data, "organization", dict, body, "data")
    path = "data.organization.membersWithRole"
    conn = _require(org, "membersWithRole", dict, body, "data.organization")
    return Page(
        edges=_edges(conn, MemberRoleEdge, body, path),
        page_info=PageInfo.from_dict(conn.get("pageInfo"), body, f"{path}.pageInfo"),
    )
