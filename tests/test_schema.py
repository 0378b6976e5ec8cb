import json

import pytest

from scripts.ghdisco.errors import MalformedResponseError
from scripts.ghdisco.schema import (
    MemberRoleEdge,
    PageInfo,
    SAMLIdentityEdge,
    parse_members_with_role_page,
    parse_saml_identities_page,
)

SAML_USERS = """{
  "data": {
    "organization": {
      "samlIdentityProvider": {
        "ssoUrl": "https://accounts.google.com/o/saml2/idp?idpid=example",
        "externalIdentities": {
          "pageInfo": {"hasNextPage": true, "endCursor": "Y3Vyc29yOjI="},
          "edges": [
            {"node": {"samlIdentity": {"nameId": "user1@example.com"}, "user": {"login": "user1"}}},
            {"node": {"samlIdentity": {"nameId": "user2@example.com"}, "user": {"login": "user2"}}}
          ]
        }
      }
    }
  }
}"""

USER_ROLES = """{
  "data": {
    "organization": {
      "membersWithRole": {
        "edges": [
          {"node": {"login": "user1"}, "role": "MEMBER"},
          {"node": {"login": "user2"}, "role": "ADMIN"}
        ]
      }
    }
  }
}"""


def test_parse_saml_identities_page():
    page = parse_saml_identities_page(SAML_USERS)
    assert page.edges == (
        SAMLIdentityEdge(login="user1", name_id="user1@example.com"),
        SAMLIdentityEdge(login="user2", name_id="user2@example.com"),
    )
    assert page.page_info == PageInfo(has_next_page=True, end_cursor="Y3Vyc29yOjI=")


def test_parse_members_with_role_page():
    page = parse_members_with_role_page(USER_ROLES)
    assert page.edges == (
        MemberRoleEdge(login="user1", role="MEMBER"),
        MemberRoleEdge(login="user2", role="ADMIN"),
    )
    # No pageInfo in the payload means no further pages.
    assert page.page_info == PageInfo(has_next_page=False)


def test_unlinked_identity_has_no_login():
    body = json.dumps({"data": {"organization": {"samlIdentityProvider": {
        "externalIdentities": {"edges": [
            {"node": {"samlIdentity": {"nameId": "ghost@example.com"}, "user": None}},
        ]},
    }}}})
    page = parse_saml_identities_page(body)
    assert page.edges == (SAMLIdentityEdge(login=None, name_id="ghost@example.com"),)


@pytest.mark.parametrize("node, path", [
    ({"user": {"login": "user1"}}, "samlIdentity"),
    ({"samlIdentity": {}, "user": {"login": "user1"}}, "samlIdentity.nameId"),
    ({"samlIdentity": {"nameId": "u@ex.com"}}, "node.user"),
    ({"samlIdentity": {"nameId": "u@ex.com"}, "user": {}}, "user.login"),
    ({"samlIdentity": {"nameId": 7}, "user": {"login": "user1"}}, "samlIdentity.nameId"),
])
def test_malformed_saml_edge(node, path):
    body = json.dumps({"data": {"organization": {"samlIdentityProvider": {
        "externalIdentities": {"edges": [{"node": node}]},
    }}}})
    with pytest.raises(MalformedResponseError) as exc_info:
        parse_saml_identities_page(body)
    assert exc_info.value.path.endswith(path)
    assert exc_info.value.raw == body


@pytest.mark.parametrize("edge, path", [
    ({"role": "MEMBER"}, "edges[0].node"),
    ({"node": {}, "role": "MEMBER"}, "node.login"),
    ({"node": {"login": "user1"}}, "edges[0].role"),
    ("not-an-edge", "edges[0]"),
])
def test_malformed_role_edge(edge, path):
    body = json.dumps({"data": {"organization": {"membersWithRole": {"edges": [edge]}}}})
    with pytest.raises(MalformedResponseError) as exc_info:
        parse_members_with_role_page(body)
    assert exc_info.value.path.endswith(path)


@pytest.mark.parametrize("body", [
    "not json",
    "[]",
    "{}",
    '{"data": {}}',
    '{"data": {"organization": {}}}',
    '{"data": {"organization": {"membersWithRole": {}}}}',
    '{"data": {"organization": {"membersWithRole": {"edges": {}}}}}',
])
def test_malformed_envelope(body):
    with pytest.raises(MalformedResponseError):
        parse_members_with_role_page(body)


def test_graphql_errors_are_reported():
    body = json.dumps({
        "data": None,
        "errors": [{"message": "Could not resolve to an Organization with the login of 'nope'."}],
    })
    with pytest.raises(MalformedResponseError, match="Could not resolve"):
        parse_members_with_role_page(body)


def test_page_info_rejects_non_boolean_flag():
    body = json.dumps({"data": {"organization": {"membersWithRole": {
        "pageInfo": {"hasNextPage": "yes", "endCursor": "abc"},
        "edges": [],
    }}}})
    with pytest.raises(MalformedResponseError, match="hasNextPage"):
        parse_members_with_role_page(body)
