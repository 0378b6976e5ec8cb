"""gh-disco: GitHub organization discovery tools.

The ``sso`` command compares the members who hold an organization role with
the members linked to the organization's SAML identity provider, and reports
either the full mapping or only the members without an SSO identity.
"""

__version__ = "0.1.0"
