import pytest

from scripts.ghdisco.config import GitHubConfig

_ENV_VARS = (
    "GHDISCO_AUTH_TOKEN",
    "GHDISCO_ORG",
    "GHDISCO_SAML_PROVIDER",
    "GHDISCO_API_URL",
    "GHDISCO_LOG_LEVEL",
    "GCP_PROJECT_ID",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so monkeypatch also removes values a .env file adds later.
    for name in _ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def github_config():
    return GitHubConfig(token="ghp_test", timeout_s=5.0)
