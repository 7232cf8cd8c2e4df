"""Shared pytest fixtures and configuration."""

import os
import pytest

# Set test environment variables before the connector reads them
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("SLACK_CLIENT_ID", "test-client-id")
os.environ.setdefault("SLACK_CLIENT_SECRET", "test-client-secret")

from slack_connector.config import SlackSettings  # noqa: E402
from slack_connector.models.slack_api import Conversation, OAuthAccess, SlackUser  # noqa: E402
from slack_connector.services.slack_platform import SlackPlatform, reset_slack_platform  # noqa: E402
from tests.utils.fakes import FakeSlackProvider  # noqa: E402


TEAM_ID = "T1"
TOKEN = "tok-A"


@pytest.fixture
def bob():
    """Counterpart of the direct conversation in the reference workspace."""
    return SlackUser(id="U1", name="bob", real_name="Bob Smith", display_name="bsmith")


@pytest.fixture
def fake_provider(bob):
    """Provider serving workspace T1: #general (C1) and a DM with bob (D1)."""
    provider = FakeSlackProvider()
    provider.add_workspace(
        TEAM_ID,
        TOKEN,
        conversations=[
            Conversation(id="C1", name="general"),
            Conversation(id="D1", user="U1"),
        ],
        users=[bob],
    )
    provider.oauth_codes["good-code"] = OAuthAccess(team_id=TEAM_ID, bot_token=TOKEN)
    return provider


@pytest.fixture
def oauth_settings():
    return SlackSettings(client_id="client-id", client_secret="client-secret")


@pytest.fixture
def static_settings():
    return SlackSettings(bot_token=TOKEN)


@pytest.fixture
def platform(fake_provider, oauth_settings):
    """Platform in OAuth mode, started, with no workspace installed yet."""
    platform = SlackPlatform(oauth_settings, provider=fake_provider)
    platform.start()
    return platform


@pytest.fixture
def installed_platform(platform, fake_provider):
    """Platform with T1 installed; provider call counters reset afterwards."""
    assert platform.handle_oauth_redirect("good-code") == {"Message": "Installed!"}
    fake_provider.calls.clear()
    return platform


@pytest.fixture(autouse=True)
def reset_platform_singleton():
    reset_slack_platform()
    yield
    reset_slack_platform()

