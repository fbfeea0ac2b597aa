"""
Shared pytest fixtures for artifactbot tests.
"""

import os

# Settings are validated on import, so these must exist before any
# artifactbot module is loaded. Test-only values.
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456:test-token")
os.environ.setdefault("JENKINS_URL", "http://jenkins.local")
os.environ.setdefault("JENKINS_USER_NAME", "bot")
os.environ.setdefault("JENKINS_USER_TOKEN", "secret")
os.environ.setdefault("ALLOWED_CHATS", "[100]")

import httpx
import pytest

from artifactbot import schemas
from artifactbot.jenkins import JenkinsClient


@pytest.fixture
def connection():
    return schemas.ConnectionInfo(
        server_url="http://jenkins.local", user_name="bot", token="secret", timeout=5
    )


@pytest.fixture
def requests_seen():
    """Requests received by the fake Jenkins server, in order."""
    return []


@pytest.fixture
def make_client(connection, requests_seen):
    """Build a JenkinsClient whose requests are answered by ``handler``."""

    def factory(handler):
        def record(request):
            requests_seen.append(request)
            return handler(request)

        return JenkinsClient(connection, transport=httpx.MockTransport(record))

    return factory
