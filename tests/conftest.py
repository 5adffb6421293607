import pytest
from unittest.mock import patch

from tests.utils.http_responses import make_response


@pytest.fixture
def mock_post():
    """Patches requests.post as seen by the HTTP client; no network traffic leaves the test."""
    with patch("webhook_invoker.clients.http_client.requests.post") as post:
        post.return_value = make_response(200, "{}")
        yield post


@pytest.fixture
def no_proxy(monkeypatch):
    """Makes requests ignore any proxy configured in the environment."""
    monkeypatch.setenv("NO_PROXY", "*")
    monkeypatch.setenv("no_proxy", "*")
