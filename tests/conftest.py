# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""Shared fixtures for slackauth tests."""

import logging

import pytest

from slackauth.config import SlackAuthConfig
from slackauth.exceptions import OAuthExchangeError
from slackauth.models import OAuthResult


TPL_SUCCESS = """<h1>Hello</h1>
\t<p>All went ok!</p>"""

TPL_ERROR = """<h1>:(</h1>
\t<p>Something went wrong!</p>"""

TPL_SLACK_BUTTON = """ADD ME:
\t\t<a href="https://slack.com/oauth/authorize?scope={{ Scopes|urlencode }}&client_id={{ ClientId }}">
\t\t\tSLACK BUTTON
\t\t</a>"""


class FakeExchanger:
    """Exchanger accepting every code except 'invalid'."""

    def __init__(self):
        self.calls = []

    async def exchange(self, client_id, client_secret, code, debug=False):
        self.calls.append(code)
        if code == "invalid":
            raise OAuthExchangeError(
                message="The authorization code is invalid or has expired. Please try installing the app again.",
                error_code="invalid_code",
            )

        return OAuthResult(
            access_token=f"xoxp-{code}",
            scope="bot,commands",
            team_name="Test Workspace",
            team_id="T12345ABCDE",
        )


@pytest.fixture
def fake_exchanger():
    return FakeExchanger()


@pytest.fixture
def template_files(tmp_path):
    """Write the success, error and button templates to disk."""
    paths = {
        "success": tmp_path / "success.html",
        "error": tmp_path / "error.html",
        "button": tmp_path / "button.html",
    }
    paths["success"].write_text(TPL_SUCCESS)
    paths["error"].write_text(TPL_ERROR)
    paths["button"].write_text(TPL_SLACK_BUTTON)
    return {name: str(path) for name, path in paths.items()}


@pytest.fixture
def service_config(template_files):
    return SlackAuthConfig(
        addr="127.0.0.1:8989",
        client_id="aaaa",
        client_secret="bbbb",
        success_tpl=template_files["success"],
        error_tpl=template_files["error"],
        button_tpl=template_files["button"],
        scopes=["bot", "commands"],
        debug=True,
    )


@pytest.fixture
def restore_root_logger():
    """Put back the root logger configuration changed by setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
