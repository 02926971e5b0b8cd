# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
Property-based tests for credential redaction in logs.

For any Slack token or client secret handled by the service, it should
never appear in formatted log output.
"""

import json
import logging

from hypothesis import given, settings
from hypothesis import strategies as st

from slackauth.logging_config import JSONFormatter, SensitiveDataFilter

TOKEN_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


@st.composite
def slack_token(draw):
    """Generate realistic Slack token with ASCII characters only."""
    prefix = draw(st.sampled_from(["xoxb", "xoxp", "xoxa", "xoxr"]))
    token_part = draw(st.text(alphabet=TOKEN_ALPHABET, min_size=20, max_size=50))
    return f"{prefix}-{token_part}"


def format_filtered(record: logging.LogRecord) -> str:
    SensitiveDataFilter().filter(record)
    return JSONFormatter().format(record)


class TestCredentialRedaction:
    @given(token=slack_token(), prefix=st.text(alphabet=TOKEN_ALPHABET + " :", max_size=30))
    @settings(max_examples=100)
    def test_tokens_in_messages_are_redacted(self, token, prefix):
        record = logging.LogRecord("slackauth", logging.INFO, __file__, 1, f"{prefix} {token}", None, None)

        output = format_filtered(record)

        assert token not in output
        json.loads(output)

    @given(token=slack_token())
    @settings(max_examples=100)
    def test_tokens_in_args_are_redacted(self, token):
        record = logging.LogRecord("slackauth", logging.INFO, __file__, 1, "token: %s", (token,), None)

        output = format_filtered(record)

        assert token not in output

    @given(secret=st.text(alphabet=TOKEN_ALPHABET, min_size=12, max_size=40))
    @settings(max_examples=100)
    def test_client_secret_extras_are_redacted(self, secret):
        record = logging.LogRecord("slackauth", logging.INFO, __file__, 1, "exchange", None, None)
        record.client_secret = secret
        record.access_token = secret

        output = format_filtered(record)

        assert secret not in output
        data = json.loads(output)
        assert data["client_secret"] == "REDACTED"
        assert data["access_token"] == "REDACTED"

    @given(secret=st.text(alphabet=TOKEN_ALPHABET, min_size=12, max_size=40))
    @settings(max_examples=100)
    def test_form_encoded_secrets_are_redacted(self, secret):
        message = f"POST oauth.access client_id=123.456&client_secret={secret}&code=abc"
        record = logging.LogRecord("slackauth", logging.INFO, __file__, 1, message, None, None)

        output = format_filtered(record)

        assert f"client_secret={secret}" not in output
