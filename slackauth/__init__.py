# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
slackauth - "Add to Slack" button OAuth service.

Serves the button page, handles the OAuth redirect callback, exchanges the
authorization code for an access token and notifies a registered callback
of every successful installation.
"""

from slackauth.button import BOT, COMMANDS, WEBHOOK, SlackButtonOptions, get_button_handler
from slackauth.config import SlackAuthConfig
from slackauth.exceptions import (
    InvalidConfig,
    MissingScopes,
    OAuthExchangeError,
    ServerError,
    ServiceStateError,
    SlackAuthError,
    TemplateLoadError,
    TemplateParseError,
    TemplateRenderError,
)
from slackauth.models import OAuthResult
from slackauth.oauth_client import OAuthExchanger, SlackOAuthClient
from slackauth.service import ServiceState, SlackAuthService

__version__ = "0.1.0"

__all__ = [
    "BOT",
    "COMMANDS",
    "WEBHOOK",
    "InvalidConfig",
    "MissingScopes",
    "OAuthExchangeError",
    "OAuthExchanger",
    "OAuthResult",
    "ServerError",
    "ServiceState",
    "ServiceStateError",
    "SlackAuthConfig",
    "SlackAuthError",
    "SlackAuthService",
    "SlackButtonOptions",
    "SlackOAuthClient",
    "TemplateLoadError",
    "TemplateParseError",
    "TemplateRenderError",
    "get_button_handler",
]
