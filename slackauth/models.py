# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
Data models for the Slack OAuth exchange.

All models use Pydantic v2. An OAuthResult is frozen once it is built from
the provider response, since it is handed from the request handler to the
notifier and then to user code.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class IncomingWebhook(BaseModel):
    """Webhook details returned when the 'incoming-webhook' scope is granted."""

    model_config = ConfigDict(frozen=True, extra="allow")

    url: str = Field(default="", description="Webhook URL to post messages to")
    channel: str = Field(default="", description="Channel name the webhook posts to")
    channel_id: str = Field(default="", description="Channel ID the webhook posts to")
    configuration_url: str = Field(default="", description="URL to manage the webhook")


class BotCredentials(BaseModel):
    """Bot user credentials returned when the 'bot' scope is granted."""

    model_config = ConfigDict(frozen=True, extra="allow")

    bot_user_id: str = Field(default="", description="Bot user ID (e.g., 'U12345')")
    bot_access_token: str = Field(default="", description="Bot access token (xoxb-...)")


class OAuthResult(BaseModel):
    """
    Parsed response of a successful token exchange.

    Fields Slack returns that are not modelled here are kept as extras, so
    callbacks get everything the provider sent.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    access_token: str = Field(..., description="Access token for the installing workspace")
    scope: str = Field(default="", description="Comma separated list of granted scopes")
    team_name: str = Field(default="", description="Name of the workspace")
    team_id: str = Field(default="", description="ID of the workspace (e.g., 'T12345')")
    user_id: Optional[str] = Field(default=None, description="Slack user who installed the app")
    incoming_webhook: Optional[IncomingWebhook] = None
    bot: Optional[BotCredentials] = None

    @classmethod
    def from_slack_response(cls, data: Dict[str, Any]) -> "OAuthResult":
        """
        Build a result from an oauth.access response body.

        Args:
            data: Decoded JSON body, already checked for 'ok'

        Returns:
            OAuthResult

        Raises:
            KeyError: If 'access_token' is missing
        """
        payload = {key: value for key, value in data.items() if key not in ("ok", "warning", "response_metadata")}
        payload["access_token"] = data["access_token"]
        return cls.model_validate(payload)

    def template_context(self) -> Dict[str, Any]:
        """Context used to render the success template."""
        context = self.model_dump()
        context["auth"] = self
        return context
