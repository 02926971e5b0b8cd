# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
Slack OAuth token exchange.

Exchanges the authorization code received on the redirect callback for an
access token. Codes are single-use, so a failed exchange is never retried.
"""

from typing import Dict, Protocol, runtime_checkable

import httpx
from pydantic import ValidationError

from slackauth.exceptions import OAuthExchangeError
from slackauth.logging_config import get_logger
from slackauth.models import OAuthResult


logger = get_logger(__name__)


@runtime_checkable
class OAuthExchanger(Protocol):
    """Anything able to turn an authorization code into an OAuthResult."""

    async def exchange(self, client_id: str, client_secret: str, code: str, debug: bool = False) -> OAuthResult:
        """
        Exchange an authorization code for an access token.

        Raises:
            OAuthExchangeError: If the exchange fails for any reason
        """
        ...


class SlackOAuthClient:
    """
    Calls Slack's oauth.access method.

    A single attempt is made per code. Every failure, including an invalid
    or expired code, surfaces as OAuthExchangeError.
    """

    OAUTH_TOKEN_URL = "https://slack.com/api/oauth.access"

    ERROR_MESSAGES: Dict[str, str] = {
        "invalid_code": "The authorization code is invalid or has expired. Please try installing the app again.",
        "code_already_used": (
            "This authorization code has already been used. Please start the installation process again."
        ),
        "bad_redirect_uri": "App configuration error. Please contact support.",
        "invalid_client_id": "App configuration error. Please contact support.",
        "bad_client_secret": "App configuration error. Please contact support.",
        "invalid_client_secret": "App configuration error. Please contact support.",
        "access_denied": "The installation was cancelled. You can try installing the app again.",
        "timeout": "Slack took too long to respond. Please try again.",
    }

    DEFAULT_ERROR_MESSAGE = "Slack could not complete the authorization. Please try again."

    def __init__(self, timeout: float = 3.0, token_url: str = OAUTH_TOKEN_URL):
        """
        Initialize Slack OAuth client.

        Args:
            timeout: Timeout in seconds for the exchange request
            token_url: Token endpoint, overridable for tests
        """
        self.timeout = timeout
        self.token_url = token_url

    async def exchange(self, client_id: str, client_secret: str, code: str, debug: bool = False) -> OAuthResult:
        """
        Exchange an authorization code for an access token.

        Args:
            client_id: Slack app client ID
            client_secret: Slack app client secret
            code: Authorization code from the OAuth callback
            debug: Log exchange activity

        Returns:
            OAuthResult with the access token and team information

        Raises:
            OAuthExchangeError: If the request fails or Slack rejects the code
        """
        if debug:
            logger.debug("Exchanging authorization code", extra={"token_url": self.token_url})

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.token_url,
                    data={
                        "client_id": client_id,
                        "client_secret": client_secret,
                        "code": code,
                    },
                )

                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise OAuthExchangeError(
                message="Failed to connect to Slack. Please try again later.",
                details=str(e),
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise OAuthExchangeError(
                message="Failed to connect to Slack. Please try again later.", details=str(e)
            ) from e
        except ValueError as e:
            raise OAuthExchangeError(
                message="Received unexpected response from Slack. Please contact support.",
                details=f"Invalid JSON: {e}",
            ) from e

        if not isinstance(data, dict):
            raise OAuthExchangeError(
                message="Received unexpected response from Slack. Please contact support.",
                details=f"Unexpected body type: {type(data).__name__}",
            )

        if debug:
            logger.debug("Slack token endpoint answered", extra={"ok": data.get("ok"), "slack_error": data.get("error")})

        if not data.get("ok"):
            error_code = data.get("error", "unknown_error")
            raise OAuthExchangeError(
                message=self.get_user_friendly_error_message(error_code),
                error_code=error_code,
                details=data.get("error_description"),
            )

        try:
            result = OAuthResult.from_slack_response(data)
        except (KeyError, ValidationError) as e:
            raise OAuthExchangeError(
                message="Received unexpected response from Slack. Please contact support.",
                details=f"Missing or invalid field: {e}",
            ) from e

        if debug:
            logger.debug(
                "Authorization code exchanged",
                extra={"team_id": result.team_id, "team_name": result.team_name, "scope": result.scope},
            )

        return result

    def get_user_friendly_error_message(self, error_code: str) -> str:
        return user_friendly_error_message(error_code)


def user_friendly_error_message(error_code: str) -> str:
    """
    Convert a Slack error code to a message safe to show to the installer.

    Args:
        error_code: Slack API error code

    Returns:
        User-friendly error message
    """
    return SlackOAuthClient.ERROR_MESSAGES.get(error_code, SlackOAuthClient.DEFAULT_ERROR_MESSAGE)
