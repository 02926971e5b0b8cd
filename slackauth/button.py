# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
"Add to Slack" button page.

The button template receives the requested scopes and the app's client ID,
and is expected to link to Slack's authorize URL with them.
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional
from urllib.parse import urlencode

import jinja2
from aiohttp import web

from slackauth.exceptions import TemplateRenderError
from slackauth.logging_config import get_logger
from slackauth.templates import TemplateLoader, render_template


logger = get_logger(__name__)

# BOT scope grants permission to add the bot bundled by the app
BOT = "bot"
# WEBHOOK scope allows requesting permission to post content to the user's Slack team
WEBHOOK = "incoming-webhook"
# COMMANDS scope allows installing slash commands bundled in the Slack app
COMMANDS = "commands"

OAUTH_AUTHORIZE_URL = "https://slack.com/oauth/authorize"

RequestHandler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@dataclass
class SlackButtonOptions:
    """Configurable parameters for a standalone Slack button page."""

    client_id: str
    button_tpl: str
    scopes: List[str] = field(default_factory=list)


def authorize_url(client_id: str, scopes: List[str]) -> str:
    """Build the Slack authorize URL the button should point to."""
    params = {"scope": ",".join(scopes), "client_id": client_id}
    return f"{OAUTH_AUTHORIZE_URL}?{urlencode(params)}"


class ButtonPage:
    """Renders the button template for GET requests."""

    def __init__(self, template: jinja2.Template, client_id: str, scopes: List[str]):
        self.template = template
        self.client_id = client_id
        self.scopes = list(scopes)

    def context(self) -> Dict[str, str]:
        return {
            "Scopes": ",".join(self.scopes),
            "ClientId": self.client_id,
            "AuthorizeUrl": authorize_url(self.client_id, self.scopes),
        }

    async def handle(self, request: web.Request) -> web.Response:
        """
        Serve the button page.

        Args:
            request: aiohttp Request object (query and body are ignored)

        Returns:
            HTML response, or a 500 response when the template fails
        """
        try:
            body = render_template(self.template, self.context())
        except TemplateRenderError as e:
            logger.error("error displaying button tpl", extra={"error": str(e)})
            return web.Response(status=500, text="Internal Server Error")

        return web.Response(text=body, content_type="text/html")


def get_button_handler(options: SlackButtonOptions, loader: Optional[TemplateLoader] = None) -> RequestHandler:
    """
    Build a request handler serving only the button page.

    Useful to mount the button in an existing aiohttp application.

    Args:
        options: Button options
        loader: Template loader to compile the template with

    Returns:
        aiohttp request handler

    Raises:
        TemplateLoadError: If the template cannot be read
        TemplateParseError: If the template is invalid
    """
    loader = loader or TemplateLoader(namespace="button")
    page = ButtonPage(loader.load(options.button_tpl), options.client_id, options.scopes)
    return page.handle
