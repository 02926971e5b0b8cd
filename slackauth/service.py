# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
HTTP service for the "Add to Slack" OAuth flow.

Serves the button page and the OAuth redirect callback using aiohttp:
- GET /      - "Add to Slack" button page (only when a button template is set)
- GET /auth  - OAuth callback, exchanges the code and renders the result
"""

import asyncio
import ssl
from enum import Enum
from typing import Any, Dict, List, Optional, TextIO

import jinja2
from aiohttp import web

from slackauth.button import ButtonPage
from slackauth.config import SlackAuthConfig
from slackauth.exceptions import OAuthExchangeError, ServerError, ServiceStateError, TemplateRenderError
from slackauth.logging_config import get_logger, log_error_with_context, setup_logging
from slackauth.models import OAuthResult
from slackauth.notifier import AuthCallback, AuthNotifier
from slackauth.oauth_client import OAuthExchanger, SlackOAuthClient, user_friendly_error_message
from slackauth.templates import TemplateLoader, render_template


logger = get_logger(__name__)


class ServiceState(str, Enum):
    """Lifecycle of a service. A terminated service cannot be run again."""

    CONSTRUCTED = "constructed"
    RUNNING = "running"
    TERMINATED = "terminated"


class SlackAuthService:
    """
    Service to authenticate on Slack using the "Add to Slack" button.

    Usage:
        service = SlackAuthService(config)
        service.on_auth(lambda auth: print(auth.team_name))
        service.run()
    """

    BUTTON_PATH = "/"
    CALLBACK_PATH = "/auth"

    def __init__(self, config: SlackAuthConfig, exchanger: Optional[OAuthExchanger] = None):
        """
        Initialize the service.

        Validates the configuration and loads every template up front, so a
        broken setup fails here rather than on the first request.

        Args:
            config: Service configuration
            exchanger: Token exchanger (defaults to SlackOAuthClient)

        Raises:
            InvalidConfig: If a required field is missing or addr is malformed
            MissingScopes: If a button template is set without scopes
            TemplateLoadError: If a template cannot be read
            TemplateParseError: If a template is invalid
        """
        config.validate()
        self.config = config
        self.host, self.port = config.bind_address()

        loader = TemplateLoader(namespace="slackauth")
        self.success_tpl = loader.load(config.success_tpl)
        self.error_tpl = loader.load(config.error_tpl)

        self.button_page: Optional[ButtonPage] = None
        button_tpl = loader.load_optional(config.button_tpl)
        if button_tpl is not None:
            self.button_page = ButtonPage(button_tpl, config.client_id, config.scopes)

        self.api: OAuthExchanger = exchanger or SlackOAuthClient(timeout=config.request_timeout_seconds)
        self.notifier = AuthNotifier()
        self.state = ServiceState.CONSTRUCTED

        self._runner: Optional[web.AppRunner] = None
        self._stopped: Optional[asyncio.Event] = None

        self.app = web.Application()
        self._setup_routes()
        self.app.on_startup.append(self._start_notifier)
        self.app.on_cleanup.append(self._stop_notifier)

    def _setup_routes(self) -> None:
        """Configure HTTP routes."""
        if self.button_page is not None:
            self.app.router.add_get(self.BUTTON_PATH, self.button_page.handle)
        self.app.router.add_get(self.CALLBACK_PATH, self.handle_authorization)

    async def _start_notifier(self, app: web.Application) -> None:
        self.notifier.start()

    async def _stop_notifier(self, app: web.Application) -> None:
        await self.notifier.stop()

    def on_auth(self, callback: AuthCallback) -> None:
        """
        Set the handler triggered every time someone authorizes the app.

        Only authorizations completed after registration reach the handler.
        Registering again replaces the previous handler.
        """
        self.notifier.on_auth(callback)

    def set_log_output(self, stream: Optional[TextIO] = None) -> None:
        """
        Set the place where logs will be written.

        Without a stream, logs go to stdout in the configured log_format
        (text unless LOG_FORMAT says otherwise). With a stream, JSON lines
        are written to it.
        """
        log_level = "DEBUG" if self.config.debug else self.config.log_level
        if stream is None:
            setup_logging(log_level=log_level, log_format=self.config.log_format)
        else:
            setup_logging(log_level=log_level, log_format="json", stream=stream)

    async def handle_authorization(self, request: web.Request) -> web.Response:
        """
        Handle the OAuth redirect callback.

        Args:
            request: aiohttp Request object with the 'code' query parameter

        Returns:
            Success page (200), error page (401) or 500 on a render failure
        """
        code = request.query.get("code", "")
        denied = request.query.get("error")

        try:
            if denied and not code:
                raise OAuthExchangeError(message=user_friendly_error_message(denied), error_code=denied)

            result = await self._exchange(code)
        except OAuthExchangeError as e:
            log_error_with_context(logger, "error getting oauth response", e)
            return self._render_page(self.error_tpl, {"auth": None, "error": e.message}, status=401, name="error")

        response = self._render_page(self.success_tpl, result.template_context(), status=200, name="success")

        logger.debug("successful authorization", extra={"team": result.team_name, "team_id": result.team_id})
        await self.notifier.push(result)

        return response

    async def _exchange(self, code: str) -> OAuthResult:
        timeout = self.config.handler_timeout_seconds
        try:
            return await asyncio.wait_for(
                self.api.exchange(self.config.client_id, self.config.client_secret, code, self.config.debug),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise OAuthExchangeError(
                message=user_friendly_error_message("timeout"),
                error_code="timeout",
                details=f"exchange did not finish within {timeout}s",
            ) from e

    def _render_page(self, template: jinja2.Template, context: Dict[str, Any], status: int, name: str) -> web.Response:
        try:
            body = render_template(template, context)
        except TemplateRenderError as e:
            logger.error(f"error displaying {name} tpl", extra={"error": str(e)})
            return web.Response(status=500, text="Internal Server Error")

        return web.Response(text=body, status=status, content_type="text/html")

    def _ssl_context(self) -> Optional[ssl.SSLContext]:
        if not self.config.tls_enabled:
            return None

        context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
        context.load_cert_chain(self.config.cert_file, self.config.key_file)
        return context

    @property
    def addresses(self) -> List[Any]:
        """Socket addresses the server listens on, once running."""
        if self._runner is None:
            return []
        return self._runner.addresses

    async def serve(self) -> None:
        """
        Run the service until shutdown() is called.

        Raises:
            ServiceStateError: If the service already ran
            ServerError: If the server cannot bind or listen
        """
        if self.state is not ServiceState.CONSTRUCTED:
            raise ServiceStateError(f"service can not be started from state {self.state.value!r}")

        self.state = ServiceState.RUNNING
        self._stopped = asyncio.Event()

        try:
            ssl_context = self._ssl_context()
        except (OSError, ssl.SSLError) as e:
            self.state = ServiceState.TERMINATED
            raise ServerError(f"unable to load TLS certificate: {e}") from e

        runner = web.AppRunner(self.app, keepalive_timeout=self.config.keepalive_timeout_seconds)
        await runner.setup()
        site = web.TCPSite(runner, self.host, self.port, ssl_context=ssl_context)

        logger.info("Starting server", extra={"addr": self.config.addr, "tls": ssl_context is not None})
        try:
            await site.start()
        except OSError as e:
            await runner.cleanup()
            self.state = ServiceState.TERMINATED
            raise ServerError(f"unable to listen on {self.config.addr}: {e}") from e

        self._runner = runner
        try:
            await self._stopped.wait()
        finally:
            await runner.cleanup()
            self._runner = None
            self.state = ServiceState.TERMINATED
            logger.info("Server stopped", extra={"addr": self.config.addr})

    async def shutdown(self) -> None:
        """Stop a running service."""
        if self._stopped is not None:
            self._stopped.set()

    def run(self) -> None:
        """Run the service. Blocks until the service crashes or stops."""
        asyncio.run(self.serve())
