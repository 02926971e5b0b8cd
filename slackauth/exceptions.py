# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
Error types raised by the slackauth service.

Construction-time errors (configuration and templates) are fatal. Exchange
and render errors are per-request and are turned into HTTP responses by the
service handlers.
"""

from typing import Optional


class SlackAuthError(Exception):
    """Base exception for all slackauth errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidConfig(SlackAuthError):
    """Raised when a required configuration field is missing or malformed."""


class MissingScopes(SlackAuthError):
    """Raised when a button template is configured without any scope."""


class TemplateLoadError(SlackAuthError):
    """Raised when a template file cannot be read."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class TemplateParseError(SlackAuthError):
    """Raised when a template file is not a valid template."""

    def __init__(self, message: str, path: str, lineno: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.lineno = lineno


class TemplateRenderError(SlackAuthError):
    """Raised when rendering a loaded template fails."""


class OAuthExchangeError(SlackAuthError):
    """
    Raised when an authorization code cannot be exchanged for a token.

    Attributes:
        message: User-friendly error message, safe to render in a page
        error_code: Slack error code (e.g., 'invalid_code'), if Slack sent one
        details: Technical details for logs only
        status_code: HTTP status returned by Slack, if any
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.details = details
        self.status_code = status_code


class ServerError(SlackAuthError):
    """Raised when the HTTP server cannot bind or listen."""


class ServiceStateError(SlackAuthError):
    """Raised when the service is run in a state that does not allow it."""
