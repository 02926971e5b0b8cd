# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
Configuration management for the slackauth service.

Handles environment variables and construction-time validation.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from slackauth.exceptions import InvalidConfig, MissingScopes


def _split_scopes(value: str) -> List[str]:
    return [scope.strip() for scope in value.split(",") if scope.strip()]


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_seconds(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default

    try:
        return float(value)
    except ValueError:
        raise InvalidConfig(f"slackauth: {name} must be a number of seconds, got {value!r}")


@dataclass
class SlackAuthConfig:
    """Configuration for the "Add to Slack" service."""

    # Address to bind, e.g. ":8080" or "0.0.0.0:8989" (required)
    addr: str

    # Slack app credentials (required)
    client_id: str
    client_secret: str

    # Page templates
    success_tpl: str = ""
    error_tpl: str = ""
    button_tpl: str = ""

    # Scopes requested by the button (required when button_tpl is set)
    scopes: List[str] = field(default_factory=list)

    debug: bool = False

    # TLS is enabled when both are provided
    cert_file: str = ""
    key_file: str = ""

    # Logging configuration (optional)
    log_level: str = "INFO"
    log_format: str = "text"

    # Timeouts (optional)
    request_timeout_seconds: float = 3.0
    # Upper bound on the whole exchange made by one callback request
    handler_timeout_seconds: float = 5.0
    keepalive_timeout_seconds: float = 1.0

    @classmethod
    def from_env(cls) -> "SlackAuthConfig":
        """Load configuration from environment variables."""
        return cls(
            addr=os.environ.get("SLACKAUTH_ADDR", ":8080"),
            client_id=os.environ.get("SLACK_CLIENT_ID", ""),
            client_secret=os.environ.get("SLACK_CLIENT_SECRET", ""),
            success_tpl=os.environ.get("SLACKAUTH_SUCCESS_TPL", "success.html"),
            error_tpl=os.environ.get("SLACKAUTH_ERROR_TPL", "error.html"),
            button_tpl=os.environ.get("SLACKAUTH_BUTTON_TPL", ""),
            scopes=_split_scopes(os.environ.get("SLACKAUTH_SCOPES", "")),
            debug=_env_flag(os.environ.get("SLACKAUTH_DEBUG", "")),
            cert_file=os.environ.get("SLACKAUTH_CERT_FILE", ""),
            key_file=os.environ.get("SLACKAUTH_KEY_FILE", ""),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            log_format=os.environ.get("LOG_FORMAT", "text"),
            request_timeout_seconds=_env_seconds("SLACKAUTH_REQUEST_TIMEOUT", 3.0),
            handler_timeout_seconds=_env_seconds("SLACKAUTH_HANDLER_TIMEOUT", 5.0),
        )

    @property
    def tls_enabled(self) -> bool:
        return bool(self.cert_file and self.key_file)

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            InvalidConfig: If addr, client id or client secret is empty
            MissingScopes: If a button template is set without scopes
        """
        if not self.addr or not self.client_id or not self.client_secret:
            raise InvalidConfig("slackauth: addr, client id and client secret can not be empty")

        if self.button_tpl and not self.scopes:
            raise MissingScopes("At least one scope needed")

        if self.request_timeout_seconds <= 0 or self.handler_timeout_seconds <= 0:
            raise InvalidConfig("slackauth: timeouts must be positive")

    def bind_address(self) -> Tuple[Optional[str], int]:
        """
        Split addr into host and port.

        An empty host (":8080") means every interface and is returned as None.

        Returns:
            Tuple of (host, port)

        Raises:
            InvalidConfig: If addr has no valid port
        """
        host, sep, port = self.addr.rpartition(":")
        if not sep:
            raise InvalidConfig(f"slackauth: addr must be host:port, got {self.addr!r}")

        try:
            port_number = int(port)
        except ValueError:
            raise InvalidConfig(f"slackauth: invalid port in addr {self.addr!r}")

        if not 0 <= port_number <= 65535:
            raise InvalidConfig(f"slackauth: port out of range in addr {self.addr!r}")

        host = host.strip("[]")
        return (host or None), port_number
