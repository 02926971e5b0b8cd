# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""Command-line interface for the slackauth service."""

import sys
from typing import Optional, Tuple

import click
from dotenv import load_dotenv

from slackauth import __version__
from slackauth.config import SlackAuthConfig
from slackauth.exceptions import SlackAuthError
from slackauth.logging_config import get_logger
from slackauth.models import OAuthResult
from slackauth.service import SlackAuthService


logger = get_logger(__name__)


def log_authorization(auth: OAuthResult) -> None:
    """Default callback: log every workspace that installs the app."""
    logger.info("someone was authorized!", extra={"team": auth.team_name, "team_id": auth.team_id})


@click.group()
@click.version_option(version=__version__, prog_name="slackauth")
def cli():
    """slackauth - "Add to Slack" button OAuth service.

    \b
    Configuration:
      Credentials are loaded from the environment and from a .env file
      in the current directory (SLACK_CLIENT_ID, SLACK_CLIENT_SECRET).
      Command line options override the environment.

    \b
    Examples:
      slackauth serve --addr :8080
      slackauth serve --button-tpl button.html --scope bot --scope commands
    """


@cli.command()
@click.option("--addr", metavar="ADDR", help="Address to listen on, e.g. :8080 or 0.0.0.0:8989")
@click.option("--success-tpl", type=click.Path(), metavar="PATH", help="Template shown after a successful auth")
@click.option("--error-tpl", type=click.Path(), metavar="PATH", help="Template shown after a failed auth")
@click.option("--button-tpl", type=click.Path(), metavar="PATH", help="Template with the Add to Slack button")
@click.option("--scope", "scopes", multiple=True, metavar="SCOPE", help="Scope requested by the button (repeatable)")
@click.option("--cert-file", type=click.Path(), metavar="PATH", help="TLS certificate (enables TLS with --key-file)")
@click.option("--key-file", type=click.Path(), metavar="PATH", help="TLS certificate key")
@click.option("--json-logs", is_flag=True, help="Write logs as JSON lines")
@click.option("--debug", is_flag=True, help="Enable detailed logging for debugging")
def serve(
    addr: Optional[str],
    success_tpl: Optional[str],
    error_tpl: Optional[str],
    button_tpl: Optional[str],
    scopes: Tuple[str, ...],
    cert_file: Optional[str],
    key_file: Optional[str],
    json_logs: bool,
    debug: bool,
):
    """Run the OAuth service until interrupted."""
    load_dotenv()

    try:
        config = SlackAuthConfig.from_env()
    except SlackAuthError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    if addr:
        config.addr = addr
    if success_tpl:
        config.success_tpl = success_tpl
    if error_tpl:
        config.error_tpl = error_tpl
    if button_tpl:
        config.button_tpl = button_tpl
    if scopes:
        config.scopes = list(scopes)
    if cert_file:
        config.cert_file = cert_file
    if key_file:
        config.key_file = key_file
    if debug:
        config.debug = True

    try:
        service = SlackAuthService(config)
    except SlackAuthError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    service.set_log_output(sys.stdout if json_logs else None)
    service.on_auth(log_authorization)

    try:
        service.run()
    except SlackAuthError as e:
        logger.error("Service terminated", extra={"error": str(e)})
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
