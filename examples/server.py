# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
Example server logging every workspace that installs the app.

Run from this directory with SLACK_CLIENT_ID and SLACK_CLIENT_SECRET set:

    python server.py
"""

import os
import sys
from pathlib import Path

from slackauth import BOT, COMMANDS, OAuthResult, SlackAuthConfig, SlackAuthError, SlackAuthService
from slackauth.logging_config import get_logger


logger = get_logger(__name__)

TEMPLATES = Path(__file__).parent / "templates"


async def on_auth(auth: OAuthResult) -> None:
    logger.info("someone was authorized!", extra={"team": auth.team_name})


def main() -> None:
    config = SlackAuthConfig(
        addr=":8080",
        client_id=os.environ.get("SLACK_CLIENT_ID", ""),
        client_secret=os.environ.get("SLACK_CLIENT_SECRET", ""),
        success_tpl=str(TEMPLATES / "success.html"),
        error_tpl=str(TEMPLATES / "error.html"),
        button_tpl=str(TEMPLATES / "button.html"),
        scopes=[BOT, COMMANDS],
        debug=True,
    )

    try:
        service = SlackAuthService(config)
    except SlackAuthError as e:
        sys.exit(f"unable to start: {e}")

    service.set_log_output()
    service.on_auth(on_auth)
    service.run()


if __name__ == "__main__":
    main()
