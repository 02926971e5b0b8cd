# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
HTML page templates for the OAuth flow.

Templates are read from disk once, at service construction, and compiled
with Jinja2. Each loader owns its own Jinja2 environment, so templates of
one service never see another service's globals or filters.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import jinja2

from slackauth.exceptions import TemplateLoadError, TemplateParseError, TemplateRenderError
from slackauth.logging_config import get_logger


logger = get_logger(__name__)


class TemplateLoader:
    """
    Reads and compiles page templates.

    Output is HTML, so autoescaping is always on.
    """

    def __init__(self, namespace: str = "slackauth"):
        """
        Initialize template loader.

        Args:
            namespace: Name of the template namespace, used in log records
        """
        self.namespace = namespace
        self.environment = jinja2.Environment(
            autoescape=True,
            undefined=jinja2.Undefined,
            keep_trailing_newline=True,
        )

    def load(self, path: str) -> jinja2.Template:
        """
        Read a template file and compile it.

        Args:
            path: Filesystem path of the template

        Returns:
            Compiled template, reusable across requests

        Raises:
            TemplateLoadError: If the file cannot be read
            TemplateParseError: If the content is not a valid template
        """
        try:
            source = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateLoadError(f"unable to read template {path!r}: {e}", path=path) from e

        try:
            template = self.environment.from_string(source)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateParseError(
                f"invalid template {path!r} at line {e.lineno}: {e.message}", path=path, lineno=e.lineno
            ) from e

        logger.debug("Template loaded", extra={"namespace": self.namespace, "path": path})
        return template

    def load_optional(self, path: str) -> Optional[jinja2.Template]:
        """Load a template, or return None when no path is configured."""
        if not path:
            return None
        return self.load(path)


def render_template(template: jinja2.Template, context: Dict[str, Any]) -> str:
    """
    Render a compiled template.

    Args:
        template: Template returned by TemplateLoader.load
        context: Template variables

    Returns:
        Rendered HTML

    Raises:
        TemplateRenderError: If Jinja2 fails while rendering
    """
    try:
        return template.render(context)
    except (jinja2.TemplateError, TypeError, ValueError) as e:
        raise TemplateRenderError(f"error rendering template: {e}") from e
