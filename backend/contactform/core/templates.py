# contactform/core/templates.py
import logging
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateError

log = logging.getLogger("uvicorn.error")


def load_reply_template(path: Path) -> Optional[Template]:
    """Parse the thank-you email template once at startup.

    Returns None when the file is missing or does not parse; replies are then
    sent as plain text only.
    """
    env = Environment(
        loader=FileSystemLoader(str(path.parent)),
        autoescape=True,
        undefined=StrictUndefined,
        keep_trailing_newline=False,
    )
    try:
        return env.get_template(path.name)
    except (TemplateError, OSError) as exc:
        log.error(f"[templates] could not load reply template {path}: {exc}")
        return None


def render_reply_html(template: Optional[Template], name: str, operator_name: str) -> Optional[str]:
    if template is None:
        log.error("[templates] reply template unavailable; sending plain text only")
        return None
    try:
        return template.render(name=name, operator_name=operator_name)
    except Exception as exc:
        log.error(f"[templates] error rendering reply template: {exc}")
        return None
