"""Jinja2 template environment shared by all page routes"""

from pathlib import Path
from typing import Any, Dict

from fastapi import Request
from fastapi.templating import Jinja2Templates

from loansewa_web.domain.session import SessionContext
from loansewa_web.utils.date_utils import long_date, short_date
from loansewa_web.utils.formatting import format_lakhs, format_optional_lakhs, format_probability

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["lakhs"] = format_lakhs
templates.env.filters["optional_lakhs"] = format_optional_lakhs
templates.env.filters["probability"] = format_probability
templates.env.filters["short_date"] = short_date
templates.env.filters["long_date"] = long_date


def render(request: Request, name: str, context: Dict[str, Any] | None = None, status_code: int = 200):
    """Render a page, attaching any pending flash message from the session"""
    context = dict(context or {})
    context.setdefault("flash", SessionContext(request.session).pop_flash())
    return templates.TemplateResponse(request, name, context, status_code=status_code)
