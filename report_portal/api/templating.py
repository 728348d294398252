from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from report_portal.report_db.models import AdminSession

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(
    request: Request,
    name: str,
    context: Optional[Dict[str, Any]] = None,
    *,
    admin_session: Optional[AdminSession] = None,
    status_code: int = 200,
):
    """Render a page; ``is_admin`` drives the navigation links."""
    page_context = {"is_admin": admin_session is not None}
    page_context.update(context or {})
    return templates.TemplateResponse(
        request, name, page_context, status_code=status_code
    )
