"""
Biodex Backend - Page Rendering
================================

What:  The Jinja2 template environment and the one helper every page route
       renders through.
Why:   Each page shows the notifications flashed by the previous request
       plus any raised while handling this one; doing that in one helper
       keeps routes thin.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from fastapi.templating import Jinja2Templates
from starlette.requests import Request
from starlette.responses import Response

from app.services.notifications import NotificationQueue, consume

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(
    request: Request,
    name: str,
    context: Optional[Dict[str, Any]] = None,
    queue: Optional[NotificationQueue] = None,
    status_code: int = 200,
) -> Response:
    """Render `name` with flashed and in-request notifications attached."""
    notifications = consume(request)
    if queue is not None:
        notifications.extend(queue.items)
    page_context: Dict[str, Any] = {"notifications": notifications}
    page_context.update(context or {})
    return templates.TemplateResponse(
        request,
        name,
        page_context,
        status_code=status_code,
    )
