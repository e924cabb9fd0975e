"""
Jinja2 templates shared by the page routes
"""

from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from noravenolife.core.config import settings
from noravenolife.utils.formatting import format_distance_to_now, format_event_time, format_price
from noravenolife.utils.security import get_session_user, pop_flashes

TEMPLATES_DIR = Path(__file__).resolve().parent.parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["event_time"] = format_event_time
templates.env.filters["event_date"] = lambda value: format_event_time(value, with_time=False)
templates.env.filters["time_until"] = format_distance_to_now
templates.env.filters["price"] = format_price
templates.env.globals["app_name"] = settings.APP_NAME
templates.env.globals["map_tile_url"] = settings.MAP_TILE_URL


def render(request: Request, template_name: str, status_code: int = 200, **context):
    return templates.TemplateResponse(
        request,
        template_name,
        {
            "current_user": get_session_user(request),
            "flashes": pop_flashes(request),
            **context,
        },
        status_code=status_code,
    )
