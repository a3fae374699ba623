"""Helpers shared by the site routers: views, redirects, flash state, locale"""

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse

FLASH_KEY = "flash"


def render_view(view: str, model: Dict[str, Any]) -> JSONResponse:
    """Hand a named view and its model to the (external) templating layer"""
    return JSONResponse({"view": view, "model": jsonable_encoder(model)})


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=302)


def set_flash(request: Request, attributes: Dict[str, Any]) -> None:
    """Attach attributes to the next request only"""
    request.session[FLASH_KEY] = jsonable_encoder(attributes)


def pop_flash(request: Request) -> Dict[str, Any]:
    return request.session.pop(FLASH_KEY, None) or {}


def request_locale(request: Request, default: str, supported: Optional[list] = None) -> str:
    """Primary language of the first Accept-Language entry"""
    header = request.headers.get("accept-language", "")
    for entry in header.split(","):
        language = entry.split(";")[0].strip().split("-")[0].lower()
        if not language or language == "*":
            continue
        if supported is None or language in supported:
            return language
        break
    return default


def parse_id(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None
