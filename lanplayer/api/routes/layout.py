"""Preferred layout cookie (desktop | mobile | tv)."""
from typing import Any

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel

from lanplayer.config import LAYOUT_COOKIE, LAYOUT_COOKIE_MAX_AGE, LAYOUTS

router = APIRouter()


class LayoutBody(BaseModel):
    layout: Any = None


@router.post("/api/layout")
def set_layout(body: LayoutBody | None = Body(None)):
    """Remember the preferred layout in a long-lived cookie. Nothing is stored server-side."""
    layout = body.layout if body else None
    if layout not in LAYOUTS:
        raise HTTPException(status_code=400, detail="invalid layout")
    response = JSONResponse({"ok": True, "layout": layout})
    response.set_cookie(
        LAYOUT_COOKIE,
        layout,
        max_age=LAYOUT_COOKIE_MAX_AGE,
        path="/",
        samesite="lax",
    )
    return response


@router.get("/clear-layout")
def clear_layout():
    """Drop the layout cookie and send the browser back to the entry page."""
    response = RedirectResponse("/", status_code=302)
    response.delete_cookie(LAYOUT_COOKIE, path="/", samesite="lax")
    return response
