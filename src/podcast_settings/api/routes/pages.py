from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

router = APIRouter(prefix="/settings", tags=["pages"])


@router.get("", response_class=HTMLResponse)
def settings_index(request: Request):
    page = request.app.state.components.page
    tabs = page.tabs()
    if not tabs:
        return HTMLResponse("")
    return HTMLResponse(page.render_html(tabs[0].key))


@router.get("/{section_key}", response_class=HTMLResponse)
def settings_section(request: Request, section_key: str, scope: Optional[str] = None):
    return HTMLResponse(request.app.state.components.page.render_html(section_key, scope))
