"""
HTML page endpoints
"""
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse

from scanquest import state
from scanquest.api.deps import get_context
from scanquest.core.auth import RequestContext


router = APIRouter(tags=["pages"])


def serve_page(name: str):
    html_path = Path(state.SETTINGS.public_dir) / name

    if not html_path.exists():
        return HTMLResponse(
            content=f"<h1>Page not found</h1><p>Please create {state.SETTINGS.public_dir}/{name}</p>",
            status_code=404
        )

    return FileResponse(html_path, media_type="text/html")


@router.get("/")
def landing_page():
    """Serve the landing page"""
    return serve_page("index.html")


@router.get("/admin.html")
def admin_page(ctx: RequestContext = Depends(get_context)):
    """Serve the admin page to logged in admins only"""
    if not ctx.admin:
        return RedirectResponse("/?needLogin=1", status_code=302)
    return serve_page("admin.html")
