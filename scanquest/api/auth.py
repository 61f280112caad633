"""
Admin login, logout and first-run setup

Password hashing and store writes block, so setup and login run them in the
threadpool after reading the body.
"""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

from scanquest import state
from scanquest.core.auth import clear_admin_session, issue_admin_session
from scanquest.models import Credentials


logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


async def read_body(request: Request) -> dict:
    """JSON or form-encoded body as a plain dict; empty when malformed"""
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            logger.warning(f"⚠️ Malformed JSON body on {request.url.path}")
            return {}
        return body if isinstance(body, dict) else {}
    form = await request.form()
    return dict(form)


@router.get("/api/auth/hasUsers")
def has_users():
    return {"hasUsers": state.CREDENTIALS.has_users()}


@router.post("/api/auth/setup")
async def setup(request: Request):
    """
    Create the first owner and log them in

    Request:
        {"username": "alice", "password": "..."}
    """
    creds = Credentials(**await read_body(request))
    await run_in_threadpool(state.CREDENTIALS.setup_owner, creds.username, creds.password)
    await run_in_threadpool(state.TENANTS.resolve, creds.username)
    logger.info(f"🚀 First-run setup completed by {creds.username}")

    response = JSONResponse({"ok": True})
    issue_admin_session(response, creds.username, creds.username)
    return response


@router.post("/login")
async def login(request: Request):
    """Check credentials; redirect to the admin page or back with ?error=1"""
    creds = Credentials(**await read_body(request))
    user = await run_in_threadpool(state.CREDENTIALS.verify_login, creds.username, creds.password)
    if user is None:
        return RedirectResponse("/?error=1", status_code=302)

    await run_in_threadpool(state.TENANTS.resolve, user.username)
    logger.info(f"🔑 {user.username} logged in")

    response = RedirectResponse("/admin.html", status_code=302)
    issue_admin_session(response, user.username, user.username)
    return response


@router.post("/logout")
def logout():
    response = RedirectResponse("/", status_code=302)
    clear_admin_session(response)
    return response
