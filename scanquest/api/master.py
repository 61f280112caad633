"""
Master endpoints (owner role): user provisioning and cross-tenant backups
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from scanquest import state
from scanquest.api.deps import master_identity
from scanquest.core.auth import Identity
from scanquest.errors import NotFoundError
from scanquest.models import NewUser
from scanquest.utils import backup_filename


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/master", tags=["master"])


@router.get("/me")
def me(identity: Identity = Depends(master_identity)):
    return {"username": identity.username, "role": identity.role}


@router.get("/users")
def list_users(identity: Identity = Depends(master_identity)):
    return {"users": state.CREDENTIALS.list_users()}


@router.post("/users")
def create_user(payload: NewUser, identity: Identity = Depends(master_identity)):
    """
    Create an admin (or owner) and their empty tenant

    Request:
        {"username": "bob", "password": "...", "role": "admin"}
    """
    state.CREDENTIALS.create_user(payload.username, payload.password, payload.role)
    state.TENANTS.resolve(payload.username)
    logger.info(f"👤 {identity.username} created user {payload.username}")
    return {"ok": True}


@router.get("/backup/{tenant}")
def backup(tenant: str, identity: Identity = Depends(master_identity)):
    """Download any tenant's raw data file; never creates a missing tenant"""
    path = state.TENANTS.path_for(tenant)
    if not path.exists():
        raise NotFoundError("Tenant DB not found")
    key = path.stem
    return FileResponse(
        path=path,
        filename=backup_filename(key),
        media_type="application/json",
    )
