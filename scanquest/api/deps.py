"""
Request dependencies shared by the routers
"""
from fastapi import Depends, Request

from scanquest import state
from scanquest.core.auth import (
    Identity,
    RequestContext,
    admin_tenant_key,
    context_from_cookies,
    require_master,
    require_tenant_admin,
)
from scanquest.core.store import TenantStore


def get_context(request: Request) -> RequestContext:
    return context_from_cookies(request.cookies, request.query_params.get("t"))


def admin_identity(ctx: RequestContext = Depends(get_context)) -> Identity:
    return require_tenant_admin(ctx, state.CREDENTIALS)


def master_identity(ctx: RequestContext = Depends(get_context)) -> Identity:
    return require_master(ctx, state.CREDENTIALS)


def admin_store(
    ctx: RequestContext = Depends(get_context),
    identity: Identity = Depends(admin_identity),
) -> TenantStore:
    """Tenant store an admin request operates on"""
    return state.TENANTS.resolve(admin_tenant_key(ctx, identity))
