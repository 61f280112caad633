"""
Auth gateway - caller identity from session cookies

Roles, weakest first: anonymous < team < admin < owner.
"""
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from scanquest.core.credentials import ROLE_OWNER, CredentialStore
from scanquest.core.tenants import resolve_tenant_key
from scanquest.errors import ForbiddenError, UnauthorizedError


logger = logging.getLogger(__name__)

ROLE_ANONYMOUS = "anonymous"
ROLE_TEAM = "team"
ROLE_TENANT_ADMIN = "admin"

ADMIN_COOKIES = ("admin", "adminUser", "tenant")


@dataclass(frozen=True)
class RequestContext:
    """Everything a request says about who is calling"""
    admin: bool = False
    admin_user: Optional[str] = None
    tenant: Optional[str] = None
    team_id: Optional[str] = None
    event_id: Optional[str] = None
    query_tenant: Optional[str] = None

    @property
    def role(self) -> str:
        """Cookie-level role; owner is only known after a credential lookup"""
        if self.admin and self.admin_user:
            return ROLE_TENANT_ADMIN
        if self.team_id:
            return ROLE_TEAM
        return ROLE_ANONYMOUS

    def tenant_key(self) -> str:
        """Tenant for this request; raises MissingTenantError when unknown"""
        return resolve_tenant_key(self.query_tenant, self.tenant, self.admin_user)


@dataclass(frozen=True)
class Identity:
    username: str
    role: str

    @property
    def is_owner(self) -> bool:
        return self.role == ROLE_OWNER


def context_from_cookies(cookies: Mapping[str, str], query_tenant: Optional[str] = None) -> RequestContext:
    def clean(name):
        value = (cookies.get(name) or "").strip()
        return value or None

    return RequestContext(
        admin=cookies.get("admin") == "true",
        admin_user=clean("adminUser"),
        tenant=clean("tenant"),
        team_id=clean("teamId"),
        event_id=clean("eventId"),
        query_tenant=(query_tenant or "").strip() or None,
    )


def require_tenant_admin(ctx: RequestContext, credentials: CredentialStore) -> Identity:
    """
    Raises:
        ForbiddenError: No admin session cookie
        UnauthorizedError: Admin cookie names a user that does not exist
    """
    if ctx.role != ROLE_TENANT_ADMIN:
        logger.warning("🚫 Admin endpoint called without admin session")
        raise ForbiddenError()
    user = credentials.get_user(ctx.admin_user)
    if user is None:
        raise UnauthorizedError("User not found")
    return Identity(username=user.username, role=user.role)


def require_master(ctx: RequestContext, credentials: CredentialStore) -> Identity:
    """
    Raises:
        ForbiddenError: Not logged in as an owner
    """
    if ctx.role != ROLE_TENANT_ADMIN:
        raise ForbiddenError()
    user = credentials.get_user(ctx.admin_user)
    if user is None or user.role != ROLE_OWNER:
        logger.warning(f"🚫 Master endpoint refused for '{ctx.admin_user}'")
        raise ForbiddenError("Owner only")
    return Identity(username=user.username, role=user.role)


def admin_tenant_key(ctx: RequestContext, identity: Identity) -> str:
    """
    Tenant an admin request operates on

    Admins are confined to their own tenant; owners may name any tenant.
    """
    key = ctx.tenant_key()
    if key != identity.username and not identity.is_owner:
        logger.warning(f"🚫 {identity.username} tried to access tenant '{key}'")
        raise ForbiddenError("Tenant not accessible")
    return key


def issue_admin_session(response, username: str, tenant: str) -> None:
    response.set_cookie("admin", "true", httponly=True)
    response.set_cookie("adminUser", username, httponly=True)
    response.set_cookie("tenant", tenant, httponly=True)


def clear_admin_session(response) -> None:
    for name in ADMIN_COOKIES:
        response.delete_cookie(name)


def issue_team_session(response, tenant: str, team_id: str, event_id: Optional[str] = None) -> None:
    # readable by page scripts
    if event_id:
        response.set_cookie("eventId", event_id, httponly=False)
    else:
        response.delete_cookie("eventId")
    response.set_cookie("tenant", tenant, httponly=False)
    response.set_cookie("teamId", team_id, httponly=False)
