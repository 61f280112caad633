"""
Tenant registry - maps tenant keys to their isolated stores
"""
import logging
import threading
from pathlib import Path
from typing import Dict, Optional

from scanquest.core.store import TenantStore
from scanquest.errors import InvalidInputError, MissingTenantError


logger = logging.getLogger(__name__)


def normalize_tenant_key(tenant_key) -> str:
    """
    Trim a tenant key and check it is usable as a file name

    Raises:
        InvalidInputError: If the key is empty or could escape the tenants dir
    """
    key = str(tenant_key or "").strip()
    if not key:
        raise InvalidInputError("Missing tenant")
    if "/" in key or "\\" in key or key.startswith("."):
        raise InvalidInputError("Invalid tenant")
    return key


def resolve_tenant_key(
    query_tenant: Optional[str],
    cookie_tenant: Optional[str],
    cookie_admin_user: Optional[str],
) -> str:
    """
    Pick the tenant for a request

    Precedence: ?t= query parameter, then the tenant cookie, then the
    adminUser cookie.

    Raises:
        MissingTenantError: If none of them is set
    """
    for candidate in (query_tenant, cookie_tenant, cookie_admin_user):
        value = str(candidate or "").strip()
        if value:
            return value
    raise MissingTenantError()


class TenantRegistry:
    """Lazily creates and caches one TenantStore per tenant key"""

    def __init__(self, data_dir, locale: str = "en"):
        self.tenants_dir = Path(data_dir) / "tenants"
        self.tenants_dir.mkdir(parents=True, exist_ok=True)
        self.locale = locale
        self._stores: Dict[str, TenantStore] = {}
        self._stores_lock = threading.Lock()
        self._key_locks: Dict[str, threading.Lock] = {}

    def path_for(self, tenant_key: str) -> Path:
        return self.tenants_dir / f"{normalize_tenant_key(tenant_key)}.json"

    def exists(self, tenant_key: str) -> bool:
        """True if the tenant's store has been materialized on disk"""
        return self.path_for(tenant_key).exists()

    def _key_lock(self, key: str) -> threading.Lock:
        with self._stores_lock:
            return self._key_locks.setdefault(key, threading.Lock())

    def resolve(self, tenant_key: str) -> TenantStore:
        """
        Return the store for a tenant, creating it on first use

        Repeated calls for the same key return the same instance. Creation is
        guarded by a per-key lock so concurrent first requests cannot build
        two stores for one tenant; other tenants are not blocked.
        """
        key = normalize_tenant_key(tenant_key)
        store = self._stores.get(key)
        if store is not None:
            return store

        with self._key_lock(key):
            store = self._stores.get(key)
            if store is None:
                store = TenantStore(key, self.path_for(key), locale=self.locale)
                with self._stores_lock:
                    self._stores[key] = store
        return store
