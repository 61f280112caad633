"""
Global application state
Shared resources accessible across all modules
"""
from pathlib import Path
from typing import Optional

from scanquest.config import Settings
from scanquest.core.credentials import CredentialStore
from scanquest.core.tenants import TenantRegistry

# Loaded at startup (or by tests) via configure()
SETTINGS: Settings = Settings()

# Process-wide users and roles
CREDENTIALS: Optional[CredentialStore] = None

# Tenant key -> TenantStore
TENANTS: Optional[TenantRegistry] = None


def configure(settings: Settings) -> None:
    """Build the shared stores from settings"""
    global SETTINGS, CREDENTIALS, TENANTS
    data_dir = Path(settings.data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)

    SETTINGS = settings
    CREDENTIALS = CredentialStore(data_dir / "core.json", rounds=settings.password_rounds)
    TENANTS = TenantRegistry(data_dir, locale=settings.locale)
