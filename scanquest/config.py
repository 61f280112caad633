"""
Configuration loader
"""
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel


DEFAULT_CONFIG_PATH = "config/settings.yaml"
CONFIG_ENV_VAR = "SCANQUEST_CONFIG"


class Settings(BaseModel):
    """Server settings"""
    data_dir: str = "data"          # core.json + tenants/<tenant>.json
    public_dir: str = "public"      # html/css/js served as-is
    host: str = "0.0.0.0"
    port: int = 3000
    locale: str = "en"              # "en" | "da"
    password_rounds: int = 100000   # pbkdf2 iterations
    log_level: str = "INFO"


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Load settings from YAML file
    
    Args:
        config_path: Path to config file. Falls back to $SCANQUEST_CONFIG,
            then config/settings.yaml.
        
    Returns:
        Settings object
        
    Raises:
        FileNotFoundError: If an explicitly requested file does not exist
    """
    explicit = config_path or os.getenv(CONFIG_ENV_VAR)
    path = Path(explicit or DEFAULT_CONFIG_PATH)
    
    if not path.exists():
        if explicit:
            raise FileNotFoundError(f"Config file not found: {path}")
        return Settings()
    
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    
    return Settings(**data)
