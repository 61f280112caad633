"""
Utility functions
"""
import os
import tempfile
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel


def now_ms() -> int:
    """Current time in milliseconds since epoch"""
    return int(time.time() * 1000)


def new_id() -> str:
    return str(uuid.uuid4())


def write_document(path: Path, document: BaseModel) -> None:
    """
    Persist a document as JSON, replacing the file atomically
    
    Args:
        path: Target file
        document: Model dumped with camelCase aliases
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(document.model_dump_json(by_alias=True, indent=2))
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise


def backup_filename(tenant: str, when: datetime = None) -> str:
    """
    Build a download name for a tenant backup
    
    Example:
        >>> backup_filename("acme", datetime(2024, 5, 1, 12, 30, 5, 123000, tzinfo=timezone.utc))
        'acme-backup-2024-05-01T12-30-05-123Z.json'
    """
    when = when or datetime.now(timezone.utc)
    stamp = when.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{when.microsecond // 1000:03d}Z"
    stamp = stamp.replace(":", "-").replace(".", "-")
    return f"{tenant}-backup-{stamp}.json"
