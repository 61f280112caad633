"""
Credential store - process-wide admin users

Passwords are hashed with PBKDF2-SHA512 (passlib) using a per-user random salt
that is also stored next to the digest.
"""
import logging
import secrets
import threading
from pathlib import Path
from typing import List, Optional

from passlib.hash import pbkdf2_sha512
from passlib.utils import consteq

from scanquest.core.tenants import normalize_tenant_key
from scanquest.errors import AlreadyConfiguredError, ConflictError, InvalidInputError
from scanquest.models import CoreDocument, User
from scanquest.utils import new_id, now_ms, write_document


logger = logging.getLogger(__name__)

ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"
DEFAULT_ROUNDS = 100000


def generate_salt() -> str:
    return secrets.token_hex(16)


def hash_password(password: str, salt: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Derive the stored digest for password with the given hex salt"""
    return pbkdf2_sha512.using(salt=bytes.fromhex(salt), rounds=rounds).hash(password)


def verify_password(password: str, salt: str, digest: str) -> bool:
    """Recompute the digest with the stored salt and compare in constant time"""
    try:
        rounds = pbkdf2_sha512.from_string(digest).rounds
        candidate = hash_password(password, salt, rounds)
    except ValueError:
        return False
    return consteq(candidate, digest)


class CredentialStore:
    """Users and roles, persisted to core.json"""

    def __init__(self, path, rounds: int = DEFAULT_ROUNDS):
        self.path = Path(path)
        self.rounds = rounds
        self._lock = threading.RLock()
        if self.path.exists():
            self._doc = CoreDocument.model_validate_json(self.path.read_text(encoding='utf-8'))
        else:
            self._doc = CoreDocument()
            write_document(self.path, self._doc)

    def has_users(self) -> bool:
        with self._lock:
            return len(self._doc.users) > 0

    def get_user(self, username: Optional[str]) -> Optional[User]:
        if not username:
            return None
        with self._lock:
            return next((u for u in self._doc.users if u.username == username), None)

    def create_user(self, username: str, password: str, role: str = ROLE_ADMIN) -> str:
        """
        Add a user

        Args:
            username: Unique, case-sensitive
            password: Plain text, hashed before storing
            role: "owner" or "admin"

        Returns:
            New user id

        Raises:
            InvalidInputError: If username or password is empty, or the
                username cannot double as a tenant key
            ConflictError: If the username is taken
        """
        if not username or not password:
            raise InvalidInputError("Missing fields")
        # the username names the user's tenant
        try:
            usable = normalize_tenant_key(username) == username
        except InvalidInputError:
            usable = False
        if not usable:
            raise InvalidInputError("Invalid username")

        with self._lock:
            if self.get_user(username) is not None:
                raise ConflictError("Username already exists")
            salt = generate_salt()
            user = User(
                id=new_id(),
                username=username,
                salt=salt,
                hash=hash_password(password, salt, self.rounds),
                role=ROLE_OWNER if role == ROLE_OWNER else ROLE_ADMIN,
                created=now_ms(),
            )
            doc = self._doc.model_copy(deep=True)
            doc.users.append(user)
            write_document(self.path, doc)
            self._doc = doc

        logger.info(f"👤 User created: {username} ({user.role})")
        return user.id

    def setup_owner(self, username: str, password: str) -> str:
        """
        First-run setup: create the initial owner

        The has-users check and the insert happen under one lock, so only one
        concurrent setup can succeed.

        Raises:
            AlreadyConfiguredError: If any user already exists
            InvalidInputError: If username or password is empty or invalid
        """
        with self._lock:
            if self.has_users():
                raise AlreadyConfiguredError()
            return self.create_user(username, password, ROLE_OWNER)

    def verify_login(self, username: str, password: str) -> Optional[User]:
        user = self.get_user(username)
        if user is None or not password or not verify_password(password, user.salt, user.hash):
            logger.warning(f"🔒 Failed login for '{username}'")
            return None
        return user

    def list_users(self) -> List[dict]:
        with self._lock:
            return [u.public() for u in self._doc.users]
