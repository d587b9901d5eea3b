"""
SecureAuth - User Registry Module

This file handles:
- The in-memory map of username -> Credential
- Loading and saving the flat-file store
- Username uniqueness

Store format (one record per line, UTF-8):

    username,password_hash_hex,salt_hex

No escaping is needed: usernames are ASCII alphanumeric and the other two
fields are hex, so none of them can contain the delimiter.

Every successful add() rewrites the whole file (temp file + fsync +
os.replace), so a crash mid-write leaves the previous store intact.
"""

import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

from .crypto import DIGEST_SIZE, SALT_SIZE

logger = logging.getLogger(__name__)


DELIMITER = ","
_HEX_DIGITS = frozenset("0123456789abcdef")
HASH_HEX_LENGTH = 2 * DIGEST_SIZE
SALT_HEX_LENGTH = 2 * SALT_SIZE


@dataclass(frozen=True)
class Credential:
    """Stored credential: username plus the hash/salt pair from one hashing call."""
    username: str
    password_hash: str
    salt: str


class RegistryError(Exception):
    """Base class for registry failures."""


class UsernameTakenError(RegistryError):
    """The username is already registered."""


class PersistenceError(RegistryError):
    """The store could not be read or written."""


def is_valid_username(username: str) -> bool:
    """Non-empty and ASCII letters/digits only."""
    return bool(username) and username.isascii() and username.isalnum()


def _is_hex(value: str, length: int) -> bool:
    """Exactly length lowercase hex characters."""
    return len(value) == length and all(c in _HEX_DIGITS for c in value)


def is_valid_record(username: str, password_hash: str, salt: str) -> bool:
    """Whether the three fields can be written and read back unchanged."""
    return (is_valid_username(username)
            and _is_hex(password_hash, HASH_HEX_LENGTH)
            and _is_hex(salt, SALT_HEX_LENGTH))


def encode_record(credential: Credential) -> str:
    return DELIMITER.join((credential.username, credential.password_hash, credential.salt))


def decode_record(line: str) -> Optional[Credential]:
    """
    Parse one store line.

    Returns:
        Credential, or None if the line is malformed (wrong field count,
        bad username, hash or salt not hex of the fixed length)
    """
    fields = line.rstrip("\r\n").split(DELIMITER)
    if len(fields) != 3:
        return None
    # Hex case is not significant; digests are compared in lowercase
    username, password_hash, salt = fields[0], fields[1].lower(), fields[2].lower()
    if not is_valid_record(username, password_hash, salt):
        return None
    return Credential(username, password_hash, salt)


# =============================================================================
# REGISTRY CLASS
# =============================================================================

class UserRegistry:
    """
    Username -> Credential map backed by a flat file.

    Usage:
        registry = UserRegistry.load("users.txt")

        if not registry.exists("alice"):
            registry.add("alice", password_hash, salt)

        cred = registry.lookup("alice")
    """

    def __init__(self, path: str):
        """
        Create an empty registry bound to a store path (nothing is read).

        Args:
            path: Path to the store file
        """
        self.path = path
        self._users: Dict[str, Credential] = {}
        # Guards check-then-insert-then-save as one critical section
        self._lock = threading.RLock()

    @classmethod
    def load(cls, path: str) -> "UserRegistry":
        """
        Build a registry from the store at path.

        Missing or empty file gives an empty registry. Malformed lines are
        skipped. If a username appears twice, the last line wins.

        Raises:
            PersistenceError: If the file exists but cannot be read
        """
        registry = cls(path)
        if not os.path.exists(path):
            logger.info("No user store at %s, starting empty", path)
            return registry

        skipped = 0
        try:
            with open(path, "r", encoding="utf-8") as f:
                for lineno, line in enumerate(f, 1):
                    credential = decode_record(line)
                    if credential is None:
                        if line.strip():
                            logger.debug("Skipping malformed line %d in %s", lineno, path)
                            skipped += 1
                        continue
                    registry._users[credential.username] = credential
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Failed to read user store {path}: {e}") from e

        logger.info("Loaded %d users from %s (%d lines skipped)",
                    len(registry._users), path, skipped)
        return registry

    def exists(self, username: str) -> bool:
        return username in self._users

    def __contains__(self, username: str) -> bool:
        return self.exists(username)

    def lookup(self, username: str) -> Optional[Credential]:
        """Return the stored Credential, or None if the user is unknown."""
        return self._users.get(username)

    def count(self) -> int:
        return len(self._users)

    def __len__(self) -> int:
        return self.count()

    def usernames(self) -> List[str]:
        return sorted(self._users)

    def add(self, username: str, password_hash: str, salt: str) -> Credential:
        """
        Register a new credential and persist the full store.

        The insert and the write happen under one lock. If the write fails,
        the insert is undone before the error propagates, so a successful
        return always means the user is on disk.

        Args:
            username: New username (must not exist yet)
            password_hash: Hex digest from hash_password()
            salt: Hex salt used for that exact digest

        Returns:
            The stored Credential

        Raises:
            ValueError: Record would not survive a reload (bad username,
                hash or salt not lowercase hex of the fixed length)
            UsernameTakenError: Username already present (nothing changes)
            PersistenceError: Store write failed (insert rolled back)
        """
        if not is_valid_record(username, password_hash, salt):
            raise ValueError(f"Invalid credential record for username {username!r}")

        with self._lock:
            if username in self._users:
                raise UsernameTakenError(f"Username already taken: {username}")

            credential = Credential(username, password_hash, salt)
            self._users[username] = credential
            try:
                self.save()
            except Exception:
                del self._users[username]
                raise

        logger.info("Registered user %s (%d total)", username, len(self._users))
        return credential

    def save(self) -> None:
        """
        Rewrite the whole store atomically.

        Writes sorted records to a temp file in the same directory, fsyncs
        it, then os.replace()s it over the store.

        Raises:
            PersistenceError: If any step of the write fails
        """
        with self._lock:
            directory = os.path.dirname(os.path.abspath(self.path))
            tmp_path = None
            try:
                os.makedirs(directory, exist_ok=True)
                fd, tmp_path = tempfile.mkstemp(prefix=".users-", suffix=".tmp", dir=directory)
                with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                    for username in sorted(self._users):
                        f.write(encode_record(self._users[username]) + "\n")
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
                tmp_path = None
            except (OSError, UnicodeError) as e:
                raise PersistenceError(f"Failed to write user store {self.path}: {e}") from e
            finally:
                if tmp_path and os.path.exists(tmp_path):
                    os.unlink(tmp_path)
