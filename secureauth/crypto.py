"""
SecureAuth - Cryptography Module

All hashing for the credential store lives here:
- Random salt generation
- Argon2id password hashing (memory-hard, 'cryptography' library)
- Password verification that never raises

Storage format:
    Salt   = 16 random bytes  -> 32 lowercase hex chars
    Digest = 32-byte Argon2id -> 64 lowercase hex chars

Why Argon2id?
    - Memory-hard: every guess costs an attacker hundreds of MiB of RAM
    - Winner of the Password Hashing Competition, default in libsodium
    - The per-user salt means identical passwords never share a digest
"""

import hmac
import os
from dataclasses import dataclass

from cryptography.hazmat.primitives.kdf.argon2 import Argon2id


# =============================================================================
# Configuration
# =============================================================================

SALT_SIZE = 16           # 128-bit salt
DIGEST_SIZE = 32         # 256-bit digest


@dataclass(frozen=True)
class HashParams:
    """
    Argon2id cost tier.

    iterations = passes over memory (CPU cost)
    memory_cost = KiB of RAM per hash
    lanes = degree of parallelism
    """
    iterations: int
    memory_cost: int
    lanes: int = 1


# Same cost as libsodium's OPSLIMIT_MODERATE / MEMLIMIT_MODERATE (~0.5s, 256 MiB)
MODERATE = HashParams(iterations=3, memory_cost=256 * 1024)

# Lighter tier (libsodium's INTERACTIVE, 64 MiB)
INTERACTIVE = HashParams(iterations=2, memory_cost=64 * 1024)


class HashingError(Exception):
    """The Argon2id primitive failed (unsupported backend, out of memory, ...)."""


# =============================================================================
# Salt
# =============================================================================

def generate_salt() -> str:
    """
    Generate a fresh random salt.

    Uses os.urandom (the OS CSPRNG). Every call returns a new value;
    salts are never reused across credentials.

    Returns:
        32-char lowercase hex string (16 bytes)
    """
    return os.urandom(SALT_SIZE).hex()


# =============================================================================
# Hashing
# =============================================================================

def hash_password(password: str, salt: str, params: HashParams = MODERATE) -> str:
    """
    Hash a password with Argon2id.

    Deterministic: same (password, salt, params) always gives the same
    digest. Blocks the caller for the full hashing time.

    Args:
        password: Raw password
        salt: Hex salt from generate_salt()
        params: Cost tier (default MODERATE)

    Returns:
        64-char lowercase hex digest

    Raises:
        ValueError: If salt is not valid hex, or the password cannot be
            encoded as UTF-8 (lone surrogates)
        HashingError: If the hashing primitive fails
    """
    salt_bytes = bytes.fromhex(salt)
    secret = password.encode('utf-8')

    try:
        kdf = Argon2id(
            salt=salt_bytes,
            length=DIGEST_SIZE,
            iterations=params.iterations,
            lanes=params.lanes,
            memory_cost=params.memory_cost,
        )
        digest = kdf.derive(secret)
    except Exception as e:
        raise HashingError(f"Hashing failed: {e}") from e

    return digest.hex()


def verify_password(
    password: str,
    stored_hash: str,
    salt: str,
    params: HashParams = MODERATE
) -> bool:
    """
    Check a candidate password against a stored digest.

    Recomputes the hash with the stored salt and compares. Any failure
    (malformed salt or password, hashing error) counts as "does not match".

    Returns:
        True only if the recomputed digest equals stored_hash (hex case ignored)
    """
    try:
        candidate = hash_password(password, salt, params)
        expected = stored_hash.lower().encode('ascii')
    except (ValueError, HashingError):
        return False
    return constant_compare(candidate.encode('ascii'), expected)


# =============================================================================
# Helpers
# =============================================================================

def constant_compare(a: bytes, b: bytes) -> bool:
    """Compare two byte strings in constant time (hmac.compare_digest)."""
    return hmac.compare_digest(a, b)
