"""
SecureAuth - Local Credential Manager

Registers users with a password, stores salted Argon2id hashes in a flat
file, and verifies login attempts against that store.

Key Features:
- Password policy: 12+ chars, lower/upper/digit/special, 0-100 strength
- Strong hashing: Argon2id (memory-hard) with a random 16-byte salt per user
- Durable store: one "username,hash,salt" line per user, rewritten atomically
- No exceptions for expected failures: register/authenticate return results

Components:
- policy.py: Password acceptance rules and strength score
- crypto.py: Salt generation, hashing, verification
- registry.py: User store (load, add, lookup)
- service.py: register/authenticate orchestration

Usage:
    python auth_main.py                              # Interactive menu
    python attack_demo.py                            # Show attacks failing
"""

from .policy import PolicyResult, Violation, evaluate
from .registry import Credential, UserRegistry
from .service import AuthResult, CredentialService, RegistrationError, RegistrationFailure

__version__ = "0.1.0"
__author__ = "SecureAuth Team"

__all__ = [
    "AuthResult",
    "Credential",
    "CredentialService",
    "PolicyResult",
    "RegistrationError",
    "RegistrationFailure",
    "UserRegistry",
    "Violation",
    "evaluate",
]
