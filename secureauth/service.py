"""
SecureAuth - Credential Service

Glue between the UI and the core modules:

    register:      policy -> confirmation -> salt -> hash -> registry.add
    authenticate:  registry.lookup -> verify

Neither call raises for expected failures. register() returns None on
success or a RegistrationFailure naming what went wrong; authenticate()
always returns an AuthResult.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, FrozenSet, Optional

from . import crypto
from .policy import PolicyResult, Violation, describe, evaluate
from .registry import PersistenceError, UserRegistry, UsernameTakenError, is_valid_username

logger = logging.getLogger(__name__)


class RegistrationError(Enum):
    EMPTY_USERNAME = "empty_username"
    INVALID_USERNAME_FORMAT = "invalid_username_format"
    USERNAME_TAKEN = "username_taken"
    POLICY_REJECTED = "policy_rejected"
    PASSWORD_MISMATCH = "password_mismatch"
    HASHING_FAILED = "hashing_failed"
    PERSISTENCE_FAILED = "persistence_failed"

    @property
    def is_infrastructure(self) -> bool:
        """True for environment failures rather than user-input mistakes."""
        return self in (RegistrationError.HASHING_FAILED, RegistrationError.PERSISTENCE_FAILED)


class AuthError(Enum):
    EMPTY_USERNAME = "empty_username"
    USER_NOT_FOUND = "user_not_found"


_REGISTRATION_MESSAGES = {
    RegistrationError.EMPTY_USERNAME: "Username required",
    RegistrationError.INVALID_USERNAME_FORMAT: "Only alphanumeric characters allowed",
    RegistrationError.USERNAME_TAKEN: "Username already taken",
    RegistrationError.POLICY_REJECTED: "Password does not meet the requirements",
    RegistrationError.PASSWORD_MISMATCH: "Passwords don't match",
    RegistrationError.HASHING_FAILED: "Account creation failed (hashing error)",
    RegistrationError.PERSISTENCE_FAILED: "Account creation failed (could not save user store)",
}


@dataclass(frozen=True)
class RegistrationFailure:
    """Why a registration was refused. violations is set only for POLICY_REJECTED."""
    kind: RegistrationError
    violations: FrozenSet[Violation] = frozenset()

    @property
    def message(self) -> str:
        text = _REGISTRATION_MESSAGES[self.kind]
        if self.violations:
            details = "; ".join(describe(v) for v in Violation if v in self.violations)
            text = f"{text}: {details}"
        return text


@dataclass(frozen=True)
class AuthResult:
    """
    Outcome of a login attempt.

    matched: password verified
    found: username exists in the registry
    error: why the lookup failed (None when the user was found)
    """
    matched: bool
    found: bool
    error: Optional[AuthError] = None

    @property
    def message(self) -> str:
        if self.error is AuthError.EMPTY_USERNAME:
            return "Username required"
        if self.error is AuthError.USER_NOT_FOUND:
            return "User not found"
        return "Login successful!" if self.matched else "Invalid credentials"


# =============================================================================
# SERVICE CLASS
# =============================================================================

class CredentialService:
    """
    Register and authenticate users against one UserRegistry.

    Usage:
        registry = UserRegistry.load("users.txt")
        service = CredentialService(registry)

        failure = service.register("alice", "Tr0ub4dor&3x!", "Tr0ub4dor&3x!")
        if failure is None:
            result = service.authenticate("alice", "Tr0ub4dor&3x!")
            assert result.matched
    """

    def __init__(
        self,
        registry: UserRegistry,
        policy: Callable[[str], PolicyResult] = evaluate,
        hash_params: crypto.HashParams = crypto.MODERATE,
    ):
        """
        Args:
            registry: Loaded registry owned by this service
            policy: Any callable password -> PolicyResult (default: evaluate)
            hash_params: Argon2id cost tier used to hash and verify
        """
        self.registry = registry
        self.policy = policy
        self.hash_params = hash_params

    def evaluate_password(self, password: str) -> PolicyResult:
        """Run the policy only (for live feedback before register)."""
        return self.policy(password)

    def registered_user_count(self) -> int:
        return self.registry.count()

    def register(
        self,
        username: str,
        password: str,
        confirmation: str
    ) -> Optional[RegistrationFailure]:
        """
        Create a new account.

        Checks run in order and stop at the first failure:
        1. Username non-empty
        2. Username ASCII alphanumeric
        3. Username not taken
        4. Password accepted by policy
        5. Confirmation equals password exactly
        6. Salt + hash + persist

        Args:
            username: Requested username
            password: Raw password
            confirmation: Second, independently typed copy of the password

        Returns:
            None on success, RegistrationFailure otherwise
        """
        if not username:
            return RegistrationFailure(RegistrationError.EMPTY_USERNAME)
        if not is_valid_username(username):
            return RegistrationFailure(RegistrationError.INVALID_USERNAME_FORMAT)
        if self.registry.exists(username):
            return RegistrationFailure(RegistrationError.USERNAME_TAKEN)

        result = self.policy(password)
        if not result.accepted:
            logger.debug("Password rejected for %s: %s",
                         username, sorted(v.value for v in result.violations))
            return RegistrationFailure(RegistrationError.POLICY_REJECTED, result.violations)

        if password != confirmation:
            return RegistrationFailure(RegistrationError.PASSWORD_MISMATCH)

        salt = crypto.generate_salt()
        try:
            password_hash = crypto.hash_password(password, salt, self.hash_params)
        except ValueError:
            # Password not encodable as UTF-8: bad input, not an environment failure
            return RegistrationFailure(RegistrationError.POLICY_REJECTED)
        except crypto.HashingError as e:
            logger.error("Hashing failed while registering %s: %s", username, e)
            return RegistrationFailure(RegistrationError.HASHING_FAILED)

        try:
            self.registry.add(username, password_hash, salt)
        except UsernameTakenError:
            return RegistrationFailure(RegistrationError.USERNAME_TAKEN)
        except PersistenceError as e:
            logger.error("Could not persist new user %s: %s", username, e)
            return RegistrationFailure(RegistrationError.PERSISTENCE_FAILED)

        return None

    def authenticate(self, username: str, password: str) -> AuthResult:
        """
        Verify a login attempt.

        Unknown users return found=False without hashing anything.
        Verification errors count as a wrong password.
        """
        if not username:
            return AuthResult(matched=False, found=False, error=AuthError.EMPTY_USERNAME)

        credential = self.registry.lookup(username)
        if credential is None:
            logger.warning("Login attempt for unknown user %s", username)
            return AuthResult(matched=False, found=False, error=AuthError.USER_NOT_FOUND)

        matched = crypto.verify_password(
            password, credential.password_hash, credential.salt, self.hash_params
        )
        if matched:
            logger.info("User %s logged in", username)
        else:
            logger.warning("Invalid password for user %s", username)
        return AuthResult(matched=matched, found=True)
