"""
SecureAuth - Password Policy Module

Decides whether a password is acceptable and how strong it looks.

Rules (all must hold):
- At least 12 characters
- At least one lowercase letter, one uppercase letter and one digit
- At least one "special" character (anything outside A-Z, a-z, 0-9)

Every missing requirement is reported, not just the first one, so the UI
can show the full list at once.

Strength score (0-100, advisory only):
    min(40, floor(length * 3.33)) + 15 per character class present
"""

import math
import secrets
import string
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Tuple


# =============================================================================
# Configuration
# =============================================================================

MIN_LENGTH = 12
LENGTH_SCORE_CAP = 40
LENGTH_SCORE_FACTOR = 3.33
CLASS_SCORE = 15             # per character class present
MAX_STRENGTH = 100

WEAK_BELOW = 70
EXCELLENT_FROM = 90

SPECIAL_CHARS = "!@#$%^&*()_+-="

REQUIREMENTS = (
    "Password Requirements:\n"
    f"- Minimum {MIN_LENGTH} characters\n"
    "- At least 1 uppercase, 1 lowercase\n"
    "- At least 1 digit and 1 special character"
)


class Violation(Enum):
    """One unmet password-composition rule."""
    TOO_SHORT = "too_short"
    MISSING_LOWERCASE = "missing_lowercase"
    MISSING_UPPERCASE = "missing_uppercase"
    MISSING_DIGIT = "missing_digit"
    MISSING_SPECIAL = "missing_special"


_MESSAGES = {
    Violation.TOO_SHORT: f"Password length must be at least {MIN_LENGTH} characters",
    Violation.MISSING_LOWERCASE: "Missing lowercase character",
    Violation.MISSING_UPPERCASE: "Missing uppercase character",
    Violation.MISSING_DIGIT: "Missing digit",
    Violation.MISSING_SPECIAL: "Missing special character",
}


@dataclass(frozen=True)
class PolicyResult:
    """Verdict for one password: accepted flag, every violation, strength."""
    accepted: bool
    violations: FrozenSet[Violation]
    strength: int

    def messages(self) -> List[str]:
        """Violation messages in declaration order (length first)."""
        return [describe(v) for v in Violation if v in self.violations]


# =============================================================================
# Evaluation
# =============================================================================

def _character_classes(password: str) -> Tuple[bool, bool, bool, bool]:
    """Return (has_lower, has_upper, has_digit, has_special), ASCII only."""
    has_lower = has_upper = has_digit = has_special = False
    for c in password:
        if c in string.ascii_lowercase:
            has_lower = True
        elif c in string.ascii_uppercase:
            has_upper = True
        elif c in string.digits:
            has_digit = True
        else:
            has_special = True
    return has_lower, has_upper, has_digit, has_special


def strength_score(password: str) -> int:
    """
    Compute the 0-100 strength score.

    Length gives up to 40 points (floor of length * 3.33), and each of
    the four character classes present adds 15. Independent of acceptance,
    so a rejected password can still score above zero.
    """
    score = min(LENGTH_SCORE_CAP, math.floor(len(password) * LENGTH_SCORE_FACTOR))
    score += CLASS_SCORE * sum(_character_classes(password))
    return min(MAX_STRENGTH, score)


def evaluate(password: str) -> PolicyResult:
    """
    Evaluate a password against the policy.

    All rules are checked; nothing short-circuits.

    Args:
        password: Candidate password (raw string)

    Returns:
        PolicyResult with accepted flag, violation set and strength score
    """
    has_lower, has_upper, has_digit, has_special = _character_classes(password)

    violations = set()
    if len(password) < MIN_LENGTH:
        violations.add(Violation.TOO_SHORT)
    if not has_lower:
        violations.add(Violation.MISSING_LOWERCASE)
    if not has_upper:
        violations.add(Violation.MISSING_UPPERCASE)
    if not has_digit:
        violations.add(Violation.MISSING_DIGIT)
    if not has_special:
        violations.add(Violation.MISSING_SPECIAL)

    return PolicyResult(
        accepted=not violations,
        violations=frozenset(violations),
        strength=strength_score(password),
    )


def describe(violation: Violation) -> str:
    return _MESSAGES[violation]


def strength_label(strength: int) -> str:
    """Map a score to "weak" (< 70), "good", or "excellent" (>= 90)."""
    if strength < WEAK_BELOW:
        return "weak"
    if strength >= EXCELLENT_FROM:
        return "excellent"
    return "good"


# =============================================================================
# Password Suggestion
# =============================================================================

def suggest_password(length: int = 16) -> str:
    """
    Generate a random password that this policy accepts.

    One character from each class is placed first, the rest is drawn from
    the full alphabet, then the whole thing is shuffled with a CSPRNG.

    Args:
        length: Password length (at least MIN_LENGTH)

    Returns:
        Random password string

    Raises:
        ValueError: If length is below MIN_LENGTH
    """
    if length < MIN_LENGTH:
        raise ValueError(f"length must be at least {MIN_LENGTH}")

    pools = [string.ascii_lowercase, string.ascii_uppercase, string.digits, SPECIAL_CHARS]
    alphabet = "".join(pools)

    chars = [secrets.choice(pool) for pool in pools]
    chars += [secrets.choice(alphabet) for _ in range(length - len(pools))]

    # secrets has no shuffle; SystemRandom is backed by os.urandom
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)
