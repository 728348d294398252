"""Admin credential check.

A single admin account is configured through the environment: a username
and a bcrypt hash of the password.
"""

import hmac
from typing import Optional

import bcrypt

from report_portal.logger import logger

# Checked against when no hash is configured so failures cost the same
_DUMMY_HASH = bcrypt.hashpw(b"report-portal-unset", bcrypt.gensalt(rounds=4))


def hash_password(password: str, rounds: int = 12) -> str:
    """Return a bcrypt hash suitable for the ADMIN_PASSWORD setting"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode(
        "ascii"
    )


class CredentialStore:
    """Static admin username + password hash"""

    def __init__(self, username: Optional[str], password_hash: Optional[str]):
        self.username = username
        self.password_hash = password_hash

    @property
    def configured(self) -> bool:
        return bool(self.username and self.password_hash)

    def _check_password(self, password: str) -> bool:
        hashed = (self.password_hash or "").encode("utf-8")
        try:
            if not hashed:
                bcrypt.checkpw(password.encode("utf-8"), _DUMMY_HASH)
                return False
            return bcrypt.checkpw(password.encode("utf-8"), hashed)
        except ValueError as e:
            # malformed configured hash, or a password bcrypt refuses (>72 bytes)
            logger.warning(f"Password check rejected: {e}")
            return False

    def verify(self, username: str, password: str) -> bool:
        """Check a submitted username/password pair.

        Both fields are always checked so the outcome does not reveal which
        one was wrong.

        Args:
            username: submitted username, compared by exact match
            password: submitted plaintext password

        Returns:
            True if both match the configured credentials
        """
        expected = (self.username or "").encode("utf-8")
        username_ok = bool(expected) and hmac.compare_digest(
            username.encode("utf-8"), expected
        )
        password_ok = self._check_password(password)
        return username_ok and password_ok
