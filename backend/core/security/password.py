"""
Password hashing for readers and staff.
"""

from typing import Optional

from passlib.context import CryptContext


class PasswordHasher:
    """bcrypt hashing with a configurable work factor.

    Tests build it with ``rounds=4``; production uses ``BCRYPT_ROUNDS``.
    """

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
            # hashes below the configured work factor are flagged by needs_update
            bcrypt__min_rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """
        Check a password against a stored hash.

        A missing hash (unknown account) still costs one bcrypt round trip so
        that lookups of unregistered phones and emails take as long as real
        ones. Malformed hashes count as a mismatch.
        """
        if hashed_password is None:
            self._context.dummy_verify()
            return False
        try:
            return self._context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            return False

    def needs_rehash(self, hashed_password: str) -> bool:
        """True when the hash was made with a different work factor."""
        return self._context.needs_update(hashed_password)
