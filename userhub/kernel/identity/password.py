"""
Password hashing utilities using bcrypt.
"""

import bcrypt

# Work factor for bcrypt hashing
BCRYPT_ROUNDS = 10


class PasswordHasher:
    """Password hashing service."""

    @staticmethod
    def _truncate_password(password: str) -> bytes:
        """
        Truncate password to 72 bytes (bcrypt limit) and encode.

        bcrypt only uses the first 72 bytes of a password.
        """
        return password.encode("utf-8")[:72]

    @staticmethod
    def hash(password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        pwd_bytes = PasswordHasher._truncate_password(password)
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(pwd_bytes, salt).decode("utf-8")

    @staticmethod
    def verify(plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            plain_password: Plain text password to verify
            hashed_password: Stored hashed password

        Returns:
            True if password matches, False otherwise (including malformed hashes)
        """
        try:
            pwd_bytes = PasswordHasher._truncate_password(plain_password)
            return bcrypt.checkpw(pwd_bytes, hashed_password.encode("utf-8"))
        except (ValueError, TypeError):
            return False
