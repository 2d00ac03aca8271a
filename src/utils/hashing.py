import hashlib
from passlib.context import CryptContext

BCRYPT_ROUNDS: int = 12

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS
)


def _fit_bcrypt(secret: str) -> str:
    # bcrypt truncates inputs at 72 bytes, so pre-hash long secrets
    if len(secret.encode("utf-8")) > 72:
        return hashlib.sha256(secret.encode("utf-8")).hexdigest()
    return secret


class HashingService:
    """Service for secure hashing and verification of passwords."""

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash a password using bcrypt with salt.

        Args:
            password: The plain text password to hash

        Returns:
            The hashed password as a string
        """
        return pwd_context.hash(_fit_bcrypt(password))

    @staticmethod
    def verify_password(password: str, hashed_password: str | None) -> bool:
        """
        Verify a plain password against its hash.

        Accounts created without a password (admin invites, OAuth) never verify.
        """
        if not hashed_password:
            return False
        try:
            return pwd_context.verify(_fit_bcrypt(password), hashed_password)
        except (ValueError, TypeError):
            return False
