from passlib.context import CryptContext

from app.core.config import settings

# PBKDF2 avoids bcrypt backend/version issues and the 72-byte bcrypt input limit.
pwd_context = CryptContext(schemes=[settings.PASSWORD_SCHEME], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of `password` against a stored hash. Malformed hashes never match."""
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        return False
