"""Password hashing for admin accounts."""

from passlib.context import CryptContext


pwd = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return pwd.verify(password, password_hash)
    except ValueError:
        # Unrecognized or malformed hash
        return False
