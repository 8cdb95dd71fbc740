from __future__ import annotations

from passlib.context import CryptContext

# argon2 for new hashes; bcrypt hashes from older databases still verify and
# get upgraded on the next successful login.
pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hashes a plain-text password."""
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str | None) -> tuple[bool, str | None]:
    """
    Checks ``password`` against a stored hash.

    Returns ``(valid, new_hash)`` where ``new_hash`` is set when the stored
    hash uses a deprecated scheme. A missing hash still costs one hash round
    so unknown usernames take as long as wrong passwords.
    """
    if not hashed_password:
        pwd_context.dummy_verify()
        return False, None
    return pwd_context.verify_and_update(password, hashed_password)
