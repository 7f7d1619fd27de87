"""Password hashing with the ``bcrypt`` library.

Seeded accounts are hashed by pgcrypto's ``crypt(..., gen_salt('bf'))``,
which produces ``$2a$`` hashes; ``bcrypt.checkpw`` accepts both prefixes.
"""

import bcrypt


def hash_password(plain: str) -> str:
    """Hash a plain-text password with bcrypt. Returns a utf-8 hash string."""
    hashed_bytes: bytes = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt())
    return hashed_bytes.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
