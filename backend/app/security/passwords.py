"""
BileMo API — Password Hashing
===============================

bcrypt with a per-password random salt. Hashes are stored as text; bcrypt
embeds the salt and cost factor in the hash itself, so verification needs
nothing else.

bcrypt only reads the first 72 bytes of a password; CustomerCreate caps the
length at 72 so two different long passwords can't collide silently.
"""

import bcrypt


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        # Stored value is not a bcrypt hash (e.g. seeded plaintext)
        return False
