"""Password Hashing — bcrypt one-way transform for stored credentials.

Invariants:
    - Plaintext passwords are never stored or returned
    - Cost factor comes from settings.bcrypt_rounds
"""

import bcrypt


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=rounds),
    ).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(
        password.encode("utf-8"), password_hash.encode("utf-8"),
    )
