import bcrypt

from backend.core import config

# bcrypt ignores (newer releases reject) anything past 72 bytes.
MAX_PASSWORD_BYTES = 72

_dummy_hash: str | None = None


def hash_password(password: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def burn_password_check(password: str) -> None:
    """Spend the same bcrypt work as a real check when there is no account to check against."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("dummy-password-not-used-for-auth")
    verify_password(password, _dummy_hash)
