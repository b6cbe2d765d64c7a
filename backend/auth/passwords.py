from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_hasher = PasswordHasher()

# Verified against when the account does not exist, so a miss costs the same
# as a wrong password.
_DUMMY_HASH = _hasher.hash("campus-hub-dummy-password")


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(hashed_password: str | None, password: str) -> bool:
    try:
        return _hasher.verify(hashed_password or _DUMMY_HASH, password)
    except (VerificationError, InvalidHashError):
        return False
