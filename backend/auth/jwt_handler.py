from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from backend.core import config
from backend.core.errors import InvalidTokenError
from backend.models.user import User


@dataclass(frozen=True)
class Claims:
    id: int
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime


class SessionIssuer:
    """Signs and verifies stateless session tokens.

    The issuer never touches the database: approval and existence are
    re-checked on every request by the access guard.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=12)) -> None:
        if not secret_key:
            raise ValueError("A signing secret is required.")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_config(cls) -> "SessionIssuer":
        return cls(
            config.JWT_SECRET_KEY,
            algorithm=config.JWT_ALGORITHM,
            ttl=timedelta(hours=config.SESSION_TOKEN_TTL_HOURS),
        )

    def issue(self, user: User, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> Claims:
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
            return Claims(
                id=int(payload["sub"]),
                email=payload["email"],
                role=payload["role"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (jwt.PyJWTError, KeyError, TypeError, ValueError) as exc:
            raise InvalidTokenError(str(exc)) from exc
