from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from backend.auth.credentials import get_user_by_id
from backend.auth.jwt_handler import SessionIssuer
from backend.auth.recovery import CodeDelivery, log_delivery
from backend.core.errors import ForbiddenError, InvalidTokenError, UnauthenticatedError
from backend.database import get_db
from backend.models.user import Role

security = HTTPBearer(auto_error=False)

_session_issuer = SessionIssuer.from_config()


@dataclass(frozen=True)
class Principal:
    id: int
    email: str
    role: str
    approved: bool


def get_session_issuer() -> SessionIssuer:
    return _session_issuer


def get_code_delivery() -> CodeDelivery:
    return log_delivery


def get_current_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    issuer: SessionIssuer = Depends(get_session_issuer),
    db: Session = Depends(get_db),
) -> Principal:
    # Missing header, wrong scheme and a bad token all fail identically.
    if credentials is None:
        raise UnauthenticatedError("Invalid token")
    try:
        claims = issuer.verify(credentials.credentials)
    except InvalidTokenError as exc:
        raise UnauthenticatedError("Invalid token") from exc

    user = get_user_by_id(db, claims.id)
    if user is None:
        raise UnauthenticatedError("User not found")

    principal = Principal(id=user.id, email=user.email, role=user.role, approved=user.is_approved)
    request.state.principal = principal
    return principal


def require_role(role: Role):
    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role != role.value:
            raise ForbiddenError(f"{role.value.capitalize()} only")
        return principal

    return dependency


def require_approved(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.approved:
        raise ForbiddenError("Account not approved")
    return principal


require_admin = require_role(Role.ADMIN)
