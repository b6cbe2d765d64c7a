"""Student approval queue.

Approval is a one-way latch: there is no operation that clears it.
"""

import logging

from sqlalchemy.orm import Session

from backend.auth import credentials
from backend.models.user import Role, User

logger = logging.getLogger(__name__)


def list_pending(db: Session) -> list[User]:
    return (
        db.query(User)
        .filter(User.role == Role.STUDENT.value, User.approved.is_(False))
        .order_by(User.id)
        .all()
    )


def approve(db: Session, email: str, approved_by: str | None = None) -> User:
    user = credentials.set_approved(db, email)
    logger.info('Approved %s (by %s)', email, approved_by or 'system')
    return user
