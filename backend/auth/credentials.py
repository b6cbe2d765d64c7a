"""Account storage: registration, credential checks and password changes.

Email uniqueness is enforced by the ``users.email`` unique constraint, so two
concurrent registrations of the same address cannot both commit.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.passwords import hash_password, verify_password
from backend.core.errors import ConflictError, NotFoundError, UnauthenticatedError, UnexpectedError
from backend.models.user import Role, User

logger = logging.getLogger(__name__)

DATABASE_ERROR_MESSAGE = 'Database unavailable. Verify DATABASE_URL.'


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        raise UnexpectedError(DATABASE_ERROR_MESSAGE) from exc


def register(db: Session, email: str, password: str) -> User:
    if get_user_by_email(db, email) is not None:
        raise ConflictError('Email already exists')

    user = User(
        email=email,
        hashed_password=hash_password(password),
        role=Role.STUDENT.value,
        approved=False,
        created_at=datetime.now(),
    )
    db.add(user)
    try:
        _commit(db)
    except IntegrityError as exc:
        raise ConflictError('Email already exists') from exc
    db.refresh(user)

    logger.info('Registered student account %s (pending approval)', email)
    return user


def verify_credential(
    db: Session,
    email: str,
    password: str,
    required_role: Role | None = None,
    failure_message: str = 'Invalid credentials',
) -> User:
    user = get_user_by_email(db, email)
    # Always run one hash comparison so response time does not reveal
    # whether the account exists.
    password_ok = verify_password(user.hashed_password if user else None, password)

    if user is None or not password_ok:
        logger.info('Rejected login for %s: bad credentials', email)
        raise UnauthenticatedError(failure_message)
    if required_role is not None and user.role != required_role.value:
        logger.info('Rejected login for %s: role %s is not %s', email, user.role, required_role.value)
        raise UnauthenticatedError(failure_message)
    if not user.is_approved:
        logger.info('Rejected login for %s: account not approved', email)
        raise UnauthenticatedError(failure_message)
    return user


def set_approved(db: Session, email: str) -> User:
    user = get_user_by_email(db, email)
    if user is None:
        raise NotFoundError('Account not found')
    if user.approved:
        return user

    user.approved = True
    _commit(db)
    return user


def set_password(db: Session, email: str, new_password: str, commit: bool = True) -> User:
    user = get_user_by_email(db, email)
    if user is None:
        raise NotFoundError('Account not found')

    user.hashed_password = hash_password(new_password)
    if commit:
        _commit(db)
    return user


def seed_admin(db: Session, email: str, password: str) -> bool:
    """Create the admin account if it is missing. Returns True when created."""
    if get_user_by_email(db, email) is not None:
        logger.info('Admin exists: %s', email)
        return False

    db.add(
        User(
            email=email,
            hashed_password=hash_password(password),
            role=Role.ADMIN.value,
            approved=True,
            created_at=datetime.now(),
        )
    )
    try:
        _commit(db)
    except IntegrityError:
        # Another worker seeded it first.
        logger.info('Admin exists: %s', email)
        return False

    logger.info('Admin seeded: %s', email)
    return True
