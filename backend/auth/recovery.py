"""One-time code password recovery.

A code is keyed by email; issuing a new one deletes the previous row inside
the same transaction, and the unique constraint on ``recovery_codes.email``
rejects a concurrent second insert. Redemption consumes the row with a
conditional delete, so only one caller can win a given code. Expiry is
checked lazily at redemption; all timestamps are naive UTC.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth import credentials
from backend.core import config
from backend.core.errors import (
    ConflictError,
    ExpiredCodeError,
    InvalidCodeError,
    NotFoundError,
    UnexpectedError,
)
from backend.models.recovery_code import RecoveryCode

logger = logging.getLogger(__name__)

CODE_MIN = 100000
CODE_MAX = 999999


class CodeDelivery(Protocol):
    def __call__(self, email: str, code: str) -> None: ...


def log_delivery(email: str, code: str) -> None:
    """Development channel: writes the code to the application log."""
    logger.info('Recovery code for %s: %s', email, code)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_code() -> str:
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


def find_code(db: Session, email: str, code: str) -> RecoveryCode | None:
    return (
        db.query(RecoveryCode)
        .filter(RecoveryCode.email == email, RecoveryCode.code == code)
        .first()
    )


def request_code(
    db: Session,
    email: str,
    now: datetime | None = None,
    ttl_seconds: int | None = None,
) -> RecoveryCode:
    if credentials.get_user_by_email(db, email) is None:
        raise NotFoundError('Email not registered')

    now = now or utcnow()
    ttl = config.RECOVERY_CODE_TTL_SECONDS if ttl_seconds is None else ttl_seconds

    try:
        db.query(RecoveryCode).filter(RecoveryCode.email == email).delete(synchronize_session=False)
        record = RecoveryCode(
            email=email,
            code=generate_code(),
            expires_at=now + timedelta(seconds=ttl),
        )
        db.add(record)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError('A recovery code request is already in progress') from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise UnexpectedError(credentials.DATABASE_ERROR_MESSAGE) from exc
    db.refresh(record)

    logger.info('Issued recovery code for %s (expires %s UTC)', email, record.expires_at.isoformat())
    return record


def redeem_code(
    db: Session,
    email: str,
    code: str,
    new_password: str,
    now: datetime | None = None,
) -> None:
    record = find_code(db, email, code)
    if record is None:
        raise InvalidCodeError('Invalid OTP')

    now = now or utcnow()
    if now > record.expires_at:
        raise ExpiredCodeError('OTP expired')

    try:
        consumed = (
            db.query(RecoveryCode)
            .filter(RecoveryCode.id == record.id, RecoveryCode.code == code)
            .delete(synchronize_session=False)
        )
        if consumed != 1:
            # Redeemed or superseded since it was read.
            db.rollback()
            raise InvalidCodeError('Invalid OTP')
        # Password change and code consumption commit together.
        credentials.set_password(db, email, new_password, commit=False)
        db.commit()
    except NotFoundError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        raise UnexpectedError(credentials.DATABASE_ERROR_MESSAGE) from exc

    logger.info('Password reset via recovery code for %s', email)


def purge_expired_codes(db: Session, now: datetime | None = None) -> int:
    now = now or utcnow()
    try:
        removed = (
            db.query(RecoveryCode)
            .filter(RecoveryCode.expires_at < now)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise UnexpectedError(credentials.DATABASE_ERROR_MESSAGE) from exc
    return removed
