"""Delete expired password recovery codes.

Expired codes are already rejected at redemption, so this is housekeeping only.

Usage:
    python -m backend.purge_expired_codes
"""
import sys

from sqlalchemy.exc import SQLAlchemyError

from backend.auth.recovery import purge_expired_codes
from backend.core.errors import UnexpectedError
from backend.database import SessionLocal


def main() -> None:
    db = SessionLocal()
    try:
        removed = purge_expired_codes(db)
    except (SQLAlchemyError, UnexpectedError) as exc:
        print("Purge failed:", exc, file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()
    print(f"Removed {removed} expired recovery code(s).")


if __name__ == "__main__":
    main()
