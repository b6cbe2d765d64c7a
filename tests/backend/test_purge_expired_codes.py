from datetime import timedelta

from backend import purge_expired_codes
from backend.auth import credentials, recovery
from backend.models.recovery_code import RecoveryCode


def test_main_removes_expired_codes_and_reports_count(db, capsys) -> None:
    credentials.register(db, 'a@x.edu', 'pw1')
    recovery.request_code(db, 'a@x.edu', now=recovery.utcnow() - timedelta(hours=2), ttl_seconds=60)

    purge_expired_codes.main()

    assert capsys.readouterr().out.strip() == 'Removed 1 expired recovery code(s).'
    db.expire_all()
    assert db.query(RecoveryCode).count() == 0
