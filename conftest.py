import os
import tempfile

os.environ.setdefault('APP_ENV', 'test')
os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('UPLOAD_DIR', tempfile.mkdtemp(prefix='campus-hub-uploads-'))
os.environ.setdefault('JWT_SECRET_KEY', 'test-signing-secret-that-is-long-enough-for-hs256')
os.environ.setdefault('ADMIN_EMAIL', 'admin@campus.edu')
os.environ.setdefault('ADMIN_PASSWORD', 'admin-test-password')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from backend.core import config  # noqa: E402
from backend.database import Base, SessionLocal, engine  # noqa: E402
from backend.main import app  # noqa: E402


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    # Entering the client runs startup, which seeds the admin account.
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token(client) -> str:
    response = client.post(
        '/api/admin/login',
        json={'email': config.ADMIN_EMAIL, 'password': config.ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return response.json()['token']
