import os

import pytest
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.core.errors import UnexpectedError
from backend.models.event import Event
from backend.routes.posting_routes import save_record


def _auth(token: str) -> dict:
    return {'Authorization': f'Bearer {token}'}


def _student_token(client, admin_token: str) -> str:
    client.post('/api/student/register', json={'email': 'a@x.edu', 'password': 'pw1'})
    client.post('/api/admin/approve', json={'email': 'a@x.edu'}, headers=_auth(admin_token))
    return client.post('/api/student/login', json={'email': 'a@x.edu', 'password': 'pw1'}).json()['token']


def test_admin_uploads_event_with_photo(client, admin_token: str) -> None:
    response = client.post(
        '/api/event/upload',
        data={'title': 'Hackathon', 'description': 'Friday night'},
        files={'photo': ('poster.png', b'\x89PNG fake', 'image/png')},
        headers=_auth(admin_token),
    )

    assert response.json() == {'success': True, 'message': 'Event uploaded successfully'}

    events = client.get('/api/events/all').json()['events']
    assert len(events) == 1
    assert events[0]['title'] == 'Hackathon'
    assert events[0]['posted_by'] == config.ADMIN_EMAIL
    photo = events[0]['photo']
    assert photo.startswith('/uploads/') and photo.endswith('.png')
    assert os.path.exists(os.path.join(config.UPLOAD_DIR, photo.rsplit('/', 1)[1]))
    assert client.get(photo).content == b'\x89PNG fake'


def test_student_cannot_upload_event(client, admin_token: str) -> None:
    token = _student_token(client, admin_token)

    response = client.post('/api/event/upload', data={'title': 'Party'}, headers=_auth(token))

    assert response.status_code == 403
    assert client.get('/api/events/all').json()['events'] == []


def test_upload_event_without_token_is_unauthenticated(client) -> None:
    response = client.post('/api/event/upload', data={'title': 'Party'})

    assert response.status_code == 401


def test_student_posts_lost_and_found_items(client, admin_token: str) -> None:
    token = _student_token(client, admin_token)

    lost = client.post('/api/upload/lost', data={'name': 'Wallet', 'description': 'Brown'}, headers=_auth(token))
    found = client.post('/api/upload/found', data={'name': 'Keys'}, headers=_auth(token))

    assert lost.json() == {'success': True, 'message': 'Lost item posted successfully'}
    assert found.json() == {'success': True, 'message': 'Found item posted successfully'}

    items = client.get('/api/items/all').json()['items']
    assert [(item['type'], item['name']) for item in items] == [('found', 'Keys'), ('lost', 'Wallet')]
    assert {item['posted_by'] for item in items} == {'a@x.edu'}
    assert all(item['photo'] == '' for item in items)


def test_admin_may_post_items(client, admin_token: str) -> None:
    response = client.post('/api/upload/found', data={'name': 'Scarf'}, headers=_auth(admin_token))

    assert response.status_code == 200


def test_item_upload_requires_token(client) -> None:
    response = client.post('/api/upload/lost', data={'name': 'Wallet'})

    assert response.status_code == 401
    assert client.get('/api/items/all').json() == {'success': True, 'items': []}


class _FailingSession:
    def __init__(self) -> None:
        self.rolled_back = False

    def add(self, record) -> None:
        pass

    def commit(self) -> None:
        raise SQLAlchemyError('database is locked')

    def rollback(self) -> None:
        self.rolled_back = True


def test_save_record_removes_photo_when_commit_fails() -> None:
    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    stored_path = os.path.join(config.UPLOAD_DIR, 'orphan-check.png')
    with open(stored_path, 'wb') as stored:
        stored.write(b'\x89PNG fake')
    session = _FailingSession()
    event = Event(title='Hackathon', photo='/uploads/orphan-check.png', posted_by=config.ADMIN_EMAIL)

    with pytest.raises(UnexpectedError):
        save_record(session, event)

    assert session.rolled_back is True
    assert not os.path.exists(stored_path)
