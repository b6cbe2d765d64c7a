import logging
import os
import secrets
import shutil
import time
from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.credentials import DATABASE_ERROR_MESSAGE
from backend.auth.dependencies import Principal, require_admin, require_approved
from backend.core import config
from backend.core.errors import UnexpectedError
from backend.database import get_db
from backend.models.event import Event
from backend.models.item import Item

router = APIRouter(tags=['posting'])

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = '/uploads'


class EventResponse(BaseModel):
    id: int
    title: str
    description: str | None = None
    photo: str | None = None
    posted_by: str
    created_at: datetime

    class Config:
        from_attributes = True


class ItemResponse(BaseModel):
    id: int
    type: str
    name: str
    description: str | None = None
    photo: str | None = None
    posted_by: str
    created_at: datetime

    class Config:
        from_attributes = True


class PostResponse(BaseModel):
    success: bool = True
    message: str


class EventListResponse(BaseModel):
    success: bool = True
    events: list[EventResponse]


class ItemListResponse(BaseModel):
    success: bool = True
    items: list[ItemResponse]


def build_upload_filename(original_name: str | None) -> str:
    _, ext = os.path.splitext(original_name or '')
    return f'{int(time.time() * 1000)}-{secrets.token_hex(3)}{ext}'


def save_photo(photo: UploadFile | None) -> str:
    if photo is None or not photo.filename:
        return ''

    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    filename = build_upload_filename(photo.filename)
    with open(os.path.join(config.UPLOAD_DIR, filename), 'wb') as destination:
        shutil.copyfileobj(photo.file, destination)
    return f'{UPLOAD_URL_PREFIX}/{filename}'


def discard_photo(photo_path: str) -> None:
    if not photo_path:
        return
    path = os.path.join(config.UPLOAD_DIR, os.path.basename(photo_path))
    if os.path.exists(path):
        os.remove(path)


def save_record(db: Session, record) -> None:
    photo_path = record.photo
    try:
        db.add(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        discard_photo(photo_path)
        raise UnexpectedError(DATABASE_ERROR_MESSAGE) from exc


def post_item(db: Session, item_type: str, name: str, description: str, photo: UploadFile | None, posted_by: str) -> None:
    item = Item(
        type=item_type,
        name=name,
        description=description,
        photo=save_photo(photo),
        posted_by=posted_by,
        created_at=datetime.now(),
    )
    save_record(db, item)
    logger.info('%s item %r posted by %s', item_type.capitalize(), name, posted_by)


@router.post('/event/upload', response_model=PostResponse)
def upload_event(
    title: str = Form(...),
    description: str = Form(''),
    photo: UploadFile | None = File(None),
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    event = Event(
        title=title,
        description=description,
        photo=save_photo(photo),
        posted_by=admin.email,
        created_at=datetime.now(),
    )
    save_record(db, event)
    logger.info('Event %r posted by %s', title, admin.email)
    return PostResponse(message='Event uploaded successfully')


@router.get('/events/all', response_model=EventListResponse)
def list_events(db: Session = Depends(get_db)):
    events = db.query(Event).order_by(Event.created_at.desc(), Event.id.desc()).all()
    return EventListResponse(events=[EventResponse.model_validate(event) for event in events])


@router.post('/upload/lost', response_model=PostResponse)
def upload_lost_item(
    name: str = Form(...),
    description: str = Form(''),
    photo: UploadFile | None = File(None),
    principal: Principal = Depends(require_approved),
    db: Session = Depends(get_db),
):
    post_item(db, 'lost', name, description, photo, principal.email)
    return PostResponse(message='Lost item posted successfully')


@router.post('/upload/found', response_model=PostResponse)
def upload_found_item(
    name: str = Form(...),
    description: str = Form(''),
    photo: UploadFile | None = File(None),
    principal: Principal = Depends(require_approved),
    db: Session = Depends(get_db),
):
    post_item(db, 'found', name, description, photo, principal.email)
    return PostResponse(message='Found item posted successfully')


@router.get('/items/all', response_model=ItemListResponse)
def list_items(db: Session = Depends(get_db)):
    items = db.query(Item).order_by(Item.created_at.desc(), Item.id.desc()).all()
    return ItemListResponse(items=[ItemResponse.model_validate(item) for item in items])
