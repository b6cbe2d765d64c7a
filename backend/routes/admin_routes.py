from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.auth import approval
from backend.auth.dependencies import Principal, require_admin
from backend.database import get_db

router = APIRouter(tags=['admin'])


class ApproveRequest(BaseModel):
    email: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError('Email is required.')
        return value


class PendingStudentResponse(BaseModel):
    email: str
    created_at: datetime

    class Config:
        from_attributes = True


class PendingListResponse(BaseModel):
    success: bool = True
    pending: list[PendingStudentResponse]


class ApproveResponse(BaseModel):
    success: bool = True
    message: str


@router.get('/pending', response_model=PendingListResponse)
def list_pending_students(
    _admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    pending = approval.list_pending(db)
    return PendingListResponse(pending=[PendingStudentResponse.model_validate(user) for user in pending])


@router.post('/approve', response_model=ApproveResponse)
def approve_student(
    data: ApproveRequest,
    admin: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    approval.approve(db, data.email, approved_by=admin.email)
    return ApproveResponse(message='Student approved successfully')
