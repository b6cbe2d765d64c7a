from fastapi import APIRouter, BackgroundTasks, Depends
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.auth import credentials, recovery
from backend.auth.dependencies import get_code_delivery, get_session_issuer
from backend.auth.jwt_handler import SessionIssuer
from backend.auth.recovery import CodeDelivery
from backend.core import config
from backend.database import get_db
from backend.models.user import Role, User

router = APIRouter(tags=['auth'])

STUDENT_LOGIN_FAILURE = 'Invalid credentials or account not approved'
ADMIN_LOGIN_FAILURE = 'Invalid admin credentials'


def _require_text(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f'{field_name} is required.')
    return value


class CredentialsRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _require_text(value, 'Email')

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _require_text(value, 'Password')


class SendCodeRequest(BaseModel):
    email: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _require_text(value, 'Email')


class ResetPasswordRequest(BaseModel):
    email: str
    otp: str
    newPassword: str

    @field_validator('otp', mode='before')
    @classmethod
    def validate_otp(cls, value) -> str:
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            raise ValueError('OTP must be a string.')
        return _require_text(value.strip(), 'OTP')

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _require_text(value, 'Email')

    @field_validator('newPassword')
    @classmethod
    def validate_new_password(cls, value: str) -> str:
        return _require_text(value, 'New password')


class UserSummary(BaseModel):
    email: str
    role: str

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    user: UserSummary


class SendCodeResponse(BaseModel):
    success: bool = True
    message: str
    otp: str | None = None


def _login_response(user: User, issuer: SessionIssuer) -> LoginResponse:
    return LoginResponse(token=issuer.issue(user), user=UserSummary.model_validate(user))


@router.post('/student/register', response_model=MessageResponse)
def register_student(data: CredentialsRequest, db: Session = Depends(get_db)):
    credentials.register(db, data.email, data.password)
    return MessageResponse(message='Registered successfully. Wait for admin approval.')


@router.post('/student/login', response_model=LoginResponse)
def student_login(
    data: CredentialsRequest,
    db: Session = Depends(get_db),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    user = credentials.verify_credential(db, data.email, data.password, failure_message=STUDENT_LOGIN_FAILURE)
    return _login_response(user, issuer)


@router.post('/admin/login', response_model=LoginResponse)
def admin_login(
    data: CredentialsRequest,
    db: Session = Depends(get_db),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    user = credentials.verify_credential(
        db,
        data.email,
        data.password,
        required_role=Role.ADMIN,
        failure_message=ADMIN_LOGIN_FAILURE,
    )
    return _login_response(user, issuer)


@router.post('/forgot-password/send-otp', response_model=SendCodeResponse, response_model_exclude_none=True)
def send_recovery_code(
    data: SendCodeRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    deliver: CodeDelivery = Depends(get_code_delivery),
):
    record = recovery.request_code(db, data.email)
    # Delivery runs after the response; issuance does not wait on it.
    background_tasks.add_task(deliver, record.email, record.code)

    if config.RECOVERY_CODE_IN_RESPONSE:
        return SendCodeResponse(message='OTP sent successfully (check console)', otp=record.code)
    return SendCodeResponse(message='OTP sent successfully')


@router.post('/forgot-password/reset', response_model=MessageResponse)
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    recovery.redeem_code(db, data.email, data.otp, data.newPassword)
    return MessageResponse(message='Password reset successfully')
