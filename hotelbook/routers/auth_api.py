import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..errors import ConflictError, InvalidRequestError, UnauthorizedError
from ..limiter import limiter
from ..models import User, UserRole
from ..schemas import ChangePasswordIn, LoginIn, MessageOut, RegisterIn, UserOut
from ..security import clear_session, hash_password, require_user, set_session, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=UserOut, status_code=201)
@limiter.limit(settings.RATE_LIMIT_AUTH)
def register(request: Request, payload: RegisterIn, response: Response, db: Session = Depends(get_db)):
    email = str(payload.email).lower()
    if db.query(User).filter(User.email == email).first():
        raise ConflictError("Email is already registered")
    user = User(
        email=email,
        hashed_password=hash_password(payload.password),
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        phone=payload.phone,
        role=UserRole.GUEST.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    set_session(response, user.id)
    logger.info("User %s registered", user.id)
    return user


@router.post("/login", response_model=UserOut)
@limiter.limit(settings.RATE_LIMIT_AUTH)
def login(request: Request, payload: LoginIn, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == str(payload.email).lower()).first()
    if not user or not verify_password(payload.password, user.hashed_password):
        raise UnauthorizedError("Invalid email or password")
    if not user.is_active:
        raise UnauthorizedError("Account is disabled")
    set_session(response, user.id)
    return user


@router.post("/logout", response_model=MessageOut)
def logout(response: Response):
    clear_session(response)
    return MessageOut(message="Logged out")


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(require_user)):
    return user


@router.post("/change-password", response_model=MessageOut)
def change_password(payload: ChangePasswordIn, user: User = Depends(require_user), db: Session = Depends(get_db)):
    if not verify_password(payload.current_password, user.hashed_password):
        raise InvalidRequestError("Current password is incorrect")
    user.hashed_password = hash_password(payload.new_password)
    db.commit()
    return MessageOut(message="Password changed")
