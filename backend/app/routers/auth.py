from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
import logging

from ..core.db import get_db
from ..core.errors import Conflict
from ..core.security import (
    hash_password, verify_password, create_access_token, get_current_user
)
from ..models.user import AppUser
from ..schemas.user import UserCreate, UserRead, Token

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _serialize_user(u: AppUser) -> dict:
    return UserRead.model_validate(u).model_dump(mode="json")


# ---- Endpoints ----
@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    username = payload.username.strip()
    full_name = payload.full_name.strip() if payload.full_name else None
    email = payload.email.strip().lower() if payload.email else None

    if db.query(AppUser).filter(AppUser.Username == username).first():
        raise Conflict("el nombre de usuario ya existe", errors={"username": "ya existe"})
    if email and db.query(AppUser).filter(AppUser.Email == email).first():
        raise Conflict("el email ya existe", errors={"email": "ya existe"})

    user = AppUser(
        Username=username,
        FullName=full_name,
        Email=email,
        Role=payload.role or "empleado",
        IsActive=True,
        HashedPassword=hash_password(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user registered id=%s role=%s", user.UserID, user.Role)
    return _serialize_user(user)


@router.post("/login", response_model=Token)
def login(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = db.query(AppUser).filter(AppUser.Username == form.username.strip()).first()
    if not user or not user.IsActive or not verify_password(form.password, user.HashedPassword):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="usuario o contraseña incorrectos",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token(sub=user.Username, role=user.Role)
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=UserRead)
def me(current: AppUser = Depends(get_current_user)):
    return _serialize_user(current)
