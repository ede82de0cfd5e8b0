from typing import Any

import jwt
from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from heliclockter import datetime_utc, timedelta
from jwt import InvalidTokenError
from pydantic import BaseModel
from starlette import status

from courtside.config import config
from courtside.models.db.account import UserAccountType
from courtside.models.db.user import UserInDB, UserPublic
from courtside.sql.users import get_user_by_email
from courtside.utils.id_types import UserId
from courtside.utils.security import verify_password

router = APIRouter(prefix=config.api_prefix)

JWT_ALGORITHM = "HS256"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{config.api_prefix}/token", auto_error=False)


class Token(BaseModel):
    access_token: str
    token_type: str
    user_id: UserId
    account_type: UserAccountType


async def authenticate_user(email: str, password: str) -> UserInDB | None:
    user = await get_user_by_email(email)
    if user is None:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


def create_access_token(data: dict[str, Any], expires_delta: timedelta) -> str:
    to_encode = data.copy()
    expire = datetime_utc.now() + expires_delta
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.jwt_secret, algorithm=JWT_ALGORITHM)


async def check_jwt_and_get_user(token: str) -> UserPublic | None:
    try:
        payload = jwt.decode(token, config.jwt_secret, algorithms=[JWT_ALGORITHM])
    except InvalidTokenError:
        return None

    email = payload.get("user")
    if not isinstance(email, str):
        return None

    user = await get_user_by_email(email)
    if user is None:
        return None

    return UserPublic.model_validate(user.model_dump(exclude={"password_hash"}))


def is_admin_user(user: UserPublic) -> bool:
    return user.account_type == UserAccountType.ADMIN


def is_coach_or_admin_user(user: UserPublic) -> bool:
    return user.account_type in {UserAccountType.COACH, UserAccountType.ADMIN}


async def user_authenticated(token: str | None = Depends(oauth2_scheme)) -> UserPublic:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if token is None:
        raise credentials_exception

    user = await check_jwt_and_get_user(token)
    if user is None:
        raise credentials_exception

    return user


async def user_authenticated_coach_or_admin(
    user: UserPublic = Depends(user_authenticated),
) -> UserPublic:
    if not is_coach_or_admin_user(user):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Coach or admin access required",
        )
    return user


async def user_authenticated_admin(user: UserPublic = Depends(user_authenticated)) -> UserPublic:
    if not is_admin_user(user):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin access required",
        )
    return user


@router.post("/token", response_model=Token)
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()) -> Token:
    user = await authenticate_user(form_data.username, form_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        data={"user": user.email},
        expires_delta=timedelta(minutes=config.access_token_expire_minutes),
    )
    return Token(
        access_token=access_token,
        token_type="bearer",
        user_id=user.id,
        account_type=user.account_type,
    )
