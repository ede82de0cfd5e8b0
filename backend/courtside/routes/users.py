from fastapi import APIRouter, Depends, HTTPException, Query
from heliclockter import datetime_utc
from starlette import status

from courtside.config import config
from courtside.models.db.account import UserAccountType
from courtside.models.db.user import (
    UserInsertable,
    UserPublic,
    UserToRegister,
    UserToUpdate,
)
from courtside.routes.auth import user_authenticated, user_authenticated_admin
from courtside.routes.models import UserPublicResponse, UsersResponse
from courtside.sql.users import create_user, get_user_by_email, get_user_by_id, get_users, update_user
from courtside.utils.errors import UniqueIndex, check_unique_constraint_violation
from courtside.utils.security import hash_password
from courtside.utils.types import assert_some

router = APIRouter(prefix=config.api_prefix)


@router.get("/users", response_model=UsersResponse)
async def list_users(
    account_type: UserAccountType | None = Query(default=None),
    _: UserPublic = Depends(user_authenticated_admin),
) -> UsersResponse:
    return UsersResponse(data=await get_users(account_type))


@router.get("/users/me", response_model=UserPublicResponse)
async def get_me(user_public: UserPublic = Depends(user_authenticated)) -> UserPublicResponse:
    return UserPublicResponse(data=user_public)


@router.put("/users/me", response_model=UserPublicResponse)
async def update_me(
    user_to_update: UserToUpdate,
    user_public: UserPublic = Depends(user_authenticated),
) -> UserPublicResponse:
    await update_user(user_public.id, user_to_update)
    return UserPublicResponse(data=assert_some(await get_user_by_id(user_public.id)))


@router.post("/users/register", response_model=UserPublicResponse)
async def register_user(user_to_register: UserToRegister) -> UserPublicResponse:
    if await get_user_by_email(user_to_register.email) is not None:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "This email is already taken")

    user = UserInsertable(
        email=user_to_register.email,
        first_name=user_to_register.first_name,
        last_name=user_to_register.last_name,
        phone=user_to_register.phone,
        password_hash=hash_password(user_to_register.password),
        created=datetime_utc.now(),
        account_type=UserAccountType.PLAYER,
    )
    with check_unique_constraint_violation({UniqueIndex.users_email_key}):
        user_created = await create_user(user)

    return UserPublicResponse(data=user_created)
