from typing import Annotated

from heliclockter import datetime_utc
from pydantic import BaseModel, StringConstraints

from courtside.models.db.account import UserAccountType
from courtside.models.db.shared import BaseModelORM
from courtside.utils.id_types import UserId

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class UserBase(BaseModelORM):
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    created: datetime_utc
    account_type: UserAccountType = UserAccountType.PLAYER


class UserInsertable(UserBase):
    password_hash: str


class UserPublic(UserBase):
    id: UserId


class UserInDB(UserBase):
    id: UserId
    password_hash: str


class UserToRegister(BaseModelORM):
    email: Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, pattern=r".+@.+")]
    first_name: NameStr
    last_name: NameStr
    phone: str | None = None
    password: Annotated[str, StringConstraints(min_length=6, max_length=72)]


class UserToUpdate(BaseModel):
    first_name: NameStr | None = None
    last_name: NameStr | None = None
    phone: str | None = None


class UserSummary(BaseModelORM):
    id: UserId
    first_name: str
    last_name: str
    email: str | None = None
