from courtside.database import database
from courtside.models.db.account import UserAccountType
from courtside.models.db.user import UserInDB, UserInsertable, UserPublic, UserToUpdate
from courtside.schema import users
from courtside.utils.db import fetch_all_parsed, fetch_one_parsed
from courtside.utils.id_types import UserId
from courtside.utils.types import dict_without_none


async def get_user_by_id(user_id: UserId) -> UserPublic | None:
    return await fetch_one_parsed(database, UserPublic, users.select().where(users.c.id == user_id))


async def get_user_by_email(email: str) -> UserInDB | None:
    query = """
        SELECT *
        FROM users
        WHERE lower(email) = lower(:email)
        """
    result = await database.fetch_one(query=query, values={"email": email})
    return UserInDB.model_validate(dict(result._mapping)) if result is not None else None


async def get_users(account_type: UserAccountType | None = None) -> list[UserPublic]:
    query = users.select().order_by(users.c.last_name, users.c.first_name)
    if account_type is not None:
        query = query.where(users.c.account_type == account_type.value)
    return await fetch_all_parsed(database, UserPublic, query)


async def get_admin_count() -> int:
    query = "SELECT count(*) FROM users WHERE account_type = :account_type"
    return int(
        await database.fetch_val(query=query, values={"account_type": UserAccountType.ADMIN.value})
    )


async def create_user(user: UserInsertable) -> UserPublic:
    query = """
        INSERT INTO users (email, first_name, last_name, phone, password_hash, account_type, created)
        VALUES (:email, :first_name, :last_name, :phone, :password_hash, :account_type, :created)
        RETURNING *
        """
    result = await database.fetch_one(
        query=query,
        values={**user.model_dump(), "account_type": user.account_type.value},
    )
    assert result is not None
    return UserPublic.model_validate(dict(result._mapping))


async def update_user(user_id: UserId, user: UserToUpdate) -> None:
    changes = dict_without_none(user.model_dump())
    if len(changes) < 1:
        return

    await database.execute(query=users.update().where(users.c.id == user_id), values=changes)
