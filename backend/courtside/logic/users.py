from heliclockter import datetime_utc

from courtside.config import config
from courtside.models.db.account import UserAccountType
from courtside.models.db.user import UserInsertable
from courtside.sql.users import create_user, get_admin_count, get_user_by_email
from courtside.utils.logging import logger
from courtside.utils.security import hash_password


async def create_admin_user_when_missing() -> None:
    """Create the configured admin account when the database has no admin yet."""
    if config.admin_email is None or config.admin_password is None:
        return

    if await get_admin_count() > 0:
        return

    if await get_user_by_email(config.admin_email) is not None:
        logger.warning(
            "No admin account exists, but %s is already taken by a non-admin user",
            config.admin_email,
        )
        return

    admin = await create_user(
        UserInsertable(
            email=config.admin_email.lower(),
            first_name="Admin",
            last_name="User",
            password_hash=hash_password(config.admin_password),
            created=datetime_utc.now(),
            account_type=UserAccountType.ADMIN,
        )
    )
    logger.info("Created admin account %s (id=%s)", admin.email, int(admin.id))
