import fcntl
from collections.abc import Iterator
from contextlib import contextmanager

from alembic.config import Config

from alembic import command
from courtside.config import config
from courtside.utils.logging import logger


@contextmanager
def migration_lock(lock_path: str) -> Iterator[None]:
    """Serializes migrations across the workers of one host."""
    with open(lock_path, "w", encoding="utf-8") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file, fcntl.LOCK_UN)


def get_alembic_config() -> Config:
    return Config("alembic.ini")


def alembic_run_migrations() -> None:
    with migration_lock(config.migration_lock_path):
        logger.info("Running migrations, lock held at %s", config.migration_lock_path)
        command.upgrade(get_alembic_config(), "head")
