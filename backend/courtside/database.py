import databases

from courtside.config import config

database = databases.Database(str(config.pg_dsn))
