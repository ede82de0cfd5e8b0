from typing import Any

from databases import Database
from pydantic import BaseModel
from sqlalchemy import Table
from sqlalchemy.sql import Select


async def fetch_one_parsed[BaseModelT: BaseModel](
    database: Database, model: type[BaseModelT], query: Select
) -> BaseModelT | None:
    record = await database.fetch_one(query)
    return model.model_validate(dict(record._mapping)) if record is not None else None


async def fetch_all_parsed[BaseModelT: BaseModel](
    database: Database, model: type[BaseModelT], query: Select
) -> list[BaseModelT]:
    records = await database.fetch_all(query)
    return [model.model_validate(dict(record._mapping)) for record in records]


async def insert_generic[BaseModelT: BaseModel](
    database: Database, data_model: BaseModel, table: Table, return_type: type[BaseModelT]
) -> tuple[int, BaseModelT]:
    values: dict[str, Any] = data_model.model_dump()
    last_record_id: int = await database.execute(query=table.insert(), values=values)
    row_inserted = await fetch_one_parsed(
        database, return_type, table.select().where(table.c.id == last_record_id)
    )
    assert row_inserted is not None
    return last_record_id, row_inserted
