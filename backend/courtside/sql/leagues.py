from typing import Any

from heliclockter import datetime_utc

from courtside.database import database
from courtside.models.db.league import (
    Division,
    League,
    LeagueBody,
    LeagueInsertable,
    LeagueStatus,
)
from courtside.schema import leagues
from courtside.utils.db import insert_generic
from courtside.utils.id_types import LeagueId


async def sql_get_league(league_id: LeagueId) -> League | None:
    query = "SELECT * FROM leagues WHERE id = :league_id"
    result = await database.fetch_one(query=query, values={"league_id": league_id})
    return League.model_validate(dict(result._mapping)) if result is not None else None


async def sql_get_leagues(
    division: Division | None = None,
    season: str | None = None,
    status: LeagueStatus | None = None,
) -> list[League]:
    query = """
        SELECT *
        FROM leagues
        WHERE TRUE
        """
    params: dict[str, Any] = {}

    if division is not None:
        query += "AND division = :division "
        params["division"] = division.value

    if season is not None:
        query += "AND season = :season "
        params["season"] = season

    if status is not None:
        query += "AND status = :status "
        params["status"] = status.value

    query += "ORDER BY start_date DESC"
    result = await database.fetch_all(query=query, values=params)
    return [League.model_validate(dict(x._mapping)) for x in result]


async def sql_create_league(league: LeagueBody) -> League:
    _, inserted = await insert_generic(
        database,
        LeagueInsertable(**league.model_dump(), created=datetime_utc.now()),
        leagues,
        League,
    )
    return inserted


async def sql_update_league(league_id: LeagueId, league: League) -> None:
    await database.execute(
        query=leagues.update().where(leagues.c.id == league_id),
        values=league.model_dump(exclude={"id", "created"}),
    )


async def sql_delete_league(league_id: LeagueId) -> None:
    query = "DELETE FROM leagues WHERE id = :league_id"
    await database.execute(query=query, values={"league_id": league_id})
