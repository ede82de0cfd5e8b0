import json
from datetime import date
from typing import Any

from heliclockter import datetime_utc

from courtside.database import database
from courtside.models.db.game import Game, GameBody, GameInsertable, GameStatus, GameWithDetails
from courtside.models.db.league import LeagueSummary
from courtside.models.db.team import TeamSummary
from courtside.schema import games
from courtside.utils.db import insert_generic
from courtside.utils.id_types import GameId, LeagueId, TeamId

_GAME_LOCK_SALT = 6_131_950_443_812_290_560

_GAME_WITH_DETAILS_QUERY = """
    SELECT
        g.*,
        l.name AS league_name,
        l.division AS league_division,
        l.season AS league_season,
        ht.name AS home_team_name,
        ht.logo AS home_team_logo,
        ht.wins AS home_team_wins,
        ht.losses AS home_team_losses,
        awt.name AS away_team_name,
        awt.logo AS away_team_logo,
        awt.wins AS away_team_wins,
        awt.losses AS away_team_losses
    FROM games g
    JOIN leagues l ON l.id = g.league_id
    JOIN teams ht ON ht.id = g.home_team_id
    JOIN teams awt ON awt.id = g.away_team_id
    """


def _parse_game_with_details(row: Any) -> GameWithDetails:
    mapping = dict(row._mapping)
    league = LeagueSummary(
        id=mapping["league_id"],
        name=mapping.pop("league_name"),
        division=mapping.pop("league_division"),
        season=mapping.pop("league_season"),
    )
    teams: dict[str, TeamSummary] = {}
    for side in ("home", "away"):
        teams[side] = TeamSummary(
            id=mapping[f"{side}_team_id"],
            name=mapping.pop(f"{side}_team_name"),
            logo=mapping.pop(f"{side}_team_logo"),
            wins=mapping.pop(f"{side}_team_wins"),
            losses=mapping.pop(f"{side}_team_losses"),
        )
    return GameWithDetails.model_validate(
        {**mapping, "league": league, "home_team": teams["home"], "away_team": teams["away"]}
    )


async def sql_get_game(game_id: GameId) -> Game | None:
    query = "SELECT * FROM games WHERE id = :game_id"
    result = await database.fetch_one(query=query, values={"game_id": game_id})
    return Game.model_validate(dict(result._mapping)) if result is not None else None


async def get_game_with_details(game_id: GameId) -> GameWithDetails | None:
    query = f"{_GAME_WITH_DETAILS_QUERY} WHERE g.id = :game_id"
    result = await database.fetch_one(query=query, values={"game_id": game_id})
    return _parse_game_with_details(result) if result is not None else None


async def sql_get_games(
    league_id: LeagueId | None = None,
    team_id: TeamId | None = None,
    status: GameStatus | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[GameWithDetails]:
    query = f"{_GAME_WITH_DETAILS_QUERY} WHERE TRUE "
    params: dict[str, Any] = {}

    if league_id is not None:
        query += "AND g.league_id = :league_id "
        params["league_id"] = league_id

    if team_id is not None:
        query += "AND (g.home_team_id = :team_id OR g.away_team_id = :team_id) "
        params["team_id"] = team_id

    if status is not None:
        query += "AND g.status = :status "
        params["status"] = status.value

    if start_date is not None:
        query += "AND g.scheduled_date >= :start_date "
        params["start_date"] = start_date

    if end_date is not None:
        query += "AND g.scheduled_date <= :end_date "
        params["end_date"] = end_date

    query += "ORDER BY g.scheduled_date, g.scheduled_time, g.id"
    result = await database.fetch_all(query=query, values=params)
    return [_parse_game_with_details(row) for row in result]


async def sql_create_game(game: GameBody) -> Game:
    now = datetime_utc.now()
    _, inserted = await insert_generic(
        database,
        GameInsertable(**game.model_dump(), created=now, updated=now),
        games,
        Game,
    )
    return inserted


def _game_lock_key(game_id: GameId) -> int:
    return _GAME_LOCK_SALT + int(game_id)


async def acquire_game_lock(game_id: GameId) -> None:
    """Block until no other transaction is updating this game; released on commit/rollback."""
    await database.execute(
        "SELECT pg_advisory_xact_lock(:lock_key)",
        values={"lock_key": _game_lock_key(game_id)},
    )


async def sql_update_game(game: Game) -> bool:
    query = """
        UPDATE games
        SET
            scheduled_date = :scheduled_date,
            scheduled_time = :scheduled_time,
            venue = :venue,
            venue_address = :venue_address,
            status = :status,
            home_score = :home_score,
            away_score = :away_score,
            quarter = :quarter,
            notes = :notes,
            officials = :officials,
            attendance = :attendance,
            updated = :updated
        WHERE id = :game_id
        RETURNING id
        """
    updated_id = await database.fetch_val(
        query=query,
        values={
            "game_id": game.id,
            "scheduled_date": game.scheduled_date,
            "scheduled_time": game.scheduled_time,
            "venue": game.venue,
            "venue_address": game.venue_address,
            "status": game.status.value,
            "home_score": game.home_score,
            "away_score": game.away_score,
            "quarter": game.quarter,
            "notes": game.notes,
            "officials": json.dumps([x.model_dump(mode="json") for x in game.officials]),
            "attendance": game.attendance,
            "updated": game.updated,
        },
    )
    return updated_id is not None


async def sql_delete_game(game_id: GameId) -> None:
    query = "DELETE FROM games WHERE id = :game_id"
    await database.execute(query=query, values={"game_id": game_id})
