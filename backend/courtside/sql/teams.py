import time

from heliclockter import datetime_utc

from courtside.config import config
from courtside.database import database
from courtside.models.db.team import (
    FullTeamWithRoster,
    RosterEntry,
    RosterEntryBody,
    RosterEntryInsertable,
    RosterEntryUpdateBody,
    Team,
    TeamBody,
    TeamInsertable,
    TeamRecord,
    TeamUpdateBody,
)
from courtside.models.db.user import UserSummary
from courtside.schema import team_players, teams
from courtside.utils.db import insert_generic
from courtside.utils.id_types import LeagueId, TeamId, UserId
from courtside.utils.logging import logger
from courtside.utils.types import dict_without_none


async def sql_get_team(team_id: TeamId) -> Team | None:
    query = "SELECT * FROM teams WHERE id = :team_id"
    result = await database.fetch_one(query=query, values={"team_id": team_id})
    return Team.model_validate(dict(result._mapping)) if result is not None else None


async def sql_get_teams(league_id: LeagueId | None = None) -> list[Team]:
    league_filter = "WHERE league_id = :league_id" if league_id is not None else ""
    query = f"""
        SELECT *
        FROM teams
        {league_filter}
        ORDER BY name
        """
    result = await database.fetch_all(
        query=query, values=dict_without_none({"league_id": league_id})
    )
    return [Team.model_validate(dict(x._mapping)) for x in result]


async def get_roster(team_id: TeamId) -> list[RosterEntry]:
    query = """
        SELECT tp.*, u.first_name, u.last_name, u.email
        FROM team_players tp
        JOIN users u ON u.id = tp.player_id
        WHERE tp.team_id = :team_id
        ORDER BY tp.created, tp.id
        """
    result = await database.fetch_all(query=query, values={"team_id": team_id})
    roster = []
    for row in result:
        mapping = dict(row._mapping)
        player = UserSummary(
            id=mapping["player_id"],
            first_name=mapping.pop("first_name"),
            last_name=mapping.pop("last_name"),
            email=mapping.pop("email"),
        )
        roster.append(RosterEntry.model_validate({**mapping, "player": player}))
    return roster


async def get_team_with_roster(team_id: TeamId) -> FullTeamWithRoster | None:
    team = await sql_get_team(team_id)
    if team is None:
        return None

    return FullTeamWithRoster(**team.model_dump(), roster=await get_roster(team_id))


async def sql_create_team(team: TeamBody) -> Team:
    _, inserted = await insert_generic(
        database,
        TeamInsertable(**team.model_dump(), created=datetime_utc.now()),
        teams,
        Team,
    )
    return inserted


async def sql_update_team(team_id: TeamId, team_body: TeamUpdateBody) -> None:
    nullable = {"color_primary", "color_secondary", "home_venue"}
    changes = {
        key: value
        for key, value in team_body.model_dump(exclude_unset=True).items()
        if value is not None or key in nullable
    }
    if len(changes) < 1:
        return

    await database.execute(query=teams.update().where(teams.c.id == team_id), values=changes)


async def sql_delete_team(team_id: TeamId) -> None:
    query = "DELETE FROM teams WHERE id = :team_id"
    await database.execute(query=query, values={"team_id": team_id})


async def lock_team_row(team_id: TeamId) -> None:
    """Serialize roster changes of a team for the rest of the current transaction."""
    await database.execute(
        "SELECT id FROM teams WHERE id = :team_id FOR UPDATE", values={"team_id": team_id}
    )


async def sql_insert_roster_entry(team_id: TeamId, body: RosterEntryBody) -> None:
    await database.execute(
        query=team_players.insert(),
        values=RosterEntryInsertable(
            **body.model_dump(), team_id=team_id, created=datetime_utc.now()
        ).model_dump(),
    )


async def sql_update_roster_entry(
    team_id: TeamId, player_id: UserId, body: RosterEntryUpdateBody
) -> None:
    changes = dict_without_none(body.model_dump())
    if len(changes) < 1:
        return

    await database.execute(
        query=team_players.update().where(
            (team_players.c.team_id == team_id) & (team_players.c.player_id == player_id)
        ),
        values=changes,
    )


async def sql_delete_roster_entries(team_id: TeamId, player_id: UserId) -> None:
    query = "DELETE FROM team_players WHERE team_id = :team_id AND player_id = :player_id"
    await database.execute(query=query, values={"team_id": team_id, "player_id": player_id})


async def get_team_records_for_update(team_ids: list[TeamId]) -> dict[TeamId, TeamRecord]:
    query = """
        SELECT id, wins, losses
        FROM teams
        WHERE id = ANY(:team_ids)
        FOR UPDATE
        """
    result = await database.fetch_all(query=query, values={"team_ids": team_ids})
    return {
        TeamId(row._mapping["id"]): TeamRecord(
            wins=row._mapping["wins"], losses=row._mapping["losses"]
        )
        for row in result
    }


async def sql_update_team_record(team_id: TeamId, record: TeamRecord) -> bool:
    query = """
        UPDATE teams
        SET wins = :wins, losses = :losses
        WHERE id = :team_id
        RETURNING id
        """
    updated_id = await database.fetch_val(
        query=query, values={"team_id": team_id, "wins": record.wins, "losses": record.losses}
    )
    return updated_id is not None


async def recalculate_league_records(league_id: LeagueId) -> tuple[int, int]:
    """
    Rebuild the win/loss counters of every team in a league from its completed games.

    Returns the number of teams that were updated and how long the rebuild took in milliseconds.
    """
    started_at = time.monotonic()

    async with database.transaction():
        teams_updated = await database.fetch_val(
            """
            WITH completed_games AS (
                SELECT home_team_id, away_team_id, home_score, away_score
                FROM games
                WHERE league_id = :league_id
                  AND status = 'COMPLETED'
                  AND home_score IS NOT NULL
                  AND away_score IS NOT NULL
            ),
            team_game_rows AS (
                SELECT
                    home_team_id AS team_id,
                    CASE WHEN home_score > away_score THEN 1 ELSE 0 END AS wins,
                    CASE WHEN home_score < away_score THEN 1 ELSE 0 END AS losses
                FROM completed_games
                UNION ALL
                SELECT
                    away_team_id AS team_id,
                    CASE WHEN away_score > home_score THEN 1 ELSE 0 END AS wins,
                    CASE WHEN away_score < home_score THEN 1 ELSE 0 END AS losses
                FROM completed_games
            ),
            team_stats AS (
                SELECT team_id, SUM(wins) AS wins, SUM(losses) AS losses
                FROM team_game_rows
                GROUP BY team_id
            ),
            updated AS (
                UPDATE teams t
                SET
                    wins = COALESCE(ts.wins, 0),
                    losses = COALESCE(ts.losses, 0)
                FROM teams scoped
                LEFT JOIN team_stats ts ON ts.team_id = scoped.id
                WHERE t.id = scoped.id
                  AND scoped.league_id = :league_id
                RETURNING t.id
            )
            SELECT count(*) FROM updated
            """,
            values={"league_id": league_id},
        )

    duration_ms = int((time.monotonic() - started_at) * 1000)
    if duration_ms >= config.records_rebuild_warn_ms:
        logger.warning(
            "Rebuilding league records was slow: league_id=%s duration_ms=%s",
            int(league_id),
            duration_ms,
        )
    return int(teams_updated or 0), duration_ms
