from fastapi import APIRouter, Depends, Query

from courtside.config import config
from courtside.database import database
from courtside.logic.roster import check_max_players_fits_roster, check_player_can_join_team
from courtside.models.db.team import (
    FullTeamWithRoster,
    RosterEntryBody,
    RosterEntryUpdateBody,
    TeamBody,
    TeamUpdateBody,
)
from courtside.models.db.user import UserPublic
from courtside.routes.auth import user_authenticated_admin, user_authenticated_coach_or_admin
from courtside.routes.models import SuccessResponse, TeamResponse, TeamsResponse
from courtside.routes.util import team_dependency
from courtside.sql.leagues import sql_get_league
from courtside.sql.teams import (
    get_team_with_roster,
    lock_team_row,
    sql_create_team,
    sql_delete_roster_entries,
    sql_delete_team,
    sql_get_teams,
    sql_insert_roster_entry,
    sql_update_roster_entry,
    sql_update_team,
)
from courtside.sql.users import get_user_by_id
from courtside.utils.errors import (
    ForeignKey,
    NotFound,
    UniqueIndex,
    check_foreign_key_violation,
    check_unique_constraint_violation,
)
from courtside.utils.id_types import LeagueId, TeamId, UserId
from courtside.utils.types import assert_some

router = APIRouter(prefix=config.api_prefix)


async def check_user_exists(user_id: UserId, entity: str = "user") -> None:
    if await get_user_by_id(user_id) is None:
        raise NotFound(entity, user_id)


@router.get("/teams", response_model=TeamsResponse)
async def get_teams(league_id: LeagueId | None = Query(default=None)) -> TeamsResponse:
    return TeamsResponse(data=await sql_get_teams(league_id))


@router.get("/teams/{team_id}", response_model=TeamResponse)
async def get_team(team: FullTeamWithRoster = Depends(team_dependency)) -> TeamResponse:
    return TeamResponse(data=team)


@router.post("/teams", response_model=TeamResponse)
async def create_team(
    team_body: TeamBody,
    _: UserPublic = Depends(user_authenticated_coach_or_admin),
) -> TeamResponse:
    if await sql_get_league(team_body.league_id) is None:
        raise NotFound("league", team_body.league_id)

    await check_user_exists(team_body.coach_id, "coach")

    with check_foreign_key_violation(
        {ForeignKey.teams_league_id_fkey, ForeignKey.teams_coach_id_fkey}
    ):
        team = await sql_create_team(team_body)

    return TeamResponse(data=assert_some(await get_team_with_roster(team.id)))


@router.put("/teams/{team_id}", response_model=TeamResponse)
async def update_team(
    team_body: TeamUpdateBody,
    _: UserPublic = Depends(user_authenticated_coach_or_admin),
    team: FullTeamWithRoster = Depends(team_dependency),
) -> TeamResponse:
    if team_body.coach_id is not None:
        await check_user_exists(team_body.coach_id, "coach")

    async with database.transaction():
        await lock_team_row(team.id)
        if team_body.max_players is not None:
            current = assert_some(await get_team_with_roster(team.id))
            check_max_players_fits_roster(current, team_body.max_players)

        with check_foreign_key_violation({ForeignKey.teams_coach_id_fkey}):
            await sql_update_team(team.id, team_body)

    return TeamResponse(data=assert_some(await get_team_with_roster(team.id)))


@router.delete("/teams/{team_id}", response_model=SuccessResponse)
async def delete_team(
    _: UserPublic = Depends(user_authenticated_admin),
    team: FullTeamWithRoster = Depends(team_dependency),
) -> SuccessResponse:
    with check_foreign_key_violation(
        {ForeignKey.games_home_team_id_fkey, ForeignKey.games_away_team_id_fkey}
    ):
        await sql_delete_team(team.id)

    return SuccessResponse()


@router.post("/teams/{team_id}/players", response_model=TeamResponse)
async def add_player_to_team(
    roster_entry: RosterEntryBody,
    team_id: TeamId,
    _: UserPublic = Depends(user_authenticated_coach_or_admin),
) -> TeamResponse:
    await check_user_exists(roster_entry.player_id, "player")

    async with database.transaction():
        await lock_team_row(team_id)
        team = await get_team_with_roster(team_id)
        if team is None:
            raise NotFound("team", team_id)

        check_player_can_join_team(team, roster_entry.player_id)
        with check_unique_constraint_violation({UniqueIndex.team_players_team_id_player_id_key}):
            await sql_insert_roster_entry(team_id, roster_entry)

    return TeamResponse(data=assert_some(await get_team_with_roster(team_id)))


@router.put("/teams/{team_id}/players/{player_id}", response_model=TeamResponse)
async def update_player_on_team(
    player_id: UserId,
    roster_entry: RosterEntryUpdateBody,
    _: UserPublic = Depends(user_authenticated_coach_or_admin),
    team: FullTeamWithRoster = Depends(team_dependency),
) -> TeamResponse:
    if player_id not in team.player_ids:
        raise NotFound("player on team", player_id)

    await sql_update_roster_entry(team.id, player_id, roster_entry)
    return TeamResponse(data=assert_some(await get_team_with_roster(team.id)))


@router.delete("/teams/{team_id}/players/{player_id}", response_model=TeamResponse)
async def remove_player_from_team(
    player_id: UserId,
    _: UserPublic = Depends(user_authenticated_coach_or_admin),
    team: FullTeamWithRoster = Depends(team_dependency),
) -> TeamResponse:
    await sql_delete_roster_entries(team.id, player_id)
    return TeamResponse(data=assert_some(await get_team_with_roster(team.id)))
