from fastapi import APIRouter, Depends, HTTPException, Query
from heliclockter import datetime_utc
from pydantic import ValidationError
from starlette import status

from courtside.config import config
from courtside.logic.standings import calculate_standings
from courtside.models.db.league import (
    Division,
    League,
    LeagueBody,
    LeagueStatus,
    LeagueUpdateBody,
    LeagueWithTeams,
)
from courtside.models.db.team import TeamSummary
from courtside.models.db.user import UserPublic
from courtside.models.standings import RecordsRebuildView
from courtside.routes.auth import user_authenticated_admin
from courtside.routes.models import (
    LeagueResponse,
    LeaguesResponse,
    LeagueWithTeamsResponse,
    RecordsRebuildResponse,
    StandingsResponse,
    SuccessResponse,
)
from courtside.routes.util import league_dependency
from courtside.sql.leagues import (
    sql_create_league,
    sql_delete_league,
    sql_get_leagues,
    sql_update_league,
)
from courtside.sql.teams import recalculate_league_records, sql_get_teams
from courtside.utils.errors import ForeignKey, check_foreign_key_violation
from courtside.utils.logging import logger

router = APIRouter(prefix=config.api_prefix)


def merge_league_update(league: League, league_body: LeagueUpdateBody) -> League:
    merged = league.model_dump(exclude={"id", "created"}) | league_body.model_dump(
        exclude_unset=True, exclude_none=True
    )
    try:
        validated = LeagueBody.model_validate(merged)
    except ValidationError as exc:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            "; ".join(str(error["msg"]) for error in exc.errors()),
        ) from exc

    return League(**validated.model_dump(), id=league.id, created=league.created)


@router.get("/leagues", response_model=LeaguesResponse)
async def get_leagues(
    division: Division | None = Query(default=None),
    season: str | None = Query(default=None),
    status_filter: LeagueStatus | None = Query(default=None, alias="status"),
) -> LeaguesResponse:
    return LeaguesResponse(data=await sql_get_leagues(division, season, status_filter))


@router.get("/leagues/{league_id}", response_model=LeagueWithTeamsResponse)
async def get_league(league: League = Depends(league_dependency)) -> LeagueWithTeamsResponse:
    teams = await sql_get_teams(league.id)
    return LeagueWithTeamsResponse(
        data=LeagueWithTeams(
            **league.model_dump(),
            teams=[TeamSummary.model_validate(team) for team in teams],
        )
    )


@router.post("/leagues", response_model=LeagueResponse)
async def create_league(
    league_body: LeagueBody,
    _: UserPublic = Depends(user_authenticated_admin),
) -> LeagueResponse:
    return LeagueResponse(data=await sql_create_league(league_body))


@router.put("/leagues/{league_id}", response_model=LeagueResponse)
async def update_league(
    league_body: LeagueUpdateBody,
    _: UserPublic = Depends(user_authenticated_admin),
    league: League = Depends(league_dependency),
) -> LeagueResponse:
    updated = merge_league_update(league, league_body)
    await sql_update_league(league.id, updated)
    return LeagueResponse(data=updated)


@router.delete("/leagues/{league_id}", response_model=SuccessResponse)
async def delete_league(
    _: UserPublic = Depends(user_authenticated_admin),
    league: League = Depends(league_dependency),
) -> SuccessResponse:
    with check_foreign_key_violation(
        {
            ForeignKey.teams_league_id_fkey,
            ForeignKey.games_league_id_fkey,
            ForeignKey.registrations_league_id_fkey,
        }
    ):
        await sql_delete_league(league.id)

    return SuccessResponse()


@router.get("/leagues/{league_id}/standings", response_model=StandingsResponse)
async def get_league_standings(league: League = Depends(league_dependency)) -> StandingsResponse:
    return StandingsResponse(data=calculate_standings(await sql_get_teams(league.id)))


@router.get("/standings", response_model=StandingsResponse)
async def get_standings() -> StandingsResponse:
    return StandingsResponse(data=calculate_standings(await sql_get_teams()))


@router.post("/leagues/{league_id}/recalculate_records", response_model=RecordsRebuildResponse)
async def recalculate_records(
    user: UserPublic = Depends(user_authenticated_admin),
    league: League = Depends(league_dependency),
) -> RecordsRebuildResponse:
    teams_updated, duration_ms = await recalculate_league_records(league.id)
    logger.info(
        "Rebuilt team records: league_id=%s teams_updated=%s requested_by=%s",
        int(league.id),
        teams_updated,
        int(user.id),
    )
    return RecordsRebuildResponse(
        data=RecordsRebuildView(
            recalculated_at=datetime_utc.now().isoformat(),
            teams_updated=teams_updated,
            duration_ms=duration_ms,
        )
    )
