from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette import status

from courtside.config import config
from courtside.logic.games import update_game_and_reconcile
from courtside.models.db.game import GameBody, GameStatus, GameUpdateBody, GameWithDetails
from courtside.models.db.user import UserPublic
from courtside.routes.auth import user_authenticated_admin
from courtside.routes.models import GameResponse, GamesResponse, SuccessResponse
from courtside.routes.util import game_dependency
from courtside.sql.games import (
    get_game_with_details,
    sql_create_game,
    sql_delete_game,
    sql_get_games,
)
from courtside.sql.leagues import sql_get_league
from courtside.sql.teams import sql_get_team
from courtside.utils.errors import ForeignKey, NotFound, check_foreign_key_violation
from courtside.utils.id_types import GameId, LeagueId, TeamId
from courtside.utils.types import assert_some

router = APIRouter(prefix=config.api_prefix)


async def check_game_teams(game_body: GameBody) -> None:
    if await sql_get_league(game_body.league_id) is None:
        raise NotFound("league", game_body.league_id)

    home_team = await sql_get_team(game_body.home_team_id)
    away_team = await sql_get_team(game_body.away_team_id)
    if home_team is None or away_team is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "One or both teams not found")

    if home_team.league_id != game_body.league_id or away_team.league_id != game_body.league_id:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Teams must be in the same league")


@router.get("/games", response_model=GamesResponse)
async def get_games(
    league_id: LeagueId | None = Query(default=None),
    team_id: TeamId | None = Query(default=None),
    status_filter: GameStatus | None = Query(default=None, alias="status"),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
) -> GamesResponse:
    return GamesResponse(
        data=await sql_get_games(league_id, team_id, status_filter, start_date, end_date)
    )


@router.get("/games/{game_id}", response_model=GameResponse)
async def get_game(game: GameWithDetails = Depends(game_dependency)) -> GameResponse:
    return GameResponse(data=game)


@router.post("/games", response_model=GameResponse)
async def create_game(
    game_body: GameBody,
    _: UserPublic = Depends(user_authenticated_admin),
) -> GameResponse:
    await check_game_teams(game_body)

    with check_foreign_key_violation(
        {
            ForeignKey.games_league_id_fkey,
            ForeignKey.games_home_team_id_fkey,
            ForeignKey.games_away_team_id_fkey,
        }
    ):
        game = await sql_create_game(game_body)

    return GameResponse(data=assert_some(await get_game_with_details(game.id)))


@router.put("/games/{game_id}", response_model=GameResponse)
async def update_game(
    game_id: GameId,
    game_body: GameUpdateBody,
    _: UserPublic = Depends(user_authenticated_admin),
) -> GameResponse:
    game = await update_game_and_reconcile(game_id, game_body)
    return GameResponse(data=assert_some(await get_game_with_details(game.id)))


@router.delete("/games/{game_id}", response_model=SuccessResponse)
async def delete_game(
    _: UserPublic = Depends(user_authenticated_admin),
    game: GameWithDetails = Depends(game_dependency),
) -> SuccessResponse:
    await sql_delete_game(game.id)
    return SuccessResponse()
