from courtside.models.db.game import GameWithDetails
from courtside.models.db.league import League
from courtside.models.db.team import FullTeamWithRoster
from courtside.models.db.registration import RegistrationWithDetails
from courtside.sql.games import get_game_with_details
from courtside.sql.leagues import sql_get_league
from courtside.sql.registrations import sql_get_registration
from courtside.sql.teams import get_team_with_roster
from courtside.utils.errors import NotFound
from courtside.utils.id_types import GameId, LeagueId, RegistrationId, TeamId


async def league_dependency(league_id: LeagueId) -> League:
    league = await sql_get_league(league_id)
    if league is None:
        raise NotFound("league", league_id)

    return league


async def team_dependency(team_id: TeamId) -> FullTeamWithRoster:
    team = await get_team_with_roster(team_id)
    if team is None:
        raise NotFound("team", team_id)

    return team


async def game_dependency(game_id: GameId) -> GameWithDetails:
    game = await get_game_with_details(game_id)
    if game is None:
        raise NotFound("game", game_id)

    return game


async def registration_dependency(registration_id: RegistrationId) -> RegistrationWithDetails:
    registration = await sql_get_registration(registration_id)
    if registration is None:
        raise NotFound("registration", registration_id)

    return registration
