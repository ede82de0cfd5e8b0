from pydantic import BaseModel

from courtside.models.db.game import GameWithDetails
from courtside.models.db.league import League, LeagueWithTeams
from courtside.models.db.registration import RegistrationWithDetails
from courtside.models.db.team import FullTeamWithRoster, Team
from courtside.models.db.user import UserPublic
from courtside.models.standings import RecordsRebuildView, StandingsRow


class SuccessResponse(BaseModel):
    success: bool = True


class DataResponse[DataT](BaseModel):
    data: DataT


class UserPublicResponse(DataResponse[UserPublic]):
    pass


class UsersResponse(DataResponse[list[UserPublic]]):
    pass


class LeagueResponse(DataResponse[League]):
    pass


class LeaguesResponse(DataResponse[list[League]]):
    pass


class TeamResponse(DataResponse[FullTeamWithRoster]):
    pass


class TeamsResponse(DataResponse[list[Team]]):
    pass


class GameResponse(DataResponse[GameWithDetails]):
    pass


class GamesResponse(DataResponse[list[GameWithDetails]]):
    pass


class RegistrationResponse(DataResponse[RegistrationWithDetails]):
    pass


class RegistrationsResponse(DataResponse[list[RegistrationWithDetails]]):
    pass


class StandingsResponse(DataResponse[list[StandingsRow]]):
    pass


class RecordsRebuildResponse(DataResponse[RecordsRebuildView]):
    pass


class LeagueWithTeamsResponse(DataResponse[LeagueWithTeams]):
    pass
