from enum import auto
from typing import Annotated, Any

from heliclockter import datetime_utc
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

from courtside.models.db.shared import BaseModelORM
from courtside.models.db.user import UserSummary
from courtside.models.db.util import parse_json_column
from courtside.utils.id_types import LeagueId, RosterEntryId, TeamId, UserId
from courtside.utils.types import EnumAutoStr

MaxPlayers = Annotated[int, Field(ge=1, le=100)]


class RosterStatus(EnumAutoStr):
    ACTIVE = auto()
    INJURED = auto()
    SUSPENDED = auto()
    INACTIVE = auto()


class TeamRecord(BaseModel):
    """
    A team's win/loss counters.

    The counters are derived from the completed games of the team. They are only ever changed
    through `apply_result` and `reverse_result`, which return a new record.
    """

    model_config = ConfigDict(frozen=True)

    wins: NonNegativeInt = 0
    losses: NonNegativeInt = 0

    @property
    def games_played(self) -> int:
        return self.wins + self.losses

    def apply_result(self, *, won: bool) -> "TeamRecord":
        if won:
            return TeamRecord(wins=self.wins + 1, losses=self.losses)
        return TeamRecord(wins=self.wins, losses=self.losses + 1)

    def reverse_result(self, *, won: bool) -> "TeamRecord":
        if won:
            return TeamRecord(wins=max(0, self.wins - 1), losses=self.losses)
        return TeamRecord(wins=self.wins, losses=max(0, self.losses - 1))


class TeamBody(BaseModelORM):
    name: str = Field(min_length=1)
    league_id: LeagueId
    coach_id: UserId
    assistant_coach_ids: list[UserId] = Field(default_factory=list)
    logo: str = ""
    color_primary: str | None = None
    color_secondary: str | None = None
    home_venue: str | None = None
    max_players: MaxPlayers = 15
    is_active: bool = True

    @field_validator("assistant_coach_ids", mode="before")
    @classmethod
    def parse_assistant_coach_ids(cls, value: Any) -> Any:
        return parse_json_column(value)


class TeamInsertable(TeamBody):
    created: datetime_utc


class Team(TeamInsertable):
    id: TeamId
    wins: NonNegativeInt = 0
    losses: NonNegativeInt = 0

    @property
    def record(self) -> TeamRecord:
        return TeamRecord(wins=self.wins, losses=self.losses)


class TeamUpdateBody(BaseModel):
    """Fields of a team that can be edited directly. The win/loss counters are not among them."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    coach_id: UserId | None = None
    assistant_coach_ids: list[UserId] | None = None
    logo: str | None = None
    color_primary: str | None = None
    color_secondary: str | None = None
    home_venue: str | None = None
    max_players: MaxPlayers | None = None
    is_active: bool | None = None


class RosterEntryBody(BaseModel):
    player_id: UserId
    jersey_number: int | None = Field(default=None, ge=0, le=99)
    position: str | None = None


class RosterEntryUpdateBody(BaseModel):
    jersey_number: int | None = Field(default=None, ge=0, le=99)
    position: str | None = None
    status: RosterStatus | None = None


class RosterEntryInsertable(BaseModelORM):
    team_id: TeamId
    player_id: UserId
    jersey_number: int | None = None
    position: str | None = None
    status: RosterStatus = RosterStatus.ACTIVE
    created: datetime_utc


class RosterEntry(RosterEntryInsertable):
    id: RosterEntryId
    player: UserSummary | None = None


class FullTeamWithRoster(Team):
    roster: list[RosterEntry] = Field(default_factory=list)

    @property
    def player_ids(self) -> set[UserId]:
        return {entry.player_id for entry in self.roster}


class TeamSummary(BaseModelORM):
    id: TeamId
    name: str
    logo: str = ""
    wins: NonNegativeInt = 0
    losses: NonNegativeInt = 0
