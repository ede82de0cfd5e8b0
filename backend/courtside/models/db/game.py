from datetime import date
from enum import auto
from typing import Annotated, Any

from heliclockter import datetime_utc
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator, model_validator

from courtside.models.db.league import LeagueSummary
from courtside.models.db.shared import BaseModelORM
from courtside.models.db.team import TeamSummary
from courtside.models.db.util import parse_json_column
from courtside.utils.id_types import GameId, LeagueId, TeamId
from courtside.utils.types import EnumAutoStr

ScheduledTime = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]


class GameStatus(EnumAutoStr):
    SCHEDULED = auto()
    IN_PROGRESS = auto()
    COMPLETED = auto()
    POSTPONED = auto()
    CANCELLED = auto()


class OfficialRole(EnumAutoStr):
    REFEREE = auto()
    UMPIRE = auto()
    SCOREKEEPER = auto()
    TIMEKEEPER = auto()


class Official(BaseModel):
    name: str
    role: OfficialRole | None = None


class GameScoreState(BaseModel):
    """The part of a game that determines its effect on the records of both teams."""

    model_config = ConfigDict(frozen=True)

    status: GameStatus
    home_score: int | None = None
    away_score: int | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == GameStatus.COMPLETED


class GameBody(BaseModelORM):
    league_id: LeagueId
    home_team_id: TeamId
    away_team_id: TeamId
    scheduled_date: date
    scheduled_time: ScheduledTime
    venue: str = Field(min_length=1)
    venue_address: str | None = None

    @model_validator(mode="after")
    def check_distinct_teams(self) -> "GameBody":
        if self.home_team_id == self.away_team_id:
            raise ValueError("Teams cannot play against themselves")
        return self


class GameInsertable(GameBody):
    status: GameStatus = GameStatus.SCHEDULED
    home_score: NonNegativeInt | None = 0
    away_score: NonNegativeInt | None = 0
    quarter: NonNegativeInt = 1
    notes: str = ""
    officials: list[Official] = Field(default_factory=list)
    attendance: NonNegativeInt = 0
    created: datetime_utc
    updated: datetime_utc

    @field_validator("officials", mode="before")
    @classmethod
    def parse_officials(cls, value: Any) -> Any:
        return parse_json_column(value)


class Game(GameInsertable):
    id: GameId

    def score_state(self) -> GameScoreState:
        return GameScoreState(
            status=self.status, home_score=self.home_score, away_score=self.away_score
        )


class GameUpdateBody(BaseModel):
    """
    Partial update of a game.

    Only the fields listed here can be changed; the league and the teams of a game are fixed
    once it is created. Scores may be explicitly cleared by sending `null`.
    """

    model_config = ConfigDict(extra="forbid")

    scheduled_date: date | None = None
    scheduled_time: ScheduledTime | None = None
    venue: str | None = Field(default=None, min_length=1)
    venue_address: str | None = None
    status: GameStatus | None = None
    home_score: NonNegativeInt | None = None
    away_score: NonNegativeInt | None = None
    quarter: NonNegativeInt | None = None
    notes: str | None = None
    officials: list[Official] | None = None
    attendance: NonNegativeInt | None = None

    def apply_to(self, game: Game, updated: datetime_utc) -> Game:
        nullable = {"home_score", "away_score", "venue_address"}
        changes = {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in nullable
        }
        if "officials" in changes:
            changes["officials"] = [Official.model_validate(x) for x in changes["officials"]]
        return game.model_copy(update={**changes, "updated": updated})


class GameWithDetails(Game):
    league: LeagueSummary
    home_team: TeamSummary
    away_team: TeamSummary
