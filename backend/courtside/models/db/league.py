from decimal import Decimal
from enum import auto

from heliclockter import datetime_utc
from pydantic import BaseModel, Field, model_validator

from courtside.models.db.shared import BaseModelORM
from courtside.models.db.team import TeamSummary
from courtside.utils.id_types import LeagueId
from courtside.utils.types import EnumAutoStr


class Division(EnumAutoStr):
    HIGH_SCHOOL_BOYS = auto()
    HIGH_SCHOOL_GIRLS = auto()
    JUNIOR_HIGH = auto()
    MENS = auto()
    WOMENS = auto()
    GEEZERS = auto()


class LeagueStatus(EnumAutoStr):
    DRAFT = auto()
    OPEN = auto()
    IN_PROGRESS = auto()
    COMPLETED = auto()


class LeagueBody(BaseModelORM):
    name: str = Field(min_length=1)
    division: Division
    season: str = Field(min_length=1)
    start_date: datetime_utc
    end_date: datetime_utc
    registration_deadline: datetime_utc
    max_teams: int = Field(default=12, ge=1)
    registration_fee: Decimal = Field(ge=0, decimal_places=2)
    rules: str = ""
    status: LeagueStatus = LeagueStatus.DRAFT
    is_active: bool = True

    @model_validator(mode="after")
    def check_dates(self) -> "LeagueBody":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class LeagueInsertable(LeagueBody):
    created: datetime_utc


class League(LeagueInsertable):
    id: LeagueId


class LeagueUpdateBody(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    division: Division | None = None
    season: str | None = Field(default=None, min_length=1)
    start_date: datetime_utc | None = None
    end_date: datetime_utc | None = None
    registration_deadline: datetime_utc | None = None
    max_teams: int | None = Field(default=None, ge=1)
    registration_fee: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    rules: str | None = None
    status: LeagueStatus | None = None
    is_active: bool | None = None


class LeagueSummary(BaseModelORM):
    id: LeagueId
    name: str
    division: Division
    season: str


class LeagueWithTeams(League):
    teams: list[TeamSummary] = Field(default_factory=list)
