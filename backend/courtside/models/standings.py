from pydantic import BaseModel, NonNegativeInt

from courtside.utils.id_types import TeamId


class StandingsRow(BaseModel):
    rank: int
    team_id: TeamId
    team: str
    wins: NonNegativeInt
    losses: NonNegativeInt
    win_percentage: float
    games_played: NonNegativeInt


class RecordsRebuildView(BaseModel):
    success: bool = True
    recalculated_at: str
    teams_updated: int = 0
    duration_ms: int = 0
