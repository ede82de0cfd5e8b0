"""
Keeps the win/loss counters of teams in line with the results of their completed games.

When a game is updated, the previously recorded result (if any) is reversed before the new
result is applied. Ties are never recorded, so there is nothing to reverse or apply for them.

Note that moving a game out of the completed state without changing its scores leaves its
result on the books. Rebuilding the records of the league from scratch removes such results.
"""

from enum import auto

from pydantic import BaseModel, ConfigDict

from courtside.models.db.game import GameScoreState
from courtside.models.db.team import TeamRecord
from courtside.utils.types import EnumAutoStr


class GameOutcome(EnumAutoStr):
    HOME_WIN = auto()
    AWAY_WIN = auto()
    TIE = auto()


def determine_outcome(home_score: int, away_score: int) -> GameOutcome:
    if home_score > away_score:
        return GameOutcome.HOME_WIN
    if away_score > home_score:
        return GameOutcome.AWAY_WIN
    return GameOutcome.TIE


class ReconciliationEffect(BaseModel):
    model_config = ConfigDict(frozen=True)

    reversed_outcome: GameOutcome | None = None
    applied_outcome: GameOutcome | None = None

    @property
    def changes_records(self) -> bool:
        return any(
            outcome is not None and outcome != GameOutcome.TIE
            for outcome in (self.reversed_outcome, self.applied_outcome)
        )

    def apply_to(self, home: TeamRecord, away: TeamRecord) -> tuple[TeamRecord, TeamRecord]:
        if self.reversed_outcome == GameOutcome.HOME_WIN:
            home = home.reverse_result(won=True)
            away = away.reverse_result(won=False)
        elif self.reversed_outcome == GameOutcome.AWAY_WIN:
            away = away.reverse_result(won=True)
            home = home.reverse_result(won=False)

        if self.applied_outcome == GameOutcome.HOME_WIN:
            home = home.apply_result(won=True)
            away = away.apply_result(won=False)
        elif self.applied_outcome == GameOutcome.AWAY_WIN:
            away = away.apply_result(won=True)
            home = home.apply_result(won=False)

        return home, away


def recorded_outcome(state: GameScoreState) -> GameOutcome | None:
    if state.home_score is None or state.away_score is None:
        return None
    return determine_outcome(state.home_score, state.away_score)


def reconcile(previous: GameScoreState, new: GameScoreState) -> ReconciliationEffect:
    """
    Determine how the records of both teams change when a game goes from `previous` to `new`.

    Nothing changes unless the new state is completed with both scores set. A result that was
    already recorded is reversed when the scores changed, and the new result is applied when the
    game was not completed before or its scores changed.
    """
    new_outcome = recorded_outcome(new)
    if not new.is_completed or new_outcome is None:
        return ReconciliationEffect()

    was_completed = previous.is_completed
    scores_changed = (
        previous.home_score != new.home_score or previous.away_score != new.away_score
    )

    reversed_outcome: GameOutcome | None = None
    if was_completed and scores_changed:
        reversed_outcome = recorded_outcome(previous)

    applied_outcome: GameOutcome | None = None
    if not was_completed or scores_changed:
        applied_outcome = new_outcome

    return ReconciliationEffect(
        reversed_outcome=reversed_outcome, applied_outcome=applied_outcome
    )
