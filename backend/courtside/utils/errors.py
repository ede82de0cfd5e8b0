from collections.abc import Iterator
from contextlib import contextmanager
from enum import auto

from asyncpg.exceptions import ForeignKeyViolationError, UniqueViolationError
from fastapi import HTTPException
from starlette import status

from courtside.utils.types import EnumAutoStr


class NotFound(HTTPException):
    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Could not find {entity} with id {int(entity_id)}",
        )


class CapacityExceeded(HTTPException):
    def __init__(self, max_players: int) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Team is full (maximum of {max_players} players)",
        )


class DuplicateMember(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Player already on this team",
        )


class StalePersistence(HTTPException):
    """
    Raised when one write of a multi-row update could not be applied.

    The surrounding transaction is rolled back, so callers can retry the whole request; the
    retry re-reads the game and team rows instead of reusing the stale ones.
    """

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class UniqueIndex(EnumAutoStr):
    users_email_key = auto()
    team_players_team_id_player_id_key = auto()
    registrations_user_id_league_id_key = auto()


class ForeignKey(EnumAutoStr):
    teams_league_id_fkey = auto()
    teams_coach_id_fkey = auto()
    games_league_id_fkey = auto()
    games_home_team_id_fkey = auto()
    games_away_team_id_fkey = auto()
    registrations_league_id_fkey = auto()
    registrations_team_id_fkey = auto()


unique_index_violation_error_lookup = {
    UniqueIndex.users_email_key: "This email is already taken",
    UniqueIndex.team_players_team_id_player_id_key: "Player already on this team",
    UniqueIndex.registrations_user_id_league_id_key: "Already registered for this league",
}


foreign_key_violation_error_lookup = {
    ForeignKey.teams_league_id_fkey: "This league still has teams, delete those first",
    ForeignKey.teams_coach_id_fkey: "This user still coaches a team, reassign that team first",
    ForeignKey.games_league_id_fkey: "This league still has games, delete those first",
    ForeignKey.games_home_team_id_fkey: "This team is scheduled in games, delete those first",
    ForeignKey.games_away_team_id_fkey: "This team is scheduled in games, delete those first",
    ForeignKey.registrations_league_id_fkey: (
        "This league still has registrations, delete those first"
    ),
    ForeignKey.registrations_team_id_fkey: "This team does not exist",
}


@contextmanager
def check_unique_constraint_violation(
    expected_violations: set[UniqueIndex],
) -> Iterator[None]:
    try:
        yield
    except UniqueViolationError as exc:
        for violation in expected_violations:
            if violation.value in str(exc):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=unique_index_violation_error_lookup[violation],
                ) from exc

        raise


@contextmanager
def check_foreign_key_violation(expected_violations: set[ForeignKey]) -> Iterator[None]:
    try:
        yield
    except ForeignKeyViolationError as exc:
        constraint_name = str(exc.as_dict().get("constraint_name", ""))
        for violation in expected_violations:
            if violation.value == constraint_name:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=foreign_key_violation_error_lookup[violation],
                ) from exc

        raise
