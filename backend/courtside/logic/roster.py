from fastapi import HTTPException
from starlette import status

from courtside.models.db.team import FullTeamWithRoster
from courtside.utils.errors import CapacityExceeded, DuplicateMember
from courtside.utils.id_types import UserId


def check_player_can_join_team(team: FullTeamWithRoster, player_id: UserId) -> None:
    if len(team.roster) >= team.max_players:
        raise CapacityExceeded(team.max_players)

    if player_id in team.player_ids:
        raise DuplicateMember()


def check_max_players_fits_roster(team: FullTeamWithRoster, max_players: int) -> None:
    if max_players < len(team.roster):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Team already has {len(team.roster)} players, "
                f"max_players cannot be lowered to {max_players}"
            ),
        )
