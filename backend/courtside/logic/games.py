from heliclockter import datetime_utc

from courtside.database import database
from courtside.logic.reconciliation import ReconciliationEffect, reconcile
from courtside.models.db.game import Game, GameUpdateBody
from courtside.sql.games import acquire_game_lock, sql_get_game, sql_update_game
from courtside.sql.teams import get_team_records_for_update, sql_update_team_record
from courtside.utils.errors import NotFound, StalePersistence
from courtside.utils.id_types import GameId
from courtside.utils.logging import logger


async def apply_reconciliation_to_teams(game: Game, effect: ReconciliationEffect) -> None:
    records = await get_team_records_for_update([game.home_team_id, game.away_team_id])
    if game.home_team_id not in records or game.away_team_id not in records:
        raise StalePersistence(f"Could not load the teams of game {int(game.id)}")

    home_record, away_record = effect.apply_to(
        records[game.home_team_id], records[game.away_team_id]
    )
    for team_id, record in ((game.home_team_id, home_record), (game.away_team_id, away_record)):
        if not await sql_update_team_record(team_id, record):
            logger.error(
                "Could not save record of team %s while updating game %s",
                int(team_id),
                int(game.id),
            )
            raise StalePersistence(f"Could not save the record of team {int(team_id)}")

    logger.info(
        "Reconciled game %s: reversed=%s applied=%s home=%s-%s away=%s-%s",
        int(game.id),
        effect.reversed_outcome,
        effect.applied_outcome,
        home_record.wins,
        home_record.losses,
        away_record.wins,
        away_record.losses,
    )


async def update_game_and_reconcile(game_id: GameId, game_body: GameUpdateBody) -> Game:
    """
    Update a game and adjust the records of both its teams to the new result.

    The game is re-read while holding a lock for this game, so two concurrent updates of the
    same game never reconcile against the same previous state. The game and both team records
    are written in one transaction.
    """
    async with database.transaction():
        await acquire_game_lock(game_id)

        previous = await sql_get_game(game_id)
        if previous is None:
            raise NotFound("game", game_id)

        updated = game_body.apply_to(previous, datetime_utc.now())
        if not await sql_update_game(updated):
            raise StalePersistence(f"Could not save game {int(game_id)}")

        effect = reconcile(previous.score_state(), updated.score_state())
        if effect.changes_records:
            await apply_reconciliation_to_teams(updated, effect)

    return updated
