from datetime import date
from typing import Any

import pytest
from heliclockter import datetime_utc
from pydantic import ValidationError

from courtside.logic import games as games_logic
from courtside.models.db.account import UserAccountType
from courtside.models.db.game import Game, GameStatus, GameUpdateBody, GameWithDetails
from courtside.models.db.league import Division, LeagueSummary
from courtside.models.db.team import TeamRecord, TeamSummary, TeamUpdateBody
from courtside.models.db.user import UserPublic
from courtside.routes import games as game_routes
from courtside.utils.errors import NotFound, StalePersistence
from courtside.utils.id_types import GameId, LeagueId, TeamId, UserId

HOME_TEAM_ID = TeamId(1)
AWAY_TEAM_ID = TeamId(2)


class _DummyTransaction:
    async def __aenter__(self) -> "_DummyTransaction":
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        return False


def _build_game(status: GameStatus = GameStatus.SCHEDULED, home: int | None = 0, away: int | None = 0) -> Game:
    now = datetime_utc.now()
    return Game(
        id=GameId(7),
        league_id=LeagueId(1),
        home_team_id=HOME_TEAM_ID,
        away_team_id=AWAY_TEAM_ID,
        scheduled_date=date(2026, 3, 14),
        scheduled_time="19:00",
        venue="Community Center",
        status=status,
        home_score=home,
        away_score=away,
        created=now,
        updated=now,
    )


class _FakeLeagueStore:
    def __init__(self, game: Game | None, records: dict[TeamId, TeamRecord]) -> None:
        self.game = game
        self.records = records
        self.locks: list[GameId] = []
        self.failing_team_ids: set[TeamId] = set()

    async def acquire_game_lock(self, game_id: GameId) -> None:
        self.locks.append(game_id)

    async def sql_get_game(self, _: GameId) -> Game | None:
        return self.game

    async def sql_update_game(self, game: Game) -> bool:
        self.game = game
        return True

    async def get_team_records_for_update(self, team_ids: list[TeamId]) -> dict[TeamId, TeamRecord]:
        return {team_id: self.records[team_id] for team_id in team_ids if team_id in self.records}

    async def sql_update_team_record(self, team_id: TeamId, record: TeamRecord) -> bool:
        if team_id in self.failing_team_ids:
            return False
        self.records[team_id] = record
        return True


def _install_store(monkeypatch: pytest.MonkeyPatch, store: _FakeLeagueStore) -> None:
    for name in (
        "acquire_game_lock",
        "sql_get_game",
        "sql_update_game",
        "get_team_records_for_update",
        "sql_update_team_record",
    ):
        monkeypatch.setattr(games_logic, name, getattr(store, name))
    monkeypatch.setattr(games_logic.database, "transaction", lambda: _DummyTransaction())


@pytest.mark.asyncio
async def test_completing_game_updates_both_teams(monkeypatch: pytest.MonkeyPatch) -> None:
    store = _FakeLeagueStore(
        _build_game(),
        {HOME_TEAM_ID: TeamRecord(wins=2, losses=1), AWAY_TEAM_ID: TeamRecord(wins=1, losses=2)},
    )
    _install_store(monkeypatch, store)

    updated = await games_logic.update_game_and_reconcile(
        GameId(7),
        GameUpdateBody(status=GameStatus.COMPLETED, home_score=21, away_score=15),
    )

    assert updated.status == GameStatus.COMPLETED
    assert store.locks == [GameId(7)]

@pytest.mark.asyncio
async def test_repeating_the_same_update_does_not_double_count(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    store = _FakeLeagueStore(
        _build_game(),
        {HOME_TEAM_ID: TeamRecord(), AWAY_TEAM_ID: TeamRecord()},
    )
    _install_store(monkeypatch, store)
    body = GameUpdateBody(status=GameStatus.COMPLETED, home_score=10, away_score=8)

    await games_logic.update_game_and_reconcile(GameId(7), body)
    await games_logic.update_game_and_reconcile(GameId(7), body)

    assert store.records[HOME_TEAM_ID] == TeamRecord(wins=1, losses=0)
    assert store.records[AWAY_TEAM_ID] == TeamRecord(wins=0, losses=1)


@pytest.mark.asyncio
async def test_score_correction_moves_the_win(monkeypatch: pytest.MonkeyPatch) -> None:
    store = _FakeLeagueStore(
        _build_game(GameStatus.COMPLETED, 20, 18),
        {HOME_TEAM_ID: TeamRecord(wins=5, losses=2), AWAY_TEAM_ID: TeamRecord(wins=3, losses=4)},
    )
    _install_store(monkeypatch, store)

    await games_logic.update_game_and_reconcile(
        GameId(7), GameUpdateBody(home_score=18, away_score=20)
    )

    assert store.records[HOME_TEAM_ID] == TeamRecord(wins=4, losses=3)
    assert store.records[AWAY_TEAM_ID] == TeamRecord(wins=4, losses=3)


@pytest.mark.asyncio
async def test_non_score_update_leaves_records_alone(monkeypatch: pytest.MonkeyPatch) -> None:
    store = _FakeLeagueStore(
        _build_game(GameStatus.COMPLETED, 20, 18),
        {HOME_TEAM_ID: TeamRecord(wins=5, losses=2), AWAY_TEAM_ID: TeamRecord(wins=3, losses=4)},
    )
    _install_store(monkeypatch, store)

    updated = await games_logic.update_game_and_reconcile(
        GameId(7), GameUpdateBody(notes="Overtime", attendance=250)
    )

    assert updated.notes == "Overtime"
    assert updated.attendance == 250
    assert store.records[HOME_TEAM_ID] == TeamRecord(wins=5, losses=2)
    assert store.records[AWAY_TEAM_ID] == TeamRecord(wins=3, losses=4)


@pytest.mark.asyncio
async def test_update_of_unknown_game_is_not_found(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_store(monkeypatch, _FakeLeagueStore(None, {}))

    with pytest.raises(NotFound):
        await games_logic.update_game_and_reconcile(GameId(7), GameUpdateBody(notes="x"))


@pytest.mark.asyncio
async def test_failed_team_write_raises_stale_persistence(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    store = _FakeLeagueStore(
        _build_game(),
        {HOME_TEAM_ID: TeamRecord(), AWAY_TEAM_ID: TeamRecord()},
    )
    store.failing_team_ids = {AWAY_TEAM_ID}
    _install_store(monkeypatch, store)

    with pytest.raises(StalePersistence) as exc_info:
        await games_logic.update_game_and_reconcile(
            GameId(7),
            GameUpdateBody(status=GameStatus.COMPLETED, home_score=3, away_score=1),
        )

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_missing_team_raises_stale_persistence(monkeypatch: pytest.MonkeyPatch) -> None:
    store = _FakeLeagueStore(_build_game(), {HOME_TEAM_ID: TeamRecord()})
    _install_store(monkeypatch, store)

    with pytest.raises(StalePersistence):
        await games_logic.update_game_and_reconcile(
            GameId(7),
            GameUpdateBody(status=GameStatus.COMPLETED, home_score=3, away_score=1),
        )


def test_game_update_body_rejects_record_and_team_fields() -> None:
    with pytest.raises(ValidationError):
        GameUpdateBody.model_validate({"wins": 10})

    with pytest.raises(ValidationError):
        GameUpdateBody.model_validate({"home_team_id": 5})


def test_team_update_body_rejects_record_fields() -> None:
    with pytest.raises(ValidationError):
        TeamUpdateBody.model_validate({"name": "Rim Rockers", "losses": 0})


def test_game_update_can_clear_scores() -> None:
    game = _build_game(GameStatus.COMPLETED, 20, 18)

    updated = GameUpdateBody.model_validate({"home_score": None}).apply_to(
        game, datetime_utc.now()
    )

    assert updated.home_score is None
    assert updated.away_score == 18
    assert updated.status == GameStatus.COMPLETED


@pytest.mark.asyncio
async def test_deleting_completed_game_keeps_team_records(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = {"records_for_update": 0, "update_team_record": 0}
    deleted: list[GameId] = []

    async def fake_records_for_update(_: list[TeamId]) -> dict[TeamId, TeamRecord]:
        calls["records_for_update"] += 1
        return {}

    async def fake_update_team_record(*_: object) -> bool:
        calls["update_team_record"] += 1
        return True

    async def fake_delete_game(game_id: GameId) -> None:
        deleted.append(game_id)

    monkeypatch.setattr(games_logic, "get_team_records_for_update", fake_records_for_update)
    monkeypatch.setattr(games_logic, "sql_update_team_record", fake_update_team_record)
    monkeypatch.setattr(game_routes, "sql_delete_game", fake_delete_game)

    game = _build_game(GameStatus.COMPLETED, home=21, away=15)
    admin = UserPublic(
        id=UserId(1),
        email="admin@example.org",
        first_name="Alex",
        last_name="Morgan",
        created=datetime_utc.now(),
        account_type=UserAccountType.ADMIN,
    )
    await game_routes.delete_game(
        admin,
        GameWithDetails(
            **game.model_dump(),
            league=LeagueSummary(id=LeagueId(1), name="Spring Hoops", division=Division.MENS, season="2026"),
            home_team=TeamSummary(id=HOME_TEAM_ID, name="Rim Rockers", wins=3, losses=1),
            away_team=TeamSummary(id=AWAY_TEAM_ID, name="Net Gains", wins=1, losses=3),
        ),
    )

    assert deleted == [GameId(7)]
    assert calls == {"records_for_update": 0, "update_team_record": 0}
