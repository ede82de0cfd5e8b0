from typing import Any

import pytest
from fastapi import HTTPException
from heliclockter import datetime_utc

from courtside.logic.roster import check_max_players_fits_roster, check_player_can_join_team
from courtside.models.db.account import UserAccountType
from courtside.models.db.team import FullTeamWithRoster, RosterEntry, RosterEntryBody
from courtside.models.db.user import UserPublic
from courtside.routes import teams as team_routes
from courtside.utils.errors import CapacityExceeded, DuplicateMember
from courtside.utils.id_types import LeagueId, RosterEntryId, TeamId, UserId


class _DummyTransaction:
    async def __aenter__(self) -> "_DummyTransaction":
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        return False


def _build_team(player_count: int, max_players: int = 15) -> FullTeamWithRoster:
    now = datetime_utc.now()
    return FullTeamWithRoster(
        id=TeamId(3),
        name="Rim Rockers",
        league_id=LeagueId(1),
        coach_id=UserId(1),
        max_players=max_players,
        created=now,
        roster=[
            RosterEntry(
                id=RosterEntryId(index),
                team_id=TeamId(3),
                player_id=UserId(100 + index),
                created=now,
            )
            for index in range(player_count)
        ],
    )


def _build_coach() -> UserPublic:
    return UserPublic(
        id=UserId(1),
        email="coach@example.org",
        first_name="Casey",
        last_name="Reed",
        created=datetime_utc.now(),
        account_type=UserAccountType.COACH,
    )


def test_full_team_rejects_new_player() -> None:
    team = _build_team(15)

    with pytest.raises(CapacityExceeded) as exc_info:
        check_player_can_join_team(team, UserId(500))

    assert exc_info.value.status_code == 400
    assert len(team.roster) == 15


def test_player_already_on_team_is_rejected() -> None:
    with pytest.raises(DuplicateMember):
        check_player_can_join_team(_build_team(3), UserId(101))


def test_new_player_fits_on_team_with_room() -> None:
    check_player_can_join_team(_build_team(14), UserId(500))


def test_max_players_cannot_drop_below_roster_size() -> None:
    team = _build_team(10)

    with pytest.raises(HTTPException) as exc_info:
        check_max_players_fits_roster(team, 9)

    assert exc_info.value.status_code == 400
    check_max_players_fits_roster(team, 10)


@pytest.mark.asyncio
async def test_add_player_route_does_not_insert_into_full_team(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    calls = {"insert": 0, "lock": 0}

    async def fake_get_user_by_id(user_id: UserId) -> UserPublic:
        return _build_coach()

    async def fake_lock_team_row(_: TeamId) -> None:
        calls["lock"] += 1

    async def fake_get_team_with_roster(_: TeamId) -> FullTeamWithRoster:
        return _build_team(15)

    async def fake_insert(*_: Any) -> None:
        calls["insert"] += 1

    monkeypatch.setattr(team_routes, "get_user_by_id", fake_get_user_by_id)
    monkeypatch.setattr(team_routes, "lock_team_row", fake_lock_team_row)
    monkeypatch.setattr(team_routes, "get_team_with_roster", fake_get_team_with_roster)
    monkeypatch.setattr(team_routes, "sql_insert_roster_entry", fake_insert)
    monkeypatch.setattr(team_routes.database, "transaction", lambda: _DummyTransaction())

    with pytest.raises(CapacityExceeded):
        await team_routes.add_player_to_team(
            RosterEntryBody(player_id=UserId(500)), TeamId(3), _build_coach()
        )

    assert calls["lock"] == 1
    assert calls["insert"] == 0


@pytest.mark.asyncio
async def test_add_player_route_inserts_when_team_has_room(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    inserted: list[tuple[TeamId, RosterEntryBody]] = []

    async def fake_get_user_by_id(user_id: UserId) -> UserPublic:
        return _build_coach()

    async def fake_lock_team_row(_: TeamId) -> None:
        return None

    async def fake_get_team_with_roster(_: TeamId) -> FullTeamWithRoster:
        return _build_team(len(inserted) + 4)

    async def fake_insert(team_id: TeamId, body: RosterEntryBody) -> None:
        inserted.append((team_id, body))

    monkeypatch.setattr(team_routes, "get_user_by_id", fake_get_user_by_id)
    monkeypatch.setattr(team_routes, "lock_team_row", fake_lock_team_row)
    monkeypatch.setattr(team_routes, "get_team_with_roster", fake_get_team_with_roster)
    monkeypatch.setattr(team_routes, "sql_insert_roster_entry", fake_insert)
    monkeypatch.setattr(team_routes.database, "transaction", lambda: _DummyTransaction())

    response = await team_routes.add_player_to_team(
        RosterEntryBody(player_id=UserId(500), jersey_number=23), TeamId(3), _build_coach()
    )

    assert inserted == [(TeamId(3), RosterEntryBody(player_id=UserId(500), jersey_number=23))]
    assert len(response.data.roster) == 5


@pytest.mark.asyncio
async def test_add_unknown_player_is_not_found(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_get_user_by_id(_: UserId) -> None:
        return None

    monkeypatch.setattr(team_routes, "get_user_by_id", fake_get_user_by_id)

    with pytest.raises(HTTPException) as exc_info:
        await team_routes.add_player_to_team(
            RosterEntryBody(player_id=UserId(404)), TeamId(3), _build_coach()
        )

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_remove_absent_player_is_a_no_op(monkeypatch: pytest.MonkeyPatch) -> None:
    deleted: list[tuple[TeamId, UserId]] = []

    async def fake_delete(team_id: TeamId, player_id: UserId) -> None:
        deleted.append((team_id, player_id))

    async def fake_get_team_with_roster(_: TeamId) -> FullTeamWithRoster:
        return _build_team(3)

    monkeypatch.setattr(team_routes, "sql_delete_roster_entries", fake_delete)
    monkeypatch.setattr(team_routes, "get_team_with_roster", fake_get_team_with_roster)

    response = await team_routes.remove_player_from_team(UserId(999), _build_coach(), _build_team(3))

    assert deleted == [(TeamId(3), UserId(999))]
    assert [entry.player_id for entry in response.data.roster] == [
        UserId(100),
        UserId(101),
        UserId(102),
    ]
