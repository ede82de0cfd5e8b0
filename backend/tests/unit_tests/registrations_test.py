import csv
import io
from decimal import Decimal

import pytest
from fastapi import HTTPException
from heliclockter import datetime_utc, timedelta

from courtside.logic import registrations as registration_logic
from courtside.logic.registrations import (
    EXPORT_COLUMNS,
    check_registration_deadline,
    registrations_to_csv,
)
from courtside.models.db.account import UserAccountType
from courtside.models.db.league import Division, League, LeagueSummary
from courtside.models.db.registration import (
    EmergencyWaiver,
    Registration,
    RegistrationBody,
    RegistrationInsertable,
    RegistrationType,
    RegistrationUpdateBody,
    RegistrationWithDetails,
    ShirtSize,
)
from courtside.models.db.team import Team
from courtside.models.db.user import UserPublic, UserSummary
from courtside.routes import registrations as registration_routes
from courtside.sql import registrations as registration_sql
from courtside.utils.id_types import LeagueId, RegistrationId, TeamId, UserId


def _build_league(deadline_offset: timedelta = timedelta(days=7)) -> League:
    now = datetime_utc.now()
    return League(
        id=LeagueId(4),
        name="Spring Hoops",
        division=Division.MENS,
        season="2026",
        start_date=now,
        end_date=now + timedelta(days=60),
        registration_deadline=now + deadline_offset,
        registration_fee=Decimal("85.00"),
        created=now,
    )


def _build_user(account_type: UserAccountType = UserAccountType.PLAYER) -> UserPublic:
    return UserPublic(
        id=UserId(9),
        email="jordan@example.org",
        first_name="Jordan",
        last_name="Parker",
        created=datetime_utc.now(),
        account_type=account_type,
    )


def _with_details(registration_id: RegistrationId, insertable: RegistrationInsertable) -> RegistrationWithDetails:
    return RegistrationWithDetails(
        **insertable.model_dump(),
        id=registration_id,
        user=UserSummary(id=UserId(9), first_name="Jordan", last_name="Parker", email="jordan@example.org"),
        league=LeagueSummary(id=LeagueId(4), name="Spring Hoops", division=Division.MENS, season="2026"),
    )


class _FakeRegistrationStore:
    def __init__(self) -> None:
        self.rows: dict[RegistrationId, RegistrationWithDetails] = {}

    async def get_for_user_and_league(self, user_id: UserId, league_id: LeagueId) -> Registration | None:
        for row in self.rows.values():
            if row.user_id == user_id and row.league_id == league_id:
                return row
        return None

    async def create(self, registration: RegistrationInsertable) -> RegistrationId:
        registration_id = RegistrationId(len(self.rows) + 1)
        self.rows[registration_id] = _with_details(registration_id, registration)
        return registration_id

    async def get(self, registration_id: RegistrationId) -> RegistrationWithDetails | None:
        return self.rows.get(registration_id)


def _install_store(monkeypatch: pytest.MonkeyPatch, league: League | None) -> _FakeRegistrationStore:
    store = _FakeRegistrationStore()

    async def fake_get_league(_: LeagueId) -> League | None:
        return league

    monkeypatch.setattr(registration_logic, "sql_get_league", fake_get_league)
    monkeypatch.setattr(
        registration_logic, "get_registration_for_user_and_league", store.get_for_user_and_league
    )
    monkeypatch.setattr(registration_logic, "sql_create_registration", store.create)
    monkeypatch.setattr(registration_logic, "sql_get_registration", store.get)
    return store


@pytest.mark.asyncio
async def test_create_registration_charges_league_fee(monkeypatch: pytest.MonkeyPatch) -> None:
    store = _install_store(monkeypatch, _build_league())

    registration = await registration_logic.create_registration(
        _build_user(),
        RegistrationBody(league_id=LeagueId(4), registration_type=RegistrationType.PLAYER),
    )

    assert registration.amount_due == Decimal("85.00")
    assert registration.amount_paid == Decimal("0")
    assert registration.user_id == UserId(9)
    assert len(store.rows) == 1


@pytest.mark.asyncio
async def test_second_registration_for_same_league_is_rejected(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    store = _install_store(monkeypatch, _build_league())
    body = RegistrationBody(league_id=LeagueId(4), registration_type=RegistrationType.PLAYER)

    await registration_logic.create_registration(_build_user(), body)
    with pytest.raises(HTTPException) as exc_info:
        await registration_logic.create_registration(_build_user(), body)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Already registered for this league"
    assert len(store.rows) == 1


@pytest.mark.asyncio
async def test_registration_after_deadline_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    store = _install_store(monkeypatch, _build_league(deadline_offset=timedelta(days=-1)))

    with pytest.raises(HTTPException) as exc_info:
        await registration_logic.create_registration(
            _build_user(),
            RegistrationBody(league_id=LeagueId(4), registration_type=RegistrationType.PLAYER),
        )

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Registration deadline has passed"
    assert store.rows == {}


@pytest.mark.asyncio
async def test_registration_for_unknown_league_is_not_found(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _install_store(monkeypatch, None)

    with pytest.raises(HTTPException) as exc_info:
        await registration_logic.create_registration(
            _build_user(),
            RegistrationBody(league_id=LeagueId(99), registration_type=RegistrationType.COACH),
        )

    assert exc_info.value.status_code == 404


def test_deadline_check_accepts_the_deadline_itself() -> None:
    league = _build_league()

    check_registration_deadline(league, league.registration_deadline)
    with pytest.raises(HTTPException):
        check_registration_deadline(league, league.registration_deadline + timedelta(seconds=1))


def test_registrations_to_csv() -> None:
    now = datetime_utc.now()
    registration = _with_details(
        RegistrationId(12),
        RegistrationInsertable(
            user_id=UserId(9),
            league_id=LeagueId(4),
            registration_type=RegistrationType.PLAYER,
            amount_due=Decimal("85"),
            amount_paid=Decimal("40.5"),
            shirt_size=ShirtSize.L,
            emergency_waiver=EmergencyWaiver(signed=True, signed_date=now, signer_name="Jordan Parker"),
            created=now,
            updated=now,
        ),
    )

    rows = list(csv.reader(io.StringIO(registrations_to_csv([registration]))))

    assert rows[0] == EXPORT_COLUMNS
    assert len(rows) == 2
    exported = dict(zip(EXPORT_COLUMNS, rows[1], strict=True))
    assert exported["Registration ID"] == "12"
    assert exported["Email"] == "jordan@example.org"
    assert exported["Division"] == "MENS"
    assert exported["Amount Due"] == "85.00"
    assert exported["Amount Paid"] == "40.50"
    assert exported["Shirt Size"] == "L"
    assert exported["Waiver Signed"] == "yes"
    assert exported["Team"] == ""


def test_registration_update_body_flags_admin_fields() -> None:
    assert not RegistrationUpdateBody(notes="Bringing my own ball").touches_admin_fields()
    assert RegistrationUpdateBody(status="APPROVED").touches_admin_fields()  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_player_cannot_approve_own_registration(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = {"update": 0}
    now = datetime_utc.now()
    registration = _with_details(
        RegistrationId(1),
        RegistrationInsertable(
            user_id=UserId(9),
            league_id=LeagueId(4),
            registration_type=RegistrationType.PLAYER,
            amount_due=Decimal("85"),
            created=now,
            updated=now,
        ),
    )

    async def fake_update(*_: object) -> None:
        calls["update"] += 1

    monkeypatch.setattr(registration_routes, "sql_update_registration", fake_update)

    with pytest.raises(HTTPException) as exc_info:
        await registration_routes.update_registration(
            RegistrationUpdateBody(status="APPROVED"),  # type: ignore[arg-type]
            _build_user(),
            registration,
        )

    assert exc_info.value.status_code == 401
    assert calls["update"] == 0


@pytest.mark.asyncio
async def test_other_player_cannot_view_registration() -> None:
    now = datetime_utc.now()
    registration = _with_details(
        RegistrationId(1),
        RegistrationInsertable(
            user_id=UserId(10),
            league_id=LeagueId(4),
            registration_type=RegistrationType.PLAYER,
            amount_due=Decimal("85"),
            created=now,
            updated=now,
        ),
    )

    with pytest.raises(HTTPException) as exc_info:
        await registration_routes.get_registration(_build_user(), registration)

    assert exc_info.value.status_code == 401

    response = await registration_routes.get_registration(
        _build_user(UserAccountType.ADMIN), registration
    )
    assert response.data.id == RegistrationId(1)


@pytest.mark.asyncio
async def test_export_registrations_as_csv(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_get_registrations(**_: object) -> list[RegistrationWithDetails]:
        return []

    monkeypatch.setattr(registration_routes, "sql_get_registrations", fake_get_registrations)

    response = await registration_routes.export_registrations(
        "csv", LeagueId(4), _build_user(UserAccountType.ADMIN)
    )

    assert response.media_type == "text/csv"
    assert response.headers["content-disposition"] == 'attachment; filename="registrations-4.csv"'
    assert bytes(response.body).decode().splitlines() == [",".join(EXPORT_COLUMNS)]


def _build_registration(team_id: TeamId | None = None) -> RegistrationWithDetails:
    now = datetime_utc.now()
    return _with_details(
        RegistrationId(1),
        RegistrationInsertable(
            user_id=UserId(9),
            league_id=LeagueId(4),
            team_id=team_id,
            registration_type=RegistrationType.PLAYER,
            amount_due=Decimal("85"),
            created=now,
            updated=now,
        ),
    )


def _build_team(team_id: TeamId, league_id: LeagueId) -> Team:
    return Team(
        id=team_id,
        name="Northside Ballers",
        league_id=league_id,
        coach_id=UserId(2),
        created=datetime_utc.now(),
    )


def _install_team_update(
    monkeypatch: pytest.MonkeyPatch,
    registration: RegistrationWithDetails,
    team: Team | None,
) -> list[RegistrationUpdateBody]:
    updates: list[RegistrationUpdateBody] = []

    async def fake_get_team(_: TeamId) -> Team | None:
        return team

    async def fake_update(_: RegistrationId, body: RegistrationUpdateBody) -> None:
        updates.append(body)

    async def fake_get_registration(_: RegistrationId) -> RegistrationWithDetails:
        return registration

    monkeypatch.setattr(registration_routes, "sql_get_team", fake_get_team)
    monkeypatch.setattr(registration_routes, "sql_update_registration", fake_update)
    monkeypatch.setattr(registration_routes, "sql_get_registration", fake_get_registration)
    return updates


@pytest.mark.asyncio
async def test_assigning_unknown_team_is_not_found(monkeypatch: pytest.MonkeyPatch) -> None:
    updates = _install_team_update(monkeypatch, _build_registration(), None)

    with pytest.raises(HTTPException) as exc_info:
        await registration_routes.update_registration(
            RegistrationUpdateBody(team_id=TeamId(404)),
            _build_user(UserAccountType.ADMIN),
            _build_registration(),
        )

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Could not find team with id 404"
    assert updates == []


@pytest.mark.asyncio
async def test_assigning_team_from_other_league_is_rejected(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    updates = _install_team_update(
        monkeypatch, _build_registration(), _build_team(TeamId(3), LeagueId(5))
    )

    with pytest.raises(HTTPException) as exc_info:
        await registration_routes.update_registration(
            RegistrationUpdateBody(team_id=TeamId(3)),
            _build_user(UserAccountType.ADMIN),
            _build_registration(),
        )

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Team must be in the same league as the registration"
    assert updates == []


@pytest.mark.asyncio
async def test_admin_assigns_team_from_same_league(monkeypatch: pytest.MonkeyPatch) -> None:
    updates = _install_team_update(
        monkeypatch, _build_registration(), _build_team(TeamId(3), LeagueId(4))
    )

    await registration_routes.update_registration(
        RegistrationUpdateBody(team_id=TeamId(3)),
        _build_user(UserAccountType.ADMIN),
        _build_registration(),
    )

    assert [body.team_id for body in updates] == [TeamId(3)]


@pytest.mark.asyncio
async def test_admin_clears_team_assignment(monkeypatch: pytest.MonkeyPatch) -> None:
    registration = _build_registration(team_id=TeamId(3))
    updates = _install_team_update(monkeypatch, registration, None)
    body = RegistrationUpdateBody.model_validate({"team_id": None})

    assert body.touches_admin_fields()
    await registration_routes.update_registration(
        body, _build_user(UserAccountType.ADMIN), registration
    )

    assert len(updates) == 1
    assert "team_id" in updates[0].model_fields_set


@pytest.mark.asyncio
async def test_player_cannot_clear_team_assignment(monkeypatch: pytest.MonkeyPatch) -> None:
    registration = _build_registration(team_id=TeamId(3))
    updates = _install_team_update(monkeypatch, registration, None)

    with pytest.raises(HTTPException) as exc_info:
        await registration_routes.update_registration(
            RegistrationUpdateBody.model_validate({"team_id": None}), _build_user(), registration
        )

    assert exc_info.value.status_code == 401
    assert updates == []


@pytest.mark.asyncio
async def test_update_writes_explicit_null_team(monkeypatch: pytest.MonkeyPatch) -> None:
    executed: list[dict[str, object]] = []

    async def fake_execute(query: str, values: dict[str, object]) -> None:
        executed.append({"query": query, **values})

    monkeypatch.setattr(registration_sql.database, "execute", fake_execute)

    await registration_sql.sql_update_registration(
        RegistrationId(1), RegistrationUpdateBody.model_validate({"team_id": None, "notes": None})
    )
    await registration_sql.sql_update_registration(
        RegistrationId(1), RegistrationUpdateBody(notes="Late arrival")
    )

    assert len(executed) == 2
    assert executed[0]["team_id"] is None
    assert "notes" not in executed[0]
    assert "team_id = :team_id" in str(executed[0]["query"])
    assert "team_id" not in executed[1]
    assert executed[1]["notes"] == "Late arrival"
