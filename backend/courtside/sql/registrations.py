import json
from typing import Any

from heliclockter import datetime_utc

from courtside.database import database
from courtside.models.db.league import LeagueSummary
from courtside.models.db.registration import (
    PaymentUpdateBody,
    Registration,
    RegistrationInsertable,
    RegistrationStatus,
    RegistrationUpdateBody,
    RegistrationWithDetails,
)
from courtside.models.db.user import UserSummary
from courtside.utils.id_types import LeagueId, RegistrationId, UserId
from courtside.utils.types import dict_without_none

_REGISTRATION_WITH_DETAILS_QUERY = """
    SELECT
        r.*,
        u.first_name AS user_first_name,
        u.last_name AS user_last_name,
        u.email AS user_email,
        l.name AS league_name,
        l.division AS league_division,
        l.season AS league_season,
        t.name AS team_name
    FROM registrations r
    JOIN users u ON u.id = r.user_id
    JOIN leagues l ON l.id = r.league_id
    LEFT JOIN teams t ON t.id = r.team_id
    """


def _parse_registration_with_details(row: Any) -> RegistrationWithDetails:
    mapping = dict(row._mapping)
    user = UserSummary(
        id=mapping["user_id"],
        first_name=mapping.pop("user_first_name"),
        last_name=mapping.pop("user_last_name"),
        email=mapping.pop("user_email"),
    )
    league = LeagueSummary(
        id=mapping["league_id"],
        name=mapping.pop("league_name"),
        division=mapping.pop("league_division"),
        season=mapping.pop("league_season"),
    )
    return RegistrationWithDetails.model_validate({**mapping, "user": user, "league": league})


async def sql_get_registration(registration_id: RegistrationId) -> RegistrationWithDetails | None:
    query = f"{_REGISTRATION_WITH_DETAILS_QUERY} WHERE r.id = :registration_id"
    result = await database.fetch_one(query=query, values={"registration_id": registration_id})
    return _parse_registration_with_details(result) if result is not None else None


async def sql_get_registrations(
    league_id: LeagueId | None = None,
    status: RegistrationStatus | None = None,
    user_id: UserId | None = None,
) -> list[RegistrationWithDetails]:
    query = f"{_REGISTRATION_WITH_DETAILS_QUERY} WHERE TRUE "
    params: dict[str, Any] = {}

    if league_id is not None:
        query += "AND r.league_id = :league_id "
        params["league_id"] = league_id

    if status is not None:
        query += "AND r.status = :status "
        params["status"] = status.value

    if user_id is not None:
        query += "AND r.user_id = :user_id "
        params["user_id"] = user_id

    query += "ORDER BY r.created DESC"
    result = await database.fetch_all(query=query, values=params)
    return [_parse_registration_with_details(row) for row in result]


async def get_registration_for_user_and_league(
    user_id: UserId, league_id: LeagueId
) -> Registration | None:
    query = """
        SELECT *
        FROM registrations
        WHERE user_id = :user_id
          AND league_id = :league_id
        """
    result = await database.fetch_one(
        query=query, values={"user_id": user_id, "league_id": league_id}
    )
    return Registration.model_validate(dict(result._mapping)) if result is not None else None


async def sql_create_registration(registration: RegistrationInsertable) -> RegistrationId:
    query = """
        INSERT INTO registrations (
            user_id,
            league_id,
            team_id,
            registration_type,
            payment_status,
            amount_paid,
            amount_due,
            payment_method,
            transaction_id,
            status,
            emergency_waiver,
            medical_info,
            shirt_size,
            notes,
            created,
            updated
        )
        VALUES (
            :user_id,
            :league_id,
            :team_id,
            :registration_type,
            :payment_status,
            :amount_paid,
            :amount_due,
            :payment_method,
            :transaction_id,
            :status,
            :emergency_waiver,
            :medical_info,
            :shirt_size,
            :notes,
            :created,
            :updated
        )
        RETURNING id
        """
    values = registration.model_dump(mode="json")
    new_id = await database.fetch_val(
        query=query,
        values={
            **values,
            "amount_paid": registration.amount_paid,
            "amount_due": registration.amount_due,
            "emergency_waiver": json.dumps(values["emergency_waiver"]),
            "medical_info": json.dumps(values["medical_info"]),
            "created": registration.created,
            "updated": registration.updated,
        },
    )
    return RegistrationId(new_id)


async def sql_update_registration(
    registration_id: RegistrationId, body: RegistrationUpdateBody
) -> None:
    nullable = {"team_id"}
    changes: dict[str, Any] = {
        key: value
        for key, value in body.model_dump(mode="json", exclude_unset=True).items()
        if value is not None or key in nullable
    }
    for json_column in ("emergency_waiver", "medical_info"):
        if json_column in changes:
            changes[json_column] = json.dumps(changes[json_column])
    if len(changes) < 1:
        return

    assignments = ", ".join(f"{column} = :{column}" for column in changes)
    query = f"""
        UPDATE registrations
        SET {assignments}, updated = :updated
        WHERE id = :registration_id
        """
    await database.execute(
        query=query,
        values={**changes, "updated": datetime_utc.now(), "registration_id": registration_id},
    )


async def sql_update_payment(registration_id: RegistrationId, body: PaymentUpdateBody) -> None:
    changes: dict[str, Any] = dict_without_none(body.model_dump(mode="json"))
    if body.amount_paid is not None:
        changes["amount_paid"] = body.amount_paid
    if changes.get("transaction_id") == "":
        del changes["transaction_id"]
    if len(changes) < 1:
        return

    assignments = ", ".join(f"{column} = :{column}" for column in changes)
    query = f"""
        UPDATE registrations
        SET {assignments}, updated = :updated
        WHERE id = :registration_id
        """
    await database.execute(
        query=query,
        values={**changes, "updated": datetime_utc.now(), "registration_id": registration_id},
    )


async def sql_delete_registration(registration_id: RegistrationId) -> None:
    query = "DELETE FROM registrations WHERE id = :registration_id"
    await database.execute(query=query, values={"registration_id": registration_id})
