import csv
import io

from fastapi import HTTPException
from heliclockter import datetime_utc
from starlette import status

from courtside.models.db.league import League
from courtside.models.db.registration import (
    RegistrationBody,
    RegistrationInsertable,
    RegistrationWithDetails,
)
from courtside.models.db.user import UserPublic
from courtside.sql.leagues import sql_get_league
from courtside.sql.registrations import (
    get_registration_for_user_and_league,
    sql_create_registration,
    sql_get_registration,
)
from courtside.utils.errors import NotFound, UniqueIndex, check_unique_constraint_violation
from courtside.utils.types import assert_some

EXPORT_COLUMNS = [
    "Registration ID",
    "First Name",
    "Last Name",
    "Email",
    "League",
    "Division",
    "Season",
    "Team",
    "Type",
    "Status",
    "Payment Status",
    "Amount Due",
    "Amount Paid",
    "Payment Method",
    "Shirt Size",
    "Waiver Signed",
    "Registered At",
]


def check_registration_deadline(league: League, now: datetime_utc) -> None:
    if now > league.registration_deadline:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Registration deadline has passed",
        )


async def create_registration(
    user: UserPublic, body: RegistrationBody
) -> RegistrationWithDetails:
    league = await sql_get_league(body.league_id)
    if league is None:
        raise NotFound("league", body.league_id)

    now = datetime_utc.now()
    check_registration_deadline(league, now)

    if await get_registration_for_user_and_league(user.id, league.id) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Already registered for this league",
        )

    # A concurrent request can still slip past the check above, the unique constraint catches it
    with check_unique_constraint_violation({UniqueIndex.registrations_user_id_league_id_key}):
        registration_id = await sql_create_registration(
            RegistrationInsertable(
                **body.model_dump(),
                user_id=user.id,
                amount_due=league.registration_fee,
                created=now,
                updated=now,
            )
        )

    return assert_some(await sql_get_registration(registration_id))


def registrations_to_csv(registrations: list[RegistrationWithDetails]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_COLUMNS)
    for registration in registrations:
        writer.writerow(
            [
                int(registration.id),
                registration.user.first_name,
                registration.user.last_name,
                registration.user.email or "",
                registration.league.name,
                registration.league.division.value,
                registration.league.season,
                registration.team_name or "",
                registration.registration_type.value,
                registration.status.value,
                registration.payment_status.value,
                f"{registration.amount_due:.2f}",
                f"{registration.amount_paid:.2f}",
                registration.payment_method.value,
                registration.shirt_size.value if registration.shirt_size is not None else "",
                "yes" if registration.emergency_waiver.signed else "no",
                registration.created.isoformat(),
            ]
        )
    return output.getvalue()
