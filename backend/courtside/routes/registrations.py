from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette import status
from starlette.responses import Response

from courtside.config import config
from courtside.logic.registrations import create_registration, registrations_to_csv
from courtside.models.db.registration import (
    PaymentUpdateBody,
    RegistrationBody,
    RegistrationStatus,
    RegistrationUpdateBody,
    RegistrationWithDetails,
)
from courtside.models.db.user import UserPublic
from courtside.routes.auth import is_admin_user, user_authenticated, user_authenticated_admin
from courtside.routes.models import RegistrationResponse, RegistrationsResponse, SuccessResponse
from courtside.routes.util import registration_dependency
from courtside.sql.registrations import (
    sql_delete_registration,
    sql_get_registration,
    sql_get_registrations,
    sql_update_payment,
    sql_update_registration,
)
from courtside.sql.teams import sql_get_team
from courtside.utils.errors import ForeignKey, NotFound, check_foreign_key_violation
from courtside.utils.id_types import LeagueId, UserId
from courtside.utils.types import assert_some

router = APIRouter(prefix=config.api_prefix)


def check_owner_or_admin(registration: RegistrationWithDetails, user: UserPublic) -> None:
    if registration.user_id != user.id and not is_admin_user(user):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authorized to access this registration")


@router.post("/registrations", response_model=RegistrationResponse)
async def register_for_league(
    registration_body: RegistrationBody,
    user: UserPublic = Depends(user_authenticated),
) -> RegistrationResponse:
    return RegistrationResponse(data=await create_registration(user, registration_body))


@router.get("/registrations", response_model=RegistrationsResponse)
async def get_registrations(
    league_id: LeagueId | None = Query(default=None),
    status_filter: RegistrationStatus | None = Query(default=None, alias="status"),
    user_id: UserId | None = Query(default=None),
    _: UserPublic = Depends(user_authenticated_admin),
) -> RegistrationsResponse:
    return RegistrationsResponse(
        data=await sql_get_registrations(league_id, status_filter, user_id)
    )


@router.get("/registrations/me", response_model=RegistrationsResponse)
async def get_my_registrations(
    user: UserPublic = Depends(user_authenticated),
) -> RegistrationsResponse:
    return RegistrationsResponse(data=await sql_get_registrations(user_id=user.id))


@router.get("/registrations/export", response_model=None)
async def export_registrations(
    export_format: Literal["csv", "json"] = Query(default="csv", alias="format"),
    league_id: LeagueId | None = Query(default=None),
    _: UserPublic = Depends(user_authenticated_admin),
) -> Response:
    registrations = await sql_get_registrations(league_id=league_id)
    suffix = f"-{int(league_id)}" if league_id is not None else ""

    if export_format == "json":
        return Response(
            content=RegistrationsResponse(data=registrations).model_dump_json(),
            media_type="application/json",
            headers={
                "Content-Disposition": f'attachment; filename="registrations{suffix}.json"'
            },
        )

    return Response(
        content=registrations_to_csv(registrations),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="registrations{suffix}.csv"'},
    )


@router.get("/registrations/{registration_id}", response_model=RegistrationResponse)
async def get_registration(
    user: UserPublic = Depends(user_authenticated),
    registration: RegistrationWithDetails = Depends(registration_dependency),
) -> RegistrationResponse:
    check_owner_or_admin(registration, user)
    return RegistrationResponse(data=registration)


@router.put("/registrations/{registration_id}", response_model=RegistrationResponse)
async def update_registration(
    registration_body: RegistrationUpdateBody,
    user: UserPublic = Depends(user_authenticated),
    registration: RegistrationWithDetails = Depends(registration_dependency),
) -> RegistrationResponse:
    check_owner_or_admin(registration, user)
    if registration_body.touches_admin_fields() and not is_admin_user(user):
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED, "Only admins can change the status or team"
        )

    if registration_body.team_id is not None:
        team = await sql_get_team(registration_body.team_id)
        if team is None:
            raise NotFound("team", registration_body.team_id)
        if team.league_id != registration.league_id:
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                "Team must be in the same league as the registration",
            )

    with check_foreign_key_violation({ForeignKey.registrations_team_id_fkey}):
        await sql_update_registration(registration.id, registration_body)
    return RegistrationResponse(data=assert_some(await sql_get_registration(registration.id)))


@router.put("/registrations/{registration_id}/payment", response_model=RegistrationResponse)
async def update_payment(
    payment_body: PaymentUpdateBody,
    _: UserPublic = Depends(user_authenticated_admin),
    registration: RegistrationWithDetails = Depends(registration_dependency),
) -> RegistrationResponse:
    await sql_update_payment(registration.id, payment_body)
    return RegistrationResponse(data=assert_some(await sql_get_registration(registration.id)))


@router.delete("/registrations/{registration_id}", response_model=SuccessResponse)
async def delete_registration(
    _: UserPublic = Depends(user_authenticated_admin),
    registration: RegistrationWithDetails = Depends(registration_dependency),
) -> SuccessResponse:
    await sql_delete_registration(registration.id)
    return SuccessResponse()
