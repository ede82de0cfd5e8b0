from decimal import Decimal
from enum import auto
from typing import Any

from heliclockter import datetime_utc
from pydantic import BaseModel, ConfigDict, Field, field_validator

from courtside.models.db.league import LeagueSummary
from courtside.models.db.shared import BaseModelORM
from courtside.models.db.user import UserSummary
from courtside.models.db.util import parse_json_column
from courtside.utils.id_types import LeagueId, RegistrationId, TeamId, UserId
from courtside.utils.types import EnumAutoStr


class RegistrationType(EnumAutoStr):
    PLAYER = auto()
    COACH = auto()
    VOLUNTEER = auto()


class PaymentStatus(EnumAutoStr):
    PENDING = auto()
    PARTIAL = auto()
    PAID = auto()
    REFUNDED = auto()


class PaymentMethod(EnumAutoStr):
    CREDIT_CARD = auto()
    DEBIT_CARD = auto()
    CASH = auto()
    CHECK = auto()
    ONLINE = auto()


class RegistrationStatus(EnumAutoStr):
    SUBMITTED = auto()
    APPROVED = auto()
    REJECTED = auto()
    WAITLIST = auto()


class ShirtSize(EnumAutoStr):
    XS = auto()
    S = auto()
    M = auto()
    L = auto()
    XL = auto()
    XXL = auto()


class EmergencyWaiver(BaseModel):
    signed: bool = False
    signed_date: datetime_utc | None = None
    signer_name: str | None = None


class MedicalInfo(BaseModel):
    allergies: str | None = None
    medications: str | None = None
    conditions: str | None = None
    insurance_provider: str | None = None
    policy_number: str | None = None


class RegistrationBody(BaseModel):
    league_id: LeagueId
    registration_type: RegistrationType
    shirt_size: ShirtSize | None = None
    emergency_waiver: EmergencyWaiver = Field(default_factory=EmergencyWaiver)
    medical_info: MedicalInfo = Field(default_factory=MedicalInfo)
    notes: str = ""


class RegistrationInsertable(BaseModelORM):
    user_id: UserId
    league_id: LeagueId
    team_id: TeamId | None = None
    registration_type: RegistrationType
    payment_status: PaymentStatus = PaymentStatus.PENDING
    amount_paid: Decimal = Decimal("0")
    amount_due: Decimal
    payment_method: PaymentMethod = PaymentMethod.ONLINE
    transaction_id: str = ""
    status: RegistrationStatus = RegistrationStatus.SUBMITTED
    emergency_waiver: EmergencyWaiver = Field(default_factory=EmergencyWaiver)
    medical_info: MedicalInfo = Field(default_factory=MedicalInfo)
    shirt_size: ShirtSize | None = None
    notes: str = ""
    created: datetime_utc
    updated: datetime_utc

    @field_validator("emergency_waiver", "medical_info", mode="before")
    @classmethod
    def parse_sub_record(cls, value: Any) -> Any:
        return parse_json_column(value)


class Registration(RegistrationInsertable):
    id: RegistrationId


class RegistrationWithDetails(Registration):
    user: UserSummary
    league: LeagueSummary
    team_name: str | None = None


class RegistrationUpdateBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    shirt_size: ShirtSize | None = None
    emergency_waiver: EmergencyWaiver | None = None
    medical_info: MedicalInfo | None = None
    notes: str | None = None
    team_id: TeamId | None = None
    status: RegistrationStatus | None = None

    def touches_admin_fields(self) -> bool:
        return "team_id" in self.model_fields_set or self.status is not None


class PaymentUpdateBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount_paid: Decimal | None = Field(default=None, ge=0)
    payment_method: PaymentMethod | None = None
    transaction_id: str | None = None
    payment_status: PaymentStatus | None = None
