from sqlalchemy import Column, ForeignKey, Integer, String, Table, UniqueConstraint, func
from sqlalchemy.orm import declarative_base  # type: ignore[attr-defined]
from sqlalchemy.sql.sqltypes import JSON, BigInteger, Boolean, Date, DateTime, Numeric, Text

Base = declarative_base()
metadata = Base.metadata
DateTimeTZ = DateTime(timezone=True)

users = Table(
    "users",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("email", String, nullable=False, unique=True),
    Column("first_name", String, nullable=False),
    Column("last_name", String, nullable=False),
    Column("phone", String, nullable=True),
    Column("password_hash", String, nullable=False),
    Column("account_type", String, nullable=False, server_default="PLAYER"),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)

leagues = Table(
    "leagues",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("name", String, nullable=False, index=True),
    Column("division", String, nullable=False, index=True),
    Column("season", String, nullable=False, index=True),
    Column("start_date", DateTimeTZ, nullable=False),
    Column("end_date", DateTimeTZ, nullable=False),
    Column("registration_deadline", DateTimeTZ, nullable=False),
    Column("max_teams", Integer, nullable=False, server_default="12"),
    Column("registration_fee", Numeric(10, 2), nullable=False),
    Column("rules", Text, nullable=False, server_default=""),
    Column("status", String, nullable=False, server_default="DRAFT", index=True),
    Column("is_active", Boolean, nullable=False, server_default="t"),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)

teams = Table(
    "teams",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("name", String, nullable=False, index=True),
    Column("league_id", BigInteger, ForeignKey("leagues.id"), index=True, nullable=False),
    Column("coach_id", BigInteger, ForeignKey("users.id"), index=True, nullable=False),
    Column("assistant_coach_ids", JSON, nullable=False, server_default="[]"),
    Column("wins", Integer, nullable=False, server_default="0"),
    Column("losses", Integer, nullable=False, server_default="0"),
    Column("logo", String, nullable=False, server_default=""),
    Column("color_primary", String, nullable=True),
    Column("color_secondary", String, nullable=True),
    Column("home_venue", String, nullable=True),
    Column("max_players", Integer, nullable=False, server_default="15"),
    Column("is_active", Boolean, nullable=False, server_default="t"),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)

team_players = Table(
    "team_players",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("team_id", BigInteger, ForeignKey("teams.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("player_id", BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("jersey_number", Integer, nullable=True),
    Column("position", String, nullable=True),
    Column("status", String, nullable=False, server_default="ACTIVE"),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    UniqueConstraint("team_id", "player_id"),
)

games = Table(
    "games",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("league_id", BigInteger, ForeignKey("leagues.id"), index=True, nullable=False),
    Column("home_team_id", BigInteger, ForeignKey("teams.id"), index=True, nullable=False),
    Column("away_team_id", BigInteger, ForeignKey("teams.id"), index=True, nullable=False),
    Column("scheduled_date", Date, nullable=False, index=True),
    Column("scheduled_time", String, nullable=False),
    Column("venue", String, nullable=False),
    Column("venue_address", String, nullable=True),
    Column("status", String, nullable=False, server_default="SCHEDULED", index=True),
    Column("home_score", Integer, nullable=True, server_default="0"),
    Column("away_score", Integer, nullable=True, server_default="0"),
    Column("quarter", Integer, nullable=False, server_default="1"),
    Column("notes", Text, nullable=False, server_default=""),
    Column("officials", JSON, nullable=False, server_default="[]"),
    Column("attendance", Integer, nullable=False, server_default="0"),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Column("updated", DateTimeTZ, nullable=False, server_default=func.now()),
)

registrations = Table(
    "registrations",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("user_id", BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("league_id", BigInteger, ForeignKey("leagues.id"), index=True, nullable=False),
    Column("team_id", BigInteger, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True),
    Column("registration_type", String, nullable=False),
    Column("payment_status", String, nullable=False, server_default="PENDING"),
    Column("amount_paid", Numeric(10, 2), nullable=False, server_default="0"),
    Column("amount_due", Numeric(10, 2), nullable=False),
    Column("payment_method", String, nullable=False, server_default="ONLINE"),
    Column("transaction_id", String, nullable=False, server_default=""),
    Column("status", String, nullable=False, server_default="SUBMITTED", index=True),
    Column("emergency_waiver", JSON, nullable=False, server_default="{}"),
    Column("medical_info", JSON, nullable=False, server_default="{}"),
    Column("shirt_size", String, nullable=True),
    Column("notes", Text, nullable=False, server_default=""),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Column("updated", DateTimeTZ, nullable=False, server_default=func.now()),
    UniqueConstraint("user_id", "league_id"),
)
