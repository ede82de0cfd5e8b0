"""create league tables

Revision ID: 4a7c2e91b0d3
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str | None = "4a7c2e91b0d3"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("account_type", sa.String(), server_default="PLAYER", nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="users_email_key"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)

    op.create_table(
        "leagues",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("division", sa.String(), nullable=False),
        sa.Column("season", sa.String(), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("registration_deadline", sa.DateTime(timezone=True), nullable=False),
        sa.Column("max_teams", sa.Integer(), server_default="12", nullable=False),
        sa.Column("registration_fee", sa.Numeric(10, 2), nullable=False),
        sa.Column("rules", sa.Text(), server_default="", nullable=False),
        sa.Column("status", sa.String(), server_default="DRAFT", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default="t", nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_leagues_id"), "leagues", ["id"], unique=False)
    op.create_index(op.f("ix_leagues_name"), "leagues", ["name"], unique=False)
    op.create_index(op.f("ix_leagues_division"), "leagues", ["division"], unique=False)
    op.create_index(op.f("ix_leagues_season"), "leagues", ["season"], unique=False)
    op.create_index(op.f("ix_leagues_status"), "leagues", ["status"], unique=False)

    op.create_table(
        "teams",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("league_id", sa.BigInteger(), nullable=False),
        sa.Column("coach_id", sa.BigInteger(), nullable=False),
        sa.Column("assistant_coach_ids", sa.JSON(), server_default="[]", nullable=False),
        sa.Column("wins", sa.Integer(), server_default="0", nullable=False),
        sa.Column("losses", sa.Integer(), server_default="0", nullable=False),
        sa.Column("logo", sa.String(), server_default="", nullable=False),
        sa.Column("color_primary", sa.String(), nullable=True),
        sa.Column("color_secondary", sa.String(), nullable=True),
        sa.Column("home_venue", sa.String(), nullable=True),
        sa.Column("max_players", sa.Integer(), server_default="15", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default="t", nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["league_id"], ["leagues.id"], name="teams_league_id_fkey"),
        sa.ForeignKeyConstraint(["coach_id"], ["users.id"], name="teams_coach_id_fkey"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("wins >= 0 AND losses >= 0", name="teams_record_non_negative"),
    )
    op.create_index(op.f("ix_teams_id"), "teams", ["id"], unique=False)
    op.create_index(op.f("ix_teams_name"), "teams", ["name"], unique=False)
    op.create_index(op.f("ix_teams_league_id"), "teams", ["league_id"], unique=False)
    op.create_index(op.f("ix_teams_coach_id"), "teams", ["coach_id"], unique=False)

    op.create_table(
        "team_players",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("team_id", sa.BigInteger(), nullable=False),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("jersey_number", sa.Integer(), nullable=True),
        sa.Column("position", sa.String(), nullable=True),
        sa.Column("status", sa.String(), server_default="ACTIVE", nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("team_id", "player_id", name="team_players_team_id_player_id_key"),
    )
    op.create_index(op.f("ix_team_players_id"), "team_players", ["id"], unique=False)
    op.create_index(op.f("ix_team_players_team_id"), "team_players", ["team_id"], unique=False)
    op.create_index(op.f("ix_team_players_player_id"), "team_players", ["player_id"], unique=False)

    op.create_table(
        "games",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("league_id", sa.BigInteger(), nullable=False),
        sa.Column("home_team_id", sa.BigInteger(), nullable=False),
        sa.Column("away_team_id", sa.BigInteger(), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("scheduled_time", sa.String(), nullable=False),
        sa.Column("venue", sa.String(), nullable=False),
        sa.Column("venue_address", sa.String(), nullable=True),
        sa.Column("status", sa.String(), server_default="SCHEDULED", nullable=False),
        sa.Column("home_score", sa.Integer(), server_default="0", nullable=True),
        sa.Column("away_score", sa.Integer(), server_default="0", nullable=True),
        sa.Column("quarter", sa.Integer(), server_default="1", nullable=False),
        sa.Column("notes", sa.Text(), server_default="", nullable=False),
        sa.Column("officials", sa.JSON(), server_default="[]", nullable=False),
        sa.Column("attendance", sa.Integer(), server_default="0", nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["league_id"], ["leagues.id"], name="games_league_id_fkey"),
        sa.ForeignKeyConstraint(["home_team_id"], ["teams.id"], name="games_home_team_id_fkey"),
        sa.ForeignKeyConstraint(["away_team_id"], ["teams.id"], name="games_away_team_id_fkey"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("home_team_id <> away_team_id", name="games_distinct_teams"),
    )
    op.create_index(op.f("ix_games_id"), "games", ["id"], unique=False)
    op.create_index(op.f("ix_games_league_id"), "games", ["league_id"], unique=False)
    op.create_index(op.f("ix_games_home_team_id"), "games", ["home_team_id"], unique=False)
    op.create_index(op.f("ix_games_away_team_id"), "games", ["away_team_id"], unique=False)
    op.create_index(op.f("ix_games_scheduled_date"), "games", ["scheduled_date"], unique=False)
    op.create_index(op.f("ix_games_status"), "games", ["status"], unique=False)

    op.create_table(
        "registrations",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("league_id", sa.BigInteger(), nullable=False),
        sa.Column("team_id", sa.BigInteger(), nullable=True),
        sa.Column("registration_type", sa.String(), nullable=False),
        sa.Column("payment_status", sa.String(), server_default="PENDING", nullable=False),
        sa.Column("amount_paid", sa.Numeric(10, 2), server_default="0", nullable=False),
        sa.Column("amount_due", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_method", sa.String(), server_default="ONLINE", nullable=False),
        sa.Column("transaction_id", sa.String(), server_default="", nullable=False),
        sa.Column("status", sa.String(), server_default="SUBMITTED", nullable=False),
        sa.Column("emergency_waiver", sa.JSON(), server_default="{}", nullable=False),
        sa.Column("medical_info", sa.JSON(), server_default="{}", nullable=False),
        sa.Column("shirt_size", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), server_default="", nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["league_id"], ["leagues.id"], name="registrations_league_id_fkey"),
        sa.ForeignKeyConstraint(
            ["team_id"], ["teams.id"], name="registrations_team_id_fkey", ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "league_id", name="registrations_user_id_league_id_key"),
    )
    op.create_index(op.f("ix_registrations_id"), "registrations", ["id"], unique=False)
    op.create_index(op.f("ix_registrations_user_id"), "registrations", ["user_id"], unique=False)
    op.create_index(op.f("ix_registrations_league_id"), "registrations", ["league_id"], unique=False)
    op.create_index(op.f("ix_registrations_status"), "registrations", ["status"], unique=False)


def downgrade() -> None:
    op.drop_table("registrations")
    op.drop_table("games")
    op.drop_table("team_players")
    op.drop_table("teams")
    op.drop_table("leagues")
    op.drop_table("users")
