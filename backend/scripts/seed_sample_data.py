#!/usr/bin/env python3
import argparse
import asyncio
import random
from decimal import Decimal

from heliclockter import datetime_utc, timedelta

from courtside.database import database
from courtside.logic.games import update_game_and_reconcile
from courtside.models.db.account import UserAccountType
from courtside.models.db.game import GameBody, GameStatus, GameUpdateBody
from courtside.models.db.league import Division, LeagueBody, LeagueStatus
from courtside.models.db.team import RosterEntryBody, TeamBody
from courtside.models.db.user import UserInsertable, UserPublic
from courtside.sql.games import sql_create_game
from courtside.sql.leagues import sql_create_league
from courtside.sql.teams import sql_create_team, sql_insert_roster_entry
from courtside.sql.users import create_user, get_user_by_email
from courtside.utils.id_types import TeamId
from courtside.utils.security import hash_password

TEAM_NAMES = [
    "Rim Rockers",
    "Court Kings",
    "Fast Breakers",
    "Glass Cleaners",
    "Buzzer Beaters",
    "Full Court Press",
    "Backdoor Cutters",
    "Pick and Rollers",
]

FIRST_NAMES = ["Alex", "Jordan", "Sam", "Casey", "Riley", "Morgan", "Taylor", "Jamie", "Drew"]
LAST_NAMES = ["Parker", "Reed", "Hayes", "Brooks", "Ellis", "Grant", "Lane", "Shaw", "Wells"]


def build_round_robin(team_ids: list[TeamId]) -> list[tuple[TeamId, TeamId]]:
    return [
        (home, away)
        for index, home in enumerate(team_ids)
        for away in team_ids[index + 1 :]
    ]


def determine_score(rng: random.Random) -> tuple[int, int]:
    home_score = rng.randint(35, 80)
    away_score = rng.randint(35, 80)
    if home_score == away_score:
        home_score += 2
    return home_score, away_score


async def ensure_user(
    email: str,
    first_name: str,
    last_name: str,
    password: str,
    account_type: UserAccountType,
) -> UserPublic:
    existing = await get_user_by_email(email)
    if existing is not None:
        return UserPublic.model_validate(existing.model_dump(exclude={"password_hash"}))

    return await create_user(
        UserInsertable(
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=hash_password(password),
            created=datetime_utc.now(),
            account_type=account_type,
        )
    )


async def seed_league(
    division: Division,
    season: str,
    team_count: int,
    players_per_team: int,
    completed_games: int,
    password: str,
    rng: random.Random,
) -> None:
    now = datetime_utc.now()
    league = await sql_create_league(
        LeagueBody(
            name=f"{division.value.replace('_', ' ').title()} {season}",
            division=division,
            season=season,
            start_date=now,
            end_date=now + timedelta(days=90),
            registration_deadline=now + timedelta(days=14),
            registration_fee=Decimal("75.00"),
            status=LeagueStatus.IN_PROGRESS,
        )
    )
    print(f"Created league {league.name} (id={int(league.id)})")

    team_ids: list[TeamId] = []
    for team_index in range(team_count):
        coach = await ensure_user(
            email=f"coach{team_index + 1}.{int(league.id)}@example.org",
            first_name=rng.choice(FIRST_NAMES),
            last_name=rng.choice(LAST_NAMES),
            password=password,
            account_type=UserAccountType.COACH,
        )
        team = await sql_create_team(
            TeamBody(
                name=TEAM_NAMES[team_index % len(TEAM_NAMES)],
                league_id=league.id,
                coach_id=coach.id,
                home_venue=f"Gym {team_index + 1}",
            )
        )
        team_ids.append(team.id)

        for player_index in range(players_per_team):
            player = await ensure_user(
                email=f"player{team_index + 1}-{player_index + 1}.{int(league.id)}@example.org",
                first_name=rng.choice(FIRST_NAMES),
                last_name=rng.choice(LAST_NAMES),
                password=password,
                account_type=UserAccountType.PLAYER,
            )
            await sql_insert_roster_entry(
                team.id, RosterEntryBody(player_id=player.id, jersey_number=player_index + 1)
            )

    pairings = build_round_robin(team_ids)
    for game_index, (home_team_id, away_team_id) in enumerate(pairings):
        game = await sql_create_game(
            GameBody(
                league_id=league.id,
                home_team_id=home_team_id,
                away_team_id=away_team_id,
                scheduled_date=(now + timedelta(days=7 * (game_index // 2))).date(),
                scheduled_time="19:00" if game_index % 2 == 0 else "20:30",
                venue="Community Center",
            )
        )
        if game_index < completed_games:
            home_score, away_score = determine_score(rng)
            await update_game_and_reconcile(
                game.id,
                GameUpdateBody(
                    status=GameStatus.COMPLETED, home_score=home_score, away_score=away_score
                ),
            )

    print(
        f"Seeded {len(team_ids)} teams and {len(pairings)} games, "
        f"{min(completed_games, len(pairings))} of them completed"
    )


async def async_main() -> None:
    parser = argparse.ArgumentParser(
        description="Seed a demo league with coaches, rosters, a round-robin schedule and results."
    )
    parser.add_argument(
        "--division",
        type=Division,
        choices=list(Division),
        default=Division.MENS,
    )
    parser.add_argument("--season", type=str, default=str(datetime_utc.now().year))
    parser.add_argument("--teams", type=int, default=6)
    parser.add_argument("--players-per-team", type=int, default=8)
    parser.add_argument("--completed-games", type=int, default=8)
    parser.add_argument("--sample-password", type=str, default="sample-pass-123")
    parser.add_argument("--random-seed", type=int, default=None)
    args = parser.parse_args()

    if args.teams < 2:
        raise ValueError("--teams must be at least 2")

    await database.connect()
    try:
        await seed_league(
            division=args.division,
            season=args.season,
            team_count=int(args.teams),
            players_per_team=int(args.players_per_team),
            completed_games=int(args.completed_games),
            password=str(args.sample_password),
            rng=random.Random(args.random_seed),
        )
    finally:
        await database.disconnect()


if __name__ == "__main__":
    asyncio.run(async_main())
