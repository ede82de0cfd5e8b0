from courtside.models.db.team import Team
from courtside.models.standings import StandingsRow


def get_win_percentage(wins: int, losses: int) -> float:
    games_played = wins + losses
    if games_played == 0:
        return 0.0
    return round(wins / games_played * 100, 1)


def calculate_standings(teams: list[Team]) -> list[StandingsRow]:
    ranked = sorted(teams, key=lambda team: (-team.wins, team.losses, team.name))
    return [
        StandingsRow(
            rank=rank,
            team_id=team.id,
            team=team.name,
            wins=team.wins,
            losses=team.losses,
            win_percentage=get_win_percentage(team.wins, team.losses),
            games_played=team.wins + team.losses,
        )
        for rank, team in enumerate(ranked, start=1)
    ]
