from typing import NewType

GameId = NewType("GameId", int)
LeagueId = NewType("LeagueId", int)
RegistrationId = NewType("RegistrationId", int)
RosterEntryId = NewType("RosterEntryId", int)
TeamId = NewType("TeamId", int)
UserId = NewType("UserId", int)
