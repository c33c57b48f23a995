"""Provider clients that fetch and normalize upstream data.

Available clients:
- SportsDataClient: SportsDataIO schedules, finals and tournament feed
- HighlightlyClient: Highlightly (RapidAPI) daily results
- EspnTeamDirectoryClient: ESPN team directory (logos, ESPN ids)

Every client returns canonical records from ``payloads`` rather than raw
provider JSON.
"""
from bracket_pool.services.sync.adapters.base import ProviderClient
from bracket_pool.services.sync.adapters.espn import EspnTeamDirectoryClient
from bracket_pool.services.sync.adapters.highlightly import HighlightlyClient
from bracket_pool.services.sync.adapters.payloads import DirectoryTeam, ProviderGame, ResultsGame
from bracket_pool.services.sync.adapters.sportsdata import SportsDataClient

__all__ = [
    "ProviderClient",
    "SportsDataClient",
    "HighlightlyClient",
    "EspnTeamDirectoryClient",
    "ProviderGame",
    "ResultsGame",
    "DirectoryTeam",
]
