"""Symmetric team-pair index for one date's provider games.

Internal games store teams as team1/team2, which does not follow the
provider's home/away order, so every pair is indexed under both orders.
"""
from typing import Dict, Iterable, Optional

from bracket_pool.services.sync.adapters.payloads import ProviderGame


def pair_key(team_a: int, team_b: int) -> str:
    return f"{team_a}-{team_b}"


class PairIndex:
    """
    ``"{a}-{b}"`` → provider game id, inserted in both key orders.

    Example:
        >>> index = PairIndex()
        >>> index.add(101, 102, 9001)
        >>> index.lookup(102, 101)
        9001
    """

    def __init__(self):
        self._index: Dict[str, int] = {}

    @classmethod
    def from_games(cls, games: Iterable[ProviderGame]) -> "PairIndex":
        index = cls()
        for game in games:
            if game.game_id is None or game.home_team_id is None or game.away_team_id is None:
                continue
            index.add(game.home_team_id, game.away_team_id, game.game_id)
        return index

    def add(self, team_a: int, team_b: int, game_id: int) -> None:
        self._index[pair_key(team_a, team_b)] = game_id
        self._index[pair_key(team_b, team_a)] = game_id

    def lookup(self, team_a: Optional[int], team_b: Optional[int]) -> Optional[int]:
        if team_a is None or team_b is None:
            return None
        return self._index.get(pair_key(team_a, team_b))

    def __len__(self) -> int:
        return len(self._index)
