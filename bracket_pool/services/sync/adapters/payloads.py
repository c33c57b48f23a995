"""Provider payload normalization.

Providers return either a bare array of games or an object wrapping one
(``Games``, ``games``, ``data``). ``extract_game_list`` collapses those
shapes once, and the ``from_payload`` constructors turn each raw dict into
a canonical record with the field-name fallbacks applied, so nothing
downstream ever branches on payload shape or raw key names.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from bracket_pool.services.sync.enums import FINISHED_STATUSES

SPORTSDATA_LIST_KEYS = ("Games", "games")
HIGHLIGHTLY_LIST_KEYS = ("games", "data")


def extract_game_list(payload: Any, keys: Sequence[str] = SPORTSDATA_LIST_KEYS) -> Optional[List[Dict[str, Any]]]:
    """
    Return the list of raw game dicts in ``payload``.

    Args:
        payload: Decoded JSON body
        keys: Wrapper keys to try, in order, when the payload is an object

    Returns:
        List of dicts (non-dict entries dropped), or None when the payload
        has no recognizable game list. Callers decide whether that is fatal.
    """
    if isinstance(payload, list):
        return [g for g in payload if isinstance(g, dict)]
    if isinstance(payload, dict):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return [g for g in value if isinstance(g, dict)]
    return None


def describe_shape(payload: Any) -> Dict[str, Any]:
    """Diagnostic summary of an unrecognized payload."""
    if isinstance(payload, dict):
        return {"receivedType": "object", "sampleKeys": list(payload.keys())[:40]}
    if isinstance(payload, list):
        return {"receivedType": "array", "sampleKeys": []}
    return {"receivedType": type(payload).__name__, "sampleKeys": []}


def _first(raw: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def as_int(value: Any) -> Optional[int]:
    """Integer value of ``value`` or None; booleans and fractional numbers are rejected."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    return None


def as_str(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def _as_datetime(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _as_date(value: Any) -> Optional[date]:
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


class ProviderGame(BaseModel):
    """One SportsDataIO game, whatever endpoint it came from."""

    model_config = ConfigDict(frozen=True)

    game_id: Optional[int] = None
    status: Optional[str] = None
    is_closed: bool = False
    season: Optional[int] = None
    round: Optional[int] = None
    bracket: Optional[str] = None
    slot: Optional[int] = None
    home_team_id: Optional[int] = None
    away_team_id: Optional[int] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    start_time: Optional[datetime] = None
    day: Optional[date] = None

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "ProviderGame":
        start = _first(raw, "DateTimeUTC", "DateTime")
        return cls(
            game_id=as_int(_first(raw, "GameID", "GameId", "gameId")),
            status=as_str(raw.get("Status")),
            is_closed=raw.get("IsClosed") is True,
            season=as_int(raw.get("Season")),
            round=as_int(_first(raw, "Round", "round")),
            bracket=as_str(_first(raw, "Bracket", "bracket", "Region", "region")),
            slot=as_int(_first(raw, "TournamentDisplayOrder", "Slot", "slot")),
            home_team_id=as_int(raw.get("HomeTeamID")),
            away_team_id=as_int(raw.get("AwayTeamID")),
            home_score=as_int(raw.get("HomeTeamScore")),
            away_score=as_int(raw.get("AwayTeamScore")),
            start_time=_as_datetime(start),
            day=_as_date(_first(raw, "Day", "DateTimeUTC", "DateTime")),
        )

    @property
    def team_ids(self) -> tuple:
        return (self.home_team_id, self.away_team_id)

    @property
    def has_decisive_score(self) -> bool:
        """Both scores present and different; ties are placeholder data in this sport."""
        return (
            self.home_score is not None
            and self.away_score is not None
            and self.home_score != self.away_score
        )


class ResultsGame(BaseModel):
    """One Highlightly game; team ids are Highlightly's own string ids."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    status: str = ""
    home_team_id: Optional[str] = None
    away_team_id: Optional[str] = None
    winner_team_id: Optional[str] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "ResultsGame":
        home = raw.get("homeTeam") if isinstance(raw.get("homeTeam"), dict) else {}
        away = raw.get("awayTeam") if isinstance(raw.get("awayTeam"), dict) else {}
        return cls(
            id=as_str(_first(raw, "id", "game_id")),
            status=(as_str(raw.get("status")) or "").lower(),
            home_team_id=as_str(_first(raw, "home_team_id")) or as_str(home.get("id")),
            away_team_id=as_str(_first(raw, "away_team_id")) or as_str(away.get("id")),
            winner_team_id=as_str(raw.get("winner_team_id")),
            home_score=as_int(raw.get("home_score")),
            away_score=as_int(raw.get("away_score")),
        )

    @property
    def is_finished(self) -> bool:
        return self.status in FINISHED_STATUSES


class DirectoryTeam(BaseModel):
    """One ESPN team directory entry that has both an id and a logo."""

    model_config = ConfigDict(frozen=True)

    id: int
    display_name: str
    short_display_name: Optional[str] = None
    logo_url: str

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> Optional["DirectoryTeam"]:
        team_id = as_int(raw.get("id"))
        display_name = as_str(_first(raw, "displayName", "name", "shortDisplayName"))
        logos = raw.get("logos")
        logo_url = None
        if isinstance(logos, list) and logos and isinstance(logos[0], dict):
            logo_url = as_str(logos[0].get("href"))
        if team_id is None or display_name is None or logo_url is None:
            return None
        return cls(
            id=team_id,
            display_name=display_name,
            short_display_name=as_str(raw.get("shortDisplayName")),
            logo_url=logo_url,
        )


def parse_team_directory(payload: Any) -> List[DirectoryTeam]:
    """
    Pull ``sports[0].leagues[0].teams[].team`` out of an ESPN response.

    Entries without an id, a name or a logo are dropped.
    """
    try:
        entries = payload["sports"][0]["leagues"][0]["teams"]
    except (KeyError, IndexError, TypeError):
        return []
    if not isinstance(entries, list):
        return []

    teams = []
    for entry in entries:
        raw = entry.get("team") if isinstance(entry, dict) else None
        if isinstance(raw, dict):
            team = DirectoryTeam.from_payload(raw)
            if team is not None:
                teams.append(team)
    return teams
