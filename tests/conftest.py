"""Shared pytest fixtures for bracket-pool-sync tests."""
import sys
from pathlib import Path
from typing import Any, AsyncGenerator, Dict, Generator, List, Optional

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from bracket_pool.core.config import Settings, SportsDataConfig  # noqa: E402
from bracket_pool.models import Base, Game, Pool, Team  # noqa: E402
from bracket_pool.services.sync.adapters.sportsdata import SportsDataClient  # noqa: E402

CRON_SECRET = "test-cron-secret"

SPORTSDATA_PATH = "/v3/cbb/scores/json"
SCHEDULE_PATH = f"{SPORTSDATA_PATH}/Games/2026POST"
ESPN_TEAMS_PATH = "/apis/site/v2/sports/basketball/mens-college-basketball/teams"
HIGHLIGHTLY_HOST = "highlightly.test"


def final_games_path(day: str) -> str:
    return f"{SPORTSDATA_PATH}/GamesByDateFinal/{day}"


def games_by_date_path(day: str) -> str:
    return f"{SPORTSDATA_PATH}/GamesByDate/{day}"


def tournament_path(season: int = 2026) -> str:
    return f"{SPORTSDATA_PATH}/Tournament/{season}"


# =============================================================================
# SETTINGS
# =============================================================================

def make_settings(**overrides: Any) -> Settings:
    """Settings for tests; never reads a .env file."""
    values: Dict[str, Any] = {
        "ENVIRONMENT": "test",
        "DATABASE_URL": "sqlite://",
        "CRON_SECRET": CRON_SECRET,
        "TOURNAMENT_SEASON": 2026,
        "SPORTSDATA_API_KEY": "sd-test-key",
        "RAPIDAPI_KEY": "rapid-test-key",
        "HIGHLIGHTLY_HOST": HIGHLIGHTLY_HOST,
        "RATE_LIMIT_ENABLED": False,
        "LOG_JSON": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    return make_settings()


# =============================================================================
# DATABASE
# =============================================================================

@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Fresh in-memory SQLite database per test, shared by every connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(bind=engine)
    session = TestSessionLocal()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def teams(db_session: Session) -> Dict[str, Team]:
    """
    Tournament teams keyed by short label.

    SportsDataIO ids: duke=101, siena=102, miami_oh=103, houston=104.
    The play-in team has no provider ids yet.
    """
    rows = {
        "duke": Team(
            id="team-duke", name="Duke", region="East", seed_in_region=1, cost=30,
            sportsdata_team_id=101, external_team_id="hl-101",
        ),
        "siena": Team(
            id="team-siena", name="Siena", region="East", seed_in_region=16, cost=1,
            sportsdata_team_id=102, external_team_id="hl-102",
        ),
        "miami_oh": Team(
            id="team-miami-oh", name="Miami (OH)", region="Midwest", seed_in_region=11, cost=5,
            sportsdata_team_id=103,
        ),
        "houston": Team(
            id="team-houston", name="Houston", region="South", seed_in_region=1, cost=28,
            sportsdata_team_id=104, external_team_id="hl-104",
        ),
        "play_in": Team(
            id="team-play-in", name="Texas/San Diego State", region="West", seed_in_region=11, cost=4,
        ),
    }
    db_session.add_all(rows.values())
    db_session.commit()
    return rows


@pytest.fixture
def pool(db_session: Session) -> Pool:
    row = Pool(id="pool-1", name="Office Pool", created_by="user-creator")
    db_session.add(row)
    db_session.commit()
    return row


@pytest.fixture
def game_factory(db_session: Session):
    """Create games with sensible defaults; pass any Game column to override."""

    def create(**fields: Any) -> Game:
        values: Dict[str, Any] = {"round": "R64", "region": "East", "season": 2026}
        values.update(fields)
        game = Game(**values)
        db_session.add(game)
        db_session.commit()
        return game

    return create


# =============================================================================
# PROVIDERS
# =============================================================================

class ProviderStub:
    """
    In-memory stand-in for every upstream provider, routed by URL path.

    Usage:
        provider_stub.route(final_games_path("2026-03-19"), json=[...])
        provider_stub.route(tournament_path(), text="")
        provider_stub.route(SCHEDULE_PATH, status_code=500, text="boom")
    """

    def __init__(self):
        self.routes: Dict[str, httpx.Response] = {}
        self.requests: List[httpx.Request] = []

    def route(
        self,
        path: str,
        json: Any = None,
        text: Optional[str] = None,
        status_code: int = 200,
    ) -> None:
        if text is not None:
            self.routes[path] = httpx.Response(status_code, text=text)
        else:
            self.routes[path] = httpx.Response(status_code, json=json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get(request.url.path)
        if response is None:
            return httpx.Response(404, text=f"no stub for {request.url.path}")
        return httpx.Response(
            response.status_code, content=response.content, headers=response.headers
        )

    @property
    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def provider_stub() -> ProviderStub:
    return ProviderStub()


@pytest.fixture
async def http_client(provider_stub: ProviderStub) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(provider_stub.handler)) as client:
        yield client


@pytest.fixture
def sportsdata_client(test_settings: Settings, http_client: httpx.AsyncClient) -> SportsDataClient:
    return SportsDataClient(SportsDataConfig.from_settings(test_settings), http_client)


def sportsdata_game(
    game_id: int,
    home: int,
    away: int,
    home_score: Optional[int] = None,
    away_score: Optional[int] = None,
    status: str = "Final",
    day: str = "2026-03-19",
    **extra: Any,
) -> Dict[str, Any]:
    """Raw SportsDataIO game as the API returns it."""
    game = {
        "GameID": game_id,
        "Season": 2026,
        "Status": status,
        "IsClosed": status == "Final",
        "Day": f"{day}T00:00:00",
        "DateTime": f"{day}T12:15:00",
        "HomeTeamID": home,
        "AwayTeamID": away,
        "HomeTeamScore": home_score,
        "AwayTeamScore": away_score,
    }
    game.update(extra)
    return game


# =============================================================================
# HTTP
# =============================================================================

@pytest.fixture(scope="function")
async def async_client(
    db_session: Session,
    test_settings: Settings,
    http_client: httpx.AsyncClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with the store, settings and providers overridden."""
    from bracket_pool.main import app
    from bracket_pool.api.dependencies import get_http_client
    from bracket_pool.core.config import get_settings
    from bracket_pool.core.database import get_db
    from bracket_pool.core.rate_limit import limiter

    def override_get_db():
        yield db_session

    async def override_get_http_client():
        yield http_client

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_http_client] = override_get_http_client

    limiter_enabled = limiter.enabled
    limiter.enabled = False

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    limiter.enabled = limiter_enabled
    app.dependency_overrides.clear()


@pytest.fixture
def cron_headers() -> Dict[str, str]:
    return {"X-Cron-Secret": CRON_SECRET}

