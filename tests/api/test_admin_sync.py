"""
HTTP tests for the admin sync endpoints.

These tests verify that the endpoints:
- Reject callers without the shared secret (401) or pool-creator rights (400/403)
- Fail fast with 500 when a required setting is missing
- Render pipeline errors as {"ok": false, "error": ...} with the mapped status
- Return each job's report unchanged on success

Providers are stubbed with httpx.MockTransport; the store is in-memory SQLite.
"""
from datetime import date

import pytest

from bracket_pool.api.routes.admin import sync as admin_sync
from bracket_pool.core.config import get_settings
from bracket_pool.services.sync.jobs import score_sync
from bracket_pool.services.sync.jobs.bracket_sync import NOTE_EMPTY
from bracket_pool.services.sync.jobs.game_link import NOTHING_TO_LINK

from conftest import (
    ESPN_TEAMS_PATH,
    SCHEDULE_PATH,
    SPORTSDATA_PATH,
    final_games_path,
    games_by_date_path,
    make_settings,
    sportsdata_game,
    tournament_path,
)


@pytest.fixture
def app():
    from bracket_pool.main import app
    return app


# =============================================================================
# HEALTH
# =============================================================================

class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, async_client):
        """Should report healthy when the store answers."""
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_correlation_id_echoed(self, async_client):
        response = await async_client.get("/", headers={"X-Correlation-ID": "run-42"})

        assert response.status_code == 200
        assert response.headers["X-Correlation-ID"] == "run-42"


# =============================================================================
# SHARED SECRET
# =============================================================================

class TestCronSecret:

    @pytest.mark.asyncio
    async def test_missing_secret(self, async_client, provider_stub):
        """Should return 401 before any provider call."""
        response = await async_client.get("/api/admin/link-games")

        assert response.status_code == 401
        assert response.json() == {"ok": False, "error": "Unauthorized"}
        assert provider_stub.requests == []

    @pytest.mark.asyncio
    async def test_wrong_secret(self, async_client):
        response = await async_client.post("/api/admin/full-sync", headers={"X-Cron-Secret": "nope"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_secret_not_configured(self, app, async_client, cron_headers):
        """Should return 500 naming CRON_SECRET when it is not configured."""
        app.dependency_overrides[get_settings] = lambda: make_settings(CRON_SECRET="")

        response = await async_client.get("/api/admin/link-games", headers=cron_headers)

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "CRON_SECRET is required."}

    @pytest.mark.asyncio
    async def test_provider_key_not_configured(self, app, async_client, cron_headers, provider_stub):
        app.dependency_overrides[get_settings] = lambda: make_settings(SPORTSDATA_API_KEY="")

        response = await async_client.get("/api/admin/import-schedule", headers=cron_headers)

        assert response.status_code == 500
        assert response.json()["error"] == "SPORTSDATA_API_KEY is required."
        assert provider_stub.requests == []


# =============================================================================
# SCHEDULER-FACING JOBS
# =============================================================================

class TestSyncJobs:

    @pytest.mark.asyncio
    async def test_import_schedule_season_param(self, async_client, cron_headers, teams, provider_stub):
        """Should import the season given in the query string."""
        provider_stub.route(f"{SPORTSDATA_PATH}/Games/2025POST", json=[
            sportsdata_game(8001, home=101, away=102, status="Scheduled", Round=1, Bracket="East"),
        ])

        response = await async_client.post("/api/admin/import-schedule?season=2025", headers=cron_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["season"] == 2025
        assert body["upserted"] == 1

    @pytest.mark.asyncio
    async def test_link_games_nothing_to_do(self, async_client, cron_headers, teams):
        response = await async_client.get("/api/admin/link-games", headers=cron_headers)

        assert response.status_code == 200
        assert response.json()["message"] == NOTHING_TO_LINK

    @pytest.mark.asyncio
    async def test_sync_scores_explicit_dates(self, async_client, cron_headers, teams, game_factory, provider_stub):
        game_factory(team1_id="team-siena", team2_id="team-duke", sportsdata_game_id=9001, slot=1)
        provider_stub.route(final_games_path("2026-03-19"), json=[
            sportsdata_game(9001, home=101, away=102, home_score=82, away_score=64),
        ])

        response = await async_client.get("/api/admin/sync-scores?date=2026-03-19", headers=cron_headers)

        assert response.status_code == 200
        assert response.json()["updatedGames"] == 1
        assert response.json()["dates"] == ["2026-03-19"]

    @pytest.mark.asyncio
    async def test_sync_scores_bad_date(self, async_client, cron_headers):
        response = await async_client.get("/api/admin/sync-scores?date=19-03-2026", headers=cron_headers)

        assert response.status_code == 400
        assert response.json()["ok"] is False

    @pytest.mark.asyncio
    async def test_sync_bracket_not_available_yet(self, async_client, cron_headers, provider_stub):
        """Should return 200 with ok=true for an empty tournament feed."""
        provider_stub.route(tournament_path(2026), text="")

        response = await async_client.get("/api/admin/sync-bracket", headers=cron_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["note"] == NOTE_EMPTY

    @pytest.mark.asyncio
    async def test_sync_games_requires_date(self, async_client, cron_headers):
        response = await async_client.post("/api/admin/sync-games", headers=cron_headers, json={})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_sync_games(self, async_client, cron_headers, teams, game_factory, provider_stub):
        game_factory(team1_id="team-siena", team2_id="team-duke", slot=1)
        provider_stub.route(games_by_date_path("2026-03-19"), json=[
            sportsdata_game(9001, home=101, away=102, home_score=75, away_score=60),
        ])

        response = await async_client.post(
            "/api/admin/sync-games", headers=cron_headers, json={"date": "2026-03-19"}
        )

        assert response.status_code == 200
        assert response.json()["winnersSet"] == 1

    @pytest.mark.asyncio
    async def test_sync_results_defaults_to_tournament_today(self, async_client, cron_headers, teams,
                                                             provider_stub, monkeypatch):
        monkeypatch.setattr(admin_sync, "tournament_today", lambda tz: date(2026, 3, 19))
        provider_stub.route("/matches", json={"games": []})

        response = await async_client.post("/api/admin/sync-results", headers=cron_headers)

        assert response.status_code == 200
        assert response.json()["date"] == "2026-03-19"
        assert provider_stub.requests[0].url.params["date"] == "2026-03-19"

    @pytest.mark.asyncio
    async def test_full_sync(self, async_client, cron_headers, teams, provider_stub, monkeypatch):
        monkeypatch.setattr(score_sync, "today_and_yesterday", lambda tz: ["2026-03-19"])
        provider_stub.route(SCHEDULE_PATH, json=[
            sportsdata_game(9001, home=101, away=102, status="Scheduled", Round=1, Bracket="East"),
        ])
        provider_stub.route(final_games_path("2026-03-19"), json=[
            sportsdata_game(9001, home=101, away=102, home_score=82, away_score=64),
        ])

        response = await async_client.post("/api/admin/full-sync", headers=cron_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert set(body) == {"ok", "import", "link", "scores"}
        assert body["scores"]["updatedGames"] == 1

    @pytest.mark.asyncio
    async def test_full_sync_failure(self, async_client, cron_headers, provider_stub):
        """Should return 502 naming the failed step when a provider fails."""
        provider_stub.route(SCHEDULE_PATH, status_code=500, text="upstream down")

        response = await async_client.post("/api/admin/full-sync", headers=cron_headers)

        assert response.status_code == 502
        body = response.json()
        assert body["ok"] is False
        assert body["failedStep"] == "import"
        assert "upstream down" in body["error"]


# =============================================================================
# POOL-CREATOR ACTIONS
# =============================================================================

class TestPoolCreatorActions:

    @pytest.mark.asyncio
    async def test_sync_logos_missing_ids(self, async_client):
        response = await async_client.post("/api/admin/sync-logos")

        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": "missing poolId/userId"}

    @pytest.mark.asyncio
    async def test_sync_logos_not_creator(self, async_client, pool, provider_stub):
        """Should return 403 for a user who did not create the pool."""
        response = await async_client.post(
            "/api/admin/sync-logos", json={"poolId": "pool-1", "userId": "user-member"}
        )

        assert response.status_code == 403
        assert provider_stub.requests == []

    @pytest.mark.asyncio
    async def test_sync_logos(self, async_client, pool, teams, provider_stub):
        provider_stub.route(ESPN_TEAMS_PATH, json={"sports": [{"leagues": [{"teams": [
            {"team": {"id": 150, "displayName": "Duke Blue Devils", "shortDisplayName": "Duke",
                      "logos": [{"href": "https://a.espncdn.com/150.png"}]}},
        ]}]}]})

        response = await async_client.post(
            "/api/admin/sync-logos", json={"poolId": "pool-1", "userId": "user-creator"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["updated"] == 1
        assert "Texas/San Diego State" in body["placeholders"]

    @pytest.mark.asyncio
    async def test_set_winner(self, async_client, pool, teams, game_factory):
        game = game_factory(team1_id="team-siena", team2_id="team-duke", slot=1)

        response = await async_client.post(
            f"/api/admin/games/{game.id}/winner",
            json={"poolId": "pool-1", "userId": "user-creator", "winnerTeamId": "team-siena"},
        )

        assert response.status_code == 200
        assert response.json()["game"]["winner_team_id"] == "team-siena"

    @pytest.mark.asyncio
    async def test_clear_winner(self, async_client, pool, teams, game_factory):
        game = game_factory(team1_id="team-siena", team2_id="team-duke", winner_team_id="team-duke", slot=1)

        response = await async_client.post(
            f"/api/admin/games/{game.id}/winner",
            json={"poolId": "pool-1", "userId": "user-creator", "winnerTeamId": None},
        )

        assert response.status_code == 200
        assert response.json()["game"]["winner_team_id"] is None

    @pytest.mark.asyncio
    async def test_winner_must_be_participant(self, async_client, pool, teams, game_factory):
        """Should return 422 and leave the game untouched."""
        game = game_factory(team1_id="team-siena", team2_id="team-duke", slot=1)

        response = await async_client.post(
            f"/api/admin/games/{game.id}/winner",
            json={"poolId": "pool-1", "userId": "user-creator", "winnerTeamId": "team-houston"},
        )

        assert response.status_code == 422
        assert response.json()["ok"] is False

    @pytest.mark.asyncio
    async def test_unknown_game(self, async_client, pool):
        response = await async_client.post(
            "/api/admin/games/nope/winner", json={"poolId": "pool-1", "userId": "user-creator"}
        )

        assert response.status_code == 404
