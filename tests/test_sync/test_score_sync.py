"""Tests for ScoreSyncJob.

Test Strategy:
1. A Final game with a decisive score sets the winner and status
2. Re-running is a no-op (winner written only when different)
3. Ties, missing scores, unlinked games and non-final statuses are skipped
4. Default dates are today and yesterday in the tournament timezone
"""
import pytest

from bracket_pool.services.sync.jobs import ScoreSyncJob
from bracket_pool.services.sync.jobs import score_sync

from conftest import final_games_path, sportsdata_game


@pytest.fixture
def linked_game(teams, game_factory):
    return game_factory(team1_id="team-siena", team2_id="team-duke", sportsdata_game_id=9001, slot=1)


class TestScoreSync:

    @pytest.mark.asyncio
    async def test_sets_winner_from_final(self, db_session, linked_game, sportsdata_client, provider_stub):
        """Should set the higher-scoring side as winner with status Final."""
        provider_stub.route(final_games_path("2026-03-19"), json=[
            sportsdata_game(9001, home=101, away=102, home_score=70, away_score=65),
        ])

        result = await ScoreSyncJob(db_session, sportsdata_client).run(dates=["2026-03-19"])

        assert result == {
            "ok": True,
            "dates": ["2026-03-19"],
            "finalsSeen": 1,
            "updatedGames": 1,
            "skippedNoMatch": 0,
            "skippedTieOrNoScore": 0,
        }
        db_session.refresh(linked_game)
        assert linked_game.winner_team_id == "team-duke"
        assert linked_game.status == "Final"

    @pytest.mark.asyncio
    async def test_rerun_is_noop(self, db_session, linked_game, sportsdata_client, provider_stub):
        """Should not rewrite a winner that is already stored."""
        provider_stub.route(final_games_path("2026-03-19"), json=[
            sportsdata_game(9001, home=101, away=102, home_score=60, away_score=71),
        ])
        job = ScoreSyncJob(db_session, sportsdata_client)

        first = await job.run(dates=["2026-03-19"])
        synced_at = linked_game.last_synced_at
        second = await job.run(dates=["2026-03-19"])

        assert first["updatedGames"] == 1
        assert second["updatedGames"] == 0
        db_session.refresh(linked_game)
        assert linked_game.winner_team_id == "team-siena"
        assert linked_game.last_synced_at == synced_at

    @pytest.mark.asyncio
    async def test_tie_is_skipped(self, db_session, linked_game, sportsdata_client, provider_stub):
        provider_stub.route(final_games_path("2026-03-19"), json=[
            sportsdata_game(9001, home=101, away=102, home_score=70, away_score=70),
        ])

        result = await ScoreSyncJob(db_session, sportsdata_client).run(dates=["2026-03-19"])

        assert result["skippedTieOrNoScore"] == 1
        db_session.refresh(linked_game)
        assert linked_game.winner_team_id is None

    @pytest.mark.asyncio
    async def test_unlinked_and_non_final(self, db_session, linked_game, sportsdata_client, provider_stub):
        """Should skip unlinked provider games and ignore non-Final statuses."""
        provider_stub.route(final_games_path("2026-03-19"), json=[
            sportsdata_game(9999, home=103, away=104, home_score=66, away_score=59),
            sportsdata_game(9001, home=101, away=102, home_score=66, away_score=59, status="F/OT"),
        ])

        result = await ScoreSyncJob(db_session, sportsdata_client).run(dates=["2026-03-19"])

        assert result["finalsSeen"] == 1
        assert result["skippedNoMatch"] == 1
        assert result["updatedGames"] == 0

    @pytest.mark.asyncio
    async def test_defaults_to_today_and_yesterday(self, db_session, linked_game, sportsdata_client,
                                                   provider_stub, monkeypatch):
        monkeypatch.setattr(score_sync, "today_and_yesterday", lambda tz: ["2026-03-20", "2026-03-19"])
        provider_stub.route(final_games_path("2026-03-20"), json=[])
        provider_stub.route(final_games_path("2026-03-19"), json=[])

        result = await ScoreSyncJob(db_session, sportsdata_client).run()

        assert result["dates"] == ["2026-03-20", "2026-03-19"]
        assert provider_stub.paths == [final_games_path("2026-03-20"), final_games_path("2026-03-19")]
