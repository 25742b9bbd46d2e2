from unittest.mock import MagicMock, patch

from app.services.sources.records import DataKind
from app.tasks import celery_app
from app.tasks.sync_tasks import fetch_rankings, fetch_recent_matches, fetch_upcoming_matches


def test_tasks_registered():
    assert "app.tasks.sync_tasks.fetch_rankings" in celery_app.tasks
    assert "app.tasks.sync_tasks.fetch_recent_matches" in celery_app.tasks
    assert "app.tasks.sync_tasks.fetch_upcoming_matches" in celery_app.tasks


def test_beat_schedule_targets_sync_tasks():
    scheduled = {entry["task"] for entry in celery_app.conf.beat_schedule.values()}

    assert scheduled == {
        "app.tasks.sync_tasks.fetch_rankings",
        "app.tasks.sync_tasks.fetch_recent_matches",
        "app.tasks.sync_tasks.fetch_upcoming_matches",
    }


def test_fetch_recent_matches_runs_recent_sync():
    with patch("app.tasks.sync_tasks._fetch_fixtures", new=MagicMock(return_value="coro")) as mock_fetch, \
            patch("app.tasks.sync_tasks.run_async", return_value={"count": 3, "source": "sample"}) as mock_run:
        result = fetch_recent_matches.run(10)

    assert result == {"count": 3, "source": "sample"}
    mock_fetch.assert_called_once_with(DataKind.recent, 10)
    mock_run.assert_called_once_with("coro")


def test_fetch_upcoming_matches_runs_upcoming_sync():
    with patch("app.tasks.sync_tasks._fetch_fixtures", new=MagicMock(return_value="coro")) as mock_fetch, \
            patch("app.tasks.sync_tasks.run_async", return_value={"count": 0, "source": "sample"}):
        fetch_upcoming_matches.run()

    mock_fetch.assert_called_once_with(DataKind.upcoming, 50)


def test_fetch_rankings_runs_rankings_sync():
    with patch("app.tasks.sync_tasks._fetch_rankings", new=MagicMock(return_value="coro")) as mock_fetch, \
            patch("app.tasks.sync_tasks.run_async", return_value={"count": 20, "source": "espn"}):
        assert fetch_rankings.run(20) == {"count": 20, "source": "espn"}

    mock_fetch.assert_called_once_with(20)
