"""
End-to-end tests for tracking cycles with fake search and webhook collaborators.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from chains.tracking_chain import TrackingChain
from models.channel import MonitorConfig, MonitoredChannel
from storage.database import StorageError
from tools.youtube_tools import YouTubeAPIError, YouTubeQuotaExceededError
from tests.conftest import START_TIME


@pytest.fixture
def make_chain(db, search, notifier, limiter, clock):
    def _make(config):
        return TrackingChain(config, db, search, notifier, limiter=limiter, clock=clock)
    return _make


class TestEndToEnd:
    """The two-run scenario for a single channel."""

    async def test_first_run_announces_second_run_skips(self, make_chain, config, search, notifier, ledger, video_factory):
        search.results["c1"] = [video_factory("v1", title="Foo &amp; Bar")]
        marks_seen_at_search = []

        async def record_mark(channel_id):
            marks_seen_at_search.append(await ledger.was_recently_checked(channel_id))

        search.before_search = record_mark
        chain = make_chain(config)

        result = await chain.run_cycle()

        assert marks_seen_at_search == [True]
        assert len(notifier.messages) == 1
        assert "Foo & Bar" in notifier.messages[0]
        assert "v1" in notifier.messages[0]
        assert await ledger.has_been_announced("v1")
        assert result["success"]
        assert result["channels_checked"] == 1
        assert result["announced"] == 1

        second = await chain.run_cycle()

        assert len(notifier.messages) == 1
        assert len(search.calls) == 1
        assert second["channels_skipped"] == 1
        assert second["channels_checked"] == 0

    async def test_channel_rescanned_after_interval_without_reposting(self, make_chain, config, search, notifier, clock, video_factory):
        search.results["c1"] = [video_factory("v1")]
        chain = make_chain(config)

        await chain.run_cycle()
        clock.advance(hours=12)
        result = await chain.run_cycle()

        assert len(search.calls) == 2
        assert result["channels_checked"] == 1
        assert len(notifier.messages) == 1

    async def test_search_uses_lookback_and_page_size(self, make_chain, config, search):
        await make_chain(config).run_cycle()

        assert search.calls == [{
            "channel_id": "c1",
            "published_after": START_TIME - timedelta(hours=48),
            "max_results": 5
        }]


class TestFailureBoundaries:
    """Search errors skip a channel, storage errors end the run."""

    async def test_search_failure_skips_only_that_channel(self, make_chain, search, notifier, ledger, video_factory):
        config = MonitorConfig(channels=(
            MonitoredChannel(name="Broken", channel_id="bad"),
            MonitoredChannel(name="Fine", channel_id="good"),
        ))
        search.errors["bad"] = YouTubeQuotaExceededError("Daily quota limit reached")
        search.results["good"] = [video_factory("v2")]

        result = await make_chain(config).run_cycle()

        assert not result["success"]
        assert result["channels_failed"] == 1
        assert result["channels_checked"] == 1
        assert result["announced"] == 1
        assert any("bad" in error for error in result["errors"])
        assert len(notifier.messages) == 1
        # Mark was written before the failed search, so the channel waits for the interval
        assert await ledger.was_recently_checked("bad")

    async def test_sweep_runs_after_search_failure(self, make_chain, config, search, ledger):
        await ledger.record_announcement("old", START_TIME - timedelta(days=40))
        search.errors["c1"] = YouTubeAPIError("Request failed")

        result = await make_chain(config).run_cycle()

        assert result["sweep"]["announcements_deleted"] == 1
        assert not await ledger.has_been_announced("old")

    async def test_storage_error_aborts_cycle(self, make_chain, config, search, ledger, video_factory):
        search.results["c1"] = [video_factory("v1")]
        chain = make_chain(config)

        with patch.object(chain.ledger, "record_announcement", AsyncMock(side_effect=StorageError("disk full"))):
            with patch.object(chain.sweeper, "sweep", AsyncMock()) as sweep:
                with pytest.raises(StorageError):
                    await chain.run_cycle()

        sweep.assert_not_called()


class TestRateLimiting:
    """Delays between channels and items come from the injected limiter."""

    async def test_delays_between_searches_and_items(self, make_chain, search, fake_sleep, video_factory):
        config = MonitorConfig(channels=(
            MonitoredChannel(name="A", channel_id="a"),
            MonitoredChannel(name="B", channel_id="b"),
        ))
        search.results["a"] = [video_factory("v1"), video_factory("v2")]

        await make_chain(config).run_cycle()

        # search a, v1, v2, search b: every acquire after the first waits
        assert fake_sleep.calls == [10, 10, 10]
