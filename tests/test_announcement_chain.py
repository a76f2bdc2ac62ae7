"""
Tests for the announcement pipeline: filtering, dedup, formatting and the delivery-failure policy.
"""

from unittest.mock import AsyncMock

import pytest

from chains.announcement_chain import AnnouncementPipeline, format_announcement
from models.channel import MonitoredChannel
from models.notification import AnnouncementOutcome
from storage.database import StorageError
from tests.conftest import START_TIME, FakeNotifier


@pytest.fixture
def pipeline(ledger, notifier, limiter, clock):
    return AnnouncementPipeline(ledger, notifier, limiter, clock=clock)


class TestFormatting:
    """Message rendering."""

    def test_html_entities_are_unescaped(self, channel, video_factory):
        video = video_factory("v1", title="Foo &amp; Bar", channel_title="Pilot&#39;s Log")

        message = format_announcement(video, channel)

        assert message == "New video from **Pilot's Log**: Foo & Bar\nhttps://youtu.be/v1"

    def test_configured_name_used_when_channel_title_missing(self, video_factory):
        channel = MonitoredChannel(name="Mentour Pilot", channel_id="UCwpHKudUkP5tNgmMdexB3ow")
        video = video_factory("v1", channel_title="")

        assert "**Mentour Pilot**" in format_announcement(video, channel)

    def test_custom_template(self, channel, video_factory):
        video = video_factory("abc")

        message = format_announcement(video, channel, "{video_id} -> {url}")

        assert message == "abc -> https://youtu.be/abc"


class TestProcess:
    """Processing a channel's candidates."""

    async def test_only_videos_are_announced(self, pipeline, ledger, notifier, channel, video_factory):
        candidates = [
            video_factory("abc"),
            video_factory("xyz", kind="youtube#playlist"),
        ]

        result = await pipeline.process(channel, candidates)

        assert len(notifier.messages) == 1
        assert "abc" in notifier.messages[0]
        assert result["announced"] == 1
        assert result["not_videos"] == 1
        assert await ledger.has_been_announced("abc")
        assert not await ledger.has_been_announced("xyz")
        assert await ledger.count_announcements() == 1

    async def test_already_announced_video_is_not_posted(self, pipeline, ledger, notifier, channel, video_factory):
        await ledger.record_announcement("v1", START_TIME)

        result = await pipeline.process(channel, [video_factory("v1")])

        assert notifier.messages == []
        assert result["already_announced"] == 1
        assert result["announced"] == 0

    async def test_repeated_candidate_in_one_scan_posted_once(self, pipeline, notifier, channel, video_factory):
        result = await pipeline.process(channel, [video_factory("v1"), video_factory("v1")])

        assert len(notifier.messages) == 1
        assert result["announced"] == 1
        assert result["already_announced"] == 1

    async def test_failed_delivery_is_still_recorded(self, ledger, limiter, clock, channel, video_factory):
        notifier = FakeNotifier(succeed=False)
        pipeline = AnnouncementPipeline(ledger, notifier, limiter, clock=clock)

        result = await pipeline.process(channel, [video_factory("v1")])

        assert len(notifier.messages) == 1
        assert result["delivery_failures"] == 1
        assert not result["success"]
        assert await ledger.has_been_announced("v1")

        # Not retried on the next cycle
        await pipeline.process(channel, [video_factory("v1")])
        assert len(notifier.messages) == 1

    async def test_recorded_with_clock_time(self, pipeline, ledger, clock, channel, video_factory):
        clock.advance(hours=3)

        await pipeline.process(channel, [video_factory("v1")])

        assert await ledger.prune_announcements(clock.now) == 1

    async def test_delay_between_candidates(self, pipeline, fake_sleep, channel, video_factory):
        await pipeline.process(channel, [video_factory("a"), video_factory("b"), video_factory("c")])

        assert fake_sleep.calls == [10, 10]

    async def test_empty_candidates(self, pipeline, notifier, fake_sleep, channel):
        result = await pipeline.process(channel, [])

        assert result["success"]
        assert result["candidates"] == 0
        assert notifier.messages == []
        assert fake_sleep.calls == []

    async def test_storage_failure_propagates(self, notifier, limiter, clock, channel, video_factory):
        ledger = AsyncMock()
        ledger.has_been_announced.side_effect = StorageError("disk gone")
        pipeline = AnnouncementPipeline(ledger, notifier, limiter, clock=clock)

        with pytest.raises(StorageError):
            await pipeline.process(channel, [video_factory("v1")])

        assert notifier.messages == []

    async def test_announce_outcomes(self, pipeline, channel, video_factory):
        assert await pipeline.announce(channel, video_factory("p", kind="youtube#channel")) is AnnouncementOutcome.NOT_A_VIDEO
        assert await pipeline.announce(channel, video_factory("v1")) is AnnouncementOutcome.ANNOUNCED
        assert await pipeline.announce(channel, video_factory("v1")) is AnnouncementOutcome.ALREADY_ANNOUNCED
