"""
Shared fixtures: a temporary ledger, a controllable clock and fake collaborators.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime, timedelta
from typing import Dict, List, Optional

import pytest

from models.channel import MonitorConfig, MonitoredChannel
from models.notification import DeliveryResult
from models.video import VideoCandidate
from storage.database import DatabaseManager
from storage.ledger import Ledger
from utils import RateLimiter

START_TIME = datetime(2024, 3, 1, 12, 0, 0)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = START_TIME):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class FakeSleep:
    """Records requested sleeps instead of sleeping."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeSearch:
    """Search collaborator returning canned results per channel."""

    def __init__(self):
        self.results: Dict[str, List[VideoCandidate]] = {}
        self.errors: Dict[str, Exception] = {}
        self.calls: List[dict] = []
        self.before_search = None

    async def search_channel(self, channel_id, published_after, max_results=5):
        self.calls.append({
            "channel_id": channel_id,
            "published_after": published_after,
            "max_results": max_results
        })
        if self.before_search:
            await self.before_search(channel_id)
        if channel_id in self.errors:
            raise self.errors[channel_id]
        return list(self.results.get(channel_id, []))


class FakeNotifier:
    """Webhook collaborator that records messages."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.messages: List[str] = []

    async def send_message(self, content: str) -> DeliveryResult:
        self.messages.append(content)
        if self.succeed:
            return DeliveryResult(success=True, status_code=204)
        return DeliveryResult(success=False, status_code=500, error_message="Unexpected HTTP status 500")


def make_video(video_id: str, title: str = "A video", channel_title: str = "X",
               kind: str = "youtube#video", published_at: Optional[datetime] = None) -> VideoCandidate:
    """Build a search candidate."""
    return VideoCandidate(
        kind=kind,
        video_id=video_id if kind == "youtube#video" else None,
        title=title,
        channel_title=channel_title,
        published_at=published_at or START_TIME
    )


@pytest.fixture
async def db(tmp_path):
    """Fresh file-backed ledger database."""
    manager = DatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'ytbot.db'}")
    await manager.init_database()
    yield manager
    await manager.close()


@pytest.fixture
async def ledger(db):
    return Ledger(db)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def limiter(fake_sleep):
    """Ten second limiter on a frozen monotonic clock, so every wait is a full interval."""
    return RateLimiter(10, sleep=fake_sleep, clock=lambda: 0.0)


@pytest.fixture
def search():
    return FakeSearch()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def channel():
    return MonitoredChannel(name="X", channel_id="c1")


@pytest.fixture
def config(channel):
    return MonitorConfig(
        channels=(channel,),
        recheck_interval=timedelta(hours=12),
        lookback=timedelta(hours=48),
        announcement_retention=timedelta(days=30),
        item_delay_seconds=10,
        max_results_per_search=5
    )


@pytest.fixture
def video_factory():
    return make_video
