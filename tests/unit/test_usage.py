"""Tests for favorites and recent-use tracking"""

import json
import logging
from datetime import timedelta

import pytest

from promptcraft.core.errors import UsageError
from promptcraft.core.usage import UsageTracker
from promptcraft.models.usage import UsageEntry, UsageLog


class TestUsageLog:
    """Test the usage log snapshot"""

    def test_find_recent(self, now):
        usage_log = UsageLog(
            recents=[
                UsageEntry(prompt_id="a", used_at=now),
                UsageEntry(prompt_id="b", used_at=now - timedelta(days=1)),
            ]
        )

        position, entry = usage_log.find_recent("b")
        assert position == 1
        assert entry.used_at == now - timedelta(days=1)
        assert usage_log.find_recent("c") is None

    def test_to_json_layout(self, now):
        usage_log = UsageLog(
            favorites=["a"], recents=[UsageEntry(prompt_id="a", used_at=now)]
        )

        assert usage_log.to_json() == {
            "favorites": ["a"],
            "recents": [{"promptId": "a", "usedAt": "2025-01-15T12:00:00Z"}],
        }


class TestUsageTracker:
    """Test the usage state file"""

    @pytest.fixture
    def tracker(self, state_path):
        return UsageTracker(state_path, max_recents=3)

    def test_missing_file_is_empty(self, tracker):
        assert tracker.load() == UsageLog()

    def test_corrupt_file_is_empty(self, tracker, state_path, caplog):
        state_path.parent.mkdir(parents=True)
        state_path.write_text("{oops")

        with caplog.at_level(logging.WARNING, logger="promptcraft"):
            assert tracker.load() == UsageLog()

        assert "Could not load usage state" in caplog.text

    def test_undecodable_file_is_empty(self, tracker, state_path, caplog):
        state_path.parent.mkdir(parents=True)
        state_path.write_bytes(b'{"favorites": ["\xff"]}')

        with caplog.at_level(logging.WARNING, logger="promptcraft"):
            assert tracker.load() == UsageLog()

        assert "Could not load usage state" in caplog.text

    def test_favorites(self, tracker, state_path):
        assert tracker.add_favorite("a") is True
        assert tracker.add_favorite("a") is False
        assert tracker.add_favorite("b") is True
        assert tracker.load().favorites == ["a", "b"]

        assert tracker.remove_favorite("a") is True
        assert tracker.remove_favorite("a") is False
        assert json.loads(state_path.read_text())["favorites"] == ["b"]

    def test_record_use_moves_to_front(self, tracker, now):
        tracker.record_use("a", now - timedelta(hours=2))
        tracker.record_use("b", now - timedelta(hours=1))
        usage_log = tracker.record_use("a", now)

        assert [r.prompt_id for r in usage_log.recents] == ["a", "b"]
        assert usage_log.recents[0].used_at == now
        assert tracker.load() == usage_log

    def test_record_use_caps_recents(self, tracker, now):
        for i, prompt_id in enumerate(["a", "b", "c", "d"]):
            tracker.record_use(prompt_id, now + timedelta(minutes=i))

        assert [r.prompt_id for r in tracker.load().recents] == ["d", "c", "b"]

    def test_record_use_keeps_favorites(self, tracker, now):
        tracker.add_favorite("a")
        tracker.record_use("b", now)
        assert tracker.load().favorites == ["a"]

    def test_save_failure(self, temp_dir):
        blocker = temp_dir / "file"
        blocker.write_text("")
        tracker = UsageTracker(blocker / "state.json")

        with pytest.raises(UsageError, match="Could not save usage state"):
            tracker.save(UsageLog())
