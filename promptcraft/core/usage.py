"""Persistence of favorites and recent prompt uses"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from promptcraft.core.errors import UsageError
from promptcraft.models.usage import UsageEntry, UsageLog

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECENTS = 20


class UsageTracker:
    """Reads and updates the usage state file.

    Every call returns a fresh ``UsageLog`` snapshot; callers pass that
    snapshot into scoring explicitly.
    """

    def __init__(self, state_path: Path, max_recents: int = DEFAULT_MAX_RECENTS):
        self.state_path = Path(state_path).expanduser()
        self.max_recents = max_recents

    def load(self) -> UsageLog:
        """Load the usage log, falling back to an empty one"""
        if not self.state_path.exists():
            return UsageLog()

        try:
            with open(self.state_path, encoding="utf-8") as f:
                data = json.load(f)
            return UsageLog.model_validate(data)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load usage state from {self.state_path}: {e}")
            return UsageLog()

    def save(self, usage_log: UsageLog) -> None:
        """Write the usage log to disk"""
        try:
            self.state_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.state_path, "w", encoding="utf-8") as f:
                json.dump(usage_log.to_json(), f, indent=2)
        except OSError as e:
            raise UsageError(f"Could not save usage state to {self.state_path}: {e}")

    def add_favorite(self, prompt_id: str) -> bool:
        """Mark a prompt as favorite; False if it already was"""
        usage_log = self.load()
        if usage_log.is_favorite(prompt_id):
            return False
        self.save(
            usage_log.model_copy(
                update={"favorites": [*usage_log.favorites, prompt_id]}
            )
        )
        logger.info(f"Added {prompt_id} to favorites")
        return True

    def remove_favorite(self, prompt_id: str) -> bool:
        """Unmark a favorite; False if it was not one"""
        usage_log = self.load()
        if not usage_log.is_favorite(prompt_id):
            return False
        favorites = [f for f in usage_log.favorites if f != prompt_id]
        self.save(usage_log.model_copy(update={"favorites": favorites}))
        logger.info(f"Removed {prompt_id} from favorites")
        return True

    def record_use(self, prompt_id: str, now: datetime | None = None) -> UsageLog:
        """Move a prompt to the front of recents"""
        usage_log = self.load()
        entry = UsageEntry(
            prompt_id=prompt_id, used_at=now or datetime.now(timezone.utc)
        )
        recents = [entry] + [r for r in usage_log.recents if r.prompt_id != prompt_id]
        updated = usage_log.model_copy(update={"recents": recents[: self.max_recents]})
        self.save(updated)
        return updated
