"""File-based prompt storage: one JSON record per prompt, grouped by category"""

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from promptcraft.core.errors import RepositoryError
from promptcraft.core.search import SearchCriteria, search_prompts
from promptcraft.models.prompts import Prompt, PromptCategory
from promptcraft.models.usage import UsageLog
from promptcraft.utils.files import ensure_dir, slugify

logger = logging.getLogger(__name__)


def _newest_first(prompts) -> list[Prompt]:
    return sorted(prompts, key=lambda p: p.updated_at, reverse=True)


@dataclass(frozen=True)
class PromptSnapshot:
    """Immutable view of the prompt collection at one point in time"""

    prompts: tuple[Prompt, ...] = ()
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __iter__(self) -> Iterator[Prompt]:
        return iter(self.prompts)

    def __len__(self) -> int:
        return len(self.prompts)

    def get(self, prompt_id: str) -> Prompt | None:
        for prompt in self.prompts:
            if prompt.id == prompt_id:
                return prompt
        return None


class FileSystemPromptRepository:
    """Stores prompts as ``<base>/<category>/<slug>.json`` files.

    Nothing is read until ``load()`` is called. Saves and deletes write
    through to disk and replace the current snapshot rather than mutating it,
    so a snapshot handed to a caller never changes underneath them.
    """

    def __init__(self, base_directory: Path):
        self.base_directory = Path(base_directory).expanduser()
        self._prompts: dict[str, Prompt] = {}
        self._paths: dict[str, Path] = {}
        self._snapshot: PromptSnapshot | None = None

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> PromptSnapshot:
        """Current snapshot; requires a prior load()"""
        return self._require_loaded()

    def _require_loaded(self) -> PromptSnapshot:
        if self._snapshot is None:
            raise RepositoryError("Prompt repository not loaded; call load() first")
        return self._snapshot

    def load(self) -> PromptSnapshot:
        """Read every prompt record from disk"""
        self._prompts = {}
        self._paths = {}

        for category in PromptCategory:
            self._load_category(category)

        logger.info(
            f"Loaded {len(self._prompts)} prompt(s) from {self.base_directory}"
        )
        return self._refresh_snapshot()

    def _load_category(self, category: PromptCategory) -> None:
        category_path = self.base_directory / category.value
        if not category_path.is_dir():
            logger.info(f"Category directory {category.value} not found, skipping")
            return

        for file_path in sorted(category_path.glob("*.json")):
            try:
                with open(file_path, encoding="utf-8") as f:
                    data = json.load(f)
                prompt = Prompt.from_json(data)
            # ValueError covers bad encoding, bad JSON and failed validation
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Failed to load prompt from {file_path}: {e}")
                continue

            self._prompts[prompt.id] = prompt
            self._paths[prompt.id] = file_path
            logger.debug(f"Loaded prompt {prompt.id} from {file_path}")

    def _refresh_snapshot(self) -> PromptSnapshot:
        self._snapshot = PromptSnapshot(prompts=tuple(self._prompts.values()))
        return self._snapshot

    def _path_for(self, prompt: Prompt) -> Path:
        return self.base_directory / prompt.category.value / f"{slugify(prompt.name)}.json"

    def find_by_id(self, prompt_id: str) -> Prompt | None:
        return self.snapshot.get(prompt_id)

    def exists(self, prompt_id: str) -> bool:
        return self.find_by_id(prompt_id) is not None

    def find_all(self) -> list[Prompt]:
        """All prompts, most recently updated first"""
        return _newest_first(self.snapshot)

    def find_by_category(self, category: PromptCategory) -> list[Prompt]:
        return _newest_first(p for p in self.snapshot if p.category == category)

    def find_by_tags(self, tags: list[str]) -> list[Prompt]:
        return _newest_first(
            p for p in self.snapshot if any(tag in p.tags for tag in tags)
        )

    def count_by_category(self) -> dict[str, int]:
        counts = {category.value: 0 for category in PromptCategory}
        for prompt in self.snapshot:
            counts[prompt.category.value] += 1
        return counts

    def search(
        self, criteria: SearchCriteria, usage_log: UsageLog | None = None
    ) -> list[Prompt]:
        return search_prompts(self.snapshot, criteria, usage_log)

    def save(self, prompt: Prompt) -> Path:
        """Write a prompt record and add or replace it in the snapshot"""
        self._require_loaded()

        file_path = self._path_for(prompt)
        try:
            ensure_dir(file_path.parent)
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(prompt.to_json(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise RepositoryError(f"Error saving prompt {prompt.id} to {file_path}: {e}")

        previous_path = self._paths.get(prompt.id)
        if previous_path is not None and previous_path != file_path:
            # Renamed or recategorised: drop the stale record
            previous_path.unlink(missing_ok=True)

        self._prompts[prompt.id] = prompt
        self._paths[prompt.id] = file_path
        self._refresh_snapshot()
        logger.info(f"Saved prompt {prompt.id} to {file_path}")
        return file_path

    def delete(self, prompt_id: str) -> bool:
        """Remove a prompt; False if no such prompt exists"""
        self._require_loaded()

        prompt = self._prompts.pop(prompt_id, None)
        if prompt is None:
            return False

        file_path = self._paths.pop(prompt_id, None) or self._path_for(prompt)
        try:
            file_path.unlink()
        except OSError as e:
            logger.warning(f"Failed to delete prompt file {file_path}: {e}")

        self._refresh_snapshot()
        logger.info(f"Deleted prompt {prompt_id}")
        return True
