"""Usage log models (favorites and recent uses)"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class UsageEntry(BaseModel):
    """A single recorded use of a prompt"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    prompt_id: str = Field(description="Prompt identifier")
    used_at: datetime = Field(description="When the prompt was used")

    @field_validator("used_at")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class UsageLog(BaseModel):
    """Snapshot of favorites and recents, most recent use first"""

    model_config = ConfigDict(frozen=True)

    favorites: list[str] = Field(default_factory=list, description="Favorite ids")
    recents: list[UsageEntry] = Field(
        default_factory=list, description="Recent uses, newest first"
    )

    def is_favorite(self, prompt_id: str) -> bool:
        return prompt_id in self.favorites

    def find_recent(self, prompt_id: str) -> tuple[int, UsageEntry] | None:
        """Position and entry of the most recent use of a prompt"""
        for position, entry in enumerate(self.recents):
            if entry.prompt_id == prompt_id:
                return position, entry
        return None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
