"""Configuration models and schemas"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from promptcraft.utils.files import get_user_config_dir


class LibraryConfig(BaseModel):
    """Prompt library location and checks"""

    prompts_dir: Path = Field(
        default=Path("~/.promptcraft/prompts"), description="Prompt library location"
    )
    validate_prompts: bool = Field(
        default=True, description="Validate prompt data before saving"
    )


class UsageConfig(BaseModel):
    """Favorites and recents state"""

    state_path: Path = Field(
        default_factory=lambda: get_user_config_dir() / "state.json",
        description="Usage state file",
    )
    max_recents: int = Field(
        default=20, description="Recent uses to keep", gt=0
    )


class SearchConfig(BaseModel):
    """Search defaults"""

    default_limit: int = Field(
        default=10, description="Default maximum search results", gt=0
    )


class LoggingConfig(BaseModel):
    """Logging configuration"""

    level: str = Field(default="WARNING", description="Log level")
    log_file: Path | None = Field(default=None, description="Optional log file path")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR"}
        level = v.upper()
        if level not in allowed_levels:
            raise ValueError(f"Log level must be one of: {', '.join(sorted(allowed_levels))}")
        return level


class PromptCraftConfig(BaseModel):
    """Main configuration model"""

    model_config = ConfigDict(extra="forbid")

    library: LibraryConfig = Field(default_factory=LibraryConfig)
    usage: UsageConfig = Field(default_factory=UsageConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
