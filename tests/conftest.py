"""Shared test fixtures and configuration"""

import json
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator

import pytest

from promptcraft.models.prompts import Prompt, PromptCategory, PromptVariable

NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def make_prompt(**overrides) -> Prompt:
    """Build a prompt with sensible defaults for tests"""
    data = {
        "id": "prompt-1",
        "name": "Sample Prompt",
        "description": "A sample prompt",
        "content": "Hello {{name}}",
        "category": PromptCategory.WORK,
        "tags": [],
        "variables": [PromptVariable(name="name", required=True)],
        "created_at": NOW - timedelta(days=10),
        "updated_at": NOW - timedelta(days=1),
    }
    data.update(overrides)
    return Prompt(**data)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def prompt_factory():
    """Factory building prompts from keyword overrides"""
    return make_prompt


@pytest.fixture
def code_review_prompt() -> Prompt:
    return make_prompt(
        id="code-review",
        name="Code Review Assistant",
        description="Review a pull request",
        content="Review {{lang}} code: {{code}}",
        tags=["code", "review"],
        author="Ada Lovelace",
        variables=[
            PromptVariable(name="lang", required=True),
            PromptVariable(name="code", required=True, default_value="// empty"),
        ],
    )


@pytest.fixture
def sample_prompts(code_review_prompt) -> list[Prompt]:
    """A small library spread over all three categories"""
    return [
        code_review_prompt,
        make_prompt(
            id="email",
            name="Professional Email",
            description="Draft an email to a colleague",
            content="Write an email to {{recipient}} about {{topic}}",
            category=PromptCategory.WORK,
            tags=["email", "writing"],
            author="Grace Hopper",
            variables=[
                PromptVariable(name="recipient", required=True),
                PromptVariable(name="topic", required=True),
            ],
            updated_at=NOW - timedelta(hours=2),
        ),
        make_prompt(
            id="journal",
            name="Daily Journal",
            description="Reflect on the day",
            content="What went well today?",
            category=PromptCategory.PERSONAL,
            tags=["journal"],
            variables=[],
            updated_at=NOW - timedelta(days=3),
        ),
        make_prompt(
            id="meeting-notes",
            name="Meeting Notes",
            description="Summarise meeting notes for the team",
            content="Summarise these notes: {{notes}}",
            category=PromptCategory.SHARED,
            tags=["meeting", "writing"],
            variables=[PromptVariable(name="notes", required=True)],
            updated_at=NOW - timedelta(days=5),
        ),
    ]


@pytest.fixture
def prompts_dir(temp_dir: Path, sample_prompts: list[Prompt]) -> Path:
    """Prompt library on disk holding the sample prompts"""
    from promptcraft.utils.files import slugify

    library = temp_dir / "prompts"
    for prompt in sample_prompts:
        category_dir = library / prompt.category.value
        category_dir.mkdir(parents=True, exist_ok=True)
        with open(category_dir / f"{slugify(prompt.name)}.json", "w") as f:
            json.dump(prompt.to_json(), f, indent=2)
    return library


@pytest.fixture
def state_path(temp_dir: Path) -> Path:
    return temp_dir / "state" / "state.json"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host PROMPTCRAFT_* variables out of the tests"""
    for key in ("PROMPTCRAFT_PROMPTS_DIR", "PROMPTCRAFT_STATE_PATH", "PROMPTCRAFT_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sample_config_dict(temp_dir: Path) -> dict:
    """Sample configuration dictionary for testing"""
    return {
        "library": {
            "prompts_dir": str(temp_dir / "library"),
            "validate_prompts": False,
        },
        "usage": {"state_path": str(temp_dir / "state.json"), "max_recents": 5},
        "search": {"default_limit": 3},
        "logging": {"level": "info"},
    }


@pytest.fixture
def sample_config_yaml(temp_dir: Path, sample_config_dict: dict) -> Path:
    """Create a sample YAML config file"""
    import yaml

    config_file = temp_dir / "config.yaml"
    with open(config_file, "w") as f:
        yaml.dump(sample_config_dict, f)
    return config_file


@pytest.fixture
def invalid_yaml_content() -> str:
    """Invalid YAML content for testing error handling"""
    return """
library:
  prompts_dir: "/tmp/prompts
  # Missing closing quote above
  validate_prompts: not_a_bool
"""


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock environment variables for testing"""

    def _mock_env(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key, value)

    return _mock_env
