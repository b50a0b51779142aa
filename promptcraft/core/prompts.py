"""Core prompt management system"""

import logging
from collections.abc import Callable
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from promptcraft.core.errors import InvalidPromptError, PromptNotFoundError
from promptcraft.core.repository import FileSystemPromptRepository
from promptcraft.core.search import SearchCriteria
from promptcraft.core.template import is_identifier
from promptcraft.core.usage import UsageTracker
from promptcraft.models.config import PromptCraftConfig
from promptcraft.models.prompts import (
    Prompt,
    PromptCategory,
    PromptDraft,
    RenderResult,
    ValidationResult,
    VariableType,
)
from promptcraft.models.usage import UsageLog

logger = logging.getLogger(__name__)


class PromptRenderer:
    """Best-effort rendering with advisory validation"""

    def render(self, prompt: Prompt, values: dict[str, Any] | None = None) -> RenderResult:
        """Render a prompt, reporting defaults used and validation errors.

        Validation never blocks rendering: missing variables render as empty
        strings and the problems are returned in ``validation_errors``.
        """
        values = values or {}
        validation_errors = prompt.validate_variables(values)

        used_defaults = [
            var.name
            for var in prompt.variables
            if values.get(var.name) is None and var.default_value is not None
        ]

        rendered = prompt.render_with_variables(values)

        if validation_errors:
            logger.debug(
                f"Rendered prompt {prompt.id} with {len(validation_errors)} "
                "validation error(s)"
            )

        return RenderResult(
            rendered=rendered,
            used_defaults=used_defaults,
            validation_errors=validation_errors,
        )


class PromptValidator:
    """Validates prompt data before it is stored"""

    VARIABLE_TYPES = {t.value for t in VariableType}

    def validate_prompt_data(self, data: dict[str, Any]) -> ValidationResult:
        """Check required text fields and variable declarations.

        Only keys present in ``data`` are checked, so partial update payloads
        can be validated too.
        """
        errors = []

        for field in ("name", "description", "content"):
            if field in data and not str(data[field] or "").strip():
                errors.append(f"Prompt {field} is required")

        seen: set[str] = set()
        for index, variable in enumerate(data.get("variables") or [], start=1):
            if not isinstance(variable, dict):
                variable = variable.model_dump()

            name = str(variable.get("name") or "").strip()
            if not name:
                errors.append(f"Variable {index}: name is required")
            elif not is_identifier(name):
                errors.append(f"Variable {index}: invalid name '{name}'")
            elif name in seen:
                errors.append(f"Variable {index}: duplicate name '{name}'")
            seen.add(name)

            var_type = variable.get("type", VariableType.STRING.value)
            if isinstance(var_type, VariableType):
                var_type = var_type.value
            if var_type not in self.VARIABLE_TYPES:
                errors.append(f"Variable {index}: invalid type")

        is_valid = len(errors) == 0
        message = (
            "Valid prompt" if is_valid else f"Found {len(errors)} validation errors"
        )
        return ValidationResult(is_valid=is_valid, message=message, errors=errors)


class PromptManager:
    """Prompt use cases over a repository and an optional usage tracker"""

    def __init__(
        self,
        repository: FileSystemPromptRepository,
        usage_tracker: UsageTracker | None = None,
        id_factory: Callable[[], str] | None = None,
        validate_prompts: bool = True,
    ):
        self.repository = repository
        self.usage_tracker = usage_tracker
        self.validate_prompts = validate_prompts
        self.id_factory = id_factory or (lambda: str(uuid4()))
        self.renderer = PromptRenderer()
        self.validator = PromptValidator()

        if not self.repository.is_loaded:
            self.repository.load()

    def _require(self, prompt_id: str) -> Prompt:
        prompt = self.repository.find_by_id(prompt_id)
        if prompt is None:
            raise PromptNotFoundError(prompt_id)
        return prompt

    def usage_log(self) -> UsageLog:
        """Current usage snapshot, empty without a tracker"""
        if self.usage_tracker is None:
            return UsageLog()
        return self.usage_tracker.load()

    def _check(self, data: dict[str, Any]) -> None:
        if not self.validate_prompts:
            return
        result = self.validator.validate_prompt_data(data)
        if not result.is_valid:
            logger.error(f"Prompt validation failed: {result.message}")
            raise InvalidPromptError(result.errors)

    def create_prompt(self, draft: PromptDraft) -> Prompt:
        """Assign an id and timestamps to a draft and store it"""
        self._check(draft.model_dump())
        prompt = draft.to_prompt(self.id_factory())
        self.repository.save(prompt)
        logger.info(f"Created prompt {prompt.id} ({prompt.name})")
        return prompt

    def update_prompt(self, prompt_id: str, **changes: Any) -> Prompt:
        """Store a new revision with the given fields replaced"""
        self._check({k: v for k, v in changes.items() if v is not None})
        prompt = self._require(prompt_id)
        try:
            updated = prompt.with_updated_content(**changes)
        except ValidationError as e:
            raise InvalidPromptError([str(error["msg"]) for error in e.errors()])
        self.repository.save(updated)
        return updated

    def delete_prompt(self, prompt_id: str) -> bool:
        if not self.repository.exists(prompt_id):
            return False
        return self.repository.delete(prompt_id)

    def get_prompt(self, prompt_id: str) -> Prompt | None:
        return self.repository.find_by_id(prompt_id)

    def list_prompts(self, category: PromptCategory | None = None) -> list[Prompt]:
        """List prompts, newest first"""
        if category:
            return self.repository.find_by_category(category)
        return self.repository.find_all()

    def search_prompts(self, criteria: SearchCriteria) -> list[Prompt]:
        return self.repository.search(criteria, self.usage_log())

    def render_prompt(
        self, prompt_id: str, values: dict[str, Any], record_usage: bool = True
    ) -> RenderResult:
        """Render a stored prompt and optionally record the use"""
        prompt = self._require(prompt_id)
        result = self.renderer.render(prompt, values)
        if record_usage and self.usage_tracker is not None:
            self.usage_tracker.record_use(prompt_id)
        return result

    def get_category_statistics(self) -> dict[str, int]:
        counts = self.repository.count_by_category()
        return {"total": sum(counts.values()), **counts}

    def set_favorite(self, prompt_id: str, is_favorite: bool) -> bool:
        """Add or remove a favorite; False when nothing changed or no tracker"""
        self._require(prompt_id)
        if self.usage_tracker is None:
            logger.warning("No usage tracker configured, favorites are disabled")
            return False
        if is_favorite:
            return self.usage_tracker.add_favorite(prompt_id)
        return self.usage_tracker.remove_favorite(prompt_id)

    def validate_prompt_data(self, data: dict[str, Any]) -> list[str]:
        return self.validator.validate_prompt_data(data).errors


def create_manager(config: PromptCraftConfig) -> PromptManager:
    """Build a PromptManager from configuration"""
    repository = FileSystemPromptRepository(config.library.prompts_dir)
    usage_tracker = UsageTracker(config.usage.state_path, config.usage.max_recents)
    return PromptManager(
        repository, usage_tracker, validate_prompts=config.library.validate_prompts
    )
