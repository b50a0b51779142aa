"""Prompt data models and schemas"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from promptcraft.core.template import (
    extract_placeholder_names,
    format_value,
    is_missing,
    matches_type,
    substitute,
)

DEFAULT_VERSION = "1.0.0"

# Tagged variant of values a caller may supply for a variable
VariableValue = str | int | float | bool | list[str]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VariableType(str, Enum):
    """Supported variable types"""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"


class PromptCategory(str, Enum):
    """Fixed prompt categories"""

    WORK = "work"
    PERSONAL = "personal"
    SHARED = "shared"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VariableValidation(_CamelModel):
    """Descriptive constraints exported into tool schemas, never enforced"""

    min_length: int | None = Field(default=None, description="Minimum string length")
    max_length: int | None = Field(default=None, description="Maximum string length")
    min: float | None = Field(default=None, description="Minimum numeric value")
    max: float | None = Field(default=None, description="Maximum numeric value")
    pattern: str | None = Field(default=None, description="Regular expression")
    options: list[str] | None = Field(default=None, description="Allowed values")


class PromptVariable(_CamelModel):
    """Prompt template variable definition"""

    name: str = Field(description="Variable name")
    type: VariableType = Field(default=VariableType.STRING, description="Variable type")
    required: bool = Field(default=False, description="Whether variable is required")
    description: str | None = Field(default=None, description="Variable description")
    default_value: Any = Field(default=None, description="Default value if not provided")
    validation: VariableValidation | None = Field(
        default=None, description="Optional value constraints"
    )


class ConsistencyReport(BaseModel):
    """Placeholder/declaration consistency check result"""

    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.errors


class RenderResult(BaseModel):
    """Rendered text plus diagnostics about how it was produced"""

    rendered: str = Field(description="Rendered prompt text")
    used_defaults: list[str] = Field(
        default_factory=list, description="Variables filled from their defaults"
    )
    validation_errors: list[str] = Field(
        default_factory=list, description="Advisory variable validation errors"
    )


class ValidationResult(BaseModel):
    """Result of prompt data validation"""

    is_valid: bool = Field(description="Whether validation passed")
    message: str = Field(default="", description="Validation message")
    errors: list[str] = Field(default_factory=list, description="Validation errors")


class Prompt(_CamelModel):
    """Stored prompt template.

    Instances are frozen; every change goes through a method returning a new
    copy. ``to_json``/``from_json`` use the camelCase record layout written by
    the file repository.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str = Field(description="Unique prompt identifier")
    name: str = Field(description="Display name")
    description: str = Field(default="", description="Prompt description")
    content: str = Field(description="Template text with {{variable}} placeholders")
    category: PromptCategory = Field(description="Prompt category")
    tags: list[str] = Field(default_factory=list, description="Searchable tags")
    variables: list[PromptVariable] = Field(
        default_factory=list, description="Declared template variables"
    )
    author: str | None = Field(default=None, description="Prompt author")
    version: str = Field(default=DEFAULT_VERSION, description="Prompt version")
    created_at: datetime = Field(default_factory=utcnow, description="Creation time")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update")

    @field_validator("tags", "variables", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("version", mode="before")
    @classmethod
    def _default_version(cls, v: Any) -> Any:
        return v or DEFAULT_VERSION

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def variable_names(self) -> list[str]:
        return [var.name for var in self.variables]

    def get_variable(self, name: str) -> PromptVariable | None:
        """Get a declared variable by name"""
        for var in self.variables:
            if var.name == name:
                return var
        return None

    def get_required_variables(self) -> list[PromptVariable]:
        """Get list of required variables"""
        return [var for var in self.variables if var.required]

    def with_updated_content(
        self,
        name: str | None = None,
        description: str | None = None,
        content: str | None = None,
        tags: list[str] | None = None,
        author: str | None = None,
        variables: list[PromptVariable] | None = None,
    ) -> "Prompt":
        """Return a copy with the given fields replaced and updated_at refreshed.

        The copy is validated, so variables may be given as plain mappings.
        """
        changes: dict[str, Any] = {"updated_at": utcnow()}
        if name is not None:
            changes["name"] = name
        if description is not None:
            changes["description"] = description
        if content is not None:
            changes["content"] = content
        if tags is not None:
            changes["tags"] = list(tags)
        if author is not None:
            changes["author"] = author
        if variables is not None:
            changes["variables"] = list(variables)
        return self.model_validate({**dict(self), **changes})

    def resolve_value(self, variable: PromptVariable, values: dict[str, Any]) -> Any:
        """Supplied value, else the declared default, else empty string"""
        value = values.get(variable.name)
        if value is None:
            value = variable.default_value
        return "" if value is None else value

    def render_with_variables(self, values: dict[str, Any]) -> str:
        """Substitute declared variables into the content"""
        replacements = {
            var.name: format_value(self.resolve_value(var, values))
            for var in self.variables
        }
        return substitute(self.content, replacements)

    def validate_variables(self, values: dict[str, Any]) -> list[str]:
        """Check supplied values for required-ness and coarse type.

        A required variable left out (or None) is satisfied by a declared
        default. An explicit empty string is reported, since rendering keeps it.
        """
        errors = []
        for var in self.variables:
            value = values.get(var.name)
            if is_missing(value):
                uses_default = value is None and not is_missing(var.default_value)
                if var.required and not uses_default:
                    errors.append(f"Variable '{var.name}' is required but not provided")
                continue
            if not matches_type(value, var.type.value):
                errors.append(f"Variable '{var.name}' must be a {var.type.value}")
        return errors

    def validate_consistency(self) -> ConsistencyReport:
        """Compare placeholders found in content with declared variables"""
        placeholders = extract_placeholder_names(self.content)
        declared = self.variable_names
        found = set(placeholders)
        declared_set = set(declared)

        errors = [
            f"Placeholder '{{{{{name}}}}}' found in content but no variable "
            f"'{name}' is declared"
            for name in placeholders
            if name not in declared_set
        ]

        warnings = []
        seen: set[str] = set()
        for name in declared:
            if name in found or name in seen:
                continue
            seen.add(name)
            warnings.append(f"Variable '{name}' is declared but not used in content")

        return ConsistencyReport(errors=errors, warnings=warnings)

    def to_json(self) -> dict[str, Any]:
        """Serialize to the persisted record layout"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Prompt":
        """Build a prompt from a persisted record"""
        return cls.model_validate(data)


class PromptDraft(_CamelModel):
    """Caller-supplied prompt fields before an id and timestamps are assigned"""

    name: str
    description: str = ""
    content: str
    category: PromptCategory
    tags: list[str] = Field(default_factory=list)
    variables: list[PromptVariable] = Field(default_factory=list)
    author: str | None = None
    version: str = DEFAULT_VERSION

    def to_prompt(self, prompt_id: str, now: datetime | None = None) -> Prompt:
        """Create the stored prompt with created_at == updated_at == now"""
        timestamp = now or utcnow()
        return Prompt(
            id=prompt_id,
            name=self.name,
            description=self.description,
            content=self.content,
            category=self.category,
            tags=list(self.tags),
            variables=list(self.variables),
            author=self.author,
            version=self.version,
            created_at=timestamp,
            updated_at=timestamp,
        )
