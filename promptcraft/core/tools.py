"""Exposes prompts as callable tools with JSON-Schema input definitions.

Each stored prompt becomes a tool named ``prompt_<id>``; two utility tools,
``search_prompts`` and ``list_categories``, sit alongside them. Transport
wiring is left to the caller: this module only builds definitions and
dispatches calls, raising ``ToolError`` with a protocol code on failure.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from promptcraft.core.errors import PromptNotFoundError, ToolError
from promptcraft.core.prompts import PromptManager
from promptcraft.core.search import SearchCriteria
from promptcraft.models.prompts import Prompt, PromptCategory, PromptVariable

logger = logging.getLogger(__name__)

PROMPT_TOOL_PREFIX = "prompt_"
SEARCH_TOOL = "search_prompts"
CATEGORIES_TOOL = "list_categories"
DEFAULT_SEARCH_LIMIT = 10

_JSON_SCHEMA_TYPES = {"string", "number", "boolean", "array"}


class ToolDefinition(BaseModel):
    """Tool name, description and JSON Schema for its arguments"""

    name: str = Field(description="Tool name")
    description: str = Field(description="Tool description")
    input_schema: dict[str, Any] = Field(description="JSON Schema for arguments")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class ToolCallResult(BaseModel):
    """Text output of a tool call plus optional metadata"""

    text: str
    meta: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"content": [{"type": "text", "text": self.text}]}
        if self.meta:
            result["meta"] = self.meta
        return result


def variable_to_property(variable: PromptVariable) -> dict[str, Any]:
    """Map a variable declaration to a JSON Schema property"""
    var_type = variable.type.value
    prop: dict[str, Any] = {
        "type": var_type if var_type in _JSON_SCHEMA_TYPES else "string",
        "description": variable.description or "",
    }

    if variable.default_value is not None:
        prop["default"] = variable.default_value

    if var_type == "array":
        prop["items"] = {"type": "string"}

    constraints = variable.validation
    if constraints is not None:
        if constraints.min_length is not None:
            prop["minLength"] = constraints.min_length
        if constraints.max_length is not None:
            prop["maxLength"] = constraints.max_length
        if constraints.min is not None:
            prop["minimum"] = constraints.min
        if constraints.max is not None:
            prop["maximum"] = constraints.max
        if constraints.pattern is not None:
            prop["pattern"] = constraints.pattern
        if constraints.options:
            prop["enum"] = list(constraints.options)

    return prop


def build_input_schema(prompt: Prompt) -> dict[str, Any]:
    """JSON Schema object describing a prompt's variables"""
    return {
        "type": "object",
        "properties": {var.name: variable_to_property(var) for var in prompt.variables},
        "required": [var.name for var in prompt.get_required_variables()],
    }


def prompt_tool_name(prompt: Prompt) -> str:
    return f"{PROMPT_TOOL_PREFIX}{prompt.id}"


def prompt_to_tool(prompt: Prompt) -> ToolDefinition:
    description = f"{prompt.name}: {prompt.description}"
    description += f" [category={prompt.category.value}]"
    if prompt.tags:
        description += f" [tags={', '.join(prompt.tags)}]"
    return ToolDefinition(
        name=prompt_tool_name(prompt),
        description=description,
        input_schema=build_input_schema(prompt),
    )


def utility_tools() -> list[ToolDefinition]:
    """Definitions of the search and category listing tools"""
    return [
        ToolDefinition(
            name=SEARCH_TOOL,
            description="Search prompts by query, category, or tags",
            input_schema={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "Search query to match in prompt names, descriptions, or content",
                    },
                    "category": {
                        "type": "string",
                        "description": "Filter by category (work, personal, shared)",
                        "enum": [c.value for c in PromptCategory],
                    },
                    "tags": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Filter by tags",
                    },
                    "limit": {
                        "type": "number",
                        "description": "Maximum number of results to return",
                        "default": DEFAULT_SEARCH_LIMIT,
                    },
                },
                "required": [],
            },
        ),
        ToolDefinition(
            name=CATEGORIES_TOOL,
            description="List all available prompt categories with counts",
            input_schema={"type": "object", "properties": {}, "required": []},
        ),
    ]


class PromptToolService:
    """Lists and dispatches prompt tools against a PromptManager"""

    def __init__(self, manager: PromptManager, default_limit: int = DEFAULT_SEARCH_LIMIT):
        self.manager = manager
        self.default_limit = default_limit

    def list_tools(self) -> list[ToolDefinition]:
        prompt_tools = [prompt_to_tool(p) for p in self.manager.list_prompts()]
        return prompt_tools + utility_tools()

    def call_tool(self, name: str, arguments: Any = None) -> ToolCallResult:
        """Dispatch a tool call by name"""
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise ToolError.parse_error(
                f"Tool arguments must be an object, got {type(arguments).__name__}"
            )
        arguments = dict(arguments)

        if name == SEARCH_TOOL:
            return self.search(arguments)
        if name == CATEGORIES_TOOL:
            return self.list_categories()
        if name.startswith(PROMPT_TOOL_PREFIX):
            return self.render(name[len(PROMPT_TOOL_PREFIX) :], arguments)

        raise ToolError.method_not_found(name)

    def search_summaries(self, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        """Ordered search results reduced to summary records"""
        try:
            criteria = SearchCriteria(
                query=arguments.get("query") or None,
                category=arguments.get("category") or None,
                tags=arguments.get("tags") or None,
                limit=arguments.get("limit") or self.default_limit,
            )
        except ValidationError as e:
            raise ToolError.invalid_params(f"Invalid search arguments: {e}") from e

        try:
            results = self.manager.search_prompts(criteria)
        except Exception as e:
            raise ToolError.internal_error("search prompts", e) from e

        return [
            {
                "id": p.id,
                "name": p.name,
                "description": p.description,
                "category": p.category.value,
                "tags": list(p.tags),
            }
            for p in results
        ]

    def search(self, arguments: dict[str, Any]) -> ToolCallResult:
        return ToolCallResult(text=json.dumps(self.search_summaries(arguments), indent=2))

    def category_counts(self) -> list[dict[str, Any]]:
        """``{category, count}`` for every category, in fixed order"""
        try:
            counts = self.manager.repository.count_by_category()
        except Exception as e:
            raise ToolError.internal_error("list categories", e) from e
        return [{"category": c.value, "count": counts[c.value]} for c in PromptCategory]

    def list_categories(self) -> ToolCallResult:
        return ToolCallResult(text=json.dumps(self.category_counts(), indent=2))

    def render(self, prompt_id: str, arguments: dict[str, Any]) -> ToolCallResult:
        """Render a prompt tool; validation problems travel in meta"""
        try:
            result = self.manager.render_prompt(prompt_id, arguments)
        except PromptNotFoundError as e:
            raise ToolError.method_not_found(f"{PROMPT_TOOL_PREFIX}{prompt_id}") from e
        except Exception as e:
            logger.error(f"Failed to render prompt {prompt_id}: {e}")
            raise ToolError.internal_error("render prompt", e) from e

        return ToolCallResult(
            text=result.rendered,
            meta={
                "errors": result.validation_errors,
                "usedDefaults": result.used_defaults,
            },
        )
