"""Exceptions raised by PromptCraft"""

from enum import Enum


class PromptCraftError(Exception):
    """Base exception for PromptCraft errors"""

    pass


class RepositoryError(PromptCraftError):
    """Prompt storage errors"""

    pass


class PromptNotFoundError(RepositoryError):
    """Raised when no prompt has the requested id"""

    def __init__(self, prompt_id: str):
        self.prompt_id = prompt_id
        super().__init__(f"Prompt with ID {prompt_id} not found")


class UsageError(PromptCraftError):
    """Usage state persistence errors"""

    pass


class ConfigError(PromptCraftError):
    """Configuration-related errors"""

    pass


class ToolErrorCode(int, Enum):
    """JSON-RPC style codes for the tool call surface"""

    PARSE_ERROR = -32700
    INVALID_PARAMS = -32602
    METHOD_NOT_FOUND = -32601
    INTERNAL_ERROR = -32603


class ToolError(PromptCraftError):
    """Raised by the tool call surface with a protocol error code"""

    def __init__(self, code: ToolErrorCode, message: str):
        self.code = code
        self.message = message
        super().__init__(message)

    @classmethod
    def method_not_found(cls, name: str) -> "ToolError":
        return cls(ToolErrorCode.METHOD_NOT_FOUND, f"Unknown tool: {name}")

    @classmethod
    def parse_error(cls, message: str) -> "ToolError":
        return cls(ToolErrorCode.PARSE_ERROR, message)

    @classmethod
    def invalid_params(cls, message: str) -> "ToolError":
        return cls(ToolErrorCode.INVALID_PARAMS, message)

    @classmethod
    def internal_error(cls, action: str, error: Exception) -> "ToolError":
        return cls(ToolErrorCode.INTERNAL_ERROR, f"Failed to {action}: {error}")


class InvalidPromptError(PromptCraftError):
    """Raised when prompt data fails validation before saving"""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Invalid prompt: {'; '.join(errors)}")
