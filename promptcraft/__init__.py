"""PromptCraft - prompt template library with ranked search and rendering"""

__version__ = "1.0.0"
