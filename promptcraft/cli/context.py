"""Shared setup for CLI commands"""

from promptcraft.core.config import config_manager
from promptcraft.core.log import configure_logging
from promptcraft.core.prompts import PromptManager, create_manager
from promptcraft.models.config import PromptCraftConfig


def load_config() -> PromptCraftConfig:
    """Load configuration and set up logging from the global options"""
    # Import here to avoid circular import
    from promptcraft.main import app

    config = config_manager.load_config(app.state.config_file)
    logging_config = config.logging
    if app.state.log_file:
        logging_config = logging_config.model_copy(
            update={"log_file": app.state.log_file}
        )
    configure_logging(logging_config, verbose=app.state.verbose)
    return config


def load_manager() -> tuple[PromptCraftConfig, PromptManager]:
    """Configuration plus a PromptManager over the configured library"""
    config = load_config()
    return config, create_manager(config)
