"""Configuration command handlers"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from promptcraft.core.config import ConfigError, config_manager
from promptcraft.models.config import PromptCraftConfig
from promptcraft.utils.formatting import print_error, print_info, print_success

config_app = typer.Typer()
console = Console()


def config_table(config: PromptCraftConfig) -> Table:
    """One row per setting, grouped by section"""
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    rows = [
        ("Prompts Directory", config.library.prompts_dir),
        ("Validate Prompts", config.library.validate_prompts),
        ("Usage State", config.usage.state_path),
        ("Max Recents", config.usage.max_recents),
        ("Search Limit", config.search.default_limit),
        ("Log Level", config.logging.level),
        ("Log File", config.logging.log_file or "Not set"),
    ]
    for setting, value in rows:
        table.add_row(setting, str(value))
    return table


@config_app.command("show")
def show_config(
    config_file: Path | None = typer.Option(
        None, "--file", "-f", help="Configuration file to show"
    ),
):
    """Show current configuration"""
    if config_file is None:
        # Import here to avoid circular import
        from promptcraft.main import app

        config_file = app.state.config_file

    try:
        config = config_manager.load_config(config_file)
    except ConfigError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1) from e

    source = config_file or config_manager.find_config_file()
    print_info("Current Configuration:")
    console.print(f"Source: {source or 'built-in defaults'}", markup=False)
    console.print(config_table(config))


@config_app.command("init")
def init_config(
    output_path: Path = typer.Option(
        Path("promptcraft.yaml"),
        "--output",
        "-o",
        help="Where to write the configuration file",
    ),
    force: bool = typer.Option(
        False, "--force", help="Overwrite an existing file"
    ),
):
    """Initialize a new configuration file"""
    if output_path.exists() and not force:
        print_error(f"{output_path} already exists (use --force to overwrite)")
        raise typer.Exit(1)

    try:
        config_manager.save_config(config_manager._load_default_config(), output_path)
    except ConfigError as e:
        print_error(f"Failed to create configuration: {e}")
        raise typer.Exit(1) from e

    print_success(f"Configuration file created: {output_path}")
    print_info("Edit the file to customize your settings")


@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context):
    """Configuration management commands"""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()
