"""Favorite prompt command handlers"""

import typer
from rich.console import Console

from promptcraft.cli.context import load_manager
from promptcraft.core.errors import PromptCraftError
from promptcraft.utils.formatting import (
    print_error,
    print_info,
    print_success,
    prompts_table,
)

favorites_app = typer.Typer()
console = Console()


@favorites_app.command("add")
def add_favorite(prompt_id: str = typer.Argument(help="Prompt ID")):
    """Mark a prompt as favorite"""
    try:
        _, manager = load_manager()
        if manager.set_favorite(prompt_id, True):
            print_success(f"Added {prompt_id} to favorites")
        else:
            print_info(f"{prompt_id} is already in favorites")

    except PromptCraftError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@favorites_app.command("remove")
def remove_favorite(prompt_id: str = typer.Argument(help="Prompt ID")):
    """Remove a prompt from favorites"""
    try:
        _, manager = load_manager()
        if manager.set_favorite(prompt_id, False):
            print_success(f"Removed {prompt_id} from favorites")
        else:
            print_info(f"{prompt_id} is not in favorites")

    except PromptCraftError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@favorites_app.command("list")
def list_favorites():
    """List favorite prompts"""
    try:
        _, manager = load_manager()
        favorites = manager.usage_log().favorites
        prompts = [p for p in manager.list_prompts() if p.id in favorites]
        if not prompts:
            print_info("No favorite prompts")
            return
        console.print(prompts_table(prompts, favorites))

    except PromptCraftError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@favorites_app.callback(invoke_without_command=True)
def favorites_callback(ctx: typer.Context):
    """Favorite prompt commands"""
    # If no command was provided, show help
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()
