"""PromptCraft command line entry point"""

from pathlib import Path

import typer
from rich.console import Console

from promptcraft.cli.config import config_app
from promptcraft.cli.favorites import favorites_app
from promptcraft.cli.prompts import prompts_app

app = typer.Typer(
    name="promptcraft",
    help="PromptCraft - prompt template library",
    add_completion=False,
)

console = Console()


class AppState:
    """Options given before the subcommand, read back by command handlers"""

    config_file: Path | None = None
    verbose: bool = False
    log_file: Path | None = None


app.state = AppState()

app.add_typer(prompts_app, name="prompts", help="Prompt library commands")
app.add_typer(favorites_app, name="favorites", help="Favorite prompt commands")
app.add_typer(config_app, name="config", help="Configuration commands")


@app.command()
def version():
    """Show PromptCraft version"""
    from promptcraft import __version__

    console.print(f"PromptCraft v{__version__}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="Read settings from this YAML file",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log debug messages"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", dir_okay=False, help="Also write log messages to this file"
    ),
):
    """PromptCraft - prompt template library

    Store, search, rank and render reusable prompt templates.
    """
    app.state.config_file = config_file
    app.state.verbose = verbose
    app.state.log_file = log_file

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()


if __name__ == "__main__":
    app()
