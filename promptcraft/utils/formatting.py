"""Rich formatting utilities for terminal output"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from promptcraft.models.prompts import ConsistencyReport, Prompt, RenderResult
from promptcraft.models.usage import UsageEntry

console = Console()


def print_error(message: str):
    """Print an error message"""
    console.print(f"[red bold]Error:[/red bold] {message}")


def print_success(message: str):
    """Print a success message"""
    console.print(f"[green]✓[/green] {message}")


def print_warning(message: str):
    """Print a warning message"""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str):
    """Print an info message"""
    console.print(f"[blue]ℹ[/blue] {message}")


def prompts_table(prompts: list[Prompt], favorites: list[str] | None = None) -> Table:
    """Build a table summarising prompts"""
    favorites = favorites or []

    table = Table()
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="green")
    table.add_column("Tags", style="yellow")
    table.add_column("Updated", style="white")
    table.add_column("★", style="red")

    for prompt in prompts:
        table.add_row(
            prompt.id,
            prompt.name,
            prompt.category.value,
            ", ".join(prompt.tags),
            prompt.updated_at.strftime("%Y-%m-%d %H:%M"),
            "★" if prompt.id in favorites else "",
        )

    return table


def recents_table(entries: list[UsageEntry], prompts: dict[str, Prompt]) -> Table:
    """Build a table of recent uses; ids whose prompt is gone are flagged"""
    table = Table()
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="green")
    table.add_column("Used", style="white")

    for entry in entries:
        used = entry.used_at.strftime("%Y-%m-%d %H:%M")
        prompt = prompts.get(entry.prompt_id)
        if prompt is None:
            table.add_row(entry.prompt_id, "[red](prompt not found)[/red]", "", used)
        else:
            table.add_row(prompt.id, prompt.name, prompt.category.value, used)

    return table


def print_prompt(prompt: Prompt):
    """Print a prompt with its variables"""
    lines = [
        f"[bold]{prompt.name}[/bold] (v{prompt.version})",
        prompt.description,
        "",
        f"Category: {prompt.category.value}",
    ]
    if prompt.tags:
        lines.append(f"Tags: {', '.join(prompt.tags)}")
    if prompt.author:
        lines.append(f"Author: {prompt.author}")

    for var in prompt.variables:
        marker = "*" if var.required else ""
        default = f" = {var.default_value!r}" if var.default_value is not None else ""
        lines.append(f"  {{{{{var.name}}}}}{marker}: {var.type.value}{default}")

    console.print(Panel("\n".join(lines), title=prompt.id, title_align="left"))
    console.print(prompt.content, markup=False, highlight=False)


def print_render_result(result: RenderResult):
    """Print rendered text followed by any diagnostics"""
    console.print(result.rendered, markup=False, highlight=False)
    if result.used_defaults:
        print_info(f"Defaults used: {', '.join(result.used_defaults)}")
    for error in result.validation_errors:
        print_warning(error)


def print_consistency_report(report: ConsistencyReport):
    for error in report.errors:
        print_error(error)
    for warning in report.warnings:
        print_warning(warning)
    if not report.errors and not report.warnings:
        print_success("Placeholders and variables are consistent")
