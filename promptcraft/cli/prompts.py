"""Prompt library command handlers"""

from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from promptcraft.cli.context import load_manager
from promptcraft.core.errors import PromptCraftError, PromptNotFoundError
from promptcraft.core.search import SearchCriteria
from promptcraft.core.template import parse_typed_value
from promptcraft.core.tools import PromptToolService
from promptcraft.models.prompts import Prompt, PromptCategory
from promptcraft.utils.formatting import (
    print_consistency_report,
    print_error,
    print_info,
    print_prompt,
    print_render_result,
    print_success,
    prompts_table,
    recents_table,
)

prompts_app = typer.Typer()
console = Console()


def _parse_vars(pairs: list[str]) -> dict[str, str]:
    values = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected NAME=VALUE, got '{pair}'")
        values[name.strip()] = value
    return values


def _typed_values(prompt: Prompt, raw: dict[str, str]) -> dict[str, Any]:
    """Convert --var text to each declared variable's type"""
    values = {}
    for name, text in raw.items():
        variable = prompt.get_variable(name)
        values[name] = (
            parse_typed_value(text, variable.type.value) if variable else text
        )
    return values


@prompts_app.command("list")
def list_prompts(
    category: PromptCategory | None = typer.Option(
        None, "--category", help="Only show prompts in this category"
    ),
):
    """List prompts, most recently updated first"""
    try:
        _, manager = load_manager()
        prompts = manager.list_prompts(category)
        if not prompts:
            print_info("No prompts found")
            return
        console.print(prompts_table(prompts, manager.usage_log().favorites))

    except PromptCraftError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@prompts_app.command("search")
def search_prompts(
    query: str | None = typer.Argument(None, help="Text to search for"),
    category: PromptCategory | None = typer.Option(
        None, "--category", help="Filter by category"
    ),
    tags: list[str] | None = typer.Option(
        None, "--tag", "-t", help="Filter by tag (repeatable)"
    ),
    author: str | None = typer.Option(None, "--author", help="Filter by author"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Maximum results"),
):
    """Search prompts ranked by relevance and usage"""
    try:
        config, manager = load_manager()
        criteria = SearchCriteria(
            query=query,
            category=category,
            tags=tags or None,
            author=author,
            limit=limit if limit is not None else config.search.default_limit,
        )
        results = manager.search_prompts(criteria)
        if not results:
            print_info(f"No prompts match: {query or '(all)'}")
            return
        console.print(prompts_table(results, manager.usage_log().favorites))

    except PromptCraftError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@prompts_app.command("show")
def show_prompt(prompt_id: str = typer.Argument(help="Prompt ID")):
    """Show a prompt and its variables"""
    try:
        _, manager = load_manager()
        prompt = manager.get_prompt(prompt_id)
        if prompt is None:
            print_error(f"Prompt with ID {prompt_id} not found")
            raise typer.Exit(1)
        print_prompt(prompt)

    except PromptCraftError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@prompts_app.command("render")
def render_prompt(
    prompt_id: str = typer.Argument(help="Prompt ID"),
    variables: list[str] | None = typer.Option(
        None, "--var", help="Variable value as NAME=VALUE (repeatable)"
    ),
):
    """Render a prompt with variable values"""
    raw_values = _parse_vars(variables or [])
    try:
        _, manager = load_manager()
        prompt = manager.get_prompt(prompt_id)
        if prompt is None:
            raise PromptNotFoundError(prompt_id)
        result = manager.render_prompt(prompt_id, _typed_values(prompt, raw_values))
        print_render_result(result)

    except PromptCraftError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


def _validate_all(prompts: list[Prompt]) -> int:
    """Report every prompt with issues; returns the total error count"""
    total_errors = total_warnings = 0
    with_issues = 0

    for prompt in prompts:
        report = prompt.validate_consistency()
        if not report.errors and not report.warnings:
            continue
        with_issues += 1
        total_errors += len(report.errors)
        total_warnings += len(report.warnings)
        console.print(f"[bold]{prompt.name}[/bold] ({prompt.id})")
        print_consistency_report(report)

    if with_issues == 0:
        print_success("All prompts are consistent")
    else:
        print_info(f"Summary: {with_issues}/{len(prompts)} prompts have issues")
        print_info(f"Total errors: {total_errors}, warnings: {total_warnings}")
    return total_errors


@prompts_app.command("validate")
def validate_prompt(
    prompt_id: str | None = typer.Argument(
        None, help="Prompt ID (all prompts when omitted)"
    ),
):
    """Check placeholders against declared variables"""
    try:
        _, manager = load_manager()
        if prompt_id is None:
            prompts = manager.list_prompts()
            print_info(f"Validating {len(prompts)} prompt(s)")
            if _validate_all(prompts):
                raise typer.Exit(1)
            return

        prompt = manager.get_prompt(prompt_id)
        if prompt is None:
            print_error(f"Prompt with ID {prompt_id} not found")
            raise typer.Exit(1)
        report = prompt.validate_consistency()
        print_consistency_report(report)
        if report.errors:
            raise typer.Exit(1)

    except PromptCraftError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@prompts_app.command("recent")
@prompts_app.command("recents", hidden=True)
def list_recent():
    """List recently used prompts, newest first"""
    try:
        _, manager = load_manager()
        recents = manager.usage_log().recents
        if not recents:
            print_info("No recent prompts")
            return
        prompts = {prompt.id: prompt for prompt in manager.list_prompts()}
        console.print(recents_table(recents, prompts))

    except PromptCraftError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@prompts_app.command("categories")
def list_categories():
    """Show prompt counts per category"""
    try:
        _, manager = load_manager()
        stats = manager.get_category_statistics()

        table = Table()
        table.add_column("Category", style="cyan")
        table.add_column("Prompts", style="white")
        for category in PromptCategory:
            table.add_row(category.value, str(stats[category.value]))
        table.add_row("total", str(stats["total"]), style="bold")
        console.print(table)

    except PromptCraftError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@prompts_app.command("tools")
def list_tools():
    """List the tools exported for each prompt"""
    try:
        config, manager = load_manager()
        service = PromptToolService(manager, config.search.default_limit)

        table = Table()
        table.add_column("Tool", style="cyan")
        table.add_column("Required", style="yellow")
        table.add_column("Description", style="white")
        for tool in service.list_tools():
            required = ", ".join(tool.input_schema.get("required", []))
            table.add_row(tool.name, required, tool.description)
        console.print(table)

    except PromptCraftError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@prompts_app.callback(invoke_without_command=True)
def prompts_callback(ctx: typer.Context):
    """Prompt library commands"""
    # If no command was provided, show help
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()
