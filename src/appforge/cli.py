"""
appforge.cli - Command Line Interface
=====================================

This module provides the command-line interface for appforge using Typer,
with rich tables and panels for output and questionary for the template
picker.

Architecture
------------
    app (main entry point)
    ├── new        - Generate a new MCP App project
    ├── templates  - List available templates
    ├── validate   - Run the validation checklist on a project
    └── add-tool   - Append tool scaffolding to a project's server.ts

Usage Examples
--------------
Interactive template selection:
    $ appforge new quote-builder -d "Build quotes" -o ~/apps

Non-interactive:
    $ appforge new quote-builder -t form -d "Build quotes" -o ~/apps --yes

Validate:
    $ appforge validate ~/apps/quote-builder
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import questionary
import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from appforge import __version__
from appforge.generator import add_tool_to_project, generate_project
from appforge.models import AddToolOptions, GenerateOptions, Settings
from appforge.registry import TEMPLATES, list_templates
from appforge.validator import CheckStatus, validate_project


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="appforge",
    help="Scaffold and validate MCP App projects.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()

STATUS_STYLES = {
    CheckStatus.PASS: "green",
    CheckStatus.WARN: "yellow",
    CheckStatus.FAIL: "red",
}


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]appforge[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]MCP App project scaffolding[/]",
            border_style="green",
        ))
        raise typer.Exit()


def load_settings(config: Path | None) -> Settings:
    """Load settings from ``config`` or return defaults; exit 1 on bad files."""
    if config is None:
        return Settings()
    try:
        return Settings.from_toml(config)
    except (OSError, ValueError) as e:
        rprint(f"[red]Error:[/] Could not load config {config}: {escape(str(e))}")
        raise typer.Exit(1)


def prompt_template() -> str:
    """
    Interactively prompt for a template.

    Returns
    -------
    str
        The selected template key.
    """
    choices = [
        questionary.Choice(
            title=f"{t.key:<11} - {t.description}",
            value=t.key,
        )
        for t in list_templates()
    ]

    result = questionary.select(
        "Which template?",
        choices=choices,
        default="blank",
    ).ask()

    if result is None:
        raise typer.Abort()

    return result


ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="TOML settings file",
        exists=True,
        dir_okay=False,
    ),
]


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    [bold]appforge[/] - MCP App project scaffolding.

    [bold]Quick Start:[/]

        appforge new my-app -t blank -d "My first app"
    """


# =============================================================================
# New Command
# =============================================================================

@app.command()
def new(
    name: Annotated[str, typer.Argument(help="Project name (kebab-case)")],
    template: Annotated[
        str | None,
        typer.Option("--template", "-t", help="Template: blank, calculator, form, chart"),
    ] = None,
    description: Annotated[
        str,
        typer.Option("--description", "-d", help="What the app does"),
    ] = "An MCP App",
    output_dir: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Directory to create the project in (default: current directory)",
        ),
    ] = None,
    app_version: Annotated[
        str,
        typer.Option("--app-version", help="Version written into package.json"),
    ] = "1.0.0",
    author: Annotated[
        str | None,
        typer.Option("--author", "-a", help="Author name"),
    ] = None,
    config: ConfigOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip prompts, use the blank template"),
    ] = False,
) -> None:
    """
    Generate a new MCP App project.

    [bold]Examples:[/]

        appforge new quote-builder -t form -d "Build quotes"
        appforge new my-chart -t chart -o ~/apps --author "Jane Doe"
    """
    settings = load_settings(config)

    if template is None:
        template = "blank" if yes else prompt_template()

    if template not in TEMPLATES:
        valid = ", ".join(TEMPLATES)
        rprint(f"[red]Error:[/] Invalid template '{template}'. Valid: {valid}")
        raise typer.Exit(1)

    try:
        options = GenerateOptions(
            name=name,
            description=description,
            template=template,
            output_dir=output_dir or Path.cwd(),
            version=app_version,
            author=author,
        )
    except ValidationError as e:
        rprint(f"[red]Error:[/] {escape(str(e))}")
        raise typer.Exit(1)

    result = generate_project(options, settings, verbose=True)

    if not result.success:
        for error in result.errors:
            rprint(f"[red]Error:[/] {error}")
        raise typer.Exit(1)

    console.print()
    console.print(Panel(
        f"[bold green]✨ Project created successfully![/]\n\n"
        f"[dim]Location:[/] {result.project_path}\n\n"
        f"[bold]Next steps:[/]\n"
        f"  cd {result.project_path}\n"
        f"  npm install\n"
        f"  npm run build",
        title="[bold green]Success[/]",
        border_style="green",
    ))
    console.print()
    console.print("[bold]Host configuration:[/]")
    console.print_json(result.config_snippet)
    console.print(
        f"[dim]Replace {settings.node_command} with your Node "
        f"v{settings.min_node_major}+ path ([cyan]which node[/]).[/]"
    )


# =============================================================================
# Templates Command
# =============================================================================

@app.command()
def templates() -> None:
    """List available templates."""
    table = Table(title="Available Templates", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Description")

    for descriptor in list_templates():
        table.add_row(descriptor.key, descriptor.name, descriptor.description)

    console.print(table)


# =============================================================================
# Validate Command
# =============================================================================

@app.command()
def validate(
    path: Annotated[
        Path,
        typer.Argument(
            help="Path to the project to validate",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ] = Path("."),
    config: ConfigOption = None,
) -> None:
    """
    Validate an MCP App project.

    Checks the Node and Bun toolchain, required files, package.json
    dependencies, the build script and build output.

    [bold]Example:[/]

        appforge validate ./quote-builder
    """
    settings = load_settings(config)

    try:
        result = validate_project(path, settings)
    except (FileNotFoundError, NotADirectoryError) as e:
        rprint(f"[red]Error:[/] {escape(str(e))}")
        raise typer.Exit(1)

    console.print()
    console.print(f"[bold]Validating:[/] {result.project_path}")
    console.print()

    table = Table(title="Checks", show_header=True)
    table.add_column("Status", width=6)
    table.add_column("Check", style="cyan")
    table.add_column("Message")

    for check in result.checks:
        style = STATUS_STYLES[check.status]
        table.add_row(f"[{style}]{check.status.value}[/]", check.name, check.message)

    console.print(table)
    console.print()

    verdict_color = "green" if result.valid else "red"
    console.print(Panel(
        f"[bold {verdict_color}]{'Valid' if result.valid else 'Invalid'}[/]\n"
        f"{result.summary}",
        title="[bold]Result[/]",
        border_style=verdict_color,
    ))

    if not result.valid:
        raise typer.Exit(1)


# =============================================================================
# Add Tool Command
# =============================================================================

@app.command("add-tool")
def add_tool(
    path: Annotated[
        Path,
        typer.Argument(
            help="Path to the project",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ],
    tool_name: Annotated[str, typer.Argument(help="Tool name (snake_case)")],
    title: Annotated[str, typer.Option("--title", help="Display title")] = "",
    description: Annotated[
        str,
        typer.Option("--description", "-d", help="What the tool does"),
    ] = "",
) -> None:
    """
    Append tool scaffolding to a project's server.ts.

    The generated handlers are not merged with the existing ones; review
    server.ts afterwards.

    [bold]Example:[/]

        appforge add-tool ./quote-builder send_quote --title "Send Quote"
    """
    try:
        options = AddToolOptions(
            project_path=path,
            tool_name=tool_name,
            tool_title=title or tool_name,
            tool_description=description,
        )
    except ValidationError as e:
        rprint(f"[red]Error:[/] {escape(str(e))}")
        raise typer.Exit(1)

    result = add_tool_to_project(options)

    if not result.success:
        rprint(f"[red]Error:[/] {result.message}")
        raise typer.Exit(1)

    console.print(Panel(
        f"[bold green]{result.message}[/]\n\n"
        "[bold]Next steps:[/]\n"
        "  Review server.ts and merge the tool handlers\n"
        "  npm run build",
        title="[bold]Success[/]",
        border_style="green",
    ))


if __name__ == "__main__":
    app()
