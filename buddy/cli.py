"""
Typer CLI for command-buddy.

Commands:
    buddy serve                      - Run the API server
    buddy db init                    - Initialize database tables
    buddy commands list git          - List saved git commands
    buddy commands search git commit - Search saved git commands
    buddy commands count git         - Count saved git commands
    buddy quiz git                   - Answer one quiz question in the terminal
    buddy info                       - Show configuration
    buddy version                    - Show version

Usage:
    buddy --help
    buddy quiz docker --explain
"""

from __future__ import annotations

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from config import get_settings
from buddy import __version__
from buddy.logging_config import configure_logging

app = typer.Typer(
    help="command-buddy CLI: learn command-line tools with LLM quizzes",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main_callback() -> None:
    """Configure logging before any command runs."""
    configure_logging(get_settings(), level="WARNING")


def _render_commands(title: str, commands: list) -> None:
    if not commands:
        rprint("[yellow]No commands found[/yellow]")
        return

    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Command", style="cyan")
    table.add_column("Explanation", style="green")

    for command in commands:
        explanation = command.explanation or ""
        if len(explanation) > 60:
            explanation = explanation[:57] + "..."
        table.add_row(command.id[:8], Text(command.command_text), Text(explanation))

    console.print(table)


# ========================================
# Server
# ========================================


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int | None = typer.Option(None, "--port", help="Port (default from config)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "buddy.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


# ========================================
# Database
# ========================================

db_app = typer.Typer(help="Database management")
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """
    Initialize database tables from SQLAlchemy models.

    Safe to run multiple times (idempotent).
    """
    from buddy.db.database import init_db

    init_db()
    rprint("[green]✓[/green] Database initialized!")


# ========================================
# Saved Commands
# ========================================

commands_app = typer.Typer(help="Browse saved commands")
app.add_typer(commands_app, name="commands")


@commands_app.command("list")
def commands_list(tool: str = typer.Argument(..., help="Tool name, e.g. git")) -> None:
    """List all commands saved for a tool."""
    from buddy.commands.command_store import CommandStore
    from buddy.db.database import init_db, session_scope

    init_db()
    with session_scope() as session:
        commands = CommandStore(session).find_by_tool(tool)
        _render_commands(f"{tool} commands ({len(commands)})", commands)


@commands_app.command("search")
def commands_search(
    tool: str = typer.Argument(..., help="Tool name, e.g. git"),
    text: str = typer.Argument(..., help="Text to look for (case-insensitive)"),
) -> None:
    """Search a tool's saved commands."""
    from buddy.commands.command_store import CommandStore
    from buddy.db.database import init_db, session_scope

    init_db()
    with session_scope() as session:
        commands = CommandStore(session).search_by_tool_and_text(tool, text)
        _render_commands(f"{tool} commands matching '{text}' ({len(commands)})", commands)


@commands_app.command("count")
def commands_count(tool: str = typer.Argument(..., help="Tool name, e.g. git")) -> None:
    """Count the commands saved for a tool."""
    from buddy.commands.command_store import CommandStore
    from buddy.db.database import init_db, session_scope

    init_db()
    with session_scope() as session:
        count = CommandStore(session).count_by_tool(tool)
    rprint(f"[bold]{tool}[/bold]: {count} saved command(s)")


# ========================================
# Quiz
# ========================================


@app.command("quiz")
def quiz(
    tool: str = typer.Argument(..., help="Tool to be quizzed on, e.g. docker"),
    explain: bool = typer.Option(False, "--explain", help="Explain your answer after feedback"),
) -> None:
    """Ask one question, check the answer, and offer to save it."""
    from buddy.commands.command_store import CommandStore
    from buddy.db.database import init_db, session_scope
    from buddy.llm import close_llm_gateway, get_llm_gateway
    from buddy.quiz.quiz_service import QuizService

    init_db()
    gateway = get_llm_gateway()
    try:
        with session_scope() as session:
            service = QuizService(gateway, CommandStore(session))

            with console.status(f"Generating a {tool} question..."):
                question = service.generate_question(tool)
            if not question.ok:
                console.print(Text.assemble(("✗ ", "red"), question.text))
                raise typer.Exit(code=1)

            console.print(Panel(Text(question.text), title=f"{tool} quiz", border_style="cyan"))
            answer = Prompt.ask("[bold]Your command[/bold]")

            with console.status("Checking your answer..."):
                feedback = service.evaluate_answer(tool, question.text, answer)
            console.print(Panel(Text(feedback.text), title="Feedback", border_style="green"))

            explanation = ""
            if explain:
                with console.status("Explaining the command..."):
                    explained = service.get_command_explanation(tool, answer)
                console.print(Panel(Text(explained.text), title="Explanation", border_style="blue"))
                if explained.ok:
                    explanation = explained.text

            if Confirm.ask("Save this command?", default=False):
                saved = service.save_command(tool, answer, explanation)
                rprint(f"[green]✓[/green] Saved as {saved.id}")
    finally:
        close_llm_gateway()
        logger.debug("Quiz session closed")


# ========================================
# Info
# ========================================


@app.command("info")
def show_info() -> None:
    """Show configuration."""
    settings = get_settings()

    table = Table(title="command-buddy Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Database URL", settings.database_url.split("@")[-1])
    table.add_row("LLM API Key", "***" if settings.llm_api_key else "Not set")
    table.add_row("LLM URL", settings.llm_api_url)
    table.add_row("LLM Model", settings.llm_model)
    table.add_row("LLM Timeout", f"{settings.llm_timeout_seconds:g}s")
    table.add_row("LLM Failure Mode", settings.llm_failure_mode)
    table.add_row("Log Level", settings.log_level)

    console.print(table)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    rprint(f"[bold]command-buddy[/bold] v{__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
