"""Main CLI application using Typer."""
import asyncio
import logging
import signal
import sys
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..catalog import catalog_lister, parse_catalog_entry
from ..config import load_config
from ..dispatch import RequestState
from ..errors import (
    ConfigurationError,
    EmptyQueryError,
    SelectionCancelledError,
    ValidationError,
)
from ..platforms import select_platform
from .commands import MULTI_LINE, ExitRequested, handle_command
from .context import AppContext
from .providers import build_context, get_session_store

logger = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="polychat",
    help="Chat with any OpenAI-compatible provider from the terminal",
    add_completion=True,
)

# Console for rich output
console = Console()

LOG_LEVELS = ("debug", "info", "warning", "error")


def setup_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    if level.lower() not in LOG_LEVELS:
        raise typer.BadParameter(f"log level must be one of {', '.join(LOG_LEVELS)}")
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at info
    logging.getLogger("httpx").setLevel(max(logging.WARNING, logging.getLogger().level))


def install_interrupt_handler(state: RequestState) -> Any:
    """Make ctrl+c cancel the in-flight request, or exit when idle.

    Installed before the event loop starts, so asyncio keeps it.

    Returns:
        The previous SIGINT handler
    """
    def _on_sigint(signum, frame):
        if not state.interrupt():
            raise KeyboardInterrupt

    return signal.signal(signal.SIGINT, _on_sigint)


def build_query(words: list[str] | None, piped: str | None) -> str | None:
    """Combine command-line words and piped stdin into one query.

    Returns:
        The query, or None when neither was given

    Raises:
        EmptyQueryError: If input was given but is blank
    """
    if not words and piped is None:
        return None
    parts = [part for part in (piped, " ".join(words or [])) if part and part.strip()]
    if not parts:
        raise EmptyQueryError("query is empty")
    return "\n\n".join(part.strip() for part in parts)


def read_input(con: Console) -> str:
    """Read one prompt; a lone backslash switches to multi-line input."""
    line = con.input("[blue]user: [/blue]")
    if line.strip() != MULTI_LINE:
        return line
    con.print(f"[dim]multi-line mode, finish with {MULTI_LINE} on its own line[/dim]")
    lines = []
    while True:
        line = con.input("")
        if line.strip() == MULTI_LINE:
            return "\n".join(lines)
        lines.append(line)


async def start(
    ctx: AppContext,
    platform: str | None,
    model: str | None,
    option: str | None,
    continue_session: bool,
    search_sessions: bool,
    exact: bool,
) -> None:
    """Connect to the platform and model chosen on the command line."""
    if continue_session or search_sessions:
        if ctx.sessions is None:
            raise ConfigurationError(
                "session saving is disabled; set POLYCHAT_SAVE_SESSIONS=1 or save_sessions in config.json"
            )
        if continue_session:
            session = ctx.sessions.load_latest()
        else:
            session = ctx.sessions.search(ctx.selector, exact=exact)
            if session is None:
                raise SelectionCancelledError("no session selected")
        await ctx.restore(session)
        ctx.console.print(f"[dim]restored {ctx.conversation.turn_count} chats[/dim]")
        return

    if option:
        try:
            platform, model = parse_catalog_entry(option)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        await ctx.connect(platform, model)
        return

    if platform:
        selection = await select_platform(
            ctx.registry,
            platform,
            model,
            ctx.selector,
            catalog_lister(ctx.registry, ctx.config.catalog_timeout),
        )
        await ctx.connect(selection.platform, selection.model, selection.base_url)
        return

    await ctx.connect(ctx.config.default_platform, model or ctx.config.default_model)


async def ask_and_report(ctx: AppContext, text: str) -> None:
    reply = await ctx.ask(text)
    if reply is None:
        ctx.console.print("[yellow]request interrupted[/yellow]")


def run_interactive(ctx: AppContext, runner: asyncio.Runner) -> None:
    """Prompt, dispatch, repeat until the user leaves."""
    ctx.console.print(
        f"[bold cyan]polychat[/bold cyan] [dim]{ctx.platform}/{ctx.model}, "
        f"type !h for help[/dim]\n"
    )
    while True:
        try:
            text = read_input(ctx.console)
        except (EOFError, KeyboardInterrupt):
            ctx.console.print("\n[dim]Goodbye![/dim]")
            return

        if not text.strip():
            continue

        try:
            if text.lstrip().startswith("!") and runner.run(handle_command(ctx, text)):
                continue
            runner.run(ask_and_report(ctx, text))
        except ExitRequested:
            ctx.console.print("[dim]Goodbye![/dim]")
            return
        except Exception as e:
            logger.debug("Turn failed", exc_info=True)
            ctx.console.print(f"[red]Error: {e}[/red]")


@app.command()
def chat(
    query: list[str] | None = typer.Argument(
        None,
        help="Ask once and exit (piped stdin is prepended)"
    ),
    platform: str | None = typer.Option(
        None,
        "--platform",
        "-p",
        help="Platform to use, e.g. groq or anthropic"
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to use"
    ),
    option: str | None = typer.Option(
        None,
        "--option",
        "-o",
        help="Platform and model as provider|model"
    ),
    continue_session: bool = typer.Option(
        False,
        "--continue",
        "-c",
        help="Continue the most recent saved session"
    ),
    search_sessions: bool = typer.Option(
        False,
        "--search-sessions",
        "-s",
        help="Pick a saved session by its content"
    ),
    exact: bool = typer.Option(
        False,
        "--exact",
        help="Use substring instead of fuzzy matching with --search-sessions"
    ),
    clear_sessions: bool = typer.Option(
        False,
        "--clear-sessions",
        help="Delete every saved session and exit"
    ),
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-l",
        help="Log level: debug, info, warning, or error"
    ),
):
    """Chat with an LLM, interactively or one question at a time."""
    setup_logging(log_level)

    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if clear_sessions:
        store = get_session_store(config, force=True)
        removed = store.clear()
        console.print(f"[green]Removed {removed} saved sessions[/green]")
        return

    piped = None if sys.stdin.isatty() else sys.stdin.read()
    try:
        text = build_query(query, piped)
    except EmptyQueryError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    state = RequestState()
    ctx = build_context(config, console=console, state=state)
    previous_handler = install_interrupt_handler(state)
    try:
        with asyncio.Runner() as runner:
            try:
                runner.run(start(ctx, platform, model, option, continue_session, search_sessions, exact))
                if text is not None:
                    runner.run(ask_and_report(ctx, text))
                else:
                    run_interactive(ctx, runner)
            finally:
                runner.run(ctx.close())
    except SelectionCancelledError:
        pass
    except Exception as e:
        logger.debug("Fatal error", exc_info=True)
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        console.print("\n[dim]Goodbye![/dim]")
    finally:
        signal.signal(signal.SIGINT, previous_handler)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
