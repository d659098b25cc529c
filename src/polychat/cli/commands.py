"""Interactive ``!`` commands.

Each handler takes the AppContext explicitly. ``handle_command`` returns
True when the input was a command and must not be sent to the model.
"""

import logging

from rich.markup import escape
from rich.table import Table

from ..catalog import catalog_lister, fetch_all_catalogs, parse_catalog_entry
from ..errors import PolychatError, SelectionCancelledError
from ..platforms import select_platform
from ..platforms.selection import choose
from .context import AppContext

logger = logging.getLogger(__name__)

EXIT = "!q"
HELP = "!h"
CLEAR = "!c"
BACKTRACK = "!b"
MODEL = "!m"
PLATFORM = "!p"
ALL_MODELS = "!o"
SAVE = "!z"
LOAD = "!r"
EXPORT = "!e"
STATE = "!i"
MULTI_LINE = "\\"

HELP_ROWS = [
    (EXIT, "exit interface"),
    (HELP, "help page"),
    (CLEAR, "clear chat history"),
    (BACKTRACK, "backtrack messages"),
    (f"{MODEL} [model]", "switch models"),
    (f"{PLATFORM} [platform]", "switch platforms"),
    (ALL_MODELS, "select from all models"),
    (SAVE, "save session"),
    (LOAD, "load a saved session"),
    (f"{EXPORT} [last]", "export chat(s), or the last response"),
    (STATE, "show current state"),
    (MULTI_LINE, "multi-line input mode"),
    ("ctrl+c", "interrupt a response, exit when idle"),
    ("ctrl+d", "exit completely"),
]


class ExitRequested(Exception):
    """Raised by ``!q`` to leave the run loop."""


def show_help(ctx: AppContext) -> None:
    table = Table(title="Commands")
    table.add_column("Command", style="cyan")
    table.add_column("Description", style="white")
    for command, description in HELP_ROWS:
        table.add_row(escape(command), description)
    ctx.console.print(table)


def show_state(ctx: AppContext) -> None:
    summary = ctx.conversation.state_summary()
    table = Table(title="State", show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Date", summary.date)
    table.add_row("Platform", summary.platform)
    table.add_row("Model", summary.model)
    table.add_row("Base URL", ctx.base_url or "-")
    table.add_row("Chats", str(summary.chats))
    table.add_row("Sessions", "on" if ctx.config.save_sessions else "off")
    ctx.console.print(table)


def clear_history(ctx: AppContext) -> None:
    ctx.conversation.clear()
    ctx.snapshot_id = None
    ctx.console.print("[yellow]chat history cleared[/yellow]")


def backtrack(ctx: AppContext) -> None:
    """Let the user pick a turn to rewind to."""
    choices = ctx.conversation.rewind_choices()
    if not choices:
        ctx.console.print("[yellow]no history to backtrack[/yellow]")
        return
    index = ctx.selector.select([label for _, label in choices], "backtrack: ")
    if index is None:
        return
    removed = ctx.conversation.rewind_to(choices[index][0])
    ctx.autosave()
    ctx.console.print(f"[yellow]removed {removed} entries[/yellow]")


async def switch_model(ctx: AppContext, model: str | None) -> None:
    if not model:
        spec = ctx.registry.get(ctx.platform)
        lister = catalog_lister(ctx.registry, ctx.config.catalog_timeout)
        with ctx.console.status("fetching models", spinner="dots"):
            models = await lister(spec)
        if not models:
            ctx.console.print("[yellow]no models returned[/yellow]")
            return
        model = choose(ctx.selector, models, "model: ", "model")
    ctx.conversation.model = model
    ctx.console.print(f"[dim]model switched to {model}[/dim]")


async def switch_platform(ctx: AppContext, platform: str | None) -> None:
    selection = await select_platform(
        ctx.registry,
        platform,
        None,
        ctx.selector,
        catalog_lister(ctx.registry, ctx.config.catalog_timeout),
    )
    await ctx.connect(selection.platform, selection.model, selection.base_url)
    ctx.console.print(f"[dim]switched to {selection.platform} ({selection.model})[/dim]")


async def pick_from_all_models(ctx: AppContext) -> None:
    with ctx.console.status("fetching models from all platforms", spinner="dots"):
        entries = await fetch_all_catalogs(ctx.registry, ctx.config.catalog_timeout)
    entries.sort()
    platform, model = parse_catalog_entry(choose(ctx.selector, entries, "model: ", "model"))
    await ctx.connect(platform, model)
    ctx.console.print(f"[dim]switched to {platform} ({model})[/dim]")


def save_session(ctx: AppContext) -> None:
    if not ctx.config.save_sessions or ctx.sessions is None:
        ctx.console.print("[yellow]session saving is disabled[/yellow]")
        return
    if ctx.conversation.turn_count == 0:
        ctx.console.print("[yellow]nothing to save[/yellow]")
        return
    ctx.autosave()
    ctx.console.print(f"[dim]session saved ({ctx.snapshot_id})[/dim]")


async def load_session(ctx: AppContext) -> None:
    if not ctx.config.save_sessions or ctx.sessions is None:
        ctx.console.print("[yellow]session saving is disabled[/yellow]")
        return
    session = ctx.sessions.search(ctx.selector)
    if session is None:
        return
    target = await ctx.restore(session)
    ctx.console.print(
        f"[dim]loaded session with {ctx.conversation.turn_count} chats "
        f"({target.provider}/{target.model})[/dim]"
    )


def export(ctx: AppContext, arg: str | None) -> None:
    if arg == "last":
        path = ctx.conversation.export_last_response()
    else:
        choices = ctx.conversation.rewind_choices()
        if not choices:
            ctx.console.print("[yellow]no chat history to export[/yellow]")
            return
        picked = ctx.selector.multiselect([label for _, label in choices], "export: ")
        if not picked:
            return
        path = ctx.conversation.export_history(indices=[choices[i][0] for i in picked])
    ctx.console.print(f"[dim]saved to {path}[/dim]")


async def handle_command(ctx: AppContext, text: str) -> bool:
    """Run ``text`` if it is a command.

    Recoverable errors are printed and the loop continues.

    Raises:
        ExitRequested: On ``!q``
    """
    command, _, arg = text.strip().partition(" ")
    arg = arg.strip() or None

    if command == EXIT:
        raise ExitRequested()

    try:
        if command == HELP:
            show_help(ctx)
        elif command == CLEAR:
            clear_history(ctx)
        elif command == BACKTRACK:
            backtrack(ctx)
        elif command == MODEL:
            await switch_model(ctx, arg)
        elif command == PLATFORM:
            await switch_platform(ctx, arg)
        elif command == ALL_MODELS:
            await pick_from_all_models(ctx)
        elif command == SAVE:
            save_session(ctx)
        elif command == LOAD:
            await load_session(ctx)
        elif command == EXPORT:
            export(ctx, arg)
        elif command == STATE:
            show_state(ctx)
        else:
            return False
    except SelectionCancelledError:
        pass
    except PolychatError as e:
        ctx.console.print(f"[red]Error: {e}[/red]")
    except Exception as e:
        logger.debug("Command %s failed", command, exc_info=True)
        ctx.console.print(f"[red]Error: {e}[/red]")
    return True
