# src/taskboard/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from ..api.errors import GatewayError, friendly_error_message
from ..cli.commands import CommandRegistry
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPT = "tasks> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def handle_line(
    state: AppState,
    line: str,
    *,
    registry: CommandRegistry = command_registry,
    emit: Callable[[str], None] | None = None,
) -> str:
    """
    Run one console line and return what should be printed.

    Plain text (no leading slash) is a shortcut for /list <text>, so typing
    "done" switches to the DONE tab. Gateway failures are turned into a
    user-visible message; anything else is logged as an internal error.
    """
    text = line.strip()
    if not text.startswith("/"):
        text = f"/list {text}"

    try:
        reply = await registry.handle(state, text, emit=emit)
    except GatewayError as e:
        msg = friendly_error_message(e)
        logger.info("Gateway error: %s", msg)
        return f"[API] {msg}"
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."

    return reply if reply is not None else ""


async def run_console_loop(state: AppState, *, read_line: Callable[[str], str] = input) -> None:
    """
    Interactive REPL. Input is read in a worker thread so pending fetches
    keep running on the event loop while the prompt waits.
    """
    logger.info("Console connector started (offline=%s).", state.offline)
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    print(await handle_line(state, "/list", emit=_print_ts), flush=True)

    while True:
        try:
            user_input = (await asyncio.to_thread(read_line, PROMPT)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = await handle_line(state, user_input, emit=_print_ts)
        if reply:
            print(reply, flush=True)

    logger.info("Console connector finished.")
