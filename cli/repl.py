"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from cli.commands import (
    handle_get,
    handle_info,
    handle_quota,
    handle_session,
    handle_share,
    handle_unshare,
    handle_update,
    handle_upload,
    handle_upload_temp,
)
from cli.completer import TransferCompleter
from cli.constants import HELP_TEXT, PROMPT_TEXT, STYLE, WELCOME_HELP, WELCOME_TITLE
from cli.models import (
    GetCommand,
    InfoCommand,
    QuotaCommand,
    SessionCommand,
    ShareCommand,
    UnshareCommand,
    UpdateCommand,
    UploadCommand,
    UploadTempCommand,
)
from cli.parser import ParseError, parse_command

HANDLERS = {
    SessionCommand: handle_session,
    InfoCommand: handle_info,
    GetCommand: handle_get,
    UploadCommand: handle_upload,
    UploadTempCommand: handle_upload_temp,
    UpdateCommand: handle_update,
    ShareCommand: handle_share,
    UnshareCommand: handle_unshare,
    QuotaCommand: handle_quota,
}


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def dispatch_command(cmd_obj) -> str:
    """Dispatch parsed command to appropriate handler."""
    handler = HANDLERS.get(type(cmd_obj))
    if handler is None:
        return f"Unknown command type: {type(cmd_obj)}"
    return handler(cmd_obj)


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=TransferCompleter(), history=history, style=STYLE
    )

    clear_screen()
    show_welcome()

    while True:
        try:
            user_input = session.prompt([("class:prompt", PROMPT_TEXT)])
            command = user_input.strip()

            if not command:
                continue

            if command == "exit":
                print("Goodbye!")
                break

            if command == "help":
                print(HELP_TEXT)
                continue

            if command == "clear":
                clear_screen()
                show_welcome()
                continue

            cmd_obj = parse_command(user_input)
            print(dispatch_command(cmd_obj))

        except ParseError as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break
