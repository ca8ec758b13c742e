"""Command parser for CLI input."""

import shlex

from cli.models import (
    CommandRequest,
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


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name, args = tokens[0], tokens[1:]

    parsers = {
        "session": _parse_session,
        "info": _parse_info,
        "get": _parse_get,
        "upload": _parse_upload,
        "upload-temp": _parse_upload_temp,
        "update": _parse_update,
        "share": _parse_share,
        "unshare": _parse_unshare,
        "quota": _parse_quota,
    }

    parser = parsers.get(command_name)
    if parser is None:
        raise ParseError(f"Unknown command: {command_name}")
    return parser(args)


def _parse_file_id(value: str) -> int:
    """Parse a positive file id."""
    try:
        file_id = int(value)
    except ValueError:
        raise ParseError(f"Invalid file id: {value}")
    if file_id <= 0:
        raise ParseError(f"File id must be positive: {value}")
    return file_id


def _parse_session(args: list[str]) -> SessionCommand:
    """Parse 'session <session-id>' command."""
    if len(args) != 1:
        raise ParseError("session requires exactly 1 argument: <session-id>")
    return SessionCommand(session_id=args[0])


def _parse_info(args: list[str]) -> InfoCommand:
    """Parse 'info <file-id>' command."""
    if len(args) != 1:
        raise ParseError("info requires exactly 1 argument: <file-id>")
    return InfoCommand(file_id=_parse_file_id(args[0]))


def _parse_get(args: list[str]) -> GetCommand:
    """Parse 'get <file-id> [output_path]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("get requires 1 or 2 arguments: <file-id> [output_path]")

    output_path = args[1] if len(args) > 1 else None
    return GetCommand(file_id=_parse_file_id(args[0]), output_path=output_path)


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path> [--public]' command."""
    is_public = "--public" in args
    paths = [arg for arg in args if arg != "--public"]

    if len(paths) != 1:
        raise ParseError("upload requires exactly 1 path: <path> [--public]")
    return UploadCommand(path=paths[0], is_public=is_public)


def _parse_upload_temp(args: list[str]) -> UploadTempCommand:
    """Parse 'upload-temp <path>' command."""
    if len(args) != 1:
        raise ParseError("upload-temp requires exactly 1 argument: <path>")
    return UploadTempCommand(path=args[0])


def _parse_update(args: list[str]) -> UpdateCommand:
    """Parse 'update <file-id> <path>' command."""
    if len(args) != 2:
        raise ParseError("update requires exactly 2 arguments: <file-id> <path>")
    return UpdateCommand(file_id=_parse_file_id(args[0]), path=args[1])


def _parse_share(args: list[str]) -> ShareCommand:
    """Parse 'share <file-id>' command."""
    if len(args) != 1:
        raise ParseError("share requires exactly 1 argument: <file-id>")
    return ShareCommand(file_id=_parse_file_id(args[0]))


def _parse_unshare(args: list[str]) -> UnshareCommand:
    """Parse 'unshare <file-id>' command."""
    if len(args) != 1:
        raise ParseError("unshare requires exactly 1 argument: <file-id>")
    return UnshareCommand(file_id=_parse_file_id(args[0]))


def _parse_quota(args: list[str]) -> QuotaCommand:
    """Parse 'quota' command."""
    if args:
        raise ParseError("quota takes no arguments")
    return QuotaCommand()
