"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

DEFAULT_SERVICE_URL = "http://localhost:8000"

DEFAULT_CONFIG_DIR = ".filetransfer"
DOWNLOADS_DIR = "downloads"

COMMANDS = [
    "session", "info", "get", "upload", "upload-temp", "update",
    "share", "unshare", "quota", "clear", "exit", "help",
]

# Commands whose arguments are local file paths
PATH_COMMANDS = ("upload", "upload-temp", "update")

STYLE = Style.from_dict(
    {
        "prompt": "#F45935 bold",
        "command": "#0088ff bold",
    }
)

RED_ORANGE = "\033[38;2;244;89;53m"
GREEN = "\033[32m"
RESET = "\033[0m"

WELCOME_TITLE = f"{RED_ORANGE}FileTransfer CLI{RESET} - chunked upload and download"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "ft> "

HELP_TEXT = """Available commands:
  session <session-id>              Store the session id used for transfers
  info <file-id>                    Show file metadata
  get <file-id> [output_path]       Download file (defaults to downloads/<name>)
  upload <path> [--public]          Upload a new file
  upload-temp <path>                Upload a temporary file
  update <file-id> <path>           Replace the content of an existing file
  share <file-id>                   Share a file and print its token
  unshare <file-id>                 Revoke a file's share token
  quota                             Show the upload quota
  clear                             Clear screen and redisplay welcome message
  help                              Show this help
  exit                              Exit REPL

Press Ctrl+C during a transfer to cancel it after the current part.
Examples:
  session 3f2b8c1e-7d4a-4f43-9e59-0c1f4a6d2b10
  upload report.pdf --public
  get 42 downloads/copy.pdf
  update 42 report-v2.pdf
  share 42"""
