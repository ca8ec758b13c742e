"""Utility functions for CLI operations."""

import signal
import sys
import threading

from cli.constants import GREEN, RESET


class ProgressPrinter:
    """Progress callback that redraws a single stdout line per part."""

    def __init__(self, label: str, total: int):
        """
        Initialize the progress printer.

        Args:
            label: Text shown before the counters (e.g. "Uploading a.bin")
            total: Expected byte count, 0 if unknown
        """
        self.label = label
        self.total = total
        self._started = False

    def __call__(self, transferred: int) -> None:
        self._started = True
        if self.total > 0:
            percent = min(transferred / self.total * 100, 100.0)
            sys.stdout.write(
                f"\r{self.label}: {format_file_size(transferred)} / {format_file_size(self.total)} "
                f"({GREEN}{percent:.1f}%{RESET})"
            )
        else:
            sys.stdout.write(f"\r{self.label}: {format_file_size(transferred)}")
        sys.stdout.flush()

    def finish(self) -> None:
        """Terminate the progress line if anything was drawn."""
        if self._started:
            sys.stdout.write('\n')
            sys.stdout.flush()


class InterruptCancellation:
    """
    Turns Ctrl+C into a cooperative cancel request while a transfer runs.

    Usable as the ``cancel`` predicate of a transfer. Outside the main thread
    the SIGINT handler cannot be replaced and the predicate only reflects
    explicit ``request()`` calls.
    """

    def __init__(self):
        self._event = threading.Event()
        self._previous_handler = None

    def request(self) -> None:
        """Ask the running transfer to stop at the next part boundary."""
        self._event.set()

    def __call__(self) -> bool:
        return self._event.is_set()

    def _handle_sigint(self, signum, frame) -> None:
        sys.stdout.write("\nCancelling after the current part...\n")
        sys.stdout.flush()
        self.request()

    def __enter__(self) -> 'InterruptCancellation':
        if threading.current_thread() is threading.main_thread():
            self._previous_handler = signal.signal(signal.SIGINT, self._handle_sigint)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._previous_handler is not None:
            signal.signal(signal.SIGINT, self._previous_handler)
            self._previous_handler = None


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"
