# wavtrim/printer.py
# Centralized user-facing output for the wav-trim CLI.
# Run results go to stdout, errors to stderr.

import os
import sys
from typing import Optional

from application.dto.batch_dto import BatchTrimResultDTO


class OutputPrinter:
    """
    Output formatter for the wav-trim CLI.

    - Run summary:  one headline plus an aligned detail block
    - Errors:       stderr, never suppressed by --quiet
    - Color:        optional, disabled by --no-color or NO_COLOR
    """

    SYMBOLS : dict[str, str] = {
        "success" : "✅",
        "error"   : "❌",
        "warning" : "⚠️ ",
        "hint"    : "→",
    }

    COLORS : dict[str, str] = {
        "green"  : "32",
        "red"    : "31",
        "yellow" : "33",
        "cyan"   : "36",
        "dim"    : "90",
    }

    COL_WIDTH : int = 10

    def __init__(self, quiet : bool = False, no_color : bool = False) -> None:
        self.quiet    : bool = quiet
        self.no_color : bool = no_color or bool(os.environ.get("NO_COLOR", ""))

    def _colorize(self, text : str, code : str) -> str:
        if self.no_color:
            return text
        return f"\033[{code}m{text}\033[0m"

    def _hint(self, hint : str) -> str:
        return self._colorize(f"{self.SYMBOLS['hint']} {hint}", self.COLORS["cyan"])

    # ── Messages ─────────────────────────────────────────────────

    def error(self, message : str, hint : Optional[str] = None) -> None:
        """Print an error to stderr with an optional fix hint."""
        symbol : str = self._colorize(self.SYMBOLS["error"], self.COLORS["red"])
        msg    : str = self._colorize(message, self.COLORS["red"])
        print(f"{symbol}  {msg}", file=sys.stderr)
        if hint:
            print(f"    {self._hint(hint)}", file=sys.stderr)

    def warning(self, message : str, hint : Optional[str] = None) -> None:
        if self.quiet:
            return
        symbol : str = self._colorize(self.SYMBOLS["warning"], self.COLORS["yellow"])
        msg    : str = self._colorize(message, self.COLORS["yellow"])
        print(f"{symbol} {msg}")
        if hint:
            print(f"    {self._hint(hint)}")

    # ── Run summary ──────────────────────────────────────────────

    def summary(self, batch : BatchTrimResultDTO) -> None:
        """
        Print the final count of processed files.

        The 'Processed N WAV files.' line is printed even in quiet mode;
        only the detail block is suppressed.
        """
        headline : str = f"Processed {batch.processed} WAV files."
        level : str = "warning" if batch.failed else "success"
        color : str = self.COLORS["yellow"] if batch.failed else self.COLORS["green"]
        symbol : str = self._colorize(self.SYMBOLS[level], color)
        print(f"{symbol}  {self._colorize(headline, color)}")

        if self.quiet:
            return

        details : dict[str, str] = {
            "Trimmed"   : str(batch.count("trimmed")),
            "Untrimmed" : str(batch.count("untrimmed")),
            "Silent"    : str(batch.silent),
            "Failed"    : str(batch.failed),
            "Output"    : batch.output_dir,
        }
        for key, value in details.items():
            dim_key : str = self._colorize(f"{key:<{self.COL_WIDTH}}", self.COLORS["dim"])
            print(f"    {dim_key}: {value}")
