#!/usr/bin/env python3
"""
wav-trim CLI
Recursively trim leading and trailing silence from mono 16-bit 16 kHz WAV files.

Usage:
    python main.py recordings/ trimmed/
    python main.py recordings/ trimmed/ --threshold -40
    python main.py recordings/ trimmed/ -t -45 --window-ms 20 --jobs 4
"""

import argparse
import logging
import sys
from typing import List, Optional

from tqdm import tqdm

from application.dto.batch_dto import BatchTrimResultDTO
from wavtrim.core import trim_directory
from wavtrim.printer import OutputPrinter
from wavtrim.utils import DEFAULT_PARAMS, OUTPUT_SUFFIX


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="wav-trim",
        description="Recursively trims silence from the start and end of WAV files in a directory.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  python main.py recordings/ trimmed/
  python main.py recordings/ trimmed/ --threshold -40 --skip-silent

Only mono 16-bit PCM WAV files at 16 kHz are processed; anything else is
reported and skipped. Outputs mirror the input tree with a '{OUTPUT_SUFFIX}' suffix.

Threshold guide:
  -60  keep faint room tone | -50 = default | -35 = trim quiet breaths too
        """,
    )

    # Positional arguments
    parser.add_argument(
        "input_dir",
        metavar="INPUT_DIR",
        help="Directory containing WAV files (processed recursively).",
    )
    parser.add_argument(
        "output_dir",
        metavar="OUTPUT_DIR",
        help="Directory for trimmed WAV files (mirrors the input structure).",
    )

    # Detection parameters
    det_group = parser.add_argument_group("Detection Parameters")
    det_group.add_argument(
        "--threshold",
        "-t",
        type=float,
        default=DEFAULT_PARAMS["threshold"],
        metavar="DBFS",
        help=(
            f"Silence threshold in dBFS (default: {DEFAULT_PARAMS['threshold']}); "
            "higher values trim more aggressively."
        ),
    )
    det_group.add_argument(
        "--window-ms",
        "-w",
        type=float,
        default=DEFAULT_PARAMS["window_ms"],
        metavar="MS",
        help=f"Analysis window length in milliseconds (default: {DEFAULT_PARAMS['window_ms']:g}).",
    )

    # Output options
    out_group = parser.add_argument_group("Output Options")
    out_group.add_argument(
        "--skip-silent",
        action="store_true",
        help="Do not write an output file for inputs that are entirely silent.",
    )
    out_group.add_argument(
        "--jobs",
        "-j",
        type=int,
        default=DEFAULT_PARAMS["jobs"],
        metavar="N",
        help="Number of files processed in parallel (default: 1).",
    )
    out_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress the progress bar, warnings and the summary details.",
    )
    out_group.add_argument(
        "--no-color",
        "-n",
        action="store_true",
        help="Disable colored output (also auto-disabled when NO_COLOR env var is set).",
    )
    out_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every processed file.",
    )

    return parser


def configure_logging(quiet: bool, verbose: bool) -> None:
    level: int = logging.WARNING
    if verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser: argparse.ArgumentParser = build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    configure_logging(args.quiet, args.verbose)
    printer: OutputPrinter = OutputPrinter(
        quiet=args.quiet,
        no_color=args.no_color,
    )

    try:
        batch: BatchTrimResultDTO
        if args.quiet:
            batch = trim_directory(
                args.input_dir,
                args.output_dir,
                threshold_db=args.threshold,
                window_ms=args.window_ms,
                skip_silent=args.skip_silent,
                jobs=args.jobs,
            )
        else:
            with tqdm(desc="Trimming", unit="file") as pbar:

                def cli_callback(done: int, total: int, path: str) -> None:
                    pbar.total = total
                    pbar.update(1)

                batch = trim_directory(
                    args.input_dir,
                    args.output_dir,
                    threshold_db=args.threshold,
                    window_ms=args.window_ms,
                    skip_silent=args.skip_silent,
                    jobs=args.jobs,
                    progress_callback=cli_callback,
                )

    except (FileNotFoundError, ValueError) as exc:
        printer.error(str(exc))
        return 1
    except OSError as exc:
        printer.error(f"Could not create output directory: {exc}")
        return 1
    except KeyboardInterrupt:
        printer.warning("Trimming cancelled.", hint="Files already written were kept.")
        return 130

    if batch.total == 0:
        printer.warning(
            f"No WAV files found under '{args.input_dir}'.",
            hint="Check the directory, files must end in .wav.",
        )
    printer.summary(batch)
    return 0


if __name__ == "__main__":
    sys.exit(main())
