# wavtrim/utils.py
# Shared constants, configuration validation and path helpers.

import math
import numbers
import os
from typing import List

# Accepted PCM layout: mono, 16-bit signed, 16 kHz
SAMPLE_RATE: int = 16000
SAMPLE_WIDTH_BITS: int = 16
CHANNELS: int = 1
PCM_SUBTYPE: str = "PCM_16"

# Range of a 16-bit signed sample; FULL_SCALE is its largest magnitude
PCM16_MIN: int = -(1 << (SAMPLE_WIDTH_BITS - 1))
PCM16_MAX: int = (1 << (SAMPLE_WIDTH_BITS - 1)) - 1
FULL_SCALE: float = float(-PCM16_MIN)

SUPPORTED_INPUT_FORMATS: set[str] = {".wav"}
OUTPUT_SUFFIX: str = "_trimmed"

# Default parameters
DEFAULT_PARAMS: dict[str, float] = {
    "threshold": -50.0,
    "window_ms": 50.0,
    "jobs": 1,
}


# Validation helpers
def validate_input_dir(path: str) -> None:
    """Raise FileNotFoundError / ValueError if the input directory is invalid."""
    if not os.path.exists(path):
        raise FileNotFoundError(
            f"Input directory does not exist: '{path}'.\n"
            f"    → Check the path and try again."
        )
    if not os.path.isdir(path):
        raise ValueError(
            f"Input path is not a directory: '{path}'.\n"
            f"    → Provide a directory that contains .wav files."
        )


def validate_threshold(value: float) -> None:
    """Raise ValueError unless the dBFS threshold is a finite number."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(
            f"Parameter 'threshold' must be a number in dBFS. Got: {value!r}.\n"
            f"    → Example: --threshold -45"
        )
    if not math.isfinite(value):
        raise ValueError(
            f"Parameter 'threshold' must be a finite number. Got: {value}.\n"
            f"    → Use a negative dBFS value such as -50."
        )


def validate_window_size(value: int) -> None:
    """Raise ValueError unless the window size is a positive sample count."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
        raise ValueError(
            f"Parameter 'window_size' must be a positive number of samples. Got: {value!r}.\n"
            f"    → 800 samples is 50 ms at 16 kHz."
        )


def validate_window_ms(value: float) -> None:
    """Raise ValueError unless the window duration is positive and finite."""
    if (
        isinstance(value, bool)
        or not isinstance(value, numbers.Real)
        or not math.isfinite(value)
        or value <= 0
    ):
        raise ValueError(
            f"Parameter 'window_ms' must be a positive duration in milliseconds. Got: {value!r}.\n"
            f"    → Example: --window-ms 50"
        )


def validate_param_range(
    value: float, name: str, min_val: float, max_val: float
) -> None:
    """Raise ValueError if a numeric parameter is out of its valid range."""
    if not (min_val <= value <= max_val):
        raise ValueError(
            f"Parameter '{name}' must be between {min_val} and {max_val}. Got: {value}.\n"
            f"    → Adjust the value to be within the valid range."
        )


# Path helpers

def is_wav_file(path: str) -> bool:
    """True when the path ends in a lowercase .wav extension."""
    return os.path.splitext(path)[1] in SUPPORTED_INPUT_FORMATS


def find_wav_files(input_dir: str) -> List[str]:
    """
    Recursively collect .wav files under *input_dir*, sorted by path.

    Symlinked directories are not followed.
    """
    found: List[str] = []
    for root, dirs, files in os.walk(input_dir, followlinks=False):
        dirs.sort()
        for name in sorted(files):
            path: str = os.path.join(root, name)
            if is_wav_file(name) and os.path.isfile(path):
                found.append(path)
    return found


def get_output_path(
    input_path: str,
    input_dir: str,
    output_dir: str,
    suffix: str = OUTPUT_SUFFIX,
) -> str:
    """
    Mirror *input_path* from *input_dir* into *output_dir* with a suffix.

    Example: in/a/b/take.wav, in, out  →  out/a/b/take_trimmed.wav
    """
    rel_path: str = os.path.relpath(input_path, input_dir)
    base: str
    ext: str
    base, ext = os.path.splitext(rel_path)
    return os.path.join(output_dir, f"{base}{suffix}{ext}")
