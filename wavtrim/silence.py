"""
Silence detection and trimming over raw 16-bit PCM samples.

The pipeline has three stages, each a plain function over values created
fresh for one file:

    analyze_windows   → per-window RMS level in dBFS (lazy)
    locate_boundaries → first/last window at or above the threshold
    apply_trim        → copy of the retained region

`trim_samples` runs all three and classifies the outcome.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence, Union

import numpy as np

from wavtrim.utils import (
    DEFAULT_PARAMS,
    FULL_SCALE,
    PCM16_MAX,
    PCM16_MIN,
    SAMPLE_RATE,
    validate_threshold,
    validate_window_ms,
    validate_window_size,
)

SILENT_DBFS: float = float("-inf")

Samples = Union[np.ndarray, Sequence[int]]


class TrimStatus(Enum):
    """Outcome of trimming one sample sequence."""

    TRIMMED = "trimmed"
    UNTRIMMED = "untrimmed"
    SILENT = "silent"


@dataclass(frozen=True)
class TrimBoundaries:
    """Retained region [start, end) in sample indices."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not (0 <= self.start <= self.end):
            raise ValueError(
                f"Invalid trim boundaries: start={self.start}, end={self.end}."
            )

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


# Fully silent input collapses to the empty region at the origin
EMPTY_BOUNDARIES: TrimBoundaries = TrimBoundaries(0, 0)


@dataclass(frozen=True)
class TrimResult:
    """Retained samples plus how they were obtained."""

    samples: np.ndarray
    boundaries: TrimBoundaries
    status: TrimStatus
    num_input_samples: int

    @property
    def removed(self) -> int:
        return self.num_input_samples - len(self.samples)


# ── Window Analyzer ─────────────────────────────────────────────

def window_size_for(window_ms: float, sample_rate: int = SAMPLE_RATE) -> int:
    """
    Convert a window duration to a sample count.

    50 ms at 16 kHz is 800 samples. Durations shorter than one sample
    period are rejected.
    """
    validate_window_ms(window_ms)
    window_size: int = int(round(sample_rate * window_ms / 1000.0))
    if window_size < 1:
        raise ValueError(
            f"Window of {window_ms} ms is shorter than one sample at {sample_rate} Hz.\n"
            f"    → Use a longer --window-ms."
        )
    return window_size


DEFAULT_WINDOW_SIZE: int = window_size_for(DEFAULT_PARAMS["window_ms"])


def rms_dbfs(window: np.ndarray) -> float:
    """
    RMS level of a block of int16 samples in dBFS.

    Samples are normalized by 32768 before squaring. An all-zero (or
    empty) block has RMS 0 and maps to -inf instead of raising.
    """
    if len(window) == 0:
        return SILENT_DBFS

    normalized: np.ndarray = np.asarray(window, dtype=np.float64) / FULL_SCALE
    rms: float = float(np.sqrt(np.mean(normalized * normalized)))
    if rms == 0.0:
        return SILENT_DBFS
    return 20.0 * math.log10(rms)


class WindowAmplitudes:
    """
    Lazy per-window dBFS levels for one sample buffer.

    Windows are non-overlapping, tile the buffer left to right, and the
    last one is truncated when the length is not a multiple of
    window_size. Values are computed on access, so a forward scan that
    stops early never touches the tail. Iterating again starts over.
    """

    def __init__(self, samples: np.ndarray, window_size: int) -> None:
        self._samples: np.ndarray = samples
        self.window_size: int = window_size
        self.num_samples: int = len(samples)

    def __len__(self) -> int:
        return -(-self.num_samples // self.window_size)

    def window_start(self, index: int) -> int:
        return index * self.window_size

    def window_end(self, index: int) -> int:
        return min((index + 1) * self.window_size, self.num_samples)

    def __getitem__(self, index: int) -> float:
        count: int = len(self)
        if index < 0:
            index += count
        if not 0 <= index < count:
            raise IndexError(f"window index {index} out of range for {count} windows")
        return rms_dbfs(self._samples[self.window_start(index):self.window_end(index)])

    def __iter__(self) -> Iterator[float]:
        for index in range(len(self)):
            yield self[index]

    def __reversed__(self) -> Iterator[float]:
        for index in reversed(range(len(self))):
            yield self[index]


def analyze_windows(samples: Samples, window_size: int) -> WindowAmplitudes:
    """
    Build the window level sequence for a mono int16 buffer.

    Args:
        samples:     1-D sequence of 16-bit signed samples.
        window_size: Samples per window (800 = 50 ms at 16 kHz).

    Returns:
        WindowAmplitudes, empty when *samples* is empty.
    """
    validate_window_size(window_size)
    return WindowAmplitudes(_as_pcm16(samples), window_size)


# ── Boundary Locator ────────────────────────────────────────────

def locate_boundaries(
    amplitudes: WindowAmplitudes, threshold_db: float
) -> TrimBoundaries:
    """
    Find the retained region from the window levels.

    A window whose level is >= threshold_db counts as sound. The region
    starts at the first sample of the first such window and ends after
    the last sample of the last one. When no window qualifies the
    result is EMPTY_BOUNDARIES (0, 0).
    """
    validate_threshold(threshold_db)

    first: int = -1
    for index, level in enumerate(amplitudes):
        if level >= threshold_db:
            first = index
            break
    if first < 0:
        return EMPTY_BOUNDARIES

    last: int = first
    for offset, level in enumerate(reversed(amplitudes)):
        index = len(amplitudes) - 1 - offset
        if index <= first:
            break
        if level >= threshold_db:
            last = index
            break

    start: int = amplitudes.window_start(first)
    end: int = min(amplitudes.window_end(last), amplitudes.num_samples)
    if start >= end:
        return EMPTY_BOUNDARIES
    return TrimBoundaries(start, end)


# ── Trim Executor ───────────────────────────────────────────────

def apply_trim(samples: Samples, boundaries: TrimBoundaries) -> np.ndarray:
    """Return a copy of samples[start:end]; never a view into *samples*."""
    buffer: np.ndarray = _as_pcm16(samples)
    if boundaries.end > len(buffer):
        raise ValueError(
            f"Trim end {boundaries.end} exceeds sample count {len(buffer)}."
        )
    return buffer[boundaries.start:boundaries.end].copy()


def trim_samples(
    samples: Samples,
    threshold_db: float = DEFAULT_PARAMS["threshold"],
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> TrimResult:
    """
    Trim leading and trailing silence from one mono int16 buffer.

    Args:
        samples:      1-D sequence of 16-bit signed samples at 16 kHz.
        threshold_db: Windows at or above this RMS level (dBFS) are kept.
        window_size:  Samples per analysis window.

    Returns:
        TrimResult whose status is SILENT when nothing reaches the
        threshold (including empty input), UNTRIMMED when the whole
        buffer is kept, TRIMMED otherwise.

    Raises:
        ValueError: invalid configuration or a non 1-D buffer. Raised
                    before any window is analyzed.
    """
    validate_threshold(threshold_db)
    validate_window_size(window_size)
    buffer: np.ndarray = _as_pcm16(samples)

    amplitudes: WindowAmplitudes = WindowAmplitudes(buffer, window_size)
    boundaries: TrimBoundaries = locate_boundaries(amplitudes, threshold_db)
    retained: np.ndarray = apply_trim(buffer, boundaries)

    status: TrimStatus
    if boundaries.is_empty:
        status = TrimStatus.SILENT
    elif boundaries.start == 0 and boundaries.end == len(buffer):
        status = TrimStatus.UNTRIMMED
    else:
        status = TrimStatus.TRIMMED

    return TrimResult(
        samples=retained,
        boundaries=boundaries,
        status=status,
        num_input_samples=len(buffer),
    )


def _as_pcm16(samples: Samples) -> np.ndarray:
    buffer: np.ndarray = np.asarray(samples)
    if buffer.ndim != 1:
        raise ValueError(
            f"Expected a 1-D mono sample buffer, got shape {buffer.shape}.\n"
            f"    → Only mono audio is supported."
        )
    if buffer.size == 0:
        return buffer.astype(np.int16)
    if buffer.dtype.kind not in "iu":
        raise ValueError(
            f"Expected 16-bit integer PCM samples, got dtype {buffer.dtype}.\n"
            f"    → Decode the audio with dtype='int16' instead of floats."
        )
    if buffer.dtype != np.int16:
        low: int = int(buffer.min())
        high: int = int(buffer.max())
        if low < PCM16_MIN or high > PCM16_MAX:
            raise ValueError(
                f"Sample values {low}..{high} are outside the 16-bit range "
                f"{PCM16_MIN}..{PCM16_MAX}.\n"
                f"    → Only 16-bit PCM audio is supported."
            )
        buffer = buffer.astype(np.int16)
    return buffer
