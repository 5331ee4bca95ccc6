import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional

import numpy as np
import soundfile as sf

from application.dto.batch_dto import BatchTrimResultDTO, FileTrimResultDTO
from application.ports.silence_trimmer_port import ISilenceTrimmer
from infrastructure.audio import RmsSilenceTrimmer
from wavtrim.silence import TrimResult, TrimStatus, window_size_for
from wavtrim.utils import (
    CHANNELS,
    DEFAULT_PARAMS,
    PCM_SUBTYPE,
    SAMPLE_RATE,
    find_wav_files,
    get_output_path,
    validate_input_dir,
    validate_param_range,
    validate_threshold,
)

logger = logging.getLogger("wav_trim")

ProgressCallback = Callable[[int, int, str], None]


def read_wav(path: str) -> np.ndarray:
    """
    Decode a mono 16-bit PCM 16 kHz WAV file into an int16 array.

    Raises:
        ValueError: the file is not in the supported layout.
        RuntimeError: libsndfile could not parse the file.
    """
    info = sf.info(path)
    if (
        info.format not in ("WAV", "WAVEX")
        or info.channels != CHANNELS
        or info.samplerate != SAMPLE_RATE
        or info.subtype != PCM_SUBTYPE
    ):
        raise ValueError(
            f"Unsupported WAV format: expected mono 16-bit PCM at 16kHz, "
            f"got {info.channels}ch {info.subtype} at {info.samplerate}Hz.\n"
            f"    → Convert the file first; it is left untouched."
        )

    samples: np.ndarray
    samples, _ = sf.read(path, dtype="int16", always_2d=False)
    return samples


def write_wav(path: str, samples: np.ndarray) -> None:
    """Encode int16 samples as a mono 16-bit PCM 16 kHz WAV file."""
    sf.write(
        path,
        np.asarray(samples, dtype=np.int16),
        SAMPLE_RATE,
        subtype=PCM_SUBTYPE,
        format="WAV",
    )


def trim_wav(
    input_path  : str,
    output_path : str,
    threshold_db: float = DEFAULT_PARAMS["threshold"],
    window_ms   : float = DEFAULT_PARAMS["window_ms"],
    skip_silent : bool = False,
    trimmer     : Optional[ISilenceTrimmer] = None,
) -> TrimResult:
    """
    Full pipeline for one file: decode → trim → encode.

    Args:
        input_path:   Source WAV (mono, 16-bit PCM, 16 kHz).
        output_path:  Destination WAV; parent directories are created.
        threshold_db: Silence threshold in dBFS.
        window_ms:    Analysis window duration in milliseconds.
        skip_silent:  When True, an entirely silent input produces no
                      output file. Otherwise an empty WAV is written.
        trimmer:      Optional ISilenceTrimmer; RmsSilenceTrimmer if omitted.

    Returns:
        The TrimResult for the file.
    """
    trimmer = trimmer or RmsSilenceTrimmer()
    params: dict = {"threshold": threshold_db, "window_ms": window_ms}

    samples: np.ndarray = read_wav(input_path)
    result: TrimResult = trimmer.trim(samples, SAMPLE_RATE, params)

    if result.status is TrimStatus.SILENT:
        logger.warning("%s is entirely below %.1f dBFS", input_path, threshold_db)
        if skip_silent:
            return result

    parent: str = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    write_wav(output_path, result.samples)

    logger.info(
        "%s: %s, %d -> %d samples",
        input_path,
        result.status.value,
        result.num_input_samples,
        len(result.samples),
    )
    return result


def _process_file(
    input_path: str,
    output_path: str,
    threshold_db: float,
    window_ms: float,
    skip_silent: bool,
    trimmer: ISilenceTrimmer,
) -> FileTrimResultDTO:
    dto: FileTrimResultDTO = FileTrimResultDTO(input_path, output_path)
    try:
        result: TrimResult = trim_wav(
            input_path,
            output_path,
            threshold_db=threshold_db,
            window_ms=window_ms,
            skip_silent=skip_silent,
            trimmer=trimmer,
        )
    except (ValueError, OSError, RuntimeError) as exc:
        # sf.LibsndfileError is a RuntimeError
        logger.error("Error processing %s: %s", input_path, exc)
        dto.status = "error"
        dto.error = str(exc)
        return dto

    dto.samples_in = result.num_input_samples
    dto.samples_out = len(result.samples)
    if result.status is TrimStatus.SILENT and skip_silent:
        dto.status = "skipped"
    else:
        dto.status = result.status.value
    return dto


def trim_directory(
    input_dir   : str,
    output_dir  : str,
    threshold_db: float = DEFAULT_PARAMS["threshold"],
    window_ms   : float = DEFAULT_PARAMS["window_ms"],
    skip_silent : bool = False,
    jobs        : int = 1,
    progress_callback: Optional[ProgressCallback] = None,
    trimmer     : Optional[ISilenceTrimmer] = None,
) -> BatchTrimResultDTO:
    """
    Trim every .wav under *input_dir* into a mirrored tree under *output_dir*.

    Outputs keep their relative location and gain a '_trimmed' suffix.
    A file that fails to decode, encode or validate is recorded in the
    result and the run continues.

    Args:
        input_dir:   Root of the input tree (searched recursively).
        output_dir:  Root of the output tree (created if missing).
        threshold_db, window_ms, skip_silent: see trim_wav.
        jobs:        Worker threads; each file runs its own pipeline.
        progress_callback: Optional callback (done, total, input_path)
                     invoked after each file completes.
        trimmer:     Optional ISilenceTrimmer shared by all files. It
                     must be stateless.

    Raises:
        FileNotFoundError / ValueError: bad input directory or
        configuration, raised before any file is touched.
    """
    # ── Validate inputs ──────────────────────────────────────────
    validate_input_dir(input_dir)
    validate_threshold(threshold_db)
    window_size_for(window_ms)
    validate_param_range(jobs, "jobs", 1, 64)

    trimmer = trimmer or RmsSilenceTrimmer()
    os.makedirs(output_dir, exist_ok=True)

    paths: List[str] = find_wav_files(input_dir)
    batch: BatchTrimResultDTO = BatchTrimResultDTO(
        input_dir=input_dir, output_dir=output_dir, total=len(paths)
    )
    logger.info("Found %d WAV files under %s", len(paths), input_dir)

    def _run(path: str) -> FileTrimResultDTO:
        return _process_file(
            path,
            get_output_path(path, input_dir, output_dir),
            threshold_db,
            window_ms,
            skip_silent,
            trimmer,
        )

    def _record(dto: FileTrimResultDTO) -> None:
        batch.results.append(dto)
        if not dto.ok:
            batch.failed_paths.append(dto.input_path)
        if progress_callback:
            progress_callback(len(batch.results), batch.total, dto.input_path)

    if jobs == 1:
        for path in paths:
            _record(_run(path))
    else:
        pool: ThreadPoolExecutor = ThreadPoolExecutor(max_workers=jobs)
        try:
            futures = [pool.submit(_run, path) for path in paths]
            for future in as_completed(futures):
                _record(future.result())
        except KeyboardInterrupt:
            # Drop queued files; only the ones already running finish
            pool.shutdown(wait=False, cancel_futures=True)
            raise
        pool.shutdown()
        # Report in discovery order regardless of completion order
        order: dict = {path: i for i, path in enumerate(paths)}
        batch.results.sort(key=lambda r: order[r.input_path])
        batch.failed_paths.sort(key=order.__getitem__)

    return batch
