# infrastructure/audio/rms_silence_trimmer.py
# Implementation of ISilenceTrimmer using windowed RMS levels in dBFS.

import numpy as np

from application.ports.silence_trimmer_port import ISilenceTrimmer
from wavtrim.silence import TrimResult, trim_samples, window_size_for
from wavtrim.utils import DEFAULT_PARAMS


class RmsSilenceTrimmer(ISilenceTrimmer):
    """Keep everything between the first and last window at or above the threshold."""

    @property
    def trimmer_id(self) -> str:
        return "rms"

    def trim(
        self,
        samples: np.ndarray,
        sample_rate: int,
        params: dict,
    ) -> TrimResult:
        threshold_db: float = params.get("threshold", DEFAULT_PARAMS["threshold"])
        window_ms: float = params.get("window_ms", DEFAULT_PARAMS["window_ms"])

        window_size: int = window_size_for(window_ms, sample_rate)
        return trim_samples(samples, threshold_db=threshold_db, window_size=window_size)
