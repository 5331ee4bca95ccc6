# application/ports/silence_trimmer_port.py
# Port interface for silence trimming.
# Domain layer — must not import infrastructure or adapter code.

from abc import ABC, abstractmethod

import numpy as np

from wavtrim.silence import TrimResult


class ISilenceTrimmer(ABC):
    """Abstract base class for leading/trailing silence removal."""

    @property
    @abstractmethod
    def trimmer_id(self) -> str:
        """Unique identifier for this trimmer (e.g., 'rms')."""
        ...

    @abstractmethod
    def trim(
        self,
        samples: np.ndarray,    # shape: (N,) int16 mono
        sample_rate: int,
        params: dict,
    ) -> TrimResult:
        """
        Remove leading and trailing silence from the samples.

        Args:
            samples:     Mono audio as (num_frames,) int16 array.
            sample_rate: Sample rate in Hz.
            params:      Trimmer parameters dict.

        Returns:
            TrimResult with the retained samples and its classification.
        """
        ...
