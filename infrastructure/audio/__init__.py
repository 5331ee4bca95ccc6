from .rms_silence_trimmer import RmsSilenceTrimmer

__all__ = [
    "RmsSilenceTrimmer",
]
