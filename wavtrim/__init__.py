"""Silence trimming for mono 16-bit 16 kHz WAV files."""

__version__ = "0.1.0"
