"""Centralized analysis configuration.

Defaults:
- Chunks: 15 s, non-overlapping, trailing partial chunk dropped
- RMS: computed serially (one worker)
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisConfig:
    """Chunking configuration."""

    # Feature windows
    chunk_seconds: int = 15

    # Threads used for per-chunk RMS (1 = serial)
    workers: int = 1
