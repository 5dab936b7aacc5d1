"""Canonical mono waveform and renderer-facing point views."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

# Samples after the last full chunk are discarded; no partial chunk is emitted.
# Chunk i always covers [i * chunk_seconds, (i + 1) * chunk_seconds).
PARTIAL_CHUNK_POLICY = "drop"


def count_full_chunks(n_samples: int, samples_per_chunk: int) -> int:
    """Number of complete chunks in ``n_samples`` (floor division).

    Rounding down is the boundary policy: trailing samples are dropped.
    """
    if samples_per_chunk <= 0:
        raise ValueError(f"samples_per_chunk must be positive, got {samples_per_chunk}")
    return n_samples // samples_per_chunk


@dataclass(frozen=True, eq=False)
class Waveform:
    """Mono float32 samples in [-1, 1] at ``sample_rate`` Hz.

    The sample array is stored read-only; build a new Waveform instead of
    editing one in place.
    """

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        samples = np.array(self.samples, dtype=np.float32).reshape(-1)
        samples.setflags(write=False)
        object.__setattr__(self, "samples", samples)

    @property
    def n_samples(self) -> int:
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return self.n_samples / self.sample_rate

    @property
    def peak_range(self) -> Tuple[float, float]:
        """(min, max) sample value; (0.0, 0.0) when empty."""
        if self.n_samples == 0:
            return 0.0, 0.0
        return float(self.samples.min()), float(self.samples.max())


def waveform_points(
    waveform: Waveform,
    start: int = 0,
    max_samples: Optional[int] = None,
    step: int = 1,
) -> List[Tuple[float, float]]:
    """(time_sec, amplitude) pairs for a window of the waveform.

    Args:
        waveform: Source waveform.
        start: First sample index of the window.
        max_samples: Window length in samples (None = to the end). The window
            is clamped to the end of the waveform.
        step: Keep one sample out of every ``step``.

    Returns:
        Points in time order, times measured from the start of the waveform.
    """
    if start < 0:
        raise ValueError(f"start must be >= 0, got {start}")
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    end = waveform.n_samples if max_samples is None else min(start + max_samples, waveform.n_samples)
    if start >= end:
        return []
    indices = np.arange(start, end, step)
    times = indices / waveform.sample_rate
    return list(zip(times.tolist(), waveform.samples[indices].tolist()))


def chunk_waveform_points(
    waveform: Waveform,
    chunk_seconds: int,
    index: int,
    step: int = 1,
) -> List[Tuple[float, float]]:
    """(time within chunk, amplitude) pairs for one full chunk.

    Only full chunks are addressable, matching the feature extractor's
    boundary policy.
    """
    samples_per_chunk = chunk_seconds * waveform.sample_rate
    total = count_full_chunks(waveform.n_samples, samples_per_chunk)
    if not 0 <= index < total:
        raise IndexError(f"chunk {index} out of range (0..{total - 1})")
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    offsets = np.arange(0, samples_per_chunk, step)
    chunk = waveform.samples[index * samples_per_chunk + offsets]
    times = offsets / waveform.sample_rate
    return list(zip(times.tolist(), chunk.tolist()))
