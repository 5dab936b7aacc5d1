"""Chunk-level energy features: fixed windows, one RMS value per chunk."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from wav_energy.audio.config import AnalysisConfig
from wav_energy.audio.waveform import Waveform, count_full_chunks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChunkFeatures:
    """Features for one chunk. Only RMS for now (room for centroid, spectrum)."""

    rms: float


@dataclass(frozen=True)
class FeatureSet:
    """Per-chunk features in playback order."""

    chunk_seconds: int
    features: Tuple[ChunkFeatures, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", tuple(self.features))

    def __len__(self) -> int:
        return len(self.features)

    def rms_values(self) -> np.ndarray:
        return np.array([f.rms for f in self.features], dtype=np.float32)

    def time_range(self, index: int) -> Tuple[int, int]:
        """(start_sec, end_sec) covered by chunk ``index``."""
        if not 0 <= index < len(self.features):
            raise IndexError(f"chunk {index} out of range (0..{len(self.features) - 1})")
        return index * self.chunk_seconds, (index + 1) * self.chunk_seconds

    def points(self) -> List[Tuple[int, float]]:
        """(chunk_index, rms) pairs for plotting."""
        return [(i, f.rms) for i, f in enumerate(self.features)]


def rms(values: Sequence[float], channels: int = 1) -> float:
    """Root mean square over interleaved frames of ``channels`` values.

    Every individual value counts toward the mean, including a short last
    frame. Empty input or ``channels == 0`` gives 0.0.
    """
    if channels < 0:
        raise ValueError(f"channels must be >= 0, got {channels}")
    values = np.asarray(values, dtype=np.float64).reshape(-1)
    if values.size == 0 or channels == 0:
        return 0.0
    mean_square = np.dot(values, values) / values.size
    return float(np.float32(np.sqrt(mean_square)))


class FeatureExtractor:
    """Splits a mono waveform into fixed-duration chunks and computes RMS.

    Chunk RMS values can be computed on a thread pool (``workers > 1``);
    output order is always chunk order.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None, workers: Optional[int] = None):
        self.config = config or AnalysisConfig()
        self.workers = workers if workers is not None else self.config.workers
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    def extract(
        self,
        samples: Sequence[float],
        sample_rate: int,
        chunk_seconds: int,
    ) -> FeatureSet:
        """Compute one RMS value per full chunk.

        Args:
            samples: Mono samples.
            sample_rate: Samples per second.
            chunk_seconds: Chunk duration in whole seconds.

        Returns:
            FeatureSet with ``len(samples) // (chunk_seconds * sample_rate)``
            entries; empty when a single chunk is longer than the input.
        """
        if chunk_seconds <= 0:
            raise ValueError(f"chunk_seconds must be positive, got {chunk_seconds}")
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")

        samples = np.asarray(samples, dtype=np.float32).reshape(-1)
        samples_per_chunk = chunk_seconds * sample_rate
        total_chunks = count_full_chunks(len(samples), samples_per_chunk)
        chunks = [
            samples[i * samples_per_chunk : (i + 1) * samples_per_chunk]
            for i in range(total_chunks)
        ]

        if self.workers > 1 and total_chunks > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                values = list(pool.map(rms, chunks))
        else:
            values = [rms(chunk, 1) for chunk in chunks]

        dropped = len(samples) - total_chunks * samples_per_chunk
        logger.debug(
            "Extracted %d chunks of %d s (%d trailing samples dropped)",
            total_chunks,
            chunk_seconds,
            dropped,
        )
        return FeatureSet(
            chunk_seconds=chunk_seconds,
            features=tuple(ChunkFeatures(rms=v) for v in values),
        )

    def extract_waveform(
        self,
        waveform: Waveform,
        chunk_seconds: Optional[int] = None,
    ) -> FeatureSet:
        """Extract features from a decoded waveform (default chunk from config)."""
        return self.extract(
            waveform.samples,
            waveform.sample_rate,
            chunk_seconds if chunk_seconds is not None else self.config.chunk_seconds,
        )
