"""WAV ingestion and chunk-level energy features."""

from wav_energy.audio import FeatureExtractor, WaveDecoder

__version__ = "0.1.0"
__all__ = ["FeatureExtractor", "WaveDecoder"]
