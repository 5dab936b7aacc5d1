"""WAV decoding and chunk feature extraction modules."""

from wav_energy.audio.config import AnalysisConfig
from wav_energy.audio.decoder import WaveDecoder, WavHeader
from wav_energy.audio.errors import AudioError, AudioFormatError, AudioIOError
from wav_energy.audio.features import ChunkFeatures, FeatureExtractor, FeatureSet, rms
from wav_energy.audio.waveform import Waveform, chunk_waveform_points, waveform_points

__all__ = [
    "AnalysisConfig",
    "AudioError",
    "AudioFormatError",
    "AudioIOError",
    "ChunkFeatures",
    "FeatureExtractor",
    "FeatureSet",
    "WaveDecoder",
    "WavHeader",
    "Waveform",
    "chunk_waveform_points",
    "rms",
    "waveform_points",
]
