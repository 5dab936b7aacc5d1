"""WAV decoding: header inspection, sample normalization, mono downmix.

Supported encodings:
- PCM integer, 16 / 24 / 32-bit
- IEEE float, 32-bit

Everything else is rejected from the header alone, before sample data is read.
"""

import logging
import struct
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import numpy as np

from wav_energy.audio.errors import AudioFormatError, AudioIOError
from wav_energy.audio.waveform import Waveform

logger = logging.getLogger(__name__)

WAVE_FORMAT_PCM = 0x0001
WAVE_FORMAT_IEEE_FLOAT = 0x0003
WAVE_FORMAT_EXTENSIBLE = 0xFFFE

# (encoding, bits) -> divisor; None means samples are already in [-1, 1]
NORMALIZATION_DIVISORS: Dict[Tuple[str, int], Optional[float]] = {
    ("int", 16): float(np.iinfo(np.int16).max),
    ("int", 24): float(1 << 23),
    ("int", 32): float(np.iinfo(np.int32).max),
    ("float", 32): None,
}

# dtype scipy.io.wavfile returns for each supported encoding
_EXPECTED_DTYPES = {
    ("int", 16): np.dtype(np.int16),
    ("int", 24): np.dtype(np.int32),
    ("int", 32): np.dtype(np.int32),
    ("float", 32): np.dtype(np.float32),
}


@dataclass(frozen=True)
class WavHeader:
    """Stream parameters from the ``fmt `` chunk."""

    format_tag: int
    channels: int
    sample_rate: int
    bits_per_sample: int
    block_align: int
    # declared byte length of the data chunk
    data_size: Optional[int] = None

    @property
    def encoding(self) -> str:
        if self.format_tag == WAVE_FORMAT_PCM:
            return "int"
        if self.format_tag == WAVE_FORMAT_IEEE_FLOAT:
            return "float"
        return "unknown"

    @property
    def is_supported(self) -> bool:
        return (self.encoding, self.bits_per_sample) in NORMALIZATION_DIVISORS

    def describe(self) -> str:
        """Short encoding label, e.g. ``int/24-bit`` or ``format 0x0006/8-bit``."""
        kind = self.encoding if self.encoding != "unknown" else f"format 0x{self.format_tag:04x}"
        return f"{kind}/{self.bits_per_sample}-bit"


def normalize(data: np.ndarray, encoding: str, bits_per_sample: int) -> np.ndarray:
    """Scale raw samples to [-1, 1] as float64.

    ``data`` is what scipy.io.wavfile returns; 24-bit samples arrive
    left-justified in int32 and are shifted back first. The most negative
    integer code maps slightly below -1 and is clipped.
    """
    key = (encoding, bits_per_sample)
    if key not in NORMALIZATION_DIVISORS:
        raise AudioFormatError(
            f"unsupported sample encoding {encoding}/{bits_per_sample}-bit",
            encoding=f"{encoding}/{bits_per_sample}-bit",
        )
    if key == ("int", 24):
        data = np.right_shift(data, 8)
    values = data.astype(np.float64)
    divisor = NORMALIZATION_DIVISORS[key]
    if divisor is not None:
        values /= divisor
    return np.clip(values, -1.0, 1.0)


def downmix(frames: np.ndarray) -> np.ndarray:
    """Average interleaved channels to mono.

    Args:
        frames: (n_frames,) for mono or (n_frames, n_channels).

    Returns:
        (n_frames,) array; mono input is returned unchanged.
    """
    if frames.ndim == 1:
        return frames
    if frames.shape[1] == 1:
        return frames[:, 0]
    return frames.mean(axis=1)


class WaveDecoder:
    """Reads a WAV file into a normalized mono :class:`Waveform`."""

    def read_header(self, path: Union[str, Path]) -> WavHeader:
        """Parse the RIFF/WAVE header: the ``fmt `` chunk and the ``data`` chunk size.

        Raises:
            AudioIOError: File missing, unreadable, or truncated in the header.
            AudioFormatError: Not a RIFF/WAVE file, an invalid ``fmt `` chunk,
                or no ``data`` chunk.
        """
        try:
            with open(path, "rb") as fid:
                return self._parse_header(fid, path)
        except OSError as exc:
            raise AudioIOError(exc.strerror or str(exc), path) from exc

    def _parse_header(self, fid, path) -> WavHeader:
        riff = fid.read(12)
        if len(riff) < 12:
            raise AudioIOError("file ends before the RIFF header", path)
        if riff[:4] == b"RIFF":
            endian = "<"
        elif riff[:4] == b"RIFX":
            endian = ">"
        else:
            raise AudioFormatError(f"not a RIFF file (magic {riff[:4]!r})", path)
        if riff[8:12] != b"WAVE":
            raise AudioFormatError(f"not a WAVE file (form type {riff[8:12]!r})", path)

        header: Optional[WavHeader] = None
        data_size: Optional[int] = None
        while header is None or data_size is None:
            chunk_header = fid.read(8)
            if len(chunk_header) < 8:
                if header is None:
                    raise AudioIOError("file ends before the fmt chunk", path)
                raise AudioFormatError("no data chunk", path, header.describe())
            chunk_id = chunk_header[:4]
            (size,) = struct.unpack(endian + "I", chunk_header[4:])
            if chunk_id == b"fmt ":
                if size < 16:
                    raise AudioFormatError(f"fmt chunk too short ({size} bytes)", path)
                body = fid.read(size)
                if len(body) < size:
                    raise AudioIOError("file ends inside the fmt chunk", path)
                header = self._parse_fmt(body, endian, path)
                fid.seek(size & 1, 1)
                continue
            if chunk_id == b"data":
                data_size = size
            # chunks are word aligned
            fid.seek(size + (size & 1), 1)
        return replace(header, data_size=data_size)

    @staticmethod
    def _parse_fmt(body: bytes, endian: str, path) -> WavHeader:
        format_tag, channels, sample_rate, _byte_rate, block_align, bits = struct.unpack(
            endian + "HHIIHH", body[:16]
        )
        if format_tag == WAVE_FORMAT_EXTENSIBLE:
            if len(body) < 40:
                raise AudioFormatError("WAVE_FORMAT_EXTENSIBLE fmt chunk too short", path)
            # sub-format GUID starts with the actual format tag
            (format_tag,) = struct.unpack(endian + "H", body[24:26])
        if channels == 0:
            raise AudioFormatError("header declares zero channels", path)
        if sample_rate == 0:
            raise AudioFormatError("header declares a zero sample rate", path)
        return WavHeader(
            format_tag=format_tag,
            channels=channels,
            sample_rate=sample_rate,
            bits_per_sample=bits,
            block_align=block_align,
        )

    def decode(self, path: Union[str, Path]) -> Waveform:
        """Decode a WAV file to mono float32 in [-1, 1].

        The header and the samples are read from the same open file.

        Raises:
            AudioIOError: File missing, unreadable, or truncated in the header.
            AudioFormatError: Unsupported encoding, no data chunk, or sample
                data that is misaligned, truncated or undecodable.
        """
        try:
            with open(path, "rb") as fid:
                header = self._parse_header(fid, path)
                logger.debug("WAV header for %s: %s", path, header)
                self._check_layout(header, path)
                fid.seek(0)
                data = self._read_samples(fid, header, path)
        except OSError as exc:
            raise AudioIOError(exc.strerror or str(exc), path) from exc

        mono = downmix(normalize(data, header.encoding, header.bits_per_sample))
        logger.debug(
            "Decoded %d frames x %d channels @ %d Hz from %s",
            len(mono),
            header.channels,
            header.sample_rate,
            path,
        )
        return Waveform(samples=mono.astype(np.float32), sample_rate=header.sample_rate)

    @staticmethod
    def _check_layout(header: WavHeader, path) -> None:
        """Reject unsupported encodings and data chunks that split a frame."""
        if not header.is_supported:
            raise AudioFormatError(
                f"unsupported sample encoding {header.describe()}",
                path,
                encoding=header.describe(),
            )
        frame_bytes = header.channels * header.bits_per_sample // 8
        if header.block_align != frame_bytes:
            raise AudioFormatError(
                f"block align {header.block_align} does not match {header.channels} x "
                f"{header.bits_per_sample}-bit frames",
                path,
                encoding=header.describe(),
            )
        if header.data_size % frame_bytes:
            raise AudioFormatError(
                f"data chunk size {header.data_size} is not a whole number of "
                f"{frame_bytes}-byte frames",
                path,
                encoding=header.describe(),
            )

    @staticmethod
    def _read_samples(fid, header: WavHeader, path) -> np.ndarray:
        """Read the data chunk with scipy and check it against the header."""
        import scipy.io.wavfile as wavfile

        try:
            _, data = wavfile.read(fid)
        except OSError:
            raise
        except Exception as exc:
            raise AudioFormatError(
                f"sample data could not be decoded: {exc}",
                path,
                header.describe(),
            ) from exc

        expected = _EXPECTED_DTYPES[(header.encoding, header.bits_per_sample)]
        if data.dtype.newbyteorder("=") != expected:
            raise AudioFormatError(
                f"sample data decoded as {data.dtype}, expected {expected}",
                path,
                encoding=header.describe(),
            )
        n_channels = 1 if data.ndim == 1 else data.shape[1]
        if n_channels != header.channels:
            raise AudioFormatError(
                f"sample data has {n_channels} channels, header declares {header.channels}",
                path,
                encoding=header.describe(),
            )
        declared_frames = header.data_size // header.block_align
        if data.shape[0] < declared_frames:
            raise AudioFormatError(
                f"data chunk declares {declared_frames} frames, only {data.shape[0]} present",
                path,
                encoding=header.describe(),
            )
        if header.encoding == "float" and not np.all(np.isfinite(data)):
            raise AudioFormatError("non-finite float sample in data", path, header.describe())
        return data
