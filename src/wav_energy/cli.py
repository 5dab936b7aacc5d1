"""CLI: decode a WAV file and print per-chunk RMS energy."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from wav_energy.audio import AudioError, FeatureExtractor, WaveDecoder
from wav_energy.audio.config import AnalysisConfig


def build_parser() -> argparse.ArgumentParser:
    defaults = AnalysisConfig()
    parser = argparse.ArgumentParser(description="Chunk-level RMS energy of a WAV file")
    parser.add_argument("path", type=Path, help="Input WAV file")
    parser.add_argument(
        "--chunk-seconds",
        type=int,
        default=defaults.chunk_seconds,
        help=f"Chunk duration in seconds (default: {defaults.chunk_seconds})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=defaults.workers,
        help="Threads for per-chunk RMS (default: 1)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log WAV header and extraction details",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.chunk_seconds <= 0:
        parser.error("--chunk-seconds must be positive")
    if args.workers < 1:
        parser.error("--workers must be >= 1")

    config = AnalysisConfig(chunk_seconds=args.chunk_seconds, workers=args.workers)
    try:
        wave = WaveDecoder().decode(args.path)
    except AudioError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    low, high = wave.peak_range
    print(f"Loaded {wave.n_samples} samples @ {wave.sample_rate} Hz ({wave.duration:.2f} s)")
    print(f"Sample min/max: {low:.6f} / {high:.6f}")

    feature_set = FeatureExtractor(config).extract_waveform(wave)
    print(f"{len(feature_set)} chunks of {feature_set.chunk_seconds} s")
    for index, value in feature_set.points():
        start, end = feature_set.time_range(index)
        print(f"  chunk {index:03d} ({start}-{end} s): rms={value:.6f}")


if __name__ == "__main__":
    main()
