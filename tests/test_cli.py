"""Tests for the wav-energy command line driver."""

from __future__ import annotations

import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

import numpy as np
import scipy.io.wavfile as wavfile

from wav_energy.cli import main


class TestCLI(unittest.TestCase):
    """End to end: WAV file -> printed chunk table."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            main(argv)
        return out.getvalue(), err.getvalue()

    def test_prints_chunk_table(self) -> None:
        path = self.tmp / "tone.wav"
        sr = 1000
        left = np.full(sr * 7, 16384, dtype=np.int16)
        stereo = np.stack([left, left], axis=1)
        wavfile.write(path, sr, stereo)

        out, _ = self._run([str(path), "--chunk-seconds", "3", "--workers", "2"])
        self.assertIn(f"Loaded {sr * 7} samples @ {sr} Hz", out)
        self.assertIn("2 chunks of 3 s", out)
        self.assertIn("chunk 000 (0-3 s): rms=0.500015", out)
        self.assertIn("chunk 001 (3-6 s)", out)
        self.assertNotIn("chunk 002", out)

    def test_unsupported_format_exits_non_zero(self) -> None:
        path = self.tmp / "u8.wav"
        wavfile.write(path, 8000, np.zeros(100, dtype=np.uint8))
        with self.assertRaises(SystemExit) as ctx:
            self._run([str(path)])
        self.assertEqual(ctx.exception.code, 1)

    def test_missing_file_exits_non_zero(self) -> None:
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
            main([str(self.tmp / "missing.wav")])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("error:", err.getvalue())

    def test_rejects_non_positive_chunk(self) -> None:
        path = self.tmp / "x.wav"
        wavfile.write(path, 8000, np.zeros(10, dtype=np.int16))
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            main([str(path), "--chunk-seconds", "0"])
        self.assertEqual(ctx.exception.code, 2)


if __name__ == "__main__":
    unittest.main(verbosity=2)
