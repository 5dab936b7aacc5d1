"""Unit tests for Waveform and the plot-data views."""

from __future__ import annotations

import unittest

import numpy as np

from wav_energy.audio import Waveform, chunk_waveform_points, waveform_points


class TestWaveform(unittest.TestCase):
    """Tests for the Waveform record."""

    def test_coerces_to_float32(self) -> None:
        wave = Waveform(samples=[0.0, 0.5, -0.5], sample_rate=2)
        self.assertEqual(wave.samples.dtype, np.float32)
        self.assertEqual(wave.n_samples, 3)
        self.assertAlmostEqual(wave.duration, 1.5)

    def test_does_not_alias_input(self) -> None:
        source = np.zeros(4, dtype=np.float32)
        wave = Waveform(samples=source, sample_rate=4)
        source[0] = 1.0
        self.assertEqual(float(wave.samples[0]), 0.0)

    def test_peak_range(self) -> None:
        wave = Waveform(samples=[0.1, -0.75, 0.5], sample_rate=1)
        low, high = wave.peak_range
        self.assertAlmostEqual(low, -0.75)
        self.assertAlmostEqual(high, 0.5)
        self.assertEqual(Waveform(samples=[], sample_rate=1).peak_range, (0.0, 0.0))

    def test_invalid_sample_rate(self) -> None:
        with self.assertRaises(ValueError):
            Waveform(samples=[0.0], sample_rate=0)


class TestWaveformPoints(unittest.TestCase):
    """Tests for waveform_points / chunk_waveform_points."""

    def setUp(self) -> None:
        self.wave = Waveform(samples=np.arange(20, dtype=np.float32) / 20, sample_rate=4)

    def test_full_waveform(self) -> None:
        points = waveform_points(self.wave)
        self.assertEqual(len(points), 20)
        self.assertEqual(points[0], (0.0, 0.0))
        self.assertEqual(points[5], (1.25, 0.25))

    def test_window_and_step(self) -> None:
        points = waveform_points(self.wave, start=8, max_samples=8, step=3)
        self.assertEqual([t for t, _ in points], [2.0, 2.75, 3.5])
        np.testing.assert_allclose([y for _, y in points], [0.4, 0.55, 0.7], rtol=1e-6)

    def test_window_clamped_to_end(self) -> None:
        self.assertEqual(len(waveform_points(self.wave, start=15, max_samples=100)), 5)
        self.assertEqual(waveform_points(self.wave, start=25), [])

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            waveform_points(self.wave, step=0)
        with self.assertRaises(ValueError):
            waveform_points(self.wave, start=-1)

    def test_chunk_points_relative_time(self) -> None:
        # 2 s chunks at 4 Hz -> 8 samples; 20 samples -> 2 full chunks
        points = chunk_waveform_points(self.wave, chunk_seconds=2, index=1, step=2)
        self.assertEqual([t for t, _ in points], [0.0, 0.5, 1.0, 1.5])
        np.testing.assert_allclose([y for _, y in points], [0.4, 0.5, 0.6, 0.7], rtol=1e-6)

    def test_partial_chunk_not_addressable(self) -> None:
        with self.assertRaises(IndexError):
            chunk_waveform_points(self.wave, chunk_seconds=2, index=2)


if __name__ == "__main__":
    unittest.main(verbosity=2)
