"""
speechfeat v1 Test Configuration

Provides synthetic signals, configurations and a CLI runner.
"""

import os
import subprocess
import sys
from pathlib import Path

import numpy as np
import pytest

from speechfeat import audio
from speechfeat.config import FeatureConfig, WindowType
from speechfeat.types import Signal


SAMPLE_RATE = 16000


def run_cli(*args: str, cwd: str | None = None) -> subprocess.CompletedProcess:
    """Run speechfeat CLI as subprocess."""
    return subprocess.run(
        [sys.executable, "-m", "speechfeat", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        # argparse wraps help text at $COLUMNS
        env={**os.environ, "COLUMNS": "200"},
    )


def make_config(**overrides) -> FeatureConfig:
    """Reference configuration with a float-PCM energy threshold."""
    values = {
        "frame_length": 512,
        "frame_shift": 256,
        "window_type": WindowType.HAMMING,
        "sample_rate": SAMPLE_RATE,
        "n_mfcc": 13,
        "n_fft": 512,
        "min_pitch": 75.0,
        "max_pitch": 300.0,
        "zcr_threshold": 0.15,
        "energy_threshold": 1.0,
    }
    values.update(overrides)
    return FeatureConfig(**values)


def make_sine(
    freq: float,
    duration_sec: float = 1.0,
    sr: int = SAMPLE_RATE,
    amplitude: float = 0.5,
    phase: float = 0.3,
) -> np.ndarray:
    """Deterministic float32 sine wave."""
    t = np.arange(int(round(sr * duration_sec))) / sr
    return (amplitude * np.sin(2 * np.pi * freq * t + phase)).astype(np.float32)


def create_test_wav(path: Path, duration_sec: float = 1.0, sr: int = SAMPLE_RATE) -> None:
    """
    Create a valid WAV file for testing.

    The first and last thirds are silent; the middle third is a 150 Hz
    tone with two weaker harmonics.
    """
    num_samples = int(sr * duration_sec)
    samples = np.zeros(num_samples, dtype=np.float32)

    start = num_samples // 3
    end = 2 * num_samples // 3
    t = np.arange(end - start) / sr
    samples[start:end] = (
        0.4 * np.sin(2 * np.pi * 150 * t)
        + 0.2 * np.sin(2 * np.pi * 300 * t)
        + 0.1 * np.sin(2 * np.pi * 450 * t)
    ).astype(np.float32)

    audio.write_wav(path, samples, sr)


@pytest.fixture
def config() -> FeatureConfig:
    return make_config()


@pytest.fixture
def sine_signal() -> Signal:
    """One second of a 150 Hz sine at 16 kHz."""
    return Signal(make_sine(150.0), SAMPLE_RATE)


@pytest.fixture
def test_wav_path(tmp_path) -> Path:
    """Create a simple test WAV file and return its path."""
    wav_path = tmp_path / "test_input.wav"
    create_test_wav(wav_path)
    return wav_path
