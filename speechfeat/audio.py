"""
speechfeat v1 Audio I/O

Thin adapter between WAV files and the in-memory Signal the pipeline consumes.

Library Stack:
    - soundfile: WAV I/O (libsndfile-backed)
    - scipy.signal.resample_poly: Deterministic resampling

INVARIANTS:
    - Only mono audio is accepted; multi-channel files are rejected
    - Samples are float32 in [-1, 1] as decoded by soundfile
    - Resampling uses fixed integer up/down factors (deterministic)
"""

import logging
from math import gcd
from pathlib import Path

import numpy as np
import soundfile as sf
from scipy.signal import resample_poly

from speechfeat.types import Signal


logger = logging.getLogger(__name__)


class AudioFormatError(RuntimeError):
    """Raised when an audio file cannot be turned into a mono Signal."""


# =============================================================================
# WAV I/O
# =============================================================================


def read_wav(path: Path) -> tuple[np.ndarray, int]:
    """
    Read WAV file and return samples with sample rate.

    Args:
        path: Path to WAV file

    Returns:
        Tuple of (samples as float32 in [-1, 1], sample_rate).
        Multi-channel files come back 2-D (samples x channels).

    Raises:
        AudioFormatError: If the file cannot be decoded
    """
    try:
        samples, sr = sf.read(path, dtype="float32", always_2d=False)
    except RuntimeError as e:
        raise AudioFormatError(f"Cannot read audio file {path}: {e}") from e
    return samples, sr


def write_wav(path: Path, samples: np.ndarray, sample_rate: int) -> None:
    """
    Write samples to WAV file as PCM 16-bit.

    Note:
        - Hard clips to [-1, 1] before writing
        - No dithering
    """
    clipped = np.clip(samples, -1.0, 1.0)
    sf.write(path, clipped, sample_rate, subtype="PCM_16")


# =============================================================================
# Canonicalization
# =============================================================================


def resample(samples: np.ndarray, sr_from: int, sr_to: int) -> np.ndarray:
    """
    Resample using scipy.signal.resample_poly with fixed integer factors.

    Returns:
        float32 samples at sr_to (the input itself when rates match).
    """
    if sr_from == sr_to:
        return samples
    g = gcd(sr_from, sr_to)
    up = sr_to // g
    down = sr_from // g
    return resample_poly(samples, up, down).astype(np.float32)


def load_signal(path: Path, sample_rate: int) -> tuple[Signal, int]:
    """
    Read a mono WAV file as a Signal at `sample_rate`.

    Args:
        path: Path to WAV file
        sample_rate: Rate the pipeline is configured for

    Returns:
        Tuple of (Signal at sample_rate, sample rate of the file).

    Raises:
        AudioFormatError: If the file is unreadable, multi-channel, empty or
            holds NaN/inf samples
    """
    samples, source_rate = read_wav(path)

    if samples.ndim != 1:
        channels = samples.shape[1]
        if channels != 1:
            raise AudioFormatError(
                f"{path} has {channels} channels; only mono audio is supported"
            )
        samples = samples[:, 0]
    if samples.size == 0:
        raise AudioFormatError(f"{path} contains no samples")
    if not np.all(np.isfinite(samples)):
        bad = int(np.count_nonzero(~np.isfinite(samples)))
        raise AudioFormatError(f"{path} contains {bad} non-finite sample(s) (NaN or inf)")

    if source_rate != sample_rate:
        logger.info("Resampling %s from %d Hz to %d Hz", path, source_rate, sample_rate)
        samples = resample(samples, source_rate, sample_rate)

    return Signal(samples=samples, sample_rate=sample_rate), int(source_rate)
