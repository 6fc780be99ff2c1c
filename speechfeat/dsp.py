"""
speechfeat v1 DSP Kernels

Deterministic, CPU-only numeric primitives used by the pipeline stages.

Library Stack:
    - numpy: Array operations, real FFT, analytic windows
    - scipy.fft.dct: Type-II discrete cosine transform

INVARIANTS:
    - All operations are deterministic and side-effect free
    - Inputs are never modified; every kernel returns a new array
    - Cached results (windows, filter banks) are read-only
    - No value returned to the caller is NaN or infinite for finite input

CONVENTIONS:
    - A 1-sample window is [1.0] for both window types (no division by zero)
    - FFT input is truncated or zero-padded to n_fft samples
    - Log input is floored at LOG_FLOOR before the natural log
    - CMVN columns with std <= STD_FLOOR become all zeros
"""

from functools import lru_cache

import numpy as np
from scipy.fft import dct

from speechfeat.config import WindowType


# =============================================================================
# Constants (FROZEN)
# =============================================================================

LOG_FLOOR = 1e-10  # Smallest mel energy passed to log()
STD_FLOOR = 1e-10  # Column std at or below this is treated as constant


# =============================================================================
# Framing
# =============================================================================


def frame_count(num_samples: int, frame_length: int, frame_shift: int) -> int:
    """
    Number of complete frames that fit in a signal.

    Returns:
        1 + floor((num_samples - frame_length) / frame_shift), or 0 when the
        signal is shorter than one frame.
    """
    if num_samples < frame_length:
        return 0
    return 1 + (num_samples - frame_length) // frame_shift


def frame_signal(samples: np.ndarray, frame_length: int, frame_shift: int) -> np.ndarray:
    """
    Split a 1-D signal into overlapping frames.

    Args:
        samples: Input samples (1D)
        frame_length: Samples per frame
        frame_shift: Samples between frame starts

    Returns:
        (num_frames, frame_length) array; row i is
        samples[i * frame_shift : i * frame_shift + frame_length].

    Raises:
        ValueError: If the signal is shorter than one frame.
    """
    n_frames = frame_count(len(samples), frame_length, frame_shift)
    if n_frames == 0:
        raise ValueError(
            f"Signal has {len(samples)} samples, fewer than frame_length={frame_length}"
        )
    view = np.lib.stride_tricks.sliding_window_view(samples, frame_length)
    return view[::frame_shift][:n_frames].copy()


# =============================================================================
# Windowing
# =============================================================================


@lru_cache(maxsize=32)
def make_window(window_type: WindowType, length: int) -> np.ndarray:
    """
    Build a symmetric analysis window.

    Hamming: w[n] = 0.54 - 0.46 cos(2 pi n / (N - 1))
    Hanning: w[n] = 0.5 (1 - cos(2 pi n / (N - 1)))

    Returns:
        Read-only float64 array of `length` samples ([1.0] when length == 1).
    """
    if length < 1:
        raise ValueError(f"Window length must be >= 1, got {length}")
    if length == 1:
        window = np.ones(1)
    elif window_type is WindowType.HAMMING:
        window = np.hamming(length)
    elif window_type is WindowType.HANNING:
        window = np.hanning(length)
    else:
        raise ValueError(f"Unknown window type: {window_type}")
    window.setflags(write=False)
    return window


def apply_window(frames: np.ndarray, window: np.ndarray) -> np.ndarray:
    """Multiply every frame by `window`; returns a new float64 array."""
    return frames.astype(np.float64) * window


# =============================================================================
# Spectral Analysis
# =============================================================================


def magnitude_spectrum(frames: np.ndarray, n_fft: int) -> np.ndarray:
    """
    Magnitude of the non-negative-frequency half of each frame's FFT.

    Frames longer than n_fft are truncated, shorter ones are zero-padded.

    Returns:
        (num_frames, n_fft // 2 + 1) array of |FFT| values.
    """
    return np.abs(np.fft.rfft(frames, n=n_fft, axis=-1))


def hz_to_mel(freq: np.ndarray | float) -> np.ndarray | float:
    """mel(f) = 2595 log10(1 + f / 700)"""
    return 2595.0 * np.log10(1.0 + np.asarray(freq) / 700.0)


def mel_to_hz(mel: np.ndarray | float) -> np.ndarray | float:
    """hz(m) = 700 (10^(m / 2595) - 1)"""
    return 700.0 * (10.0 ** (np.asarray(mel) / 2595.0) - 1.0)


def mel_bin_edges(
    n_filters: int,
    n_fft: int,
    sample_rate: int,
    fmin: float = 0.0,
    fmax: float | None = None,
) -> np.ndarray:
    """
    FFT bin index of each of the n_filters + 2 mel boundary points.

    Points are linearly spaced in mel between fmin and fmax (Nyquist by
    default) and mapped to round(hz * n_fft / sample_rate), clamped to
    [0, n_fft // 2]. Halves round away from zero.
    """
    if fmax is None:
        fmax = sample_rate / 2
    mel_points = np.linspace(hz_to_mel(fmin), hz_to_mel(fmax), n_filters + 2)
    hz_points = mel_to_hz(mel_points)
    bins = np.floor(hz_points * n_fft / sample_rate + 0.5).astype(int)
    return np.clip(bins, 0, n_fft // 2)


@lru_cache(maxsize=16)
def mel_filter_bank(
    n_filters: int,
    n_fft: int,
    sample_rate: int,
    fmin: float = 0.0,
    fmax: float | None = None,
) -> np.ndarray:
    """
    Triangular mel filter bank.

    Filter i rises linearly from 0 at edge bin i to 1 at edge bin i + 1,
    then falls linearly back towards 0 before edge bin i + 2. Bins at or
    beyond the outer edges are 0.

    Returns:
        Read-only (n_filters, n_fft // 2 + 1) array.
    """
    edges = mel_bin_edges(n_filters, n_fft, sample_rate, fmin, fmax)
    bank = np.zeros((n_filters, n_fft // 2 + 1))

    for i in range(n_filters):
        left, center, right = edges[i], edges[i + 1], edges[i + 2]
        if center > left:
            rise = np.arange(center - left)
            bank[i, left:center] = rise / (center - left)
        if right > center:
            fall = np.arange(right - center)
            bank[i, center:right] = 1.0 - fall / (right - center)

    bank.setflags(write=False)
    return bank


def log_mel_energies(magnitudes: np.ndarray, filter_bank: np.ndarray) -> np.ndarray:
    """
    Natural log of the mel-filtered spectrum.

    Args:
        magnitudes: (num_frames, n_bins) magnitude spectrum
        filter_bank: (n_filters, n_bins) mel filter bank

    Returns:
        (num_frames, n_filters) log energies, floored at log(LOG_FLOOR).
    """
    mel_energies = magnitudes @ filter_bank.T
    return np.log(np.maximum(mel_energies, LOG_FLOOR))


def cepstral_coefficients(log_mel: np.ndarray, n_coeffs: int) -> np.ndarray:
    """Orthonormal DCT-II along the filter axis, first n_coeffs kept."""
    return dct(log_mel, type=2, norm="ortho", axis=-1)[..., :n_coeffs]


def count_floored(magnitudes: np.ndarray, filter_bank: np.ndarray) -> int:
    """Number of mel energies that log_mel_energies() would floor."""
    return int(np.count_nonzero(magnitudes @ filter_bank.T < LOG_FLOOR))


# =============================================================================
# Normalization
# =============================================================================


def cmvn(features: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Cepstral mean-variance normalization.

    Each column is shifted to zero mean and scaled by its population
    standard deviation (divisor = number of rows).

    Returns:
        Tuple of (normalized features, boolean mask of constant columns).
        Constant columns (std <= STD_FLOOR) are returned as zeros.
    """
    mean = features.mean(axis=0)
    std = features.std(axis=0, ddof=0)
    constant = std <= STD_FLOOR
    safe_std = np.where(constant, 1.0, std)
    normalized = (features - mean) / safe_std
    normalized[:, constant] = 0.0
    return normalized, constant


# =============================================================================
# Pitch
# =============================================================================


def autocorrelation(frame: np.ndarray, max_lag: int) -> np.ndarray:
    """
    Unnormalized autocorrelation R[lag] = sum_t x[t] x[t + lag].

    Only overlapping samples contribute, so the summation window shrinks as
    the lag grows; lags at or beyond the frame length are 0.

    Returns:
        Array of max_lag values for lag = 0 .. max_lag - 1.
    """
    x = np.asarray(frame, dtype=np.float64)
    n = x.size
    full = np.correlate(x, x, mode="full")[n - 1:]
    result = np.zeros(max_lag)
    available = min(max_lag, n)
    result[:available] = full[:available]
    return result


def estimate_pitch(frame: np.ndarray, sample_rate: int, min_lag: int, max_lag: int) -> float:
    """
    Estimate pitch from the strongest autocorrelation lag.

    Args:
        frame: Unwindowed frame samples (1D)
        sample_rate: Sample rate (Hz)
        min_lag: Smallest lag searched, ceil(sample_rate / max_pitch)
        max_lag: Exclusive largest lag, ceil(sample_rate / min_pitch)

    Returns:
        sample_rate / best_lag. The first (smallest) lag wins ties; when no
        lag in range correlates above 0 the result is sample_rate / min_lag.
    """
    corr = autocorrelation(frame, max_lag)[min_lag:max_lag]
    best_lag = min_lag
    if corr.size:
        offset = int(np.argmax(corr))
        if corr[offset] > 0.0:
            best_lag = min_lag + offset
    return float(sample_rate / best_lag)


# =============================================================================
# Voicing
# =============================================================================


def zero_crossing_rate(frame: np.ndarray) -> float:
    """
    Fraction of adjacent sample pairs with strictly opposite sign.

    A pair is a crossing when x[n] * x[n + 1] < 0; zeros never cross.

    Returns:
        crossings / (len(frame) - 1), or 0.0 for frames shorter than 2.
    """
    x = np.asarray(frame, dtype=np.float64)
    if x.size < 2:
        return 0.0
    crossings = np.count_nonzero(x[:-1] * x[1:] < 0.0)
    return float(crossings / (x.size - 1))


def frame_energy(frame: np.ndarray) -> float:
    """Sum of squared samples."""
    x = np.asarray(frame, dtype=np.float64)
    return float(np.sum(x * x))


def is_voiced(zcr: float, energy: float, zcr_threshold: float, energy_threshold: float) -> bool:
    """Voiced iff zcr < zcr_threshold and energy > energy_threshold."""
    return bool(zcr < zcr_threshold and energy > energy_threshold)
